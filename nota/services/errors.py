class NotaError(Exception):
    pass


class IngestionError(NotaError):
    """Any failure that aborts an ingestion run."""


class DiscoveryError(IngestionError):
    """Media source search or listing failed."""


class ParseError(IngestionError):
    """A sidecar annotation document is not valid JSON or not accepted by the parser."""


class PersistenceError(IngestionError):
    """Writing task items or annotations failed."""


class ExportError(NotaError):
    pass


class SerializationError(ExportError):
    """A parser raised while serializing a task item."""


class InvalidTransition(NotaError):
    def __init__(self, prior: int, new: int):
        super().__init__(f"Invalid task status transition: {prior} -> {new}")
        self.prior = prior
        self.new = new


class UnknownParser(ValueError):
    pass


class UnknownDatasource(ValueError):
    pass
