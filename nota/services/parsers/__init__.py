from __future__ import annotations

from nota.services.errors import UnknownParser
from nota.services.parsers.base import (
    ExportAnnotation,
    ExportItem,
    ParsedAnnotation,
    ParsedAnnotations,
    Parser,
)
from nota.services.parsers.nota_json import NotaJsonParser

# Map TaskTemplate parser kind -> Parser class
PARSERS: dict[str, type[Parser]] = {
    NotaJsonParser.kind: NotaJsonParser,
}


def get_parser(kind: str | None) -> Parser:
    cls = PARSERS.get(kind or "nota")
    if not cls:
        raise UnknownParser(f"Unknown parser: {kind}")
    return cls()


__all__ = [
    "ExportAnnotation",
    "ExportItem",
    "ParsedAnnotation",
    "ParsedAnnotations",
    "Parser",
    "NotaJsonParser",
    "PARSERS",
    "get_parser",
]
