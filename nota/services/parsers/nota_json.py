from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from nota.services.errors import ParseError
from nota.services.parsers.base import ExportItem, ParsedAnnotations, Parser


class NotaJsonParser(Parser):
    """
    Native JSON format, one document per media item:

      {
        "url": "<back-link>",                        # export only
        "item": {"name": ..., "path": ..., "metadata": {...}},   # export only
        "annotations": [
          {"labelsName": "objects", "labels": {...}, "boundaries": {...}, "status": 0}
        ]
      }
    """

    kind = "nota"

    def parse(self, document: Any) -> ParsedAnnotations:
        if not isinstance(document, dict):
            raise ParseError(f"Expected a JSON object, got {type(document).__name__}")
        try:
            return ParsedAnnotations.model_validate({"annotations": document.get("annotations") or []})
        except ValidationError as e:
            raise ParseError(f"Invalid annotation document: {e}") from e

    def serialize(self, item: ExportItem) -> tuple[str, bytes] | None:
        if not item.annotations:
            return None

        doc = {
            "url": item.nota_url,
            "item": {
                "name": item.media_name,
                "path": item.media_path,
                "metadata": item.media_metadata,
            },
            "annotations": [
                {
                    "id": a.id,
                    "labelsName": a.labels_name,
                    "labels": a.labels,
                    "boundaries": a.boundaries,
                    "status": a.status,
                }
                for a in item.annotations
            ],
        }
        # keep the directory so same-named media items do not collide in the archive
        resource = item.media_path.strip("/")
        file_name = f"{resource}/{item.media_name}.json" if resource else f"{item.media_name}.json"
        return file_name, json.dumps(doc, ensure_ascii=False, indent=2).encode("utf-8")
