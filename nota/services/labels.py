from __future__ import annotations

from typing import Any

# label types whose value is a list of picked options
_MULTI_VALUE_TYPES = {"multiple-selection", "multiple_selection", "tags"}


def annotation_default_labels(labels: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Default label set for an auto-created annotation:
      {label_name: default}

    A label definition looks like
      {"name": "quality", "type": "single-selection", "options": {"default": "ok", "values": [...]}}
    Labels without an explicit default get [] for multi-value types, None otherwise.
    """
    defaults: dict[str, Any] = {}
    for label in labels or []:
        name = label.get("name")
        if not name:
            continue
        options = label.get("options") or {}
        if "default" in options:
            defaults[name] = options["default"]
        elif label.get("type") in _MULTI_VALUE_TYPES:
            defaults[name] = []
        else:
            defaults[name] = None
    return defaults
