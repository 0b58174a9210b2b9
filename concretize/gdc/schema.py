"""JSON Schema for source graphs handed to the concept deduplicator."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

import jsonschema

SOURCE_GRAPH_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["@graph"],
    "properties": {
        "@context": {},
        "@graph": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["@id"],
                "properties": {
                    "@id": {"type": "string", "minLength": 1},
                    "@type": {
                        "oneOf": [
                            {"type": "string"},
                            {"type": "array", "items": {"type": "string"}},
                        ]
                    },
                },
                "additionalProperties": True,
            },
        },
    },
}


def validate_source_graph(payload: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Validate ``payload`` and return its ``@graph`` nodes.

    Raises :class:`jsonschema.ValidationError` when the payload is malformed.
    """

    jsonschema.validate(payload, SOURCE_GRAPH_SCHEMA)
    return [dict(node) for node in payload["@graph"]]


__all__ = ["SOURCE_GRAPH_SCHEMA", "validate_source_graph"]
