"""Codec between plain Python values and Firestore REST typed values.

Firestore's REST API wraps every value in a single-key object naming its
type, e.g. ``{"stringValue": "Aspirin"}`` or
``{"mapValue": {"fields": {...}}}``. Integers travel as decimal strings.
"""

from collections.abc import Mapping
from typing import Any


def encode_value(value: Any) -> dict[str, Any]:
    """Wrap a Python value in its Firestore typed-value object."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")


def encode_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {key: encode_value(value) for key, value in fields.items()}


def decode_value(typed: Mapping[str, Any]) -> Any:
    """Unwrap a Firestore typed-value object into a plain Python value."""
    if "nullValue" in typed:
        return None
    if "booleanValue" in typed:
        return bool(typed["booleanValue"])
    if "integerValue" in typed:
        return int(typed["integerValue"])
    if "doubleValue" in typed:
        return float(typed["doubleValue"])
    if "stringValue" in typed:
        return typed["stringValue"]
    if "mapValue" in typed:
        return decode_fields(typed["mapValue"].get("fields", {}))
    if "arrayValue" in typed:
        return [decode_value(v) for v in typed["arrayValue"].get("values", [])]
    # Timestamps, references, bytes and geo points are kept in their wire form
    for key in ("timestampValue", "referenceValue", "bytesValue"):
        if key in typed:
            return typed[key]
    if "geoPointValue" in typed:
        return dict(typed["geoPointValue"])
    raise ValueError(f"Unknown Firestore value: {dict(typed)!r}")


def decode_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {key: decode_value(value) for key, value in fields.items()}


def document_id(name: str) -> str:
    """Last path segment of a document resource name."""
    return name.rsplit("/", 1)[-1]
