"""Domain base entity — one document of a remote collection, held in memory."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, ClassVar, Self

from medadmin.domain.exceptions import ValidationError


def coerce_number(raw: Any) -> float | None:
    """Return ``raw`` as a finite float, or None when it cannot be read as one.

    Upstream producers store numbers as text as often as not, so both
    ``5`` and ``"5.00"`` are accepted.
    """
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def format_amount(raw: Any) -> str:
    """Render a monetary value with two decimals, falling back to the raw value."""
    value = coerce_number(raw)
    if value is None:
        return "" if raw is None else str(raw)
    return f"{value:.2f}"


@dataclass(frozen=True)
class Record:
    """Base for every cached document.

    Subclasses name their fields with a ``str`` enum whose values are the
    wire keys; the dataclass attribute of a member is its lower-cased name.
    Instances are immutable: a mutation produces a new instance through
    :meth:`merged`, so the identifier can never change.
    """

    id: str

    field_type: ClassVar[type[Enum]]
    editable_fields: ClassVar[frozenset] = frozenset()
    numeric_fields: ClassVar[frozenset] = frozenset()
    required_fields: ClassVar[frozenset] = frozenset()
    asset_field: ClassVar[Enum | None] = None
    status_field: ClassVar[Enum | None] = None

    @staticmethod
    def attr_name(field: Enum) -> str:
        return field.name.lower()

    @classmethod
    def check_field(cls, field: Any) -> None:
        """Reject keys that are not members of this record's field enum."""
        if not isinstance(field, cls.field_type):
            raise TypeError(
                f"{field!r} is not a {cls.field_type.__name__} of {cls.__name__}"
            )

    def value_of(self, field: Enum) -> Any:
        self.check_field(field)
        return getattr(self, self.attr_name(field))

    def merged(self, changes: Mapping[Enum, Any]) -> Self:
        """Return a copy with ``changes`` applied; all other fields are kept."""
        for field in changes:
            self.check_field(field)
        return replace(self, **{self.attr_name(f): v for f, v in changes.items()})

    def draft_fields(self) -> dict[Enum, Any]:
        """Copy of the editable, non-asset fields — the starting point of an edit."""
        return {
            f: self.value_of(f)
            for f in self.field_type
            if f in self.editable_fields and f is not self.asset_field
        }

    @classmethod
    def validate_changes(
        cls, changes: Mapping[Enum, Any], *, creating: bool = False
    ) -> dict[Enum, Any]:
        """Check and normalise a field set before it is sent anywhere.

        Numeric fields are coerced to floats; required fields must be
        non-blank. With ``creating`` every required field must be present.
        """
        normalised: dict[Enum, Any] = {}
        for field, value in changes.items():
            cls.check_field(field)
            if field in cls.numeric_fields:
                number = coerce_number(value)
                if number is None:
                    raise ValidationError(field.value, f"{value!r} is not a number")
                value = number
            elif field in cls.required_fields:
                if value is None or not str(value).strip():
                    raise ValidationError(field.value, "must not be empty")
            normalised[field] = value

        if creating:
            for field in cls.field_type:
                if field in cls.required_fields and field not in normalised:
                    raise ValidationError(field.value, "is required")
        return normalised

    @classmethod
    def encode_fields(cls, changes: Mapping[Enum, Any]) -> dict[str, Any]:
        """Map typed changes to the wire keys used by the document store."""
        return {field.value: cls.encode_value(field, value) for field, value in changes.items()}

    @classmethod
    def encode_value(cls, field: Enum, value: Any) -> Any:
        return value

    @classmethod
    def decode_value(cls, field: Enum, raw: Any) -> Any:
        return raw

    def to_document(self) -> dict[str, Any]:
        return self.encode_fields({f: self.value_of(f) for f in self.field_type})

    @classmethod
    def from_document(cls, identifier: str, data: Mapping[str, Any]) -> Self:
        """Build a record from a stored document, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for field in cls.field_type:
            attr = cls.attr_name(field)
            if field.value in data and attr in known:
                kwargs[attr] = cls.decode_value(field, data[field.value])
        return cls(id=identifier, **kwargs)
