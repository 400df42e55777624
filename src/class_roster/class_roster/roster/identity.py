"""Stable identity of a class occurrence.

An occurrence is identified by what it was derived from: the kind of
template, that template's id and the calendar date. The key is a plain
composite value, so two different occurrences can never share it and the
same occurrence always maps to the same key across restarts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..common.datetime_utils import parse_iso_date
from ..core.enums import InstanceKind
from ..core.exceptions import ValidationError

_SEPARATOR = ":"


@dataclass(frozen=True, order=True)
class InstanceKey:
    kind: InstanceKind
    source_id: int
    class_date: date

    def __str__(self) -> str:
        return _SEPARATOR.join((self.kind.value, str(self.source_id), self.class_date.isoformat()))

    @classmethod
    def parse(cls, value: str) -> "InstanceKey":
        """Inverse of ``str(key)``: ``"regular:12:2025-07-05"``."""
        parts = (value or "").split(_SEPARATOR)
        if len(parts) != 3:
            raise ValidationError(f"Invalid class identity: {value!r}")

        kind_s, source_s, date_s = parts
        try:
            kind = InstanceKind(kind_s)
        except ValueError:
            raise ValidationError(f"Unknown class kind: {kind_s!r}")
        if not (source_s.isascii() and source_s.isdigit()):
            raise ValidationError(f"Invalid source id in identity: {source_s!r}")

        return cls(kind=kind, source_id=int(source_s), class_date=parse_iso_date(date_s))


def derive_identity(source_id: int, class_date: date, kind: InstanceKind = InstanceKind.REGULAR) -> InstanceKey:
    return InstanceKey(kind=InstanceKind(kind), source_id=int(source_id), class_date=class_date)
