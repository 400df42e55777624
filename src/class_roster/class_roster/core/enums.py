from __future__ import annotations

from enum import Enum, IntEnum


class Weekday(IntEnum):
    """Day of week, same numbering as ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


class InstanceKind(str, Enum):
    """Origin of a class instance: weekly slot or one-off special session."""

    REGULAR = "regular"
    SPECIAL = "special"


class InstanceStatus(str, Enum):
    """Lifecycle of one attendance list."""

    OPEN = "open"
    PRESENCE_CONFIRMED = "presence_confirmed"
    CLOSED = "closed"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class AttendanceSource(str, Enum):
    """How the student ended up on the list."""

    PRE_CHECKIN = "pre_checkin"
    WALK_IN = "walk_in"


class TemplateEditPolicy(str, Enum):
    FROZEN = "frozen"
    INHERIT = "inherit"
