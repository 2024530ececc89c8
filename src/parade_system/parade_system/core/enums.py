from __future__ import annotations

from enum import Enum

from .exceptions import ValidationError


class _ClosedEnum(str, Enum):
    """str-valued enum that rejects unknown values with ValidationError."""

    @classmethod
    def parse(cls, value, *, field_name: str | None = None):
        if isinstance(value, cls):
            return value
        raw = (value or "").strip() if isinstance(value, str) else value
        try:
            return cls(raw)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            label = field_name or cls.__name__
            raise ValidationError(f"{label} must be one of: {allowed}")


class Role(_ClosedEnum):
    """Roles used for authorization."""

    ANO = "ano"
    SENIOR = "senior"


class ParadeStatus(_ClosedEnum):
    """Parade lifecycle states, strictly forward-only."""

    ACTIVE = "active"
    ATTENDANCE_SUBMITTED = "attendance_submitted"
    COMPLETED = "completed"


OPEN_PARADE_STATUSES = (ParadeStatus.ACTIVE, ParadeStatus.ATTENDANCE_SUBMITTED)


class ParadeSession(_ClosedEnum):
    MORNING = "morning"
    EVENING = "evening"
    AFTERNOON = "after-noon"

    @classmethod
    def parse(cls, value, *, field_name: str | None = None):
        # Stored rows may carry the legacy spelling "After-Noon".
        if isinstance(value, str) and value.strip().lower() == "after-noon":
            return cls.AFTERNOON
        return super().parse(value, field_name=field_name)


class ParadeType(_ClosedEnum):
    """Activity carried out by a category during a parade."""

    THEORY = "Theory"
    DRILL = "Drill"
    WEAPON_TRAINING = "Weapon Training"
    PHYSICAL_TRAINING = "Physical Training (PT)"
    PARADE_REHEARSAL = "Parade Rehearsal"
    CULTURAL_PRACTICE = "Cultural Practice"
    EVENT = "Event"
    AWARENESS_PROGRAM = "Awareness Program"


class AttendanceStatus(_ClosedEnum):
    """Final classification persisted per cadet."""

    PRESENT = "present"
    ABSENT_WITH_PERMISSION = "absent_with_permission"
    ABSENT_WITHOUT_PERMISSION = "absent_without_permission"


class PermissionReason(_ClosedEnum):
    HEALTH_ISSUE = "Health issue"
    UNIT_OFFICE_WORK = "Unit office work"
    WENT_HOME = "Went home"
    SPORTS = "Sports"
    CAMP_DUTY = "Camp duty"
    OTHER = "Other"


class CloseFailure(str, Enum):
    """Named reasons reported by the close transaction."""

    ATTENDANCE_PENDING = "attendance_pending"
    PARADE_NOT_READY = "parade_not_ready"
    OTHER = "other"


class NotificationType(str, Enum):
    PENDING = "pending"
