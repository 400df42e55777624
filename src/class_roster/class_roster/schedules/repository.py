from __future__ import annotations

from typing import Protocol, Sequence

from .model import ScheduleTemplate, SpecialSession


class TemplateStore(Protocol):
    """Read-only source of class templates."""

    def get_active_weekly_templates(self) -> Sequence[ScheduleTemplate]:
        raise NotImplementedError

    def get_active_special_sessions(self) -> Sequence[SpecialSession]:
        raise NotImplementedError
