from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..model import ClassInstance
from .base import MaterializedInstancePolicy


class InheritTemplatePolicy(MaterializedInstancePolicy):
    """Follow the current template for schedule fields, keep check-ins and attendance.

    Capacity is not enforced retroactively: a list already above a lowered
    capacity just shows no seats left.
    """

    def apply(self, persisted: ClassInstance, projected: Optional[ClassInstance]) -> ClassInstance:
        if projected is None:
            return persisted
        return replace(
            persisted,
            start_time=projected.start_time,
            end_time=projected.end_time,
            unit=projected.unit,
            level_id=projected.level_id,
            capacity=projected.capacity,
        )
