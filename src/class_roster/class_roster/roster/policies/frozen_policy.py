from __future__ import annotations

from typing import Optional

from ..model import ClassInstance
from .base import MaterializedInstancePolicy


class FrozenPolicy(MaterializedInstancePolicy):
    """Keep the saved snapshot: time and capacity are what students signed up for."""

    def apply(self, persisted: ClassInstance, projected: Optional[ClassInstance]) -> ClassInstance:
        return persisted
