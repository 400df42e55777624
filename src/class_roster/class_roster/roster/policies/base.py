from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..model import ClassInstance


class MaterializedInstancePolicy(ABC):
    """Strategy Pattern: how a saved instance reacts to later template edits."""

    @abstractmethod
    def apply(self, persisted: ClassInstance, projected: Optional[ClassInstance]) -> ClassInstance:
        """Return the instance to show, given the current projection of the same identity (if any)."""

        raise NotImplementedError
