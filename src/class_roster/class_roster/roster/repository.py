from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Protocol

from .identity import InstanceKey
from .model import ClassInstance


class InstanceRepository(Protocol):
    """Persisted instance set: only instances that were mutated at least once."""

    def load_persisted_instances(self, start: date, end: date) -> Dict[InstanceKey, ClassInstance]:
        """Instances whose date falls in [start, end], keyed by identity."""

        raise NotImplementedError

    def get(self, key: InstanceKey) -> Optional[ClassInstance]:
        raise NotImplementedError

    def save_instance(self, instance: ClassInstance) -> None:
        """Upsert: the stored record is fully replaced."""

        raise NotImplementedError

    def delete(self, key: InstanceKey) -> bool:
        raise NotImplementedError
