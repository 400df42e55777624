from __future__ import annotations

from typing import Iterable, List, Mapping

from ..core.exceptions import IdentityCollisionError
from .identity import InstanceKey
from .model import ClassInstance


def reconcile(projected: Iterable[ClassInstance], persisted: Mapping[InstanceKey, ClassInstance]) -> List[ClassInstance]:
    """Right-biased merge: a persisted instance replaces its projection.

    Persisted instances are kept even when nothing projects them any more
    (template deactivated after check-ins were recorded).
    """
    for key, instance in persisted.items():
        if instance.identity != key:
            raise IdentityCollisionError(f"persisted instance {instance.identity} stored under {key}")

    merged = [p for p in projected if p.identity not in persisted]
    merged.extend(persisted[key] for key in sorted(persisted))
    return merged
