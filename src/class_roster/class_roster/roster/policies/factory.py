from __future__ import annotations

from ...core.enums import TemplateEditPolicy
from ...core.exceptions import ValidationError
from .base import MaterializedInstancePolicy
from .frozen_policy import FrozenPolicy
from .inherit_policy import InheritTemplatePolicy


def policy_for(name: str | TemplateEditPolicy) -> MaterializedInstancePolicy:
    """Factory Pattern: pick the policy configured by TEMPLATE_EDIT_POLICY."""
    try:
        choice = TemplateEditPolicy(str(getattr(name, "value", name)).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown template edit policy: {name!r}")

    if choice == TemplateEditPolicy.INHERIT:
        return InheritTemplatePolicy()
    return FrozenPolicy()
