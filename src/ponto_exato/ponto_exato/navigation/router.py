from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .views import ALLOWED_VIEWS, DEFAULT_VIEW, View, can_open


class ViewRouter:
    """Active-screen selector for one session.

    Any view of the role's set can be reached from any other; there is no
    back-stack and nothing outside the role's set is ever active.
    """

    def __init__(self, role: Role, active: Optional[View] = None):
        self._role = role
        if active is None or not can_open(role, active):
            active = DEFAULT_VIEW[role]
        self._active = active

    @classmethod
    def restore(cls, role: Role, stored: Optional[str]) -> "ViewRouter":
        try:
            view = View(stored) if stored else None
        except ValueError:
            view = None
        return cls(role, view)

    @property
    def role(self) -> Role:
        return self._role

    @property
    def active(self) -> View:
        return self._active

    @property
    def available(self) -> list[View]:
        return sorted(ALLOWED_VIEWS[self._role], key=lambda v: v.value)

    def navigate(self, target: View | str) -> View:
        if not isinstance(target, View):
            try:
                target = View(target)
            except ValueError:
                raise ValidationError(f"Tela desconhecida: {target}")
        if not can_open(self._role, target):
            raise AuthorizationError("Você não tem acesso a esta tela")
        self._active = target
        return target

    def reset(self) -> View:
        self._active = DEFAULT_VIEW[self._role]
        return self._active
