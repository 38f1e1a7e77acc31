from __future__ import annotations

from enum import Enum

from ..core.enums import Role


class View(str, Enum):
    # Colaborador
    DASHBOARD = "dashboard"
    MY_POINT = "mypoint"
    CARD = "card"
    REQUESTS = "requests"
    SCHEDULE = "schedule"
    HOLIDAYS = "holidays"
    PROFILE = "profile"
    SETTINGS = "settings"
    ASSISTANT = "assistant"
    # Gestor
    ADMIN = "admin"
    EMPLOYEES = "employees"
    ADMIN_HOLIDAYS = "admin_holidays"
    ADMIN_REQUESTS = "admin_requests"
    COMPANY_PROFILE = "company_profile"
    COMPLIANCE = "compliance"
    ADMIN_ASSISTANT = "admin_assistant"
    # Totem
    KIOSK = "kiosk"


EMPLOYEE_VIEWS = frozenset(
    {
        View.DASHBOARD,
        View.MY_POINT,
        View.CARD,
        View.REQUESTS,
        View.SCHEDULE,
        View.HOLIDAYS,
        View.PROFILE,
        View.SETTINGS,
        View.ASSISTANT,
    }
)

ADMIN_VIEWS = frozenset(
    {
        View.ADMIN,
        View.EMPLOYEES,
        View.ADMIN_HOLIDAYS,
        View.ADMIN_REQUESTS,
        View.COMPANY_PROFILE,
        View.COMPLIANCE,
        View.ADMIN_ASSISTANT,
    }
)

ALLOWED_VIEWS: dict[Role, frozenset[View]] = {
    Role.EMPLOYEE: EMPLOYEE_VIEWS,
    Role.ADMIN: ADMIN_VIEWS,
    Role.TOTEM: frozenset({View.KIOSK}),
}

DEFAULT_VIEW: dict[Role, View] = {
    Role.EMPLOYEE: View.DASHBOARD,
    Role.ADMIN: View.ADMIN,
    Role.TOTEM: View.KIOSK,
}


def can_open(role: Role, view: View) -> bool:
    return view in ALLOWED_VIEWS.get(role, frozenset())
