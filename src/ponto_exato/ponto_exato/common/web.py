from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackendError,
    DeviceError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..navigation.views import View, can_open
from ..session.store import FlaskSessionStore

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ValidationError, 400),
    (DeviceError, 400),
    (BackendError, 503),
)


def _status_for(error: DomainError) -> int:
    for err_type, status in _STATUS_BY_ERROR:
        if isinstance(error, err_type):
            return status
    return 400


def ok(status: int = 200, **payload: Any):
    return jsonify({"success": True, **payload}), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def api_errors(view_func):
    """Translate domain exceptions into JSON error responses."""

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        try:
            return view_func(*args, **kwargs)
        except DomainError as e:
            status = _status_for(e)
            if status >= 500:
                logger.warning("%s failed: %s", request.path, e)
            return fail(str(e), status)
        except Exception:
            logger.exception("unexpected error on %s", request.path)
            return fail("Erro interno do sistema", 500)

    return wrapper


class ViewGuard:
    """Decorator factory: loads the session user and checks the role against a view.

    The handler receives the user as the ``user`` keyword argument.
    """

    def __init__(self, store: FlaskSessionStore):
        self._store = store

    def __call__(self, view: View):
        def decorator(view_func):
            @wraps(view_func)
            @api_errors
            def wrapper(*args, **kwargs):
                user = self._store.load()
                if user is None:
                    return fail("Sessão expirada. Faça login novamente.", 401)
                if not can_open(user.role, view):
                    return fail("Você não tem acesso a esta tela", 403)
                return view_func(*args, user=user, **kwargs)

            return wrapper

        return decorator

    def logged_in(self, view_func):
        @wraps(view_func)
        @api_errors
        def wrapper(*args, **kwargs):
            user = self._store.load()
            if user is None:
                return fail("Sessão expirada. Faça login novamente.", 401)
            return view_func(*args, user=user, **kwargs)

        return wrapper


def int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Parâmetro inválido: {name}")
