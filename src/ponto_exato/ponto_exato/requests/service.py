from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import normalize_date_key, now_local
from ..common.security import new_document_id
from ..common.validators import optional_text, require_non_empty
from ..core.enums import RequestKind, RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..session.model import SessionUser
from .model import AttendanceRequest
from .repository import RequestRepository


class RequestService:
    """Employee requests (adjustments, medical certificates) and their admin decision.

    ``pending -> approved | rejected``; a decided request never changes again.
    """

    def __init__(self, requests: RequestRepository):
        self._requests = requests

    def create(
        self,
        user: SessionUser,
        *,
        kind: RequestKind | str,
        reason: str,
        date_value: Any,
        photo: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> str:
        if user.role != Role.EMPLOYEE or not user.matricula:
            raise AuthorizationError("Apenas colaboradores podem enviar solicitações")

        kind_text = require_non_empty(kind.value if isinstance(kind, RequestKind) else kind, "Tipo")
        try:
            kind = RequestKind(kind_text)
        except ValueError:
            raise ValidationError("Tipo de solicitação inválido")
        reason = require_non_empty(reason, "Motivo")
        day = normalize_date_key(date_value)

        req = AttendanceRequest(
            id=new_document_id(),
            company_code=user.company_code,
            matricula=user.matricula,
            user_name=user.name,
            kind=kind,
            reason=reason,
            date=day,
            status=RequestStatus.PENDING,
            created_at=now or now_local(),
            photo=optional_text(photo),
        )
        return self._requests.create(req)

    def list_for_user(self, user: SessionUser) -> Sequence[AttendanceRequest]:
        if not user.matricula:
            return []
        return self._requests.list_for_user(user.company_code, user.matricula)

    def list_for_company(
        self,
        user: SessionUser,
        *,
        status: Optional[RequestStatus | str] = None,
    ) -> Sequence[AttendanceRequest]:
        if user.role != Role.ADMIN:
            raise AuthorizationError("Você não tem permissão")
        if status is not None and not isinstance(status, RequestStatus):
            try:
                status = RequestStatus(status)
            except ValueError:
                raise ValidationError("Status inválido")
        return self._requests.list_for_company(user.company_code, status=status)

    def approve(self, user: SessionUser, request_id: str, *, now: Optional[datetime] = None) -> None:
        self._decide(user, request_id, RequestStatus.APPROVED, now)

    def reject(self, user: SessionUser, request_id: str, *, now: Optional[datetime] = None) -> None:
        self._decide(user, request_id, RequestStatus.REJECTED, now)

    def _decide(self, user: SessionUser, request_id: str, status: RequestStatus, now: Optional[datetime]) -> None:
        if user.role != Role.ADMIN:
            raise AuthorizationError("Você não tem permissão")

        req = self._requests.get(request_id)
        if not req or req.company_code != user.company_code:
            raise NotFoundError("Solicitação não encontrada")
        if req.is_decided:
            raise ValidationError("Solicitação já foi processada")

        decided = self._requests.decide(
            request_id=req.id,
            status=status,
            decided_by=user.email or user.name,
            decided_at=now or now_local(),
        )
        if not decided:
            # Lost the race against another decision.
            raise ValidationError("Solicitação já foi processada")
