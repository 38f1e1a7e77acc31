from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Papel da sessão usado para autorização e roteamento de telas."""

    ADMIN = "admin"
    EMPLOYEE = "employee"
    TOTEM = "totem"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class RecordStatus(str, Enum):
    """Estado de sincronização de uma marcação."""

    SYNCHRONIZED = "synchronized"
    PENDING = "pending"


class PunchType(str, Enum):
    ENTRADA = "entrada"
    INICIO_INTERVALO = "inicio_intervalo"
    FIM_INTERVALO = "fim_intervalo"
    SAIDA = "saida"


class RequestKind(str, Enum):
    AJUSTE = "ajuste"
    ATESTADO = "atestado"
    ABONO = "abono"
    INCLUSAO = "inclusão"


class RequestStatus(str, Enum):
    """Fluxo de aprovação de solicitações (terminal depois de decidido)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class HolidayType(str, Enum):
    FERIADO = "feriado"
    PARADA = "parada"
    EVENTO = "evento"


class Collection(str, Enum):
    """Coleções de documentos acompanhadas em tempo real."""

    COMPANIES = "companies"
    EMPLOYEES = "employees"
    RECORDS = "records"
