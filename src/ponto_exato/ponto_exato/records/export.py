from __future__ import annotations

import json
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import format_minutes
from ..core.exceptions import ValidationError
from ..session.model import SessionUser
from .derivation import sort_by_timestamp_asc
from .model import PointRecord

LEDGER_FILENAME = "Espelho_Ponto_Mensal.txt"


def build_ledger_text(
    records: Iterable[PointRecord],
    *,
    employee_name: str,
    reference: str,
    total_worked_minutes: Optional[int] = None,
) -> str:
    """Plain-text "espelho de ponto": one line per record, oldest first."""

    ordered = sort_by_timestamp_asc(records)
    if not ordered:
        raise ValidationError("Nenhum dado para o espelho de ponto.")

    lines = [
        "ESPELHO DE PONTO MENSAL - PONTOEXATO",
        "====================================",
        "",
        f"Funcionário: {employee_name}",
        f"Mês de Referência: {reference}",
    ]
    if total_worked_minutes is not None:
        lines.append(f"Total de Horas Calculadas: {format_minutes(total_worked_minutes)}h")
    lines += ["", "REGISTROS ENCONTRADOS:"]
    for r in ordered:
        lines.append(
            f"[{r.timestamp.strftime('%d/%m/%Y')}] - {r.timestamp.strftime('%H:%M:%S')} - {r.type.value} - {r.address}"
        )
    return "\n".join(lines) + "\n"


def device_snapshot_filename(user: SessionUser) -> str:
    return f"dados_ponto_{user.matricula or 'usuario'}.json"


def build_device_snapshot(user: SessionUser, *, device_info: str, now: datetime) -> str:
    data = {
        "user": user.name,
        "matricula": user.matricula,
        "companyCode": user.company_code,
        "exportDate": now.isoformat(),
        "deviceInfo": device_info,
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
