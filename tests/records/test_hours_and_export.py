import json
from datetime import datetime

import pytest

from fakes import employee_user, make_record

from ponto_exato.companies.model import CompanyConfig
from ponto_exato.core.enums import PunchType
from ponto_exato.core.exceptions import ValidationError
from ponto_exato.records.export import build_device_snapshot, build_ledger_text, device_snapshot_filename
from ponto_exato.records.hours import PairedPunchCalculator, build_monthly_card, daily_balance


def _day(day, *times):
    return [make_record(datetime(2026, 2, day, h, m)) for h, m in times]


def test_paired_calculator_ignores_unpaired_last_punch():
    calc = PairedPunchCalculator()
    assert calc.worked_minutes(_day(10, (8, 0), (12, 0), (13, 0), (18, 0))) == 9 * 60
    assert calc.worked_minutes(_day(10, (8, 0), (12, 0), (13, 0))) == 4 * 60


def test_daily_balance_within_tolerance_is_zero():
    assert daily_balance(533, 528, 10) == 0
    assert daily_balance(540, 528, 10) == 12
    assert daily_balance(500, 528, 10) == -28


def test_monthly_card_totals_and_overtime():
    records = (
        _day(10, (8, 0), (12, 0), (13, 0), (18, 0))  # 540 worked, +12
        + _day(11, (8, 0), (12, 0), (13, 0), (17, 0))  # 480 worked, -48
        + [make_record(datetime(2026, 3, 1, 8, 0))]
    )

    card = build_monthly_card(records, 2026, 2, CompanyConfig())

    assert [d.label for d in card.days] == ["10/02/2026", "11/02/2026"]
    assert card.total_worked_minutes == 1020
    assert card.total_balance_minutes == -36
    assert card.overtime_minutes == 12
    assert card.overtime_weighted_minutes == 18
    assert card.to_dict()["balance"] == "-00:36"


def test_ledger_lists_records_oldest_first():
    records = [
        make_record(datetime(2026, 2, 10, 12, 0, 30), punch_type=PunchType.INICIO_INTERVALO),
        make_record(datetime(2026, 2, 10, 8, 0, 5)),
    ]

    text = build_ledger_text(records, employee_name="Ana Souza", reference="02/2026", total_worked_minutes=240)
    lines = text.splitlines()

    assert "Funcionário: Ana Souza" in lines
    assert "Total de Horas Calculadas: 04:00h" in lines
    assert lines[-2] == "[10/02/2026] - 08:00:05 - entrada - Localização Validada via GPS"
    assert lines[-1] == "[10/02/2026] - 12:00:30 - inicio_intervalo - Localização Validada via GPS"


def test_ledger_without_records_is_rejected():
    with pytest.raises(ValidationError):
        build_ledger_text([], employee_name="Ana", reference="02/2026")


def test_device_snapshot_fields():
    user = employee_user()
    body = json.loads(build_device_snapshot(user, device_info="pytest-agent", now=datetime(2026, 2, 14, 9, 30)))

    assert body == {
        "user": "Ana Souza",
        "matricula": "1001",
        "companyCode": "ABC123",
        "exportDate": "2026-02-14T09:30:00",
        "deviceInfo": "pytest-agent",
    }
    assert device_snapshot_filename(user) == "dados_ponto_1001.json"
