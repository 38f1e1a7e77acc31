from datetime import date, datetime

import pytest

from ponto_exato.common.datetime_utils import coerce_timestamp, format_minutes
from ponto_exato.common.geo import haversine_distance
from ponto_exato.common.security import PasswordHasher, generate_access_code, sign_punch


def test_coerce_timestamp_variants():
    expected = datetime(2026, 2, 10, 8, 30)
    seconds = expected.timestamp()

    class Seconds:
        def __init__(self, s):
            self.seconds = int(s)
            self.nanoseconds = 0

    assert coerce_timestamp(expected) == expected
    assert coerce_timestamp("2026-02-10T08:30:00") == expected
    assert coerce_timestamp(seconds) == expected
    assert coerce_timestamp(seconds * 1000) == expected
    assert coerce_timestamp(Seconds(seconds)) == expected
    assert coerce_timestamp(date(2026, 2, 10)) == datetime(2026, 2, 10)
    with pytest.raises(TypeError):
        coerce_timestamp(None)
    with pytest.raises(ValueError):
        coerce_timestamp("ontem")


def test_format_minutes():
    assert format_minutes(0) == "00:00"
    assert format_minutes(545) == "09:05"
    assert format_minutes(-36) == "-00:36"


def test_haversine_distance():
    assert haversine_distance(-23.5505, -46.6333, -23.5505, -46.6333) == 0
    assert 1100 < haversine_distance(0, 0, 0.01, 0) < 1120


def test_password_hasher_handles_bad_hashes():
    hasher = PasswordHasher()
    h = hasher.hash("1234")

    assert hasher.verify(h, "1234")
    assert not hasher.verify(h, "4321")
    assert not hasher.verify(None, "1234")
    assert not hasher.verify("CHANGE_ME", "1234")


def test_access_code_and_signature():
    code = generate_access_code(6)
    assert len(code) == 6 and code == code.upper() and code.isalnum()

    sig = sign_punch("ABC123", "1001", "2026-02-10T08:00:00", -23.5, -46.6)
    assert len(sig) == 16
    assert sig == sign_punch("ABC123", "1001", "2026-02-10T08:00:00", -23.5, -46.6)
    assert sig != sign_punch("ABC123", "1002", "2026-02-10T08:00:00", -23.5, -46.6)
