import json
from datetime import datetime

import pytest
import requests

from fakes import FakeGenerator, make_record

from ponto_exato.assistant.client import AssistantUnavailable, GeminiClient, extract_text
from ponto_exato.assistant.service import AUDIT_FAILED, AssistantService
from ponto_exato.core.constants import AI_FALLBACK_MESSAGE
from ponto_exato.core.exceptions import ValidationError


def test_ask_sends_recent_context_and_persona():
    generator = FakeGenerator(answer="Você tem 2h de banco de horas.")
    service = AssistantService(generator)
    records = [make_record(datetime(2026, 2, 1 + i, 8, 0)) for i in range(25)]

    answer = service.ask("Quantas horas tenho?", records)

    assert answer == "Você tem 2h de banco de horas."
    call = generator.calls[0]
    assert call["prompt"].count("\n") >= 20
    assert "25/02/2026" in call["prompt"] and "01/02/2026" not in call["prompt"]
    assert call["prompt"].endswith("Pergunta: Quantas horas tenho?")
    assert "CLT" in call["system_instruction"]


def test_ask_falls_back_on_backend_failure():
    service = AssistantService(FakeGenerator(error=AssistantUnavailable("HTTP 500")))
    assert service.ask("Oi", []) == AI_FALLBACK_MESSAGE


def test_ask_requires_prompt():
    with pytest.raises(ValidationError):
        AssistantService(FakeGenerator()).ask("  ", [])


def test_audit_parses_structured_answer_with_audit_model():
    payload = {"riskLevel": "Alto", "summary": "Intervalos curtos", "alerts": ["Sem intervalo em 10/02"]}
    generator = FakeGenerator(answer=json.dumps(payload))
    service = AssistantService(generator, audit_model="gemini-3-flash-preview")

    result = service.audit_compliance("Ana", [make_record(datetime(2026, 2, 10, 8, 0))], "08:00 - 18:00")

    assert result.to_dict() == payload
    assert generator.calls[0]["model"] == "gemini-3-flash-preview"
    assert generator.calls[0]["response_schema"]["required"] == ["riskLevel", "summary", "alerts"]


@pytest.mark.parametrize("answer", ["não é json", "[]", json.dumps({"summary": "sem risco"})])
def test_audit_failure_returns_fixed_result(answer):
    service = AssistantService(FakeGenerator(answer=answer))
    assert service.audit_compliance("Ana", []) == AUDIT_FAILED


def test_summarize():
    payload = {"overview": "Regras de ponto", "topics": ["Tolerância"], "faqs": [{"q": "Atraso?", "a": "10 min"}]}
    service = AssistantService(FakeGenerator(answer=json.dumps(payload)))

    summary = service.summarize("Manual do colaborador")

    assert summary.to_dict() == payload
    failed = AssistantService(FakeGenerator(error=AssistantUnavailable("x"))).summarize("Manual")
    assert failed.overview == AI_FALLBACK_MESSAGE and failed.faqs == []


class _Response:
    def __init__(self, status_code, data):
        self.status_code = status_code
        self._data = data
        self.text = json.dumps(data)

    def json(self):
        return self._data


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def test_gemini_client_builds_request_and_reads_text():
    data = {"candidates": [{"content": {"parts": [{"text": "Olá"}, {"text": "!"}]}}]}
    http = _Session(_Response(200, data))
    client = GeminiClient("key-1", "gemini-3-pro-preview", timeout=5, session=http)

    text = client.generate("Oi", system_instruction="persona", temperature=0.5)

    assert text == "Olá!"
    url, kwargs = http.calls[0]
    assert url.endswith("/models/gemini-3-pro-preview:generateContent")
    assert kwargs["params"] == {"key": "key-1"}
    assert kwargs["timeout"] == 5
    assert kwargs["json"]["systemInstruction"] == {"parts": [{"text": "persona"}]}
    assert kwargs["json"]["generationConfig"] == {"temperature": 0.5}


def test_gemini_client_failures():
    with pytest.raises(AssistantUnavailable):
        GeminiClient("", "m").generate("Oi")
    with pytest.raises(AssistantUnavailable):
        GeminiClient("k", "m", session=_Session(_Response(500, {"error": "boom"}))).generate("Oi")
    with pytest.raises(AssistantUnavailable):
        GeminiClient("k", "m", session=_Session(error=requests.ConnectionError("down"))).generate("Oi")
    with pytest.raises(AssistantUnavailable):
        GeminiClient("k", "m", session=_Session(_Response(200, {"candidates": []}))).generate("Oi")
    assert extract_text({}) == ""
