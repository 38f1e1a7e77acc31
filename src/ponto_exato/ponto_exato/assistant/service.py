from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import AI_CONTEXT_LIMIT, AI_FALLBACK_MESSAGE
from ..records.derivation import summarize_for_assistant
from ..records.model import PointRecord
from .client import AssistantUnavailable, TextGenerator

logger = logging.getLogger(__name__)

HR_PERSONA = (
    "Você é o assistente virtual do PontoExato. Especialista em RH e CLT. "
    "Responda dúvidas sobre marcações de ponto, banco de horas e direitos trabalhistas. "
    "Seja profissional e direto."
)
AUDITOR_PERSONA = "Você é um auditor trabalhista rigoroso. Identifique riscos para a empresa com base na CLT."
SUMMARY_PERSONA = "Você organiza documentos de RH em guias de estudo objetivos, em português."

AUDIT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "riskLevel": {"type": "STRING", "description": "Baixo, Médio ou Alto"},
        "summary": {"type": "STRING", "description": "Resumo da auditoria"},
        "alerts": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Lista de irregularidades encontradas",
        },
    },
    "required": ["riskLevel", "summary", "alerts"],
}

SUMMARY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "overview": {"type": "STRING"},
        "topics": {"type": "ARRAY", "items": {"type": "STRING"}},
        "faqs": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {"q": {"type": "STRING"}, "a": {"type": "STRING"}},
                "required": ["q", "a"],
            },
        },
    },
    "required": ["overview", "topics", "faqs"],
}

_FAILURES = (AssistantUnavailable, ValueError, TypeError, KeyError, AttributeError)


@dataclass(frozen=True)
class AuditResult:
    risk_level: str
    summary: str
    alerts: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"riskLevel": self.risk_level, "summary": self.summary, "alerts": list(self.alerts)}


AUDIT_FAILED = AuditResult(risk_level="Erro", summary="Não foi possível auditar.", alerts=[])


@dataclass(frozen=True)
class NotebookSummary:
    overview: str
    topics: list[str] = field(default_factory=list)
    faqs: list[tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "overview": self.overview,
            "topics": list(self.topics),
            "faqs": [{"q": q, "a": a} for q, a in self.faqs],
        }


class AssistantService:
    """HR assistant: free questions, document summaries and CLT compliance audits.

    Every backend failure degrades to a fixed answer instead of an error.
    """

    def __init__(self, generator: TextGenerator, *, audit_model: Optional[str] = None):
        self._generator = generator
        self._audit_model = audit_model

    def ask(self, prompt: str, records: Iterable[PointRecord]) -> str:
        prompt = require_non_empty(prompt, "Pergunta")
        context = "\n".join(summarize_for_assistant(records, limit=AI_CONTEXT_LIMIT))
        text = f"Contexto de Registros de Ponto:\n{context}\n\nPergunta: {prompt}"
        try:
            return self._generator.generate(text, system_instruction=HR_PERSONA, temperature=0.5)
        except _FAILURES as e:
            logger.warning("assistant answer failed: %s", e)
            return AI_FALLBACK_MESSAGE

    def summarize(self, text: str) -> NotebookSummary:
        text = require_non_empty(text, "Texto")
        prompt = (
            "Crie um guia com visão geral, tópicos principais e perguntas frequentes "
            f"(com respostas) a partir do conteúdo abaixo:\n{text}"
        )
        try:
            raw = self._generator.generate(prompt, system_instruction=SUMMARY_PERSONA, response_schema=SUMMARY_SCHEMA)
            data = json.loads(raw)
            return NotebookSummary(
                overview=str(data["overview"]),
                topics=[str(t) for t in data.get("topics") or []],
                faqs=[(str(f["q"]), str(f["a"])) for f in data.get("faqs") or []],
            )
        except _FAILURES as e:
            logger.warning("assistant summary failed: %s", e)
            return NotebookSummary(overview=AI_FALLBACK_MESSAGE)

    def audit_compliance(
        self,
        employee_name: str,
        records: Sequence[PointRecord],
        work_shift: Optional[str] = None,
    ) -> AuditResult:
        employee_name = require_non_empty(employee_name, "Colaborador")
        lines = summarize_for_assistant(records, limit=AI_CONTEXT_LIMIT)
        shift = f" (jornada prevista: {work_shift})" if work_shift else ""
        prompt = (
            f"Analise as marcações de {employee_name}{shift} e verifique se há desvios da CLT "
            "(horas extras excessivas, falta de intervalo, falta de descanso interjornada):\n" + "\n".join(lines)
        )
        try:
            raw = self._generator.generate(
                prompt,
                system_instruction=AUDITOR_PERSONA,
                response_schema=AUDIT_SCHEMA,
                model=self._audit_model,
            )
            data = json.loads(raw.strip())
            return AuditResult(
                risk_level=str(data["riskLevel"]),
                summary=str(data["summary"]),
                alerts=[str(a) for a in data.get("alerts") or []],
            )
        except _FAILURES as e:
            logger.warning("compliance audit failed for %s: %s", employee_name, e)
            return AUDIT_FAILED
