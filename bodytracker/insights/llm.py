# -*- coding: utf-8 -*-
"""Insights — LLM calls (calorie guess, log summary).

Both helpers return ``None`` whenever the model is not configured, not
reachable or answers with nothing usable; callers show an "unavailable"
state instead of failing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import httpx

from ..config import settings
from ..entries.models import Entry, EntryKind

logger = logging.getLogger(__name__)

SUMMARY_ENTRY_LIMIT = 30

_NUMBER_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class LLMSettings:
    base_url: str
    api_key: str
    model: str
    timeout: float
    max_tokens: int
    temperature: float


def resolve_llm_settings() -> Optional[LLMSettings]:
    if not settings.llm_api_key:
        return None
    return LLMSettings(
        base_url=settings.llm_base_url,
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        timeout=settings.llm_timeout,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
    )


def _completions_url(base_url: str) -> str:
    base = base_url.rstrip("/")
    if base.endswith("/chat/completions"):
        return base
    return f"{base}/chat/completions"


def _extract_text(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        return None
    return content.strip() or None


async def complete(
    prompt: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[str]:
    cfg = resolve_llm_settings()
    if cfg is None:
        logger.warning("LLM API key not configured")
        return None
    payload: Dict[str, Any] = {
        "model": cfg.model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": cfg.temperature,
        "max_tokens": cfg.max_tokens,
    }
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {cfg.api_key}",
    }
    try:
        async with httpx.AsyncClient(timeout=cfg.timeout, transport=transport) as client:
            resp = await client.post(_completions_url(cfg.base_url), json=payload, headers=headers)
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("LLM call failed: %s", exc)
        return None
    return _extract_text(data)


def parse_calorie_guess(text: Optional[str]) -> Optional[int]:
    """First integer in the answer; zero or no number means no guess."""
    if not text:
        return None
    match = _NUMBER_RE.search(text)
    if not match:
        return None
    value = int(match.group(0))
    return value if value > 0 else None


async def estimate_calories(
    name: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[int]:
    name = (name or "").strip()
    if not name:
        return None
    prompt = (
        f'Estimate the calories for a standard serving of "{name}". '
        "Return ONLY the number (integer). If unsure, return 0."
    )
    return parse_calorie_guess(await complete(prompt, transport=transport))


def _entry_line(entry: Entry) -> str:
    unit = " kg" if entry.kind is EntryKind.weight else ""
    return f"{entry.occurred_on}: {entry.kind.value} - {entry.label} {entry.value:g}{unit}"


def build_summary_prompt(entries: Sequence[Entry]) -> str:
    lines = "\n".join(_entry_line(e) for e in entries[:SUMMARY_ENTRY_LIMIT])
    return (
        "Act as a supportive, expert nutritionist and data analyst.\n"
        "Analyze these health logs for patterns:\n"
        f"{lines}\n\n"
        'Identify 1 specific reason ("culprit") for any recent weight gain '
        "or 1 success factor for weight loss.\n"
        "Then provide 2 short, actionable bullet points for improvement.\n"
        "Keep the tone encouraging. Max 150 words."
    )


async def summarize(
    entries: Sequence[Entry],
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[str]:
    if not entries:
        return None
    return await complete(build_summary_prompt(entries), transport=transport)
