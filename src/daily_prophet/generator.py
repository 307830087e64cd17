"""Write one day's edition with the OpenAI Responses API.

The generator asks for a strict JSON document, narrows whatever comes back
with `extract_json_text`, and accepts any JSON object as the payload. When
the service answers with something that is not JSON, the edition degrades
to the template's fallback shape carrying the raw text. When the service
does not answer at all, `UpstreamServiceError` propagates to the caller.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import openai
from openai import OpenAI

from .config import Settings, get_settings
from .errors import UpstreamServiceError
from .extract import extract_json_text
from .models import EditionRecord
from .schema import SchemaTemplate, load_template

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_client(api_key: Optional[str] = None, timeout: Optional[float] = None) -> OpenAI:
    """Create an OpenAI client; retries are off so failures surface once."""
    kwargs: Dict[str, Any] = {"api_key": api_key, "max_retries": 0}
    if timeout:
        kwargs["timeout"] = timeout
    return OpenAI(**kwargs)


def _require_api_key(settings: Settings) -> str:
    if not settings.openai_api_key:
        raise RuntimeError(
            "OPENAI_API_KEY is required. Set it in the environment or .env file."
        )
    return settings.openai_api_key


def build_prompt(date_key: str, template: SchemaTemplate) -> str:
    skeleton = json.dumps(template.skeleton(date_key), ensure_ascii=False, indent=2)
    lines = [
        "You generate fictional newspaper digests. "
        f'Create the JSON object for the daily issue of "{template.title}" '
        f"dated {date_key} (write in {template.language}). "
        "Return only JSON with no extra commentary, using this structure:",
        skeleton,
        "",
        "JSON output requirements:",
        f"- The date field is required and must be exactly {date_key}",
    ]
    lines.extend(f"- {req}" for req in template.requirements)
    lines.append("")
    lines.append(
        "API clients consume this JSON directly; strict JSON parsing happens on the server."
    )
    return "\n".join(lines)


def _response_text(response: object) -> str:
    """Return the response text; raise only when the service reports a failure."""
    status = getattr(response, "status", None)
    err = getattr(response, "error", None)
    if status == "failed" or err:
        raise UpstreamServiceError(f"Generation response error: {err or status}")

    if status == "incomplete":
        details = getattr(response, "incomplete_details", None)
        reason = getattr(details, "reason", None) if details else None
        logger.warning("Generation response incomplete: reason=%s", reason)

    text = getattr(response, "output_text", None)
    return text if isinstance(text, str) else ""


def parse_payload(raw_text: str) -> Optional[Dict[str, Any]]:
    """Best-effort parse; None when the text does not hold a JSON object."""
    try:
        parsed = json.loads(extract_json_text(raw_text))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


class ContentGenerator:
    """Builds `EditionRecord`s for a date key from the configured template."""

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        settings: Optional[Settings] = None,
        template: Optional[SchemaTemplate] = None,
        clock: Clock = utc_now,
    ):
        self.settings = settings or get_settings()
        if client is None:
            client = build_client(
                _require_api_key(self.settings), timeout=self.settings.generation_timeout
            )
        self.client = client
        self.template = template or load_template(self.settings.schema_template)
        self.clock = clock

    def _call_service(self, prompt: str) -> str:
        request_kwargs: Dict[str, Any] = {
            "model": self.settings.openai_model,
            "input": prompt,
            "temperature": self.settings.temperature,
        }
        if self.settings.max_output_tokens and self.settings.max_output_tokens > 0:
            request_kwargs["max_output_tokens"] = self.settings.max_output_tokens

        try:
            response = self.client.responses.create(**request_kwargs)
        except openai.APIError as exc:
            logger.error("Generation call failed: %s", exc)
            raise UpstreamServiceError(f"Text generation failed: {exc}") from exc
        return _response_text(response)

    def generate(self, date_key: str) -> EditionRecord:
        prompt = build_prompt(date_key, self.template)
        logger.info(
            "Generating edition: date_key=%s template=%s model=%s",
            date_key,
            self.template.name,
            self.settings.openai_model,
        )
        raw = self._call_service(prompt)

        payload = parse_payload(raw)
        if payload is None:
            logger.warning(
                "Model output is not a JSON object; storing fallback edition: date_key=%s chars=%d",
                date_key,
                len(raw),
            )
            logger.debug("Unparsed model output: %s", raw)
            payload = self.template.fallback_payload(date_key, raw_text=raw)

        return EditionRecord(created_at=self.clock(), payload=payload)
