import asyncio
import json
import logging
import re
from typing import Any, Callable, Dict, Iterator, TypeVar

from openai import AsyncOpenAI
from pydantic import ValidationError

from ..config import MAX_ATTEMPTS, RETRY_DELAY_SECONDS
from ..errors import GenerationFailure, ModelResponseError
from ..schemas import BrandAnalysis, GeneratedLogo, LogoType

logger = logging.getLogger(__name__)

T = TypeVar("T")

ANALYSIS_REQUIRED_FIELDS = ("companyName", "industry", "brandPersonality")
LOGO_REQUIRED_FIELDS = ("name", "type", "rationale", "svg")

_TAG = re.compile(r"<[^<>]+>")
_SINGLE_QUOTED_ATTR = re.compile(r"""(\s[\w:.-]+\s*=\s*)'([^'"]*)'""")


# -------------------
# Response text helpers
# -------------------

def _strip_markdown_json(s: str) -> str:
    """
    Remove common markdown wrappers (```json ... ``` or bare ``` ... ```).
    """
    text = s.strip()
    if text.startswith("```"):
        lines = text.splitlines()
        # drop opening fence (may be ``` or ```json)
        lines = lines[1:]
        # drop closing fence if present
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text


_DECODER = json.JSONDecoder()


def _embedded_objects(text: str) -> Iterator[Dict[str, Any]]:
    """Yield every JSON object that starts at a ``{`` in text, in order."""
    idx = text.find("{")
    while idx != -1:
        try:
            parsed, end = _DECODER.raw_decode(text, idx)
        except json.JSONDecodeError:
            # Stray brace in prose; try the next one.
            idx = text.find("{", idx + 1)
            continue
        if isinstance(parsed, dict):
            yield parsed
        idx = text.find("{", end)


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Extract and parse the first JSON object embedded in model output.

    Prose around the payload is tolerated, including prose that itself contains
    braces, matched or not: a ``{`` that does not open a JSON object is skipped.
    """
    cleaned = _strip_markdown_json(text)
    for parsed in _embedded_objects(cleaned):
        return parsed

    head = cleaned[:200].replace("\n", "\\n")
    raise ModelResponseError(f"Model returned no parsable JSON object: {head!r}")


def _missing_fields(payload: Dict[str, Any], required: tuple) -> list:
    return [name for name in required if not payload.get(name)]


def normalize_svg_quotes(svg: str) -> str:
    """Rewrite single-quoted attribute values inside tags to double quotes."""
    return _TAG.sub(lambda m: _SINGLE_QUOTED_ATTR.sub(r'\1"\2"', m.group(0)), svg).strip()


def parse_brand_analysis(payload: Dict[str, Any]) -> BrandAnalysis:
    missing = _missing_fields(payload, ANALYSIS_REQUIRED_FIELDS)
    if missing:
        raise ModelResponseError(f"Missing required fields in analysis: {', '.join(missing)}")
    try:
        return BrandAnalysis.model_validate(payload)
    except ValidationError as exc:
        raise ModelResponseError(f"Invalid brand analysis: {exc.error_count()} validation errors") from exc


def parse_logo_response(payload: Dict[str, Any], logo_type: LogoType) -> GeneratedLogo:
    missing = _missing_fields(payload, LOGO_REQUIRED_FIELDS)
    if missing:
        raise ModelResponseError(f"Missing required fields in logo response: {', '.join(missing)}")

    svg = payload["svg"]
    if not isinstance(svg, str) or "<svg" not in svg or "</svg>" not in svg:
        raise ModelResponseError("Invalid SVG in response")

    reported = str(payload["type"]).strip().lower()
    if reported != logo_type.value:
        logger.info("Model labelled a %s concept as %r; keeping %s", logo_type.value, reported, logo_type.value)

    return GeneratedLogo(
        concept_name=str(payload["name"]).strip(),
        logo_type=logo_type,
        rationale=str(payload["rationale"]).strip(),
        svg_code=normalize_svg_quotes(svg),
    )


# -------------------
# Client
# -------------------

class ModelClient:
    """One generative text model behind a bounded retry loop."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        max_output_tokens: int = 2048,
        max_attempts: int = MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY_SECONDS,
    ):
        self.client = client
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

    async def complete(self, prompt: str, instructions: str | None = None) -> str:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "input": prompt,
            "max_output_tokens": self.max_output_tokens,
        }
        if instructions:
            kwargs["instructions"] = instructions

        response = await self.client.responses.create(**kwargs)
        text = (getattr(response, "output_text", None) or "").strip()
        if not text:
            raise ModelResponseError("Model response contained no text")
        return text

    async def request_json(
        self,
        prompt: str,
        parse: Callable[[Dict[str, Any]], T],
        label: str,
        instructions: str | None = None,
    ) -> T:
        """
        Ask the model for a JSON object and return ``parse(payload)``.

        Every failure (transport, empty output, unparsable JSON, failed
        validation) consumes one attempt. After attempt ``n`` fails we wait
        ``n * retry_delay`` seconds before the next one.
        """
        last_error: Exception | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                text = await self.complete(prompt, instructions)
                return parse(extract_json_object(text))
            except Exception as exc:
                last_error = exc
                logger.warning("Attempt %d/%d to %s failed: %s", attempt, self.max_attempts, label, exc)
                if attempt < self.max_attempts:
                    await asyncio.sleep(attempt * self.retry_delay)

        raise GenerationFailure(label, self.max_attempts, str(last_error))
