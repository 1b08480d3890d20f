from __future__ import annotations

import json
from typing import Optional

from pydantic import ValidationError

from grantaxiom.core.errors import InvalidOracleResponseError
from grantaxiom.core.models import AnalysisReport

FENCE = "```"
JSON_FENCE = "```json"
HTML_FENCE = "```html"
EMPTY_CHAT_PLACEHOLDER = "I couldn't generate a response."
MAX_VALIDATION_ERRORS_IN_DETAIL = 5


def strip_json_fences(text: str) -> str:
    return str(text or "").replace(JSON_FENCE, "").replace(FENCE, "").strip()


def _validation_summary(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors()[:MAX_VALIDATION_ERRORS_IN_DETAIL]:
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc or '<root>'}: {err.get('msg', '')}")
    return "; ".join(parts)


def normalize_audit_response(raw: Optional[str]) -> AnalysisReport:
    """Parse and validate an audit payload.

    Raises InvalidOracleResponseError with kind ``invalid_json`` when the text is
    not JSON and ``invalid_schema`` when it does not describe an AnalysisReport
    (including out-of-range scores or confidences and unknown claim statuses).
    """
    text = strip_json_fences(raw or "") or "{}"
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidOracleResponseError("invalid_json", exc.msg) from exc

    if not isinstance(payload, dict):
        raise InvalidOracleResponseError("invalid_schema", "audit payload must be a JSON object")

    try:
        return AnalysisReport.model_validate(payload)
    except ValidationError as exc:
        raise InvalidOracleResponseError(
            "invalid_schema",
            _validation_summary(exc),
            errors=exc.errors(include_url=False),
        ) from exc


def extract_code(raw: Optional[str]) -> str:
    code = str(raw or "")
    if HTML_FENCE in code:
        code = code.partition(HTML_FENCE)[2].partition(FENCE)[0]
    elif FENCE in code:
        code = code.partition(FENCE)[2].partition(FENCE)[0]
    return code.strip()


def normalize_chat_response(raw: Optional[str]) -> str:
    text = str(raw or "")
    return text if text.strip() else EMPTY_CHAT_PLACEHOLDER
