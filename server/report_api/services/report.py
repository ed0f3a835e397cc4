from __future__ import annotations
import json
import logging
from typing import Any, Dict

import openai
from pydantic import BaseModel, ConfigDict

from report_api.config import Settings
from report_api.connectors.openai_client import (
    ClientFactory, build_client, create_json_schema_response, extract_output_text, ResponseShape,
)
from report_api.services.modes import (
    DESCRIPTORS, UnsupportedModeError, build_input, resolve_mode,
)

log = logging.getLogger("report")

INVALID_BODY = "Invalid JSON body"


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def loads_strict(text: str) -> Any:
    """json.loads without the NaN/Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)


class ReportError(Exception):
    """A handled failure carrying the HTTP status and the JSON body to send."""

    def __init__(self, status_code: int, body: Dict[str, Any]):
        self.status_code = status_code
        self.body = body
        super().__init__(body.get("error"))


class ReportRequest(BaseModel):
    # No validation on purpose: old frontends send whatever they send
    model_config = ConfigDict(extra="ignore")

    mode: Any = None  # only read when present; see generate_report
    platform: Any = "all"
    region: Any = "MX"
    days: Any = 30
    topic: Any = ""


# -----------------------------
# Body ingestion
# -----------------------------
def parse_body(body: Any) -> Dict[str, Any]:
    """
    Normalize whatever the runtime handed us into one JSON string, then parse.
    Accepts an already-deserialized dict/list, raw bytes/str, or None.
    Empty or whitespace-only bodies mean "{}".
    """
    if isinstance(body, (dict, list)):
        raw = json.dumps(body)
    elif isinstance(body, (bytes, bytearray)):
        try:
            raw = bytes(body).decode("utf-8")
        except UnicodeDecodeError as e:
            log.warning("Body decode error: %s", e)
            raise ReportError(400, {"error": INVALID_BODY})
    elif body is None:
        raw = ""
    else:
        raw = str(body)

    try:
        payload = loads_strict(raw.strip() or "{}")
    except ValueError as e:
        log.warning("Body parse error: %s", e)
        raise ReportError(400, {"error": INVALID_BODY})

    if not isinstance(payload, dict):
        log.warning("Body is JSON but not an object: %s", type(payload).__name__)
        raise ReportError(400, {"error": INVALID_BODY})
    return payload


# -----------------------------
# Report generation
# -----------------------------
def generate_report(
    payload: Dict[str, Any],
    settings: Settings,
    client_factory: ClientFactory = build_client,
) -> Any:
    """
    One report per call:
      1) fail fast when the upstream key is missing
      2) resolve mode -> descriptor (missing "mode" = DEFAULT_MODE; null is not missing)
      3) single Responses API call with the mode's strict schema
      4) extract the JSON text and relay it parsed

    Raises ReportError for every non-200 outcome.
    """
    if not settings.OPENAI_API_KEY:
        log.error("Missing OPENAI_API_KEY env var")
        raise ReportError(500, {"error": "Missing OPENAI_API_KEY env var"})

    req = ReportRequest.model_validate(payload)
    mode_value = req.mode if "mode" in req.model_fields_set else settings.DEFAULT_MODE
    try:
        mode = resolve_mode(mode_value)
    except UnsupportedModeError as e:
        log.warning("%s", e)
        raise ReportError(400, {"error": str(e)})

    desc = DESCRIPTORS[mode]
    max_output_tokens = desc.max_tokens(settings)
    log.info("Generating report mode=%s schema=%s max_output_tokens=%d", mode.value, desc.name, max_output_tokens)

    client = client_factory(settings)
    try:
        data = create_json_schema_response(
            client,
            settings.OPENAI_MODEL,
            build_input(mode, req.model_dump()),
            schema_name=desc.name,
            schema=desc.schema,
            max_output_tokens=max_output_tokens,
        )
    except openai.APIStatusError as e:
        err_text = e.response.text
        log.error("OpenAI error: %s %s", e.status_code, err_text)
        raise ReportError(e.status_code, {"error": f"OpenAI {e.status_code}: {err_text}"})

    shape, text = extract_output_text(data)
    if shape is ResponseShape.UNRECOGNIZED or not isinstance(text, str) or len(text.strip()) < 2:
        log.error("Empty or invalid model output (shape=%s): %s", shape.value, data)
        raise ReportError(500, {"error": "Empty model output", "raw": text if isinstance(text, str) else ""})

    try:
        return loads_strict(text)
    except ValueError as e:
        log.error("JSON parse from model failed: %s | %s", e, text)
        return {"error": "Model returned non-JSON", "raw": text}
