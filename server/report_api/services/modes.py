from __future__ import annotations
import json
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from report_api.config import Settings
from report_api.services.llm_prompts import (
    SYSTEM_PROMPT, TRENDS_USER, BEHAVIOR_USER, LEGACY_TRENDS_USER,
)
from report_api.services.llm_schemas import (
    Schema, TRENDS_SCHEMA, BEHAVIOR_SCHEMA, LEGACY_TRENDS_SCHEMA,
)


class ReportMode(str, Enum):
    TENDENCIAS_LILLY_MX = "tendencias_lilly_mx"
    CONDUCTA_LILLY_MX = "conducta_lilly_mx"
    TENDENCIAS = "tendencias"  # legacy


_PLACEHOLDER = re.compile(r"{{(\w+)}}")

# Accepted request values that are not enum values themselves
MODE_ALIASES: Mapping[str, ReportMode] = MappingProxyType({
    "conducta": ReportMode.CONDUCTA_LILLY_MX,
})


class UnsupportedModeError(ValueError):
    def __init__(self, mode: Any):
        self.mode = mode
        super().__init__(f"Unsupported mode: {format_value(mode)}")


@dataclass(frozen=True)
class ModeDescriptor:
    name: str            # json_schema name sent upstream, verbatim
    user_prompt: str     # may contain {{PLACEHOLDERS}}
    schema: Schema
    budget_setting: str  # Settings attribute holding max_output_tokens

    def max_tokens(self, settings: Settings) -> int:
        return int(getattr(settings, self.budget_setting) or settings.DEFAULT_MAX_TOKENS)


DESCRIPTORS: Mapping[ReportMode, ModeDescriptor] = MappingProxyType({
    ReportMode.TENDENCIAS_LILLY_MX: ModeDescriptor(
        name="lilly_trends_report",
        user_prompt=TRENDS_USER,
        schema=TRENDS_SCHEMA,
        budget_setting="MAX_TOKENS_TENDENCIAS_LILLY_MX",
    ),
    ReportMode.CONDUCTA_LILLY_MX: ModeDescriptor(
        name="lilly_behavior_report",
        user_prompt=BEHAVIOR_USER,
        schema=BEHAVIOR_SCHEMA,
        budget_setting="MAX_TOKENS_CONDUCTA_LILLY_MX",
    ),
    ReportMode.TENDENCIAS: ModeDescriptor(
        name="trends_report_legacy",
        user_prompt=LEGACY_TRENDS_USER,
        schema=LEGACY_TRENDS_SCHEMA,
        budget_setting="MAX_TOKENS_TENDENCIAS",
    ),
})

if set(DESCRIPTORS) != set(ReportMode):
    raise RuntimeError("every ReportMode needs exactly one ModeDescriptor")


def supported_modes() -> list[str]:
    return [m.value for m in ReportMode] + list(MODE_ALIASES)


def resolve_mode(value: Any) -> ReportMode:
    """Map a request ``mode`` value (enum value or alias) to a ReportMode."""
    if isinstance(value, str):
        if value in MODE_ALIASES:
            return MODE_ALIASES[value]
        try:
            return ReportMode(value)
        except ValueError:
            pass
    raise UnsupportedModeError(value)


def render_user_prompt(mode: ReportMode, params: Mapping[str, Any]) -> str:
    """
    Fill the mode's user prompt. Only the legacy template has placeholders:
      PLATFORM, REGION, DAYS (as in "últimos N días"), TOPIC ("—" when empty)
    Substitution is single-pass, so user values are never re-expanded.
    """
    prompt = DESCRIPTORS[mode].user_prompt
    if mode is not ReportMode.TENDENCIAS:
        return prompt
    topic = params.get("topic")
    values = {
        "PLATFORM": format_value(params.get("platform")),
        "REGION": format_value(params.get("region")),
        "DAYS": format_value(params.get("days")),
        "TOPIC": format_value(topic) if topic else "—",
    }
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), prompt)


def build_input(mode: ReportMode, params: Mapping[str, Any]) -> str:
    return f"{SYSTEM_PROMPT}\n\n{render_user_prompt(mode, params)}"


def format_value(value: Any) -> str:
    """Render a JSON value the way it reads in a template: null/true/false, 7 not 7.0."""
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)
