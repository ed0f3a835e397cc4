# server/report_api/services/llm_schemas.py
"""
JSON Schemas handed to the Responses API with ``strict: true``.

Strict mode requires ``additionalProperties: false`` and every property listed
in ``required`` on each object, so the helpers below always emit both.
"""
from __future__ import annotations
from typing import Any, Dict

Schema = Dict[str, Any]


def _obj(**properties: Schema) -> Schema:
    return {
        "type": "object",
        "additionalProperties": False,
        "required": list(properties),
        "properties": properties,
    }


def _str(max_length: int | None = None, enum: list[str] | None = None) -> Schema:
    s: Schema = {"type": "string"}
    if enum is not None:
        s["enum"] = enum
    if max_length is not None:
        s["maxLength"] = max_length
    return s


def _arr(items: Schema, min_items: int, max_items: int) -> Schema:
    return {"type": "array", "minItems": min_items, "maxItems": max_items, "items": items}


def _num() -> Schema:
    return {"type": "number"}


# -----------------------------
# tendencias_lilly_mx
# -----------------------------
TRENDS_SCHEMA: Schema = _obj(
    mode=_str(enum=["tendencias_lilly_mx"]),
    brand=_str(60),
    platforms=_arr(_str(20), 4, 4),
    executive_summary=_arr(_str(180), 3, 4),
    last_month_patterns=_arr(_str(170), 5, 6),
    next_month_opportunities=_arr(_str(170), 5, 6),
    weekly_calendar=_arr(
        _obj(
            week_label=_str(40),
            items=_arr(
                _obj(
                    theme=_str(90),
                    objective=_str(120),
                    platform=_str(20),
                    format=_str(60),
                    hook=_str(140),
                    compliance_note=_str(140),
                ),
                3, 3,
            ),
        ),
        4, 4,
    ),
    priority_topics=_arr(
        _obj(
            topic=_str(70),
            why_it_matters=_str(160),
            recommended_angle=_str(120),
            risk_flags=_arr(_str(90), 2, 3),
            mitigation=_str(140),
        ),
        8, 8,
    ),
    recommended_sources=_arr(
        _obj(name=_str(80), url=_str(220), use_case=_str(110)),
        6, 8,
    ),
    apa_references=_arr(_str(220), 6, 8),
    charts=_obj(
        format_mix=_obj(
            labels=_arr(_str(30), 3, 5),
            values=_arr(_num(), 3, 5),
        ),
        opportunities_per_week=_obj(
            labels=_arr(_str(20), 4, 4),
            values=_arr(_num(), 4, 4),
        ),
    ),
)


# -----------------------------
# conducta_lilly_mx
# -----------------------------
BEHAVIOR_SCHEMA: Schema = _obj(
    mode=_str(enum=["conducta_lilly_mx"]),
    brand=_str(40),
    platforms=_arr(_str(16), 4, 4),
    executive_summary=_arr(_str(120), 3, 3),
    platform_guidelines=_arr(
        _obj(
            platform=_str(16),
            goals=_arr(_str(120), 2, 2),
            signals=_arr(_str(120), 3, 3),
            recommended_formats=_arr(
                _obj(format=_str(28), when_to_use=_str(120), specs=_str(120)),
                2, 2,
            ),
            copy_guidelines=_arr(_str(120), 4, 4),
        ),
        4, 4,
    ),
    format_checklist=_arr(
        _obj(format=_str(18), checkpoints=_arr(_str(120), 4, 4)),
        4, 4,
    ),
    compliance_risks=_arr(_str(120), 6, 6),
    charts=_obj(
        format_mix_by_platform=_obj(
            platforms=_arr(_str(16), 4, 4),
            formats=_arr(_str(18), 3, 4),
            values=_arr(_arr(_num(), 3, 4), 4, 4),
        ),
    ),
)


# -----------------------------
# tendencias (legacy)
# -----------------------------
LEGACY_TRENDS_SCHEMA: Schema = _obj(
    top5=_arr(_str(), 5, 5),
    forecast=_arr(_str(), 3, 3),
)
