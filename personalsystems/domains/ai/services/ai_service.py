"""Plan decomposition and habit nudges backed by the completion client."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional

from pydantic import ValidationError

from personalsystems.domains.ai.schemas.ai_schemas import HabitNudge, PlanResult
from personalsystems.domains.ai.services.client import (
    AIResponseParseError,
    CompletionClient,
    extract_json,
)

logger = logging.getLogger(__name__)

PLAN_SYSTEM_PROMPT = (
    "You turn free-form plans into concrete calendar tasks. "
    "Reply with JSON only, shaped as "
    '{"summary": string, "tasks": [{"title": string, "date": "YYYY-MM-DD", '
    '"time": "HH:MM", "duration_minutes": integer, "notes": string}]}.'
)

NUDGE_SYSTEM_PROMPT = (
    "You are a friendly habit coach. For each habit not yet completed today, "
    "suggest a time later today and write one short encouraging sentence. "
    "Reply with a JSON array only, shaped as "
    '[{"habit_name": string, "habit_id": string, "suggested_time": "HH:MM", '
    '"message": string}], most urgent first.'
)


def analyze_plan(
    content: str,
    start_date: Optional[date] = None,
    *,
    client: Optional[CompletionClient] = None,
) -> PlanResult:
    """Break ``content`` into dated tasks starting at ``start_date``."""
    client = client or CompletionClient.from_config()
    start = start_date or date.today()
    prompt = (
        f"Start date: {start.isoformat()} ({start.strftime('%A')}).\n"
        f"Plan:\n{content.strip()}"
    )
    data = extract_json(client.complete(PLAN_SYSTEM_PROMPT, prompt))
    if not isinstance(data, dict):
        raise AIResponseParseError("Plan reply is not an object")
    try:
        return PlanResult.model_validate(data)
    except ValidationError as e:
        logger.warning("Plan reply failed validation: %s", e)
        raise AIResponseParseError("Plan reply failed validation") from e


def habit_nudges(
    habits: Iterable,
    completed_today: Iterable[str],
    current_time: Optional[str] = None,
    *,
    client: Optional[CompletionClient] = None,
) -> List[HabitNudge]:
    """Nudges for habits whose names are not in ``completed_today``."""
    done = {name.strip().lower() for name in completed_today or [] if name}
    pending = [h for h in habits if h.name.strip().lower() not in done]
    if not pending:
        return []

    client = client or CompletionClient.from_config()
    lines = [
        f"- id={h.id} name={h.name} frequency={getattr(h.frequency, 'value', h.frequency)}"
        + (f" target={h.target_duration_minutes}min" if h.target_duration_minutes else "")
        for h in pending
    ]
    prompt = (
        f"Current time: {current_time or 'unknown'}\n"
        "Habits still open today:\n" + "\n".join(lines)
    )
    data = extract_json(client.complete(NUDGE_SYSTEM_PROMPT, prompt, temperature=0.7))
    if isinstance(data, dict):
        data = data.get("nudges", [])
    if not isinstance(data, list):
        raise AIResponseParseError("Nudge reply is not a list")
    try:
        nudges = [HabitNudge.model_validate(item) for item in data]
    except ValidationError as e:
        logger.warning("Nudge reply failed validation: %s", e)
        raise AIResponseParseError("Nudge reply failed validation") from e

    pending_ids = {h.id for h in pending}
    return [n for n in nudges if n.habit_id in pending_ids and n.habit_name.strip().lower() not in done]
