"""Input validation helpers."""

from __future__ import annotations

from datetime import date

from pydantic import ValidationError


def jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors(include_url=False)
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return errors


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` path segment; raise ValueError on bad input."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError("validation_error")
