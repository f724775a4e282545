"""Field types and validators shared by permit and user schemas."""

import re
from typing import Annotated

from pydantic import AfterValidator

# 24-hour clock; single-digit hours are accepted and normalized to HH:MM.
TIME_OF_DAY_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def normalize_time_of_day(value: str) -> str:
    """Validate a HH:MM clock time and zero-pad the hour ("8:05" -> "08:05")."""
    match = TIME_OF_DAY_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValueError("Time must use the HH:MM 24-hour format")
    hour, minute = match.groups()
    return f"{int(hour):02d}:{minute}"


def require_text(value: str) -> str:
    """Strip surrounding whitespace and reject empty text."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("Field is required and must not be blank")
    return stripped


TimeOfDay = Annotated[str, AfterValidator(normalize_time_of_day)]
RequiredText = Annotated[str, AfterValidator(require_text)]
