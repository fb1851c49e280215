"""Form state and validation helpers.

Form values live in explicit state objects updated from input-change
signals; validation and persistence read from these objects, never from
the widgets themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Dict, List

__all__ = [
    "FormState",
    "TemporaryPlayerForm",
    "FormValidator",
    "validate_temporary_player",
]

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
_DIGITS_RE = re.compile(r"[0-9]+")


@dataclass
class FormState:
    """Generic field -> value mapping for ad-hoc forms (trainings, events...)."""

    values: Dict[str, Any] = field(default_factory=dict)

    def update(self, name: str, value: Any) -> None:
        self.values[name] = value

    def get(self, name: str, default: Any = "") -> Any:
        return self.values.get(name, default)

    def text(self, name: str) -> str:
        value = self.values.get(name)
        return "" if value is None else str(value).strip()

    def clear(self) -> None:
        self.values.clear()


@dataclass
class TemporaryPlayerForm:
    name: str = ""
    number: str = ""

    def update(self, name: str, value: str) -> None:
        if name not in {f.name for f in fields(self)}:
            raise KeyError(name)
        setattr(self, name, value or "")

    def clear(self) -> None:
        self.name = ""
        self.number = ""

    @property
    def clean_name(self) -> str:
        return self.name.strip()

    @property
    def clean_number(self) -> str | None:
        return self.number.strip() or None


class FormValidator:
    """Accumulates human readable validation messages."""

    def __init__(self) -> None:
        self.errors: List[str] = []

    def reset(self) -> None:
        self.errors = []

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def is_valid(self) -> bool:
        return not self.errors

    def required(self, value: Any, field_name: str) -> bool:
        if value is None or not str(value).strip():
            self.errors.append(f"{field_name} is required")
            return False
        return True

    def digits_only(self, value: str | None, field_name: str = "Number") -> bool:
        if value and not _DIGITS_RE.fullmatch(value):
            self.errors.append(f"{field_name} must contain digits only")
            return False
        return True

    def email(self, value: str | None, field_name: str = "Email") -> bool:
        if value and not _EMAIL_RE.match(value):
            self.errors.append(f"{field_name} is not valid")
            return False
        return True

    def time(self, value: str | None, field_name: str = "Time") -> bool:
        if value and not _TIME_RE.match(value):
            self.errors.append(f"{field_name} is not valid")
            return False
        return True

    def time_range(self, start: str | None, end: str | None) -> bool:
        # Zero-padded HH:MM compares correctly as text
        if start and end and start.zfill(5) >= end.zfill(5):
            self.errors.append("Start time must be before end time")
            return False
        return True

    def date(self, value: str | None, field_name: str = "Date") -> bool:
        if not value:
            return True
        try:
            date.fromisoformat(value)
        except ValueError:
            self.errors.append(f"{field_name} is not valid")
            return False
        return True

    def number(self, value: Any, field_name: str = "Number") -> bool:
        if value in (None, ""):
            return True
        try:
            float(value)
        except (TypeError, ValueError):
            self.errors.append(f"{field_name} must be a number")
            return False
        return True

    def range(self, value: Any, minimum: float, maximum: float, field_name: str = "Value") -> bool:
        try:
            num = float(value)
        except (TypeError, ValueError):
            return True
        if num < minimum or num > maximum:
            self.errors.append(f"{field_name} must be between {minimum:g} and {maximum:g}")
            return False
        return True

    def min_length(self, value: str | None, length: int, field_name: str = "Field") -> bool:
        if value and len(value) < length:
            self.errors.append(f"{field_name} must be at least {length} characters")
            return False
        return True

    def max_length(self, value: str | None, length: int, field_name: str = "Field") -> bool:
        if value and len(value) > length:
            self.errors.append(f"{field_name} cannot be longer than {length} characters")
            return False
        return True


def validate_temporary_player(form: TemporaryPlayerForm) -> List[str]:
    validator = FormValidator()
    if not form.clean_name:
        validator.add_error("Enter the temporary player's name.")
    number = form.clean_number
    if number and not _DIGITS_RE.fullmatch(number):
        validator.add_error("The jersey number must contain digits only.")
    return validator.errors
