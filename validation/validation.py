from __future__ import annotations  # Candidate detail validation rules

import re
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


CorrectionField = Literal["name", "email", "phone"]

FIELD_ORDER: tuple[CorrectionField, ...] = ("name", "email", "phone")

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_PATTERN = re.compile(r"[0-9]{10}")
_PHONE_SEPARATORS = re.compile(r"[\s\-()+]")

_PROMPTS = {
    "name": "Could you please provide your full name?",
    "email": "Could you please provide your email address?",
    "phone": "And finally, your 10-digit phone number?",
}


class CandidateDetails(BaseModel):  # Contact details extracted from a resume
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = {"frozen": True}


class ValidationResult(BaseModel):  # Outcome of checking all candidate fields
    is_valid: bool
    fields_to_correct: List[CorrectionField] = Field(default_factory=list)


class CorrectionOutcome(BaseModel):  # Outcome of checking one corrected field
    is_valid: bool
    value: Optional[str] = None


def sanitize_phone(raw: Optional[str]) -> str:
    """Strip whitespace, parentheses, dashes and plus signs."""

    return _PHONE_SEPARATORS.sub("", raw or "")


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_phone(value: Optional[str]) -> bool:
    return PHONE_PATTERN.fullmatch(sanitize_phone(value)[-10:]) is not None


def validate_and_get_corrections(details: CandidateDetails) -> ValidationResult:
    """Check every field independently and list the ones that need correcting."""

    fields_to_correct: List[CorrectionField] = []
    if not details.name:
        fields_to_correct.append("name")
    if not is_valid_email(details.email):
        fields_to_correct.append("email")
    if not is_valid_phone(details.phone):
        fields_to_correct.append("phone")
    return ValidationResult(is_valid=not fields_to_correct, fields_to_correct=fields_to_correct)


def validate_correction(field: CorrectionField, text: str) -> CorrectionOutcome:
    """Apply the single-field rule used while the candidate corrects a detail.

    Phone numbers are stored as their sanitized ten-digit tail.
    """

    if field == "name":
        if len(text) > 2:
            return CorrectionOutcome(is_valid=True, value=text)
        return CorrectionOutcome(is_valid=False)
    if field == "email":
        if is_valid_email(text):
            return CorrectionOutcome(is_valid=True, value=text)
        return CorrectionOutcome(is_valid=False)
    if field == "phone":
        tail = sanitize_phone(text)[-10:]
        if PHONE_PATTERN.fullmatch(tail):
            return CorrectionOutcome(is_valid=True, value=tail)
        return CorrectionOutcome(is_valid=False)
    raise ValueError(f"Unknown correction field: {field}")


def correction_prompt(field: CorrectionField) -> str:
    return _PROMPTS[field]
