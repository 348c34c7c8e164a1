from __future__ import annotations  # Re-export validation public API

from .validation import (  # noqa: F401
    FIELD_ORDER,
    CandidateDetails,
    CorrectionField,
    CorrectionOutcome,
    ValidationResult,
    correction_prompt,
    is_valid_email,
    is_valid_phone,
    sanitize_phone,
    validate_and_get_corrections,
    validate_correction,
)

__all__ = [
    "FIELD_ORDER",
    "CandidateDetails",
    "CorrectionField",
    "CorrectionOutcome",
    "ValidationResult",
    "correction_prompt",
    "is_valid_email",
    "is_valid_phone",
    "sanitize_phone",
    "validate_and_get_corrections",
    "validate_correction",
]
