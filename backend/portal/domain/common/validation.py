"""Form validation helpers returning a field -> message map."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, Mapping, Optional

from pydantic import AfterValidator, EmailStr, HttpUrl, TypeAdapter, ValidationError

_EMAIL = TypeAdapter(EmailStr)
_HTTP_URL = TypeAdapter(HttpUrl)

_URL_FIELDS = {
    "github_url": "Please enter a valid GitHub URL",
    "linkedin_url": "Please enter a valid LinkedIn URL",
    "twitter_url": "Please enter a valid Twitter URL",
    "website_url": "Please enter a valid website URL",
}


@dataclass(slots=True)
class ValidationResult:
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_email(email: str) -> bool:
    try:
        _EMAIL.validate_python(email or "")
    except ValidationError:
        return False
    return True


def validate_url(url: str) -> bool:
    """Absolute http(s) URLs only."""
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        _HTTP_URL.validate_python(url)
    except ValidationError:
        return False
    return True


def _web_url(value: str) -> Optional[str]:
    text = value.strip()
    if not text:
        return None
    if not validate_url(text):
        raise ValueError("must be a valid http(s) URL")
    return text


# Request-model field type: blank becomes None, the accepted URL is stored as sent.
WebUrl = Annotated[str, AfterValidator(_web_url)]


def validate_required(value: Any, field_name: str) -> ValidationResult:
    empty = (
        value is None
        or (isinstance(value, str) and not value.strip())
        or (isinstance(value, float) and math.isnan(value))
    )
    if empty:
        return ValidationResult({field_name: f"{field_name} is required"})
    return ValidationResult()


def validate_min_length(value: str, min_length: int, field_name: str) -> ValidationResult:
    if value and len(value) < min_length:
        return ValidationResult({field_name: f"{field_name} must be at least {min_length} characters"})
    return ValidationResult()


def validate_profile_form(data: Mapping[str, Any]) -> ValidationResult:
    result = ValidationResult()
    full_name = data.get("full_name")
    if not full_name or len(str(full_name).strip()) < 2:
        result.errors["full_name"] = "Full name must be at least 2 characters"

    email = data.get("email")
    if email and not validate_email(str(email)):
        result.errors["email"] = "Please enter a valid email address"

    for key, message in _URL_FIELDS.items():
        value = data.get(key)
        if value and not validate_url(str(value)):
            result.errors[key] = message
    return result
