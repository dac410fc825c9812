"""
Input Validation Utilities.

Services validate request payloads here before touching the database. Each
helper either returns a normalized value or raises a field-level
`ValidationError`. `FieldErrors` collects several failures so a client gets
every problem with a form in one response instead of one at a time.
"""

import re
from typing import Any, List, Optional

from core.exceptions import ValidationError
from core.logging_config import get_logger

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt only accepts up to 72 bytes of input
MAX_PASSWORD_BYTES = 72


class InputValidator:
    """Validation and normalization helpers"""

    EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

    @staticmethod
    def sanitize_string(value: Any, max_length: int = 10000) -> str:
        """Trim a string value, treating None as empty"""
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValidationError("input", value, "Must be a string")

        value = value.strip()
        if len(value) > max_length:
            raise ValidationError(
                "input", value[:100], f"Must be no more than {max_length} characters"
            )
        return value

    @staticmethod
    def validate_required(field: str, value: Any, message: str) -> str:
        """Require a non-empty string"""
        value = InputValidator.sanitize_string(value)
        if not value:
            raise ValidationError(field, value, message)
        return value

    @staticmethod
    def validate_email(email: Any) -> str:
        """Validate email address"""
        email = InputValidator.sanitize_string(email, max_length=254)

        if not InputValidator.EMAIL_PATTERN.match(email):
            raise ValidationError("email", email, "Please include a valid email")

        return email.lower()

    @staticmethod
    def validate_password(password: Any) -> str:
        """Validate password length (value never echoed back)"""
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "password",
                "***",
                f"Please enter a password with {MIN_PASSWORD_LENGTH} or more characters",
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                "password",
                "***",
                f"Please enter a password of no more than {MAX_PASSWORD_BYTES} bytes",
            )
        return password

    @staticmethod
    def parse_skills(skills: Any) -> List[str]:
        """Split a comma-delimited skills string into trimmed entries"""
        if isinstance(skills, (list, tuple)):
            parts = [str(skill) for skill in skills]
        else:
            parts = InputValidator.sanitize_string(skills).split(",")
        return [part.strip() for part in parts if part.strip()]


class FieldErrors:
    """Collects field-level validation failures"""

    def __init__(self):
        self.errors: List[ValidationError] = []

    def check(self, validator, *args) -> Optional[Any]:
        """Run a validator, recording its failure instead of raising"""
        try:
            return validator(*args)
        except ValidationError as e:
            self.errors.append(e)
            return None

    def raise_if_any(self):
        if self.errors:
            logger.debug(
                f"Validation failed for fields: {[e.field for e in self.errors]}"
            )
            raise ValidationError.combine(self.errors)
