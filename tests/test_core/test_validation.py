import pytest

from core.exceptions import ValidationError
from core.validation import FieldErrors, InputValidator


class TestInputValidator:
    """Test validation and normalization helpers."""

    def test_sanitize_string(self):
        assert InputValidator.sanitize_string("  hello ") == "hello"
        assert InputValidator.sanitize_string(None) == ""

    def test_sanitize_string_rejects_non_strings(self):
        with pytest.raises(ValidationError):
            InputValidator.sanitize_string(42)

    def test_sanitize_string_max_length(self):
        with pytest.raises(ValidationError):
            InputValidator.sanitize_string("x" * 11, max_length=10)

    def test_validate_required(self):
        assert InputValidator.validate_required("name", " Jane ", "Name is required") == "Jane"

        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_required("name", "   ", "Name is required")
        assert exc_info.value.errors == [{"msg": "Name is required", "param": "name"}]

    @pytest.mark.parametrize(
        "email", ["jane@example.com", "first.last+tag@sub.example.org"]
    )
    def test_valid_emails(self, email):
        assert InputValidator.validate_email(email) == email

    def test_email_is_lowercased(self):
        assert InputValidator.validate_email(" Jane@Example.COM ") == "jane@example.com"

    @pytest.mark.parametrize("email", ["", None, "jane", "jane@", "@example.com", "a@b"])
    def test_invalid_emails(self, email):
        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_email(email)
        assert exc_info.value.message == "Please include a valid email"

    def test_validate_password(self):
        assert InputValidator.validate_password("123456") == "123456"

        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_password("12345")
        assert "6 or more characters" in exc_info.value.message
        assert exc_info.value.details["value"] == "***"

    @pytest.mark.parametrize("password", ["p" * 80, "\u00e9" * 40])
    def test_password_over_72_bytes(self, password):
        with pytest.raises(ValidationError) as exc_info:
            InputValidator.validate_password(password)

        assert exc_info.value.errors == [
            {"msg": "Please enter a password of no more than 72 bytes", "param": "password"}
        ]

    def test_password_at_72_bytes(self):
        password = "\u00e9" * 36
        assert InputValidator.validate_password(password) == password

    def test_parse_skills(self):
        assert InputValidator.parse_skills("python, fastapi , ,sql,") == [
            "python",
            "fastapi",
            "sql",
        ]
        assert InputValidator.parse_skills([" go ", "", "rust"]) == ["go", "rust"]
        assert InputValidator.parse_skills(None) == []


class TestFieldErrors:
    """Test collection of several field failures."""

    def test_collects_all_failures(self):
        errors = FieldErrors()
        errors.check(InputValidator.validate_required, "name", "", "Name is required")
        errors.check(InputValidator.validate_email, "bad")
        errors.check(InputValidator.validate_password, "123")

        with pytest.raises(ValidationError) as exc_info:
            errors.raise_if_any()

        assert [e["param"] for e in exc_info.value.errors] == ["name", "email", "password"]

    def test_returns_value_when_valid(self):
        errors = FieldErrors()

        assert errors.check(InputValidator.validate_email, "JANE@example.com") == "jane@example.com"
        errors.raise_if_any()
