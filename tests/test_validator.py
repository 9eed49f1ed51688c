"""
Unit Tests for EmailValidator

Comprehensive tests covering:
- Sanitization and valid/invalid email formats
- Outcome ordering across syntax, domain and MX checks
- Edge cases and boundary conditions
"""

import pytest
from unittest.mock import Mock

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mail_gate.validator import (
    EmailValidator,
    EmailResult,
    EmailOutcome,
    sanitize_email,
    get_domain,
)
from mail_gate.resolver import MockResolver


def make_resolver():
    resolver = MockResolver()
    for domain in ("example.com", "example.org", "test-domain.co.uk", "a.bc",
                   "subdomain.example.com", "domain.travel"):
        resolver.add_host(domain, "93.184.216.34")
    resolver.add_host("nomx.example.com", "10.0.0.2", mx=False)
    return resolver


class TestSanitizeEmail:
    """Tests for the sanitization filter."""

    @pytest.mark.parametrize("raw,expected", [
        ("user@example.com", "user@example.com"),
        ("<user@example.com>", "user@example.com"),
        (" user@example.com ", "user@example.com"),
        ("user name@example.com", "username@example.com"),
        ('"quoted"@example.com', "quoted@example.com"),
        ("usér@example.com", "usr@example.com"),
        ("user+tag@[127.0.0.1]", "user+tag@[127.0.0.1]"),
        ("bad@@@", "bad@@@"),
    ])
    def test_sanitize(self, raw, expected):
        assert sanitize_email(raw) == expected


class TestGetDomain:
    """Tests for get_domain."""

    @pytest.mark.parametrize("text,expected", [
        ("user@example.com", "example.com"),
        ("<user@example.com>", "example.com"),
        ("example.com", "example.com"),
        ("a@b@c", "b"),
    ])
    def test_get_domain(self, text, expected):
        assert get_domain(text) == expected


class TestEmailValidatorOutcomes:
    """Tests for the five validation outcomes."""

    def setup_method(self):
        """Set up test fixtures."""
        self.resolver = make_resolver()
        self.validator = EmailValidator(self.resolver)

    def test_ok(self):
        result = self.validator.validate("user@example.com")
        assert result.outcome is EmailOutcome.OK
        assert result.valid is True
        assert result.canonical == result.raw == "user@example.com"
        assert result.domain == "example.com"
        assert result.ip == "93.184.216.34"

    def test_ok_but_raw(self):
        result = self.validator.validate("<user@example.com>")
        assert result.outcome is EmailOutcome.OK_BUT_RAW
        assert result.valid is True
        assert result.canonical == "user@example.com"
        assert result.raw == "<user@example.com>"
        assert result.canonical != result.raw

    def test_invalid_syntax(self):
        result = self.validator.validate("not-an-email")
        assert result.outcome is EmailOutcome.INVALID_SYNTAX
        assert result.valid is False
        assert result.canonical == ""
        assert result.domain == ""
        assert result.ip is None
        assert result.to_dict()["ip"] == "0.0.0.0"

    def test_invalid_domain(self):
        result = self.validator.validate("user@unknown.example")
        assert result.outcome is EmailOutcome.INVALID_DOMAIN
        assert result.valid is False
        assert result.domain == "unknown.example"
        assert result.ip is None

    def test_missing_mx_record_keeps_ip(self):
        result = self.validator.validate("user@nomx.example.com")
        assert result.outcome is EmailOutcome.MISSING_MX_RECORD
        assert result.valid is False
        assert result.ip == "10.0.0.2"

    def test_syntax_failure_never_touches_dns(self):
        self.validator.validate("bad@@@")
        assert self.resolver.call_history == []

    def test_domain_failure_skips_mx_check(self):
        self.validator.validate("user@unknown.example")
        assert self.resolver.call_history == [("resolve_host", "unknown.example")]

    def test_checks_run_in_order(self):
        self.validator.validate("user@example.com")
        assert self.resolver.call_history == [
            ("resolve_host", "example.com"),
            ("has_record", "example.com", "MX"),
        ]

    def test_idempotent(self):
        first = self.validator.validate("<user@example.com>")
        second = self.validator.validate("<user@example.com>")
        assert first == second

    @pytest.mark.parametrize("email,code", [
        ("user@example.com", 0),
        ("<user@example.com>", 0),
        ("user@unknown.example", 1),
        ("user@nomx.example.com", 2),
        ("invalid", 3),
    ])
    def test_check_address(self, email, code):
        assert self.validator.check_address(email) == code


class TestEmailValidatorSyntax:
    """Syntax tests with a resolver that knows every test domain."""

    def setup_method(self):
        """Set up test fixtures."""
        self.validator = EmailValidator(make_resolver())

    @pytest.mark.parametrize("email", [
        "user@example.com",
        "test.email@example.org",
        "user123@test-domain.co.uk",
        "user+tag@example.com",
        "user_name@example.com",
        "user@subdomain.example.com",
        "user@a.bc",
        "email@domain.travel",
    ])
    def test_valid_emails(self, email):
        assert self.validator.validate(email).outcome is EmailOutcome.OK

    @pytest.mark.parametrize("email", [
        "",
        "plainaddress",
        "@missing-local.com",
        "missing-domain@",
        "user@.com",
        "user@domain",
        "user@domain.",
        "user@@double-at.com",
        "user@domain..com",
        ".user@example.com",
        "user.@example.com",
        "user..name@example.com",
        "user@-domain.com",
        "user@domain-.com",
        "user@domain.a",
        "user@domain.123",
        "user@sub_domain.com",
        "user@[127.0.0.1]",
        "@",
    ])
    def test_invalid_emails(self, email):
        result = self.validator.validate(email)
        assert result.outcome is EmailOutcome.INVALID_SYNTAX

    def test_email_with_special_characters(self):
        """Test email with allowed special characters in local part."""
        for char in "!#$%&'*+=?^_`{|}~-":
            email = f"user{char}name@example.com"
            assert self.validator.is_valid(email) is True, email

    def test_pattern_rejects_trailing_newline(self):
        assert EmailValidator.EMAIL_REGEX.fullmatch("user@example.com\n") is None

    def test_whitespace_is_sanitized(self):
        result = self.validator.validate("  user@example.com  ")
        assert result.outcome is EmailOutcome.OK_BUT_RAW

    def test_email_exceeds_maximum_length(self):
        result = self.validator.validate("a" * 250 + "@example.com")
        assert result.outcome is EmailOutcome.INVALID_SYNTAX

    def test_local_part_exceeds_maximum_length(self):
        result = self.validator.validate("a" * 65 + "@example.com")
        assert result.outcome is EmailOutcome.INVALID_SYNTAX

    def test_local_part_at_maximum_length(self):
        assert self.validator.is_valid("a" * 64 + "@example.com") is True

    def test_non_string_input(self):
        result = self.validator.validate(None)
        assert result.outcome is EmailOutcome.INVALID_SYNTAX


class TestEmailValidatorWithMock:
    """Tests using unittest.mock for the resolver."""

    def test_with_mock_resolver(self):
        resolver = Mock()
        resolver.resolve_host.return_value = "192.0.2.1"
        resolver.has_record.return_value = True

        validator = EmailValidator(resolver)
        result = validator.validate("user@example.com")

        assert result.valid is True
        resolver.resolve_host.assert_called_once_with("example.com")
        resolver.has_record.assert_called_once_with("example.com", "MX")

    def test_domain_taken_after_last_at(self):
        resolver = Mock()
        resolver.resolve_host.return_value = "192.0.2.1"
        resolver.has_record.return_value = False

        EmailValidator(resolver).validate("user@mail.example.com")
        resolver.resolve_host.assert_called_once_with("mail.example.com")

    def test_call_count(self):
        resolver = Mock()
        resolver.resolve_host.return_value = "192.0.2.1"
        resolver.has_record.return_value = True

        validator = EmailValidator(resolver)
        validator.validate_batch(["user1@example.com", "invalid", "user3@example.com"])

        assert resolver.has_record.call_count == 2


class TestEmailResult:
    """Tests for the EmailResult value object."""

    def test_valid_follows_outcome(self):
        for outcome in EmailOutcome:
            result = EmailResult(outcome=outcome, raw="x")
            assert result.valid is (outcome in (EmailOutcome.OK, EmailOutcome.OK_BUT_RAW))

    def test_to_dict(self):
        result = EmailValidator(make_resolver()).validate("<user@example.com>")
        assert result.to_dict() == {
            "outcome": "ok_but_raw",
            "raw": "<user@example.com>",
            "canonical": "user@example.com",
            "domain": "example.com",
            "ip": "93.184.216.34",
            "valid": True,
        }

    def test_validate_batch(self):
        validator = EmailValidator(make_resolver())
        results = validator.validate_batch(["user1@example.com", "invalid-email", "user2@example.org"])
        assert [r.valid for r in results] == [True, False, True]


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
