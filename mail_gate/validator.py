"""
Email Validator Module

Contains the EmailValidator class for validating email addresses.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .domain import NO_ADDRESS, DomainValidator
from .resolver import ResolverBase


class EmailOutcome(str, Enum):
    """
    Outcome of an email validation, in the order checks are made.

    OK and OK_BUT_RAW are the only outcomes that allow sending.
    """

    OK = "ok"
    OK_BUT_RAW = "ok_but_raw"
    INVALID_SYNTAX = "invalid_syntax"
    INVALID_DOMAIN = "invalid_domain"
    MISSING_MX_RECORD = "missing_mx_record"

    @property
    def valid(self) -> bool:
        return self in (EmailOutcome.OK, EmailOutcome.OK_BUT_RAW)

    @property
    def code(self) -> int:
        """Integer status: 0 valid, 1 bad domain, 2 no MX, 3 bad syntax."""
        return _CODES[self]


_CODES = {
    EmailOutcome.OK: 0,
    EmailOutcome.OK_BUT_RAW: 0,
    EmailOutcome.INVALID_DOMAIN: 1,
    EmailOutcome.MISSING_MX_RECORD: 2,
    EmailOutcome.INVALID_SYNTAX: 3,
}


@dataclass(frozen=True)
class EmailResult:
    """
    Represents the result of an email validation.

    Attributes:
        outcome: What the validation concluded
        raw: The string exactly as it was passed in
        canonical: The sanitized address, empty if its syntax was invalid
        domain: The domain part of the address
        ip: The domain's IPv4 address, None if it did not resolve
    """
    outcome: EmailOutcome
    raw: str
    canonical: str = ''
    domain: str = ''
    ip: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.outcome.valid

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary format."""
        return {
            'outcome': self.outcome.value,
            'raw': self.raw,
            'canonical': self.canonical,
            'domain': self.domain,
            'ip': self.ip or NO_ADDRESS,
            'valid': self.valid,
        }


# Everything else is stripped before validation
_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")


def sanitize_email(raw: str) -> str:
    """
    Strip characters that cannot appear in an email address.

    This does not validate; "<user@example.com>" becomes "user@example.com"
    but "user@@" stays as it is.
    """
    return _DISALLOWED_CHARS.sub('', raw)


def get_domain(text: str) -> str:
    """
    Extract the domain from an address, optionally wrapped in angle brackets.

    Strings without an '@' are returned as they are.
    """
    text = re.sub(r'^<?([^<>]+)>?$', r'\1', text)

    if '@' in text:
        return text.split('@')[1]

    return text


class EmailValidator:
    """
    Validates email addresses against syntax, DNS and MX records.

    Checks run in order and stop at the first failure:
    - Sanitization and format validation using regex
    - Resolution of the domain part
    - MX record verification for the domain

    A domain that resolves but publishes no MX record is rejected; there is
    no fallback to its A record.

    Example:
        >>> validator = EmailValidator(resolver)
        >>> result = validator.validate('<user@example.com>')
        >>> print(result.outcome, result.canonical)
        EmailOutcome.OK_BUT_RAW user@example.com
    """

    # Local part cannot start or end with a dot, and cannot have consecutive dots
    EMAIL_REGEX = re.compile(
        r"(?P<local>"
        r"[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]+)*"
        r")"
        r"@"
        r"(?P<domain>(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+"
        r"[a-zA-Z]{2,})"
    )

    # Maximum lengths according to RFC 5321
    MAX_EMAIL_LENGTH = 254
    MAX_LOCAL_LENGTH = 64

    def __init__(self, resolver: Optional[ResolverBase] = None):
        """
        Initialize the EmailValidator.

        Args:
            resolver: Resolver used for domain and MX lookups,
                      a DNSResolver by default
        """
        self.domains = DomainValidator(resolver)
        self.resolver = self.domains.resolver

    def _is_well_formed(self, email: str) -> bool:
        if not email or len(email) > self.MAX_EMAIL_LENGTH:
            return False

        match = self.EMAIL_REGEX.fullmatch(email)
        if not match:
            return False

        return len(match.group('local')) <= self.MAX_LOCAL_LENGTH

    def validate(self, raw: str) -> EmailResult:
        """
        Validate an email address.

        Args:
            raw: The address to validate, possibly with stray characters

        Returns:
            EmailResult object with validation details
        """
        email = sanitize_email(raw) if isinstance(raw, str) else ''

        if not self._is_well_formed(email):
            return EmailResult(outcome=EmailOutcome.INVALID_SYNTAX, raw=raw)

        domain = email.rsplit('@', 1)[-1]
        domain_result = self.domains.resolve(domain)

        if not domain_result.resolvable:
            return EmailResult(
                outcome=EmailOutcome.INVALID_DOMAIN,
                raw=raw,
                canonical=email,
                domain=domain,
            )

        if not self.domains.is_dns_record(domain_result, 'MX'):
            return EmailResult(
                outcome=EmailOutcome.MISSING_MX_RECORD,
                raw=raw,
                canonical=email,
                domain=domain,
                ip=domain_result.ip,
            )

        outcome = EmailOutcome.OK if raw == email else EmailOutcome.OK_BUT_RAW
        return EmailResult(
            outcome=outcome,
            raw=raw,
            canonical=email,
            domain=domain,
            ip=domain_result.ip,
        )

    def validate_batch(self, emails: list) -> List[EmailResult]:
        """
        Validate multiple email addresses.

        Args:
            emails: List of email addresses to validate

        Returns:
            List of EmailResult objects
        """
        return [self.validate(email) for email in emails]

    def is_valid(self, email: str) -> bool:
        """Quick check if email is valid."""
        return self.validate(email).valid

    def check_address(self, email: str) -> int:
        """Validate and return the integer status code of the outcome."""
        return self.validate(email).outcome.code
