"""
Domain Validator Module

Checks that a string is a well-formed hostname and that it exists in DNS.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .resolver import DNSResolver, ResolverBase

# Rendered in place of a missing IP address in serialized results
NO_ADDRESS = '0.0.0.0'


class DomainOutcome(str, Enum):
    """Outcome of a domain validation."""

    OK = "ok"
    INVALID_SYNTAX = "invalid_syntax"
    NOT_EXISTS = "not_exists"


@dataclass(frozen=True)
class DomainResult:
    """
    Represents the result of a domain validation.

    Attributes:
        outcome: What the validation concluded
        domain: The validated domain, empty if its syntax was invalid
        ip: The resolved IPv4 address, None unless the outcome is OK
    """
    outcome: DomainOutcome
    domain: str
    ip: Optional[str] = None

    @property
    def resolvable(self) -> bool:
        return self.outcome is DomainOutcome.OK

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary format."""
        return {
            'outcome': self.outcome.value,
            'domain': self.domain,
            'ip': self.ip or NO_ADDRESS,
            'resolvable': self.resolvable,
        }


LABEL_REGEX = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?")
MAX_HOSTNAME_LENGTH = 253


def is_hostname(domain: str) -> bool:
    """
    Check hostname syntax.

    Labels are 1-63 letters, digits or hyphens, never starting or ending
    with a hyphen, and the whole name is at most 253 characters.
    """
    if not isinstance(domain, str) or not domain:
        return False
    if len(domain) > MAX_HOSTNAME_LENGTH:
        return False
    return all(LABEL_REGEX.fullmatch(label) for label in domain.split('.'))


class DomainValidator:
    """
    Validates domain names against hostname syntax and DNS.

    Example:
        >>> validator = DomainValidator(MockResolver({'example.com': '93.184.216.34'}))
        >>> validator.validate('example.com').outcome
        <DomainOutcome.OK: 'ok'>
    """

    def __init__(self, resolver: Optional[ResolverBase] = None):
        """
        Initialize the DomainValidator.

        Args:
            resolver: Resolver used for lookups, a DNSResolver by default
        """
        self.resolver = resolver if resolver is not None else DNSResolver()

    def validate(self, domain: str) -> DomainResult:
        """
        Validate a domain name.

        Syntax is checked first; the resolver is only consulted for
        well-formed names.

        Args:
            domain: The domain to validate

        Returns:
            DomainResult object with validation details
        """
        if not is_hostname(domain):
            return DomainResult(outcome=DomainOutcome.INVALID_SYNTAX, domain='')

        return self.resolve(domain)

    def resolve(self, domain: str) -> DomainResult:
        """
        Resolve an already well-formed domain name.

        A resolver that hands the name back unchanged found nothing, so the
        domain is reported as not existing.
        """
        ip = self.resolver.resolve_host(domain)

        if ip == domain:
            return DomainResult(outcome=DomainOutcome.NOT_EXISTS, domain=domain)

        return DomainResult(outcome=DomainOutcome.OK, domain=domain, ip=ip)

    def is_dns_record(self, result: DomainResult, record_type: str) -> bool:
        """
        Check for a DNS record on a validated domain.

        No query is issued unless the domain validated as OK.
        """
        if not result.resolvable:
            return False
        return self.resolver.has_record(result.domain, record_type)

    def check_server(self, domain: str) -> int:
        """
        Check that a domain can receive mail.

        Returns:
            0 if the domain exists and has an MX record,
            1 if it is malformed or does not exist,
            2 if it exists but has no MX record
        """
        result = self.validate(domain)
        if not result.resolvable:
            return 1
        return 0 if self.is_dns_record(result, 'MX') else 2
