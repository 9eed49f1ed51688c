"""
Resolver Module

Provides the DNS lookups that domain and email validation depend on.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

import dns.exception
import dns.resolver

logger = logging.getLogger(__name__)


class ResolverBase(ABC):
    """
    Abstract base class for resolvers.

    ``resolve_host`` returns its argument unchanged when the name cannot be
    resolved. Validators rely on that echo to detect missing domains, so
    implementations must never return None or raise instead.
    """

    @abstractmethod
    def resolve_host(self, name: str) -> str:
        """
        Resolve a hostname to an IPv4 address.

        Args:
            name: The hostname to resolve

        Returns:
            The address as a string, or ``name`` itself if resolution failed
        """
        pass

    @abstractmethod
    def has_record(self, domain: str, record_type: str) -> bool:
        """
        Check if a DNS record of the given type exists for a domain.

        Args:
            domain: The domain to check
            record_type: DNS record type, e.g. 'MX' or 'A'

        Returns:
            True if at least one record exists, False otherwise
        """
        pass

    @abstractmethod
    def get_mx_records(self, domain: str) -> List[tuple]:
        """
        Get all MX records for a domain.

        Args:
            domain: The domain to check

        Returns:
            List of (priority, server) tuples
        """
        pass


class DNSResolver(ResolverBase):
    """
    Real resolver that performs DNS lookups with dnspython.

    Every query is bounded by ``timeout``; lookup errors of any kind are
    reported as "no answer" rather than raised.
    """

    def __init__(self, timeout: float = 5):
        """
        Initialize the resolver.

        Args:
            timeout: DNS query timeout in seconds
        """
        self.timeout = timeout
        self._resolver = dns.resolver.Resolver()
        self._resolver.timeout = timeout
        self._resolver.lifetime = timeout

    def resolve_host(self, name: str) -> str:
        try:
            answers = self._resolver.resolve(name, 'A')
        except dns.exception.DNSException as e:
            logger.debug(f"A lookup for {name} failed: {e!r}")
            return name

        for rdata in answers:
            return rdata.address
        return name

    def has_record(self, domain: str, record_type: str) -> bool:
        try:
            answers = self._resolver.resolve(domain, record_type)
            return len(answers) > 0
        except dns.resolver.NXDOMAIN:
            # Domain does not exist
            return False
        except dns.resolver.NoAnswer:
            # Domain exists but has no record of this type
            return False
        except dns.exception.DNSException as e:
            logger.debug(f"{record_type} lookup for {domain} failed: {e!r}")
            return False

    def get_mx_records(self, domain: str) -> List[tuple]:
        try:
            answers = self._resolver.resolve(domain, 'MX')
        except dns.exception.DNSException as e:
            logger.debug(f"MX lookup for {domain} failed: {e!r}")
            return []

        records = []
        for rdata in answers:
            records.append((rdata.preference, str(rdata.exchange)))
        return sorted(records, key=lambda x: x[0])


class MockResolver(ResolverBase):
    """
    Mock resolver for testing purposes.

    Answers from in-memory tables of host addresses and DNS records.
    """

    def __init__(
        self,
        hosts: Optional[Dict[str, str]] = None,
        records: Optional[Iterable[Tuple[str, str]]] = None,
    ):
        """
        Initialize the mock resolver.

        Args:
            hosts: Mapping of hostname to IP address,
                   e.g. {'example.com': '93.184.216.34'}
            records: (domain, record_type) pairs that exist,
                     e.g. [('example.com', 'MX')]
        """
        self.hosts = dict(hosts or {})
        self.records = {(d.lower(), t.upper()) for d, t in (records or [])}
        self.call_history = []

    def add_host(self, name: str, ip: str, mx: bool = True):
        """
        Register a resolvable host.

        Args:
            name: Hostname
            ip: Address it resolves to
            mx: Whether to also register an MX record for it
        """
        self.hosts[name] = ip
        if mx:
            self.records.add((name.lower(), 'MX'))

    def resolve_host(self, name: str) -> str:
        self.call_history.append(('resolve_host', name))
        return self.hosts.get(name, name)

    def has_record(self, domain: str, record_type: str) -> bool:
        self.call_history.append(('has_record', domain, record_type))
        return (domain.lower(), record_type.upper()) in self.records

    def get_mx_records(self, domain: str) -> List[tuple]:
        self.call_history.append(('get_mx_records', domain))
        if (domain.lower(), 'MX') in self.records:
            return [(10, f'mail.{domain}')]
        return []

    def reset_history(self):
        """Reset the call history."""
        self.call_history = []
