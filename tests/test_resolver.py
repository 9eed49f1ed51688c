"""
Unit Tests for Resolvers

Tests for the dnspython-backed and mock resolver implementations.
"""

import pytest
from unittest.mock import MagicMock

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import dns.exception
import dns.resolver

from mail_gate.resolver import DNSResolver, MockResolver, ResolverBase


class TestDNSResolverInitialization:
    """Tests for DNSResolver initialization."""

    def test_init_with_timeout(self):
        """Test initialization with custom timeout."""
        service = DNSResolver(timeout=30)
        assert service.timeout == 30
        assert service._resolver.timeout == 30
        assert service._resolver.lifetime == 30

    def test_init_default_timeout(self):
        """Test default timeout value."""
        service = DNSResolver()
        assert service.timeout == 5


class TestDNSResolverLookups:
    """Tests for DNSResolver with a mocked dnspython resolver."""

    def setup_method(self):
        """Set up test fixtures with mocked resolver."""
        self.service = DNSResolver(timeout=5)
        self.mock_resolver = MagicMock()
        self.service._resolver = self.mock_resolver

    def test_resolve_host_success(self):
        """Test resolving a host returns its first A record."""
        self.mock_resolver.resolve.return_value = [
            MagicMock(address='93.184.216.34'),
            MagicMock(address='93.184.216.35'),
        ]

        assert self.service.resolve_host('example.com') == '93.184.216.34'
        self.mock_resolver.resolve.assert_called_once_with('example.com', 'A')

    @pytest.mark.parametrize("error", [
        dns.resolver.NXDOMAIN(),
        dns.resolver.NoAnswer(),
        dns.resolver.NoNameservers(),
        dns.exception.Timeout(),
    ])
    def test_resolve_host_failure_echoes_name(self, error):
        """Test that a failed lookup hands the name back unchanged."""
        self.mock_resolver.resolve.side_effect = error
        assert self.service.resolve_host('nonexistent.invalid') == 'nonexistent.invalid'

    def test_resolve_host_empty_answer_echoes_name(self):
        """Test that an empty answer also echoes the name."""
        self.mock_resolver.resolve.return_value = []
        assert self.service.resolve_host('empty.example') == 'empty.example'

    def test_has_record_success(self):
        """Test record check with an answer."""
        self.mock_resolver.resolve.return_value = [MagicMock()]

        assert self.service.has_record('gmail.com', 'MX') is True
        self.mock_resolver.resolve.assert_called_once_with('gmail.com', 'MX')

    def test_has_record_nxdomain(self):
        """Test record check when domain does not exist."""
        self.mock_resolver.resolve.side_effect = dns.resolver.NXDOMAIN()
        assert self.service.has_record('nonexistent.invalid', 'MX') is False

    def test_has_record_no_answer(self):
        """Test record check when no record of the type exists."""
        self.mock_resolver.resolve.side_effect = dns.resolver.NoAnswer()
        assert self.service.has_record('no-mx.com', 'MX') is False

    def test_has_record_no_nameservers(self):
        """Test record check when no nameservers are available."""
        self.mock_resolver.resolve.side_effect = dns.resolver.NoNameservers()
        assert self.service.has_record('no-ns.com', 'MX') is False

    def test_has_record_timeout(self):
        """Test record check with DNS timeout."""
        self.mock_resolver.resolve.side_effect = dns.exception.Timeout()
        assert self.service.has_record('timeout.com', 'TXT') is False

    def test_get_mx_records_sorted(self):
        """Test getting MX records sorted by preference."""
        mock_rdata1 = MagicMock()
        mock_rdata1.preference = 20
        mock_rdata1.exchange = 'mail2.example.com'

        mock_rdata2 = MagicMock()
        mock_rdata2.preference = 10
        mock_rdata2.exchange = 'mail1.example.com'

        self.mock_resolver.resolve.return_value = [mock_rdata1, mock_rdata2]

        records = self.service.get_mx_records('example.com')
        assert records == [(10, 'mail1.example.com'), (20, 'mail2.example.com')]

    def test_get_mx_records_error(self):
        """Test getting MX records with a DNS error."""
        self.mock_resolver.resolve.side_effect = dns.resolver.NXDOMAIN()
        assert self.service.get_mx_records('error.com') == []


class TestMockResolver:
    """Tests for the MockResolver class."""

    def test_inheritance(self):
        """Test that MockResolver inherits from ResolverBase."""
        assert isinstance(MockResolver(), ResolverBase)

    def test_unknown_host_echoes_name(self):
        """Test default resolution echoes the name."""
        resolver = MockResolver()
        assert resolver.resolve_host('unknown.com') == 'unknown.com'

    def test_configured_hosts_and_records(self):
        """Test configured responses."""
        resolver = MockResolver(
            hosts={'example.com': '93.184.216.34'},
            records=[('example.com', 'mx')],
        )

        assert resolver.resolve_host('example.com') == '93.184.216.34'
        assert resolver.has_record('EXAMPLE.com', 'MX') is True
        assert resolver.has_record('example.com', 'TXT') is False

    def test_add_host(self):
        """Test registering hosts dynamically."""
        resolver = MockResolver()
        resolver.add_host('mail.example', '10.0.0.1')
        resolver.add_host('nomx.example', '10.0.0.2', mx=False)

        assert resolver.has_record('mail.example', 'MX') is True
        assert resolver.has_record('nomx.example', 'MX') is False
        assert resolver.resolve_host('nomx.example') == '10.0.0.2'

    def test_get_mx_records(self):
        """Test get_mx_records method."""
        resolver = MockResolver()
        resolver.add_host('example.com', '93.184.216.34')

        assert resolver.get_mx_records('example.com') == [(10, 'mail.example.com')]
        assert resolver.get_mx_records('other.com') == []

    def test_call_history(self):
        """Test call history tracking and reset."""
        resolver = MockResolver()
        resolver.resolve_host('domain1.com')
        resolver.has_record('domain2.com', 'MX')

        assert resolver.call_history == [
            ('resolve_host', 'domain1.com'),
            ('has_record', 'domain2.com', 'MX'),
        ]

        resolver.reset_history()
        assert resolver.call_history == []


class TestResolverBase:
    """Tests for ResolverBase abstract class."""

    def test_cannot_instantiate_abstract_class(self):
        """Test that ResolverBase cannot be instantiated directly."""
        with pytest.raises(TypeError):
            ResolverBase()

    def test_incomplete_implementation(self):
        """Test that subclass must implement abstract methods."""
        class IncompleteResolver(ResolverBase):
            def resolve_host(self, name):
                return name

        with pytest.raises(TypeError):
            IncompleteResolver()


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
