"""
Mail Gate Package

Validates domains and email addresses against syntax and DNS, and composes
outgoing messages from the recipients that pass.
"""

from .composer import MessageComposer, ComposerState, encode_subject, is_ascii
from .domain import DomainValidator, DomainResult, DomainOutcome, is_hostname
from .exceptions import MailGateError, UnknownHeaderError, ConfigurationError
from .headers import HeaderKey, resolve_header
from .recipients import RecipientAggregator, FailureSummary, prepare
from .reporting import ErrorReporterBase, LoggingErrorReporter, Severity
from .resolver import ResolverBase, DNSResolver, MockResolver
from .transport import MailTransportBase, SMTPTransport, MockTransport
from .validator import EmailValidator, EmailResult, EmailOutcome, sanitize_email, get_domain

__all__ = [
    'MessageComposer', 'ComposerState', 'encode_subject', 'is_ascii',
    'DomainValidator', 'DomainResult', 'DomainOutcome', 'is_hostname',
    'MailGateError', 'UnknownHeaderError', 'ConfigurationError',
    'HeaderKey', 'resolve_header',
    'RecipientAggregator', 'FailureSummary', 'prepare',
    'ErrorReporterBase', 'LoggingErrorReporter', 'Severity',
    'ResolverBase', 'DNSResolver', 'MockResolver',
    'MailTransportBase', 'SMTPTransport', 'MockTransport',
    'EmailValidator', 'EmailResult', 'EmailOutcome', 'sanitize_email', 'get_domain',
]
__version__ = '1.0.0'
