"""
Message Composer Module

Collects validated headers for a single message, decides whether it may be
sent, and hands it to a transport.
"""

import base64
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from .headers import OPTIONAL_ADDRESS_HEADERS, HeaderKey, resolve_header
from .recipients import FailureSummary, RecipientAggregator
from .reporting import ErrorReporterBase, LoggingErrorReporter, Severity
from .transport import EOL, MailTransportBase, SMTPTransport
from .validator import EmailValidator

logger = logging.getLogger(__name__)

TEXT = 'text/plain'
HTML = 'text/html'
DEFAULT_CHARSET = 'utf-8'
DEFAULT_SUBJECT = 'no subject'

_PRINTABLE_ASCII = re.compile(r'[\x20-\x7e]+')


def is_ascii(text: str) -> bool:
    """True if text is non-empty and entirely printable ASCII."""
    return _PRINTABLE_ASCII.fullmatch(text) is not None


def encode_subject(subject: str, charset: str = DEFAULT_CHARSET) -> str:
    """
    Encode a subject line for a mail header.

    Printable ASCII passes through; anything else becomes a single base64
    encoded word, ``=?charset?B?...?=``.
    """
    if is_ascii(subject):
        return subject

    payload = base64.b64encode(subject.encode(charset)).decode('ascii')
    return f'=?{charset}?B?{payload}?='


def _default_headers() -> Dict[HeaderKey, str]:
    headers = {key: '' for key in HeaderKey}
    headers[HeaderKey.CONTENT_TYPE] = TEXT
    headers[HeaderKey.CHARSET] = DEFAULT_CHARSET
    return headers


@dataclass
class ComposerState:
    """
    Everything a composer knows about the message being built.

    Attributes:
        headers: Current value of every header
        summary: Addresses rejected so far, by header
        tolerate_partial_failure: Send even if some addresses were rejected
        allow_cc_as_to: Use Cc as the recipient list when To is empty
    """
    headers: Dict[HeaderKey, str] = field(default_factory=_default_headers)
    summary: FailureSummary = field(default_factory=FailureSummary)
    tolerate_partial_failure: bool = False
    allow_cc_as_to: bool = False

    @property
    def error_count(self) -> int:
        return self.summary.error_count


class MessageComposer:
    """
    Composes a message from validated headers and sends it.

    Every address-bearing header is validated as it is set; invalid
    addresses are dropped and counted. Whether the message may then be sent
    depends on the partial-failure and Cc-as-To policies.

    Example:
        >>> mail = MessageComposer('me@example.com', 'you@example.com', validator=validator)
        >>> mail.set_header('cc', 'boss@example.com, typo@@example.com')
        >>> mail.errors()
        1
        >>> mail.ready_to_send()
        False
        >>> mail.send_incomplete()
        >>> mail.send('Hello', 'Greetings')
        True
    """

    def __init__(
        self,
        from_addr: str = '',
        to: str = '',
        tolerate_partial_failure: bool = False,
        allow_cc_as_to: bool = False,
        validator: Optional[EmailValidator] = None,
        transport: Optional[MailTransportBase] = None,
        reporter: Optional[ErrorReporterBase] = None,
    ):
        """
        Initialize the composer.

        Args:
            from_addr: Sender address
            to: Recipient list
            tolerate_partial_failure: Send even if some addresses were rejected
            allow_cc_as_to: Use Cc as the recipient list when To is empty
            validator: Validator for every address, EmailValidator() by default
            transport: Transport used by send, a local SMTP relay by default
            reporter: Receives transport failures, logging by default
        """
        self.state = ComposerState(
            tolerate_partial_failure=tolerate_partial_failure,
            allow_cc_as_to=allow_cc_as_to,
        )
        self.aggregator = RecipientAggregator(validator or EmailValidator(), self.state.summary)
        self.transport = transport if transport is not None else SMTPTransport()
        self.reporter = reporter if reporter is not None else LoggingErrorReporter()

        if from_addr:
            self.set_header(HeaderKey.FROM, from_addr)
        if to:
            self.set_header(HeaderKey.TO, to)

    @classmethod
    def text(cls, from_addr: str, to: str, message: str, subject: str = '', **kwargs) -> bool:
        """Compose and send a plain text message in one call."""
        return cls(from_addr, to, **kwargs).send(message, subject)

    def set_header(self, name, value: str):
        """
        Set a header by name or alias.

        Address-bearing headers are validated and replaced by the valid
        subset of their addresses.

        Raises:
            UnknownHeaderError: If the name matches no header
        """
        key = resolve_header(name)

        if key.carries_addresses:
            self.state.headers[key] = self.aggregator.add(key, value)
        else:
            self.state.headers[key] = value

    def header(self, name) -> str:
        """Get the current value of a header by name or alias."""
        return self.state.headers[resolve_header(name)]

    def send_incomplete(self):
        """Allow sending even if some addresses were rejected."""
        self.state.tolerate_partial_failure = True

    def use_cc_as_to(self):
        """Allow Cc to stand in for an empty To."""
        self.state.allow_cc_as_to = True

    def ready_to_send(self) -> bool:
        headers = self.state.headers

        if not headers[HeaderKey.FROM]:
            return False

        if not headers[HeaderKey.TO] and not (self.state.allow_cc_as_to and headers[HeaderKey.CC]):
            return False

        return self.state.tolerate_partial_failure or self.state.error_count == 0

    def is_complete(self) -> bool:
        """True if no address has been rejected."""
        return self.state.error_count == 0

    def errors(self) -> int:
        return self.state.error_count

    def summary(self) -> FailureSummary:
        return self.state.summary

    def header_block(self) -> str:
        """
        Assemble the CRLF-terminated header block.

        To and Subject are not part of the block; they are passed to the
        transport separately.
        """
        headers = self.state.headers
        lines = [
            'MIME-Version: 1.0',
            f'Content-Type: {headers[HeaderKey.CONTENT_TYPE]}; charset={headers[HeaderKey.CHARSET]}',
            f'From: {headers[HeaderKey.FROM]}',
        ]

        for key in OPTIONAL_ADDRESS_HEADERS:
            if headers[key]:
                lines.append(f'{key.value}: {headers[key]}')

        return ''.join(line + EOL for line in lines)

    def send(self, message: str, subject: str = '') -> bool:
        """
        Send the message if it is ready.

        Args:
            message: Message body
            subject: Subject line; falls back to the Subject header, then
                     to a placeholder

        Returns:
            True if the transport accepted the message
        """
        if not self.ready_to_send():
            logger.debug(
                f"Message not ready to send: {self.state.error_count} rejected address(es)"
            )
            return False

        headers = self.state.headers
        if not headers[HeaderKey.TO]:
            headers[HeaderKey.TO] = headers[HeaderKey.CC]
            headers[HeaderKey.CC] = ''

        to = headers[HeaderKey.TO]
        subject = subject or headers[HeaderKey.SUBJECT] or DEFAULT_SUBJECT
        try:
            subject = encode_subject(subject, headers[HeaderKey.CHARSET])
        except (LookupError, UnicodeEncodeError) as e:
            self.reporter.log(f"Email to {to} was not sent: {e}", Severity.MEDIUM)
            return False

        if not self.transport.send(to, subject, message, self.header_block()):
            self.reporter.log(f"Email to {to} was not sent.", Severity.MEDIUM)
            return False

        return True
