"""
Mail Transport Module

Hands composed messages to something that can deliver them.
"""

import logging
import os
import smtplib
from abc import ABC, abstractmethod
from email.utils import getaddresses
from typing import Dict, List, Optional, Tuple

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

EOL = '\r\n'


class MailTransportBase(ABC):
    """Abstract base class for mail transports."""

    @abstractmethod
    def send(self, to: str, subject: str, body: str, headers: str) -> bool:
        """
        Attempt to deliver a message.

        Args:
            to: Comma-joined recipient addresses
            subject: Subject line, already encoded for the wire
            body: Message body
            headers: CRLF-terminated header block

        Returns:
            True if the message was accepted for delivery
        """
        pass


def parse_header_block(headers: str) -> List[Tuple[str, str]]:
    """Split a CRLF header block into (name, value) pairs."""
    fields = []
    for line in headers.split(EOL):
        if not line:
            continue
        name, _, value = line.partition(':')
        fields.append((name.strip(), value.strip()))
    return fields


def _addresses(*values: str) -> List[str]:
    return [addr for _, addr in getaddresses([v for v in values if v]) if addr]


class SMTPTransport(MailTransportBase):
    """
    Delivers messages through an SMTP relay.

    Bcc recipients receive the message through the envelope only; the Bcc
    header is never transmitted.
    """

    def __init__(
        self,
        host: str = 'localhost',
        port: int = 25,
        username: Optional[str] = None,
        password: Optional[str] = None,
        starttls: bool = False,
        timeout: float = 10,
    ):
        """
        Initialize the transport.

        Args:
            host: SMTP relay host
            port: SMTP relay port
            username: Login name, if the relay requires authentication
            password: Login password
            starttls: Whether to upgrade the connection with STARTTLS
            timeout: Socket timeout in seconds
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> 'SMTPTransport':
        """
        Build a transport from SMTP_* environment variables.

        Raises:
            ConfigurationError: If SMTP_HOST is not set
        """
        host = os.environ.get('SMTP_HOST')
        if not host:
            raise ConfigurationError("SMTP_HOST is not set")

        return cls(
            host=host,
            port=int(os.environ.get('SMTP_PORT', 25)),
            username=os.environ.get('SMTP_USER') or None,
            password=os.environ.get('SMTP_PASSWORD') or None,
            starttls=os.environ.get('SMTP_STARTTLS', 'false').lower() == 'true',
            timeout=float(os.environ.get('SMTP_TIMEOUT', 10)),
        )

    def build_message(self, to: str, subject: str, body: str, headers: str) -> Tuple[str, List[str], bytes]:
        """
        Build the SMTP envelope and payload for a message.

        Returns:
            Tuple of (envelope sender, envelope recipients, payload)
        """
        fields = parse_header_block(headers)
        values: Dict[str, str] = {name.lower(): value for name, value in fields}

        sender_addrs = _addresses(values.get('return-path', '')) or _addresses(values.get('from', ''))
        envelope_from = sender_addrs[0] if sender_addrs else ''
        recipients = _addresses(to, values.get('cc', ''), values.get('bcc', ''))

        lines = [f'To: {to}', f'Subject: {subject}']
        lines.extend(f'{name}: {value}' for name, value in fields if name.lower() != 'bcc')
        text = EOL.join(lines) + EOL + EOL + body

        charset = 'utf-8'
        content_type = values.get('content-type', '')
        if 'charset=' in content_type:
            charset = content_type.split('charset=', 1)[1].strip() or charset

        return envelope_from, recipients, text.encode(charset)

    def send(self, to: str, subject: str, body: str, headers: str) -> bool:
        try:
            envelope_from, recipients, payload = self.build_message(to, subject, body, headers)
        except (LookupError, UnicodeEncodeError) as e:
            logger.error(f"Cannot encode message to {to}: {e}")
            return False

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.starttls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or '')
                refused = smtp.sendmail(envelope_from, recipients, payload)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery to {to} via {self.host}:{self.port} failed: {e}")
            return False

        if refused:
            logger.warning(f"Relay refused some recipients: {sorted(refused)}")
        logger.info(f"Message to {to} accepted by {self.host}:{self.port}")
        return True


class MockTransport(MailTransportBase):
    """Mock transport that records messages instead of sending them."""

    def __init__(self, succeed: bool = True):
        """
        Initialize the mock transport.

        Args:
            succeed: Value every send call returns
        """
        self.succeed = succeed
        self.sent = []

    def send(self, to: str, subject: str, body: str, headers: str) -> bool:
        self.sent.append({'to': to, 'subject': subject, 'body': body, 'headers': headers})
        return self.succeed
