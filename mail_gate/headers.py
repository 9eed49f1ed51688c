"""Header keys and the aliases accepted for them."""

from enum import Enum

from .exceptions import UnknownHeaderError


class HeaderKey(str, Enum):
    """Headers a composed message can carry, valued by their wire names."""

    FROM = "From"
    SENDER = "Sender"
    TO = "To"
    CC = "Cc"
    BCC = "Bcc"
    REPLY_TO = "Reply-To"
    RETURN_PATH = "Return-Path"
    RETURN_RECEIPT_TO = "Return-Receipt-To"
    DISPOSITION_NOTIFICATION_TO = "Disposition-Notification-To"
    CONTENT_TYPE = "Content-Type"
    CHARSET = "charset"
    SUBJECT = "Subject"

    @property
    def carries_addresses(self) -> bool:
        return self not in SCALAR_HEADERS


SCALAR_HEADERS = frozenset({HeaderKey.CONTENT_TYPE, HeaderKey.CHARSET, HeaderKey.SUBJECT})

# Optional headers in the order they are written after From
OPTIONAL_ADDRESS_HEADERS = (
    HeaderKey.SENDER,
    HeaderKey.CC,
    HeaderKey.BCC,
    HeaderKey.REPLY_TO,
    HeaderKey.RETURN_PATH,
    HeaderKey.RETURN_RECEIPT_TO,
    HeaderKey.DISPOSITION_NOTIFICATION_TO,
)

# Keys are lowercased with '-' and '_' removed
HEADER_ALIASES = {
    'from': HeaderKey.FROM,
    'sender': HeaderKey.SENDER,
    'to': HeaderKey.TO,
    'cc': HeaderKey.CC,
    'bcc': HeaderKey.BCC,
    'replyto': HeaderKey.REPLY_TO,
    'reply': HeaderKey.REPLY_TO,
    'returnpath': HeaderKey.RETURN_PATH,
    'path': HeaderKey.RETURN_PATH,
    'returnreceiptto': HeaderKey.RETURN_RECEIPT_TO,
    'receipt': HeaderKey.RETURN_RECEIPT_TO,
    'dispositionnotificationto': HeaderKey.DISPOSITION_NOTIFICATION_TO,
    'disp': HeaderKey.DISPOSITION_NOTIFICATION_TO,
    'contenttype': HeaderKey.CONTENT_TYPE,
    'content': HeaderKey.CONTENT_TYPE,
    'charset': HeaderKey.CHARSET,
    'subject': HeaderKey.SUBJECT,
    'title': HeaderKey.SUBJECT,
}


def resolve_header(name) -> HeaderKey:
    """
    Map a header name or alias to its HeaderKey.

    Matching ignores case, hyphens and underscores, so 'ReplyTo',
    'reply-to', 'REPLY_TO' and 'reply' all name the same header.

    Raises:
        UnknownHeaderError: If nothing matches
    """
    if isinstance(name, HeaderKey):
        return name

    key = str(name).lower().replace('-', '').replace('_', '')
    try:
        return HEADER_ALIASES[key]
    except KeyError:
        raise UnknownHeaderError(name) from None
