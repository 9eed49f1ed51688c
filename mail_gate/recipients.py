"""
Recipient Aggregation Module

Turns raw recipient strings into comma-joined lists of validated addresses,
keeping a record of every address that had to be dropped.
"""

import logging
import re
from typing import Dict, Iterator, List, Optional, Tuple

from .validator import EmailResult, EmailValidator

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r'[\s,]+')


def split_addresses(raw_list: str) -> List[str]:
    """Split on runs of whitespace and/or commas, dropping empty tokens."""
    return [token for token in _SEPARATORS.split(raw_list) if token]


def _header_name(header) -> str:
    return getattr(header, 'value', header)


class FailureSummary:
    """
    Rejected addresses grouped by the header they were given for.

    Entries are only ever appended. Headers may be looked up by HeaderKey or
    by wire name, e.g. ``summary['To']``.
    """

    def __init__(self):
        self._entries: Dict[str, List[EmailResult]] = {}

    def record(self, header, result: EmailResult):
        """Append a rejected result under a header."""
        self._entries.setdefault(_header_name(header), []).append(result)

    @property
    def error_count(self) -> int:
        return sum(len(results) for results in self._entries.values())

    def get(self, header, default=None):
        return self._entries.get(_header_name(header), default)

    def __getitem__(self, header) -> List[EmailResult]:
        return self._entries[_header_name(header)]

    def __contains__(self, header) -> bool:
        return _header_name(header) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> Iterator[Tuple[str, List[EmailResult]]]:
        return iter(self._entries.items())

    def to_dict(self) -> Dict[str, list]:
        """Convert summary to dictionary format."""
        return {
            header: [result.to_dict() for result in results]
            for header, results in self._entries.items()
        }


class RecipientAggregator:
    """
    Validates recipient lists one address at a time.

    Aggregation is best-effort: invalid addresses are dropped and recorded in
    the summary, and the remaining addresses are still returned.
    """

    def __init__(self, validator: EmailValidator, summary: Optional[FailureSummary] = None):
        """
        Initialize the aggregator.

        Args:
            validator: Validator applied to every address
            summary: Summary that rejected addresses are recorded in
        """
        self.validator = validator
        self.summary = summary if summary is not None else FailureSummary()

    @property
    def error_count(self) -> int:
        return self.summary.error_count

    def add(self, header, raw_list: str) -> str:
        """
        Validate a raw recipient list for a header.

        Args:
            header: Header the addresses are for, used as the summary key
            raw_list: One or more addresses separated by whitespace or commas

        Returns:
            Comma-joined canonical forms of the valid addresses, or '' if none
        """
        accepted = []

        for token in split_addresses(raw_list):
            result = self.validator.validate(token)

            if not result.valid:
                self.summary.record(header, result)
                logger.debug(
                    f"Dropping {_header_name(header)} address {token!r}: {result.outcome.value}"
                )
                continue

            accepted.append(result.canonical)

        return ','.join(accepted)


def prepare(raw_list: str, validator: Optional[EmailValidator] = None) -> Optional[str]:
    """
    Filter a raw recipient list down to its valid addresses.

    Returns:
        Comma-joined canonical addresses, or None if none are valid
    """
    aggregator = RecipientAggregator(validator or EmailValidator())
    return aggregator.add('', raw_list) or None
