"""
Protocol number table and well-known service ports.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Union

from .models import UNKNOWN_PROTOCOL
from .utils import is_ascii_digits, open_source, split_fields


logger = logging.getLogger("flowtag.protocols")

# IANA protocol numbers shipped as package data
DEFAULT_PROTOCOL_TABLE = Path(__file__).parent / "data" / "protocol-numbers.csv"


# IP Protocol Numbers (IANA)
class Protocol:
    """IP protocol number constants"""
    ICMP = 1
    TCP = 6
    UDP = 17
    ICMPV6 = 58
    SCTP = 132


# Protocol keyword to number mapping
PROTOCOL_MAP: Dict[str, int] = {
    'icmp': Protocol.ICMP,
    'tcp': Protocol.TCP,
    'udp': Protocol.UDP,
    'ipv6-icmp': Protocol.ICMPV6,
    'sctp': Protocol.SCTP,
}


# Service to port/protocol mapping, used to seed synthetic lookup tables
SERVICE_PORTS: Dict[str, Dict[str, int]] = {
    'ftp': {'port': 21, 'protocol': Protocol.TCP},
    'ssh': {'port': 22, 'protocol': Protocol.TCP},
    'telnet': {'port': 23, 'protocol': Protocol.TCP},
    'smtp': {'port': 25, 'protocol': Protocol.TCP},
    'dns': {'port': 53, 'protocol': Protocol.UDP},
    'http': {'port': 80, 'protocol': Protocol.TCP},
    'pop3': {'port': 110, 'protocol': Protocol.TCP},
    'ntp': {'port': 123, 'protocol': Protocol.UDP},
    'imap': {'port': 143, 'protocol': Protocol.TCP},
    'snmp': {'port': 161, 'protocol': Protocol.UDP},
    'https': {'port': 443, 'protocol': Protocol.TCP},
    'smtps': {'port': 465, 'protocol': Protocol.TCP},
    'imaps': {'port': 993, 'protocol': Protocol.TCP},
    'mysql': {'port': 3306, 'protocol': Protocol.TCP},
    'postgresql': {'port': 5432, 'protocol': Protocol.TCP},
    'redis': {'port': 6379, 'protocol': Protocol.TCP},
    'mongodb': {'port': 27017, 'protocol': Protocol.TCP},
}


def get_protocol_number(protocol_name: str) -> int:
    """
    Get protocol number from protocol keyword.

    Args:
        protocol_name: Protocol keyword (e.g., 'tcp', 'udp')

    Returns:
        Protocol number

    Raises:
        KeyError: If protocol keyword is not found
    """
    return PROTOCOL_MAP[protocol_name.lower()]


class ProtocolTable:
    """
    Maps numeric protocol identifiers to lowercase keywords.

    Loaded once from a CSV table whose first line is a header and whose rows
    start with ``<number>,<keyword>``. Rows without a purely numeric id or
    without a keyword (ranges, unassigned blocks) are skipped.

    Example:
        >>> table = ProtocolTable.load(["Decimal,Keyword", "6,TCP", "17,UDP"])
        >>> table.lookup("6")
        'tcp'
        >>> table.lookup("99")
        'unknown'
    """

    def __init__(self, entries: Dict[str, str] = None):
        self._entries: Dict[str, str] = dict(entries or {})

    @classmethod
    def load(cls, source: Union[str, Path, Iterable[str]]) -> "ProtocolTable":
        """
        Load a protocol table.

        Args:
            source: Path to the CSV file, or an iterable of its lines

        Returns:
            Populated ProtocolTable. Empty if the source cannot be read.
        """
        table = cls()
        try:
            with open_source(source) as lines:
                next(lines, None)  # header
                for line in lines:
                    table._add_row(line.rstrip('\r\n'))
        except OSError as e:
            logger.error("Error reading protocol numbers (check the table path): %s", e)
            return table

        logger.debug("Loaded %d protocol numbers", len(table))
        return table

    @classmethod
    def default(cls) -> "ProtocolTable":
        """Load the IANA protocol table bundled with the package"""
        return cls.load(DEFAULT_PROTOCOL_TABLE)

    def _add_row(self, line: str):
        parts = split_fields(line)
        if len(parts) < 2 or not is_ascii_digits(parts[0]) or not parts[1]:
            return
        self._entries[parts[0].strip()] = parts[1].strip().lower()

    def lookup(self, numeric_id: str) -> str:
        """
        Resolve a protocol number to its keyword.

        Args:
            numeric_id: Protocol number as it appears in the flow log

        Returns:
            Lowercase keyword, or 'unknown'
        """
        return self._entries.get(numeric_id, UNKNOWN_PROTOCOL)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, numeric_id: str) -> bool:
        return numeric_id in self._entries
