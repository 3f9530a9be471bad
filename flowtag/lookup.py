"""
Port/protocol to tag lookup table.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union

from .errors import LookupTableError
from .interner import KeyInterner
from .models import UNTAGGED, CompositeKey
from .utils import open_source, split_fields


logger = logging.getLogger("flowtag.lookup")

_PORT_PATTERN = re.compile(r"\+?[0-9]+")
MAX_PORT = 65535


class LookupTable:
    """
    Maps (destination port, protocol keyword) pairs to tags.

    Rows are ``<port>,<protocol>,<tag>`` after a header line. The protocol
    is matched case-insensitively; the tag keeps its case. A later row for
    the same pair replaces the earlier tag.

    Example:
        >>> interner = KeyInterner()
        >>> table = LookupTable.load(["dstport,protocol,tag", "23,TCP,sv_P1"], interner)
        >>> table.lookup(interner.intern(23, "tcp"))
        'sv_P1'
    """

    def __init__(self, interner: Optional[KeyInterner] = None):
        self.interner = interner if interner is not None else KeyInterner()
        self._tags: Dict[CompositeKey, str] = {}

    @classmethod
    def load(cls, source: Union[str, Path, Iterable[str]],
             interner: Optional[KeyInterner] = None) -> "LookupTable":
        """
        Load a lookup table.

        Args:
            source: Path to the CSV file, or an iterable of its lines
            interner: Interner shared with the classifier

        Returns:
            Populated LookupTable. Empty if the source cannot be read.

        Raises:
            LookupTableError: If a row's port field is not an integer in 0-65535
        """
        table = cls(interner)
        try:
            with open_source(source) as lines:
                next(lines, None)  # header
                for line_number, line in enumerate(lines, start=2):
                    table._add_row(line.rstrip('\r\n'), line_number)
        except OSError as e:
            logger.error("Error reading lookup table: %s", e)
            return table

        logger.debug("Loaded %d lookup entries", len(table))
        return table

    def _add_row(self, line: str, line_number: int):
        parts = split_fields(line)
        if len(parts) < 3:
            return

        raw_port = parts[0].strip()
        if not _PORT_PATTERN.fullmatch(raw_port) or int(raw_port) > MAX_PORT:
            raise LookupTableError(
                f"Invalid port '{raw_port}' on lookup table line {line_number}",
                line_number=line_number
            )

        self.add(int(raw_port), parts[1], parts[2])

    def add(self, port: int, protocol: str, tag: str) -> CompositeKey:
        """
        Add or replace a single entry.

        Args:
            port: Destination port
            protocol: Protocol keyword, any case
            tag: Tag text (surrounding whitespace is dropped)

        Returns:
            The interned key the tag was stored under
        """
        key = self.interner.intern(port, protocol.strip().lower())
        self._tags[key] = tag.strip()
        return key

    def lookup(self, key: CompositeKey) -> str:
        """
        Resolve the tag for a key.

        Args:
            key: Port/protocol key

        Returns:
            Tag string, or 'Untagged'
        """
        return self._tags.get(key, UNTAGGED)

    def items(self) -> Iterator[Tuple[CompositeKey, str]]:
        return iter(self._tags.items())

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, key: CompositeKey) -> bool:
        return key in self._tags
