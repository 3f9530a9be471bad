"""
Flow log classification and aggregation.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from .interner import KeyInterner
from .lookup import LookupTable
from .models import FlowCounts
from .protocols import ProtocolTable
from .utils import is_ascii_digits, open_source


logger = logging.getLogger("flowtag.classifier")

# Version 2 flow log field positions
MIN_FIELDS = 8
DSTPORT_FIELD = 6
PROTOCOL_FIELD = 7


class FlowLogClassifier:
    """
    Tags flow log records and counts them per tag and per port/protocol.

    Both reference tables must be fully loaded before processing starts;
    they are only read here. Lines with fewer than eight fields or a
    non-numeric destination port are skipped without logging.

    Example:
        >>> classifier = FlowLogClassifier(protocols, lookup)
        >>> counts = classifier.process("flow.log")
        >>> counts.tag_counts["sv_P1"]
        1
    """

    def __init__(self, protocol_table: ProtocolTable, lookup_table: LookupTable,
                 interner: Optional[KeyInterner] = None):
        """
        Initialize classifier.

        Args:
            protocol_table: Protocol number -> keyword table
            lookup_table: Port/protocol -> tag table
            interner: Key interner; defaults to the lookup table's own, so
                      flow keys and lookup keys are the same objects
        """
        self.protocol_table = protocol_table
        self.lookup_table = lookup_table
        self.interner = interner if interner is not None else lookup_table.interner

    def process(self, source: Union[str, Path, Iterable[str]],
                counts: Optional[FlowCounts] = None) -> FlowCounts:
        """
        Classify every record of a flow log.

        Args:
            source: Path to the flow log, or an iterable of its lines
            counts: Existing aggregate to add to (new one if None)

        Returns:
            Aggregated FlowCounts

        Raises:
            OSError: If the flow log cannot be opened
        """
        counts = counts if counts is not None else FlowCounts()
        with open_source(source) as lines:
            for line in lines:
                self.process_line(line, counts)

        logger.info("Processed %d records (%d skipped), %d distinct port/protocol pairs",
                    counts.records_processed, counts.records_skipped,
                    len(counts.port_protocol_counts))
        return counts

    def process_line(self, line: str, counts: FlowCounts) -> bool:
        """
        Classify one flow log line into counts.

        Args:
            line: Raw flow log line
            counts: Aggregate to update

        Returns:
            True if the line was well-formed and counted
        """
        parts = line.split()
        if len(parts) < MIN_FIELDS or not is_ascii_digits(parts[DSTPORT_FIELD]):
            counts.records_skipped += 1
            return False

        dst_port = int(parts[DSTPORT_FIELD])
        protocol = self.protocol_table.lookup(parts[PROTOCOL_FIELD])
        key = self.interner.intern(dst_port, protocol)

        counts.record(key, self.lookup_table.lookup(key))
        return True


def process_flow_log(source: Union[str, Path, Iterable[str]],
                     protocol_table: ProtocolTable,
                     lookup_table: LookupTable,
                     interner: Optional[KeyInterner] = None) -> FlowCounts:
    """
    Convenience function to classify a flow log.

    Args:
        source: Path to the flow log, or an iterable of its lines
        protocol_table: Protocol number -> keyword table
        lookup_table: Port/protocol -> tag table
        interner: Key interner (lookup table's if None)

    Returns:
        Aggregated FlowCounts
    """
    return FlowLogClassifier(protocol_table, lookup_table, interner).process(source)
