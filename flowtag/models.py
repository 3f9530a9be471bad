"""
Data models for flow log tagging and aggregation.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict


UNTAGGED = "Untagged"
UNKNOWN_PROTOCOL = "unknown"


@dataclass(frozen=True, order=True)
class CompositeKey:
    """
    Destination port / protocol keyword pair.

    Instances are handed out by KeyInterner so that equal pairs share one
    object across the lookup table and both count tables.

    Attributes:
        port: Destination port number (0-65535)
        protocol: Lowercase protocol keyword (e.g. 'tcp', 'udp')
    """
    port: int
    protocol: str

    @property
    def canonical(self) -> str:
        """Canonical string form used as the interning key"""
        return f"{self.port}|{self.protocol}"

    def to_csv_row(self, count: int) -> str:
        """Render as a report row: port,protocol,count"""
        return f"{self.port},{self.protocol},{count}"

    def __repr__(self) -> str:
        return f"CompositeKey({self.port}/{self.protocol})"


@dataclass
class FlowCounts:
    """
    Aggregate counts produced by one flow log run.

    Attributes:
        tag_counts: Tag -> number of records resolving to it
        port_protocol_counts: CompositeKey -> number of records
        records_processed: Well-formed records counted
        records_skipped: Malformed lines ignored
    """
    tag_counts: Counter = field(default_factory=Counter)
    port_protocol_counts: Counter = field(default_factory=Counter)
    records_processed: int = 0
    records_skipped: int = 0

    def record(self, key: CompositeKey, tag: str):
        """Count one well-formed record"""
        self.port_protocol_counts[key] += 1
        self.tag_counts[tag] += 1
        self.records_processed += 1

    def merge(self, other: "FlowCounts") -> "FlowCounts":
        """
        Fold another partial aggregate into this one.

        Args:
            other: Counts from a separately processed chunk

        Returns:
            self, for chaining
        """
        self.tag_counts.update(other.tag_counts)
        self.port_protocol_counts.update(other.port_protocol_counts)
        self.records_processed += other.records_processed
        self.records_skipped += other.records_skipped
        return self

    def to_dict(self) -> Dict:
        """Plain-dict summary of the run"""
        return {
            'records_processed': self.records_processed,
            'records_skipped': self.records_skipped,
            'distinct_tags': len(self.tag_counts),
            'distinct_port_protocols': len(self.port_protocol_counts),
        }


@dataclass
class FlowLogRecord:
    """
    One version 2 VPC flow log record.

    Attributes:
        account_id: AWS account id
        interface_id: Network interface id (eni-...)
        source_ip: Source IPv4 address
        destination_ip: Destination IPv4 address
        source_port: Source port number (0-65535)
        destination_port: Destination port number (0-65535)
        protocol: IANA protocol number (6=TCP, 17=UDP, 1=ICMP, etc.)
        packets: Packets transferred
        bytes: Bytes transferred
        start: Window start, Unix epoch seconds
        end: Window end, Unix epoch seconds
        action: ACCEPT or REJECT
        log_status: OK, NODATA or SKIPDATA
        version: Flow log format version
    """
    account_id: str
    interface_id: str
    source_ip: str
    destination_ip: str
    source_port: int
    destination_port: int
    protocol: int
    packets: int
    bytes: int
    start: int
    end: int
    action: str = "ACCEPT"
    log_status: str = "OK"
    version: int = 2

    def __post_init__(self):
        """Validate field values"""
        if not (0 <= self.source_port <= 65535):
            raise ValueError(f"Invalid source_port: {self.source_port}")
        if not (0 <= self.destination_port <= 65535):
            raise ValueError(f"Invalid destination_port: {self.destination_port}")

        if not (0 <= self.protocol <= 255):
            raise ValueError(f"Invalid protocol: {self.protocol}")

        if self.end < self.start:
            raise ValueError(f"end ({self.end}) precedes start ({self.start})")

        if self.action not in ("ACCEPT", "REJECT"):
            raise ValueError(f"Invalid action: {self.action}")

    def to_log_line(self) -> str:
        """
        Convert to a space-separated flow log line.

        Returns:
            Flow log line without trailing newline
        """
        return (f"{self.version} {self.account_id} {self.interface_id} "
                f"{self.source_ip} {self.destination_ip} "
                f"{self.source_port} {self.destination_port} {self.protocol} "
                f"{self.packets} {self.bytes} {self.start} {self.end} "
                f"{self.action} {self.log_status}")

    def __repr__(self) -> str:
        return (f"FlowLogRecord({self.source_ip}:{self.source_port} -> "
                f"{self.destination_ip}:{self.destination_port}, "
                f"proto={self.protocol}, {self.action})")
