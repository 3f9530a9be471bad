"""
Synthetic lookup tables and flow logs for testing and benchmarking.
"""

import random
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np

from .models import FlowLogRecord
from .protocols import PROTOCOL_MAP, SERVICE_PORTS, get_protocol_number
from .utils import generate_timestamps, random_ipv4, random_port


LOOKUP_HEADER = "dstport,protocol,tag"
TAGGED_PROTOCOLS = ['tcp', 'udp', 'icmp']

LookupRow = Tuple[int, str, str]

# Every distinct (port, protocol) pair a lookup table can hold
MAX_LOOKUP_ENTRIES = 65536 * len(TAGGED_PROTOCOLS)


class LookupTableGenerator:
    """
    Generate lookup table rows.

    Well-known service ports come first, then random ports, each paired
    with a protocol keyword and one of ``num_tags`` tags named
    ``sv_P1``, ``sv_P2``, ... No (port, protocol) pair repeats, so at most
    MAX_LOOKUP_ENTRIES rows can be generated.
    """

    def __init__(self, num_entries: int = 200, num_tags: int = 20, seed: Optional[int] = None):
        if num_entries <= 0:
            raise ValueError(f"num_entries must be positive, got {num_entries}")
        if num_entries > MAX_LOOKUP_ENTRIES:
            raise ValueError(f"num_entries cannot exceed {MAX_LOOKUP_ENTRIES}, got {num_entries}")
        if num_tags <= 0:
            raise ValueError(f"num_tags must be positive, got {num_tags}")

        self.num_entries = num_entries
        self.num_tags = num_tags
        self._rng = random.Random(seed)

    def generate(self) -> List[LookupRow]:
        """
        Build the rows.

        Returns:
            List of (port, protocol, tag) tuples
        """
        tags = [f"sv_P{i}" for i in range(1, self.num_tags + 1)]
        seen = set()
        rows: List[LookupRow] = []

        for info in SERVICE_PORTS.values():
            if len(rows) >= self.num_entries:
                break
            port = info['port']
            protocol = self._rng.choice(TAGGED_PROTOCOLS)
            seen.add((port, protocol))
            rows.append((port, protocol, self._rng.choice(tags)))

        # num_entries distinct pair indices always leave enough pairs unseen
        for index in self._rng.sample(range(MAX_LOOKUP_ENTRIES), self.num_entries):
            if len(rows) >= self.num_entries:
                break
            port, protocol = divmod(index, len(TAGGED_PROTOCOLS))
            pair = (port, TAGGED_PROTOCOLS[protocol])
            if pair in seen:
                continue
            seen.add(pair)
            rows.append((*pair, self._rng.choice(tags)))

        return rows

    def write(self, filename: Union[str, Path]) -> List[LookupRow]:
        """
        Generate rows and write them as a CSV lookup table.

        Args:
            filename: Output CSV filename

        Returns:
            The rows written
        """
        rows = self.generate()
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(LOOKUP_HEADER + '\n')
            for port, protocol, tag in rows:
                f.write(f"{port},{protocol},{tag}\n")
        return rows


class PatternGenerator(ABC):
    """Base class for flow record traffic patterns"""

    def __init__(self, rng: random.Random):
        self.rng = rng

    @abstractmethod
    def destination(self) -> Tuple[int, int]:
        """
        Pick the destination of the next record.

        Returns:
            (destination port, protocol number)
        """
        pass


class TaggedTrafficGenerator(PatternGenerator):
    """Traffic aimed at port/protocol pairs present in a lookup table"""

    def __init__(self, rng: random.Random, lookup_rows: List[LookupRow]):
        super().__init__(rng)
        if not lookup_rows:
            raise ValueError("TaggedTrafficGenerator needs at least one lookup row")
        self.targets = [(port, get_protocol_number(protocol))
                        for port, protocol, _ in lookup_rows]

    def destination(self) -> Tuple[int, int]:
        return self.rng.choice(self.targets)


class RandomTrafficGenerator(PatternGenerator):
    """Traffic to random ports, any common protocol"""

    def destination(self) -> Tuple[int, int]:
        protocol = self.rng.choice(list(PROTOCOL_MAP.values()))
        return random_port('any', self.rng), protocol


class FlowLogGenerator:
    """
    Generate version 2 flow log records.

    A ``hit_ratio`` share of records targets pairs from ``lookup_rows`` (so
    they get tagged); the rest go to random ports. Packet and byte counts
    and record timestamps are drawn with NumPy.

    Example:
        >>> rows = LookupTableGenerator(10, seed=1).generate()
        >>> for record in FlowLogGenerator(100, rows, seed=1):
        ...     print(record.to_log_line())
    """

    def __init__(self, num_records: int = 10000,
                 lookup_rows: Optional[List[LookupRow]] = None,
                 hit_ratio: float = 0.8,
                 seed: Optional[int] = None,
                 start_timestamp: Optional[float] = None,
                 records_per_second: float = 100.0):
        if num_records < 0:
            raise ValueError(f"num_records cannot be negative, got {num_records}")
        if hit_ratio < 0.0 or hit_ratio > 1.0:
            raise ValueError(f"hit_ratio must be between 0.0 and 1.0, got {hit_ratio}")

        self.num_records = num_records
        self._rng = random.Random(seed)
        self._np_rng = np.random.default_rng(seed)
        self._start_timestamp = start_timestamp if start_timestamp is not None else time.time()
        self._rate = records_per_second
        self.account_id = str(self._rng.randint(10 ** 11, 10 ** 12 - 1))
        self.interface_ids = [f"eni-{self._rng.getrandbits(32):08x}" for _ in range(4)]

        self._patterns: List[PatternGenerator] = []
        self._weights: List[float] = []
        if lookup_rows and hit_ratio > 0.0:
            self._patterns.append(TaggedTrafficGenerator(self._rng, lookup_rows))
            self._weights.append(hit_ratio)
        if not self._patterns or hit_ratio < 1.0:
            self._patterns.append(RandomTrafficGenerator(self._rng))
            self._weights.append(1.0 - hit_ratio if self._weights else 1.0)

    def __iter__(self) -> Iterator[FlowLogRecord]:
        starts = generate_timestamps(self._start_timestamp, self.num_records, self._rate,
                                     distribution='poisson', rng=self._np_rng)
        durations = self._np_rng.integers(1, 60, size=self.num_records)
        packets = self._np_rng.poisson(20, size=self.num_records) + 1
        packet_sizes = self._np_rng.integers(64, 1501, size=self.num_records)

        for i in range(self.num_records):
            pattern = self._rng.choices(self._patterns, weights=self._weights, k=1)[0]
            dst_port, protocol = pattern.destination()
            start = int(starts[i])

            yield FlowLogRecord(
                account_id=self.account_id,
                interface_id=self._rng.choice(self.interface_ids),
                source_ip=random_ipv4('10.0.0.0/16', self._rng),
                destination_ip=random_ipv4('198.51.100.0/24', self._rng),
                source_port=random_port('dynamic', self._rng),
                destination_port=dst_port,
                protocol=protocol,
                packets=int(packets[i]),
                bytes=int(packets[i] * packet_sizes[i]),
                start=start,
                end=start + int(durations[i]),
                action='ACCEPT' if self._rng.random() < 0.9 else 'REJECT'
            )

    def write(self, filename: Union[str, Path], batch_size: int = 1000) -> int:
        """
        Stream records to a flow log file in batches.

        Args:
            filename: Output filename
            batch_size: Number of lines to buffer before writing

        Returns:
            Number of records written
        """
        count = 0
        buffer = []
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            for record in self:
                buffer.append(record.to_log_line())
                count += 1

                if len(buffer) >= batch_size:
                    f.write('\n'.join(buffer) + '\n')
                    buffer.clear()

            if buffer:
                f.write('\n'.join(buffer) + '\n')

        return count
