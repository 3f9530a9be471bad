"""
Input helpers and random value utilities for synthetic flow data.
"""

import ipaddress
import random
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

import numpy as np


Source = Union[str, Path, Iterable[str]]


@contextmanager
def open_source(source: Source) -> Iterator[Iterator[str]]:
    """
    Open a table or log source as an iterator of lines.

    Args:
        source: File path, or an already-open file / iterable of lines

    Yields:
        Iterator over the source's lines

    Undecodable bytes are read as U+FFFD.

    Raises:
        OSError: If a path cannot be opened
    """
    if isinstance(source, (str, Path)):
        with open(source, 'r', encoding='utf-8', errors='replace') as f:
            yield iter(f)
    else:
        yield iter(source)


def split_fields(line: str, sep: str = ',') -> List[str]:
    """
    Split a delimited row, dropping trailing empty fields.

    Args:
        line: Row without line terminator
        sep: Field separator

    Returns:
        List of raw (untrimmed) fields
    """
    parts = line.split(sep)
    while parts and parts[-1] == '':
        parts.pop()
    return parts


def is_ascii_digits(value: str) -> bool:
    """True if value is a non-empty run of 0-9"""
    return value.isascii() and value.isdigit()


def timestamp_filename(suffix: str = '.log') -> str:
    """Output file name derived from the current time in epoch milliseconds"""
    return f"{int(time.time() * 1000)}{suffix}"


def random_ipv4(subnet: Optional[str] = None, rng: Optional[random.Random] = None) -> str:
    """
    Generate a random IPv4 address.

    Args:
        subnet: CIDR notation subnet (e.g., '10.0.0.0/16')
                If None, generates completely random IP
        rng: Random instance to draw from (module random if None)

    Returns:
        IPv4 address string
    """
    rng = rng or random
    if subnet:
        network = ipaddress.IPv4Network(subnet, strict=False)
        num_addresses = network.num_addresses
        # Avoid network and broadcast addresses for most subnets
        if num_addresses > 2:
            random_offset = rng.randint(1, num_addresses - 2)
        else:
            random_offset = rng.randint(0, num_addresses - 1)
        return str(network.network_address + random_offset)

    return f"{rng.randint(1, 223)}.{rng.randint(0, 255)}." \
           f"{rng.randint(0, 255)}.{rng.randint(1, 254)}"


def random_port(port_range: str = 'dynamic', rng: Optional[random.Random] = None) -> int:
    """
    Generate a random port number.

    Args:
        port_range: Port range type - 'well_known', 'registered', 'dynamic', or 'any'
        rng: Random instance to draw from (module random if None)

    Returns:
        Port number
    """
    ranges = {
        'well_known': (0, 1023),
        'registered': (1024, 49151),
        'dynamic': (49152, 65535),
        'any': (1, 65535),
    }

    start, end = ranges.get(port_range, ranges['dynamic'])
    return (rng or random).randint(start, end)


def generate_timestamps(start_time: float, count: int, rate: float,
                        distribution: str = 'constant',
                        rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Generate array of timestamps based on record rate.

    Args:
        start_time: Starting timestamp (Unix epoch)
        count: Number of timestamps to generate
        rate: Records per second
        distribution: 'constant' or 'poisson'
        rng: NumPy generator for the random distributions

    Returns:
        NumPy array of timestamps
    """
    rng = rng if rng is not None else np.random.default_rng()

    if distribution == 'poisson':
        # Exponential inter-arrival times (Poisson process)
        inter_arrivals = rng.exponential(1.0 / rate, count)
        timestamps = start_time + np.cumsum(inter_arrivals)

    else:  # constant
        inter_arrival = 1.0 / rate
        timestamps = start_time + np.arange(count) * inter_arrival

    return timestamps
