"""Shared fixtures for FlowTag tests."""

from pathlib import Path

import pytest

from flowtag.interner import KeyInterner
from flowtag.lookup import LookupTable
from flowtag.protocols import ProtocolTable


PROTOCOL_CSV = """Decimal,Keyword,Protocol
1,ICMP,Internet Control Message
6,TCP,Transmission Control
17,UDP,User Datagram
"""

LOOKUP_CSV = """dstport,protocol,tag
25,tcp,sv_P1
68,udp,sv_P2
23,tcp,sv_P1
31,udp,SV_P3
443,tcp,sv_P2
110,tcp,email
993,tcp,email
143,tcp,email
"""

FLOW_LOG = """2 123456789012 eni-0a1b2c3d 10.0.1.201 198.51.100.2 443 49153 6 25 20000 1620140761 1620140821 ACCEPT OK
2 123456789012 eni-4d3c2b1a 192.168.1.100 203.0.113.101 23 49154 6 15 12000 1620140761 1620140821 REJECT OK
2 123456789012 eni-5e6f7g8h 192.168.1.101 198.51.100.3 25 49155 6 10 8000 1620140761 1620140821 ACCEPT OK
2 123456789012 eni-9h8g7f6e 172.16.0.100 203.0.113.102 110 49156 6 12 9000 1620140761 1620140821 ACCEPT OK
2 123456789012 eni-7i8j9k0l 172.16.0.101 192.0.2.203 993 49157 6 8 5000 1620140761 1620140821 ACCEPT OK
2 123456789012 eni-6m7n8o9p 10.0.2.200 198.51.100.4 143 49158 6 18 14000 1620140761 1620140821 ACCEPT OK
2 123456789012 eni-1a2b3c4d 192.168.0.1 203.0.113.12 1024 80 6 10 5000 1620140661 1620140721 ACCEPT OK
2 123456789012 eni-1a2b3c4d 203.0.113.12 192.168.0.1 80 1024 6 12 6000 1620140661 1620140721 ACCEPT OK
2 123456789012 eni-5f6g7h8i 10.0.2.103 52.26.198.183 56000 23 6 15 7500 1620140661 1620140721 REJECT OK
2 123456789012 eni-9k10l11m 192.168.1.5 51.15.99.115 49321 25 6 20 10000 1620140661 1620140721 ACCEPT OK
2 123456789012 eni-1a2b3c4d 192.168.1.6 87.250.250.242 49152 110 6 5 2500 1620140661 1620140721 ACCEPT OK
2 123456789012 eni-2d2e2f3g 192.168.2.7 77.88.55.80 49153 993 6 7 3500 1620140661 1620140721 ACCEPT OK
2 123456789012 eni-4h5i6j7k 172.16.0.2 192.0.2.146 49154 143 6 9 4500 1620140661 1620140721 ACCEPT OK
2 123456789012 eni-7l8m9n0o 10.0.0.9 198.51.100.9 40000 68 17 3 300 1620140661 1620140721 ACCEPT OK
"""


@pytest.fixture
def interner() -> KeyInterner:
    return KeyInterner()


@pytest.fixture
def protocol_table() -> ProtocolTable:
    return ProtocolTable.load(PROTOCOL_CSV.splitlines())


@pytest.fixture
def lookup_table(interner: KeyInterner) -> LookupTable:
    return LookupTable.load(LOOKUP_CSV.splitlines(), interner)


@pytest.fixture
def input_files(tmp_path: Path) -> dict:
    """Protocol table, lookup table and flow log written to disk."""
    paths = {
        "protocols": tmp_path / "protocols.csv",
        "lookup": tmp_path / "lookup.csv",
        "flow_log": tmp_path / "flow.log",
    }
    paths["protocols"].write_text(PROTOCOL_CSV)
    paths["lookup"].write_text(LOOKUP_CSV)
    paths["flow_log"].write_text(FLOW_LOG)
    return paths
