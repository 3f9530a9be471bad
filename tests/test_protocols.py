"""ProtocolTable unit tests."""

from pathlib import Path

from flowtag.protocols import ProtocolTable, get_protocol_number


class TestProtocolTableLoad:
    def test_keywords_are_lowercased(self, protocol_table):
        assert protocol_table.lookup("6") == "tcp"
        assert protocol_table.lookup("17") == "udp"
        assert protocol_table.lookup("1") == "icmp"

    def test_header_is_skipped(self):
        table = ProtocolTable.load(["1,ICMP", "6,TCP"])
        assert len(table) == 1
        assert "1" not in table

    def test_keyword_is_trimmed(self):
        table = ProtocolTable.load(["Decimal,Keyword", "47,  GRE  ,Generic Routing"])
        assert table.lookup("47") == "gre"

    def test_unknown_number(self, protocol_table):
        assert protocol_table.lookup("250") == "unknown"
        assert protocol_table.lookup("") == "unknown"

    def test_invalid_rows_are_skipped(self):
        table = ProtocolTable.load([
            "Decimal,Keyword",
            "146-252,,Unassigned",
            "61,,any host internal protocol",
            "TCP,6",
            "99",
            "",
            "17,UDP",
        ])
        assert len(table) == 1
        assert table.lookup("17") == "udp"

    def test_duplicate_ids_last_write_wins(self):
        table = ProtocolTable.load(["Decimal,Keyword", "6,TCP", "6,XTCP"])
        assert table.lookup("6") == "xtcp"

    def test_missing_file_gives_empty_table(self, tmp_path: Path, caplog):
        table = ProtocolTable.load(tmp_path / "missing.csv")
        assert len(table) == 0
        assert table.lookup("6") == "unknown"
        assert "Error reading protocol numbers" in caplog.text

    def test_load_from_file(self, input_files):
        table = ProtocolTable.load(input_files["protocols"])
        assert len(table) == 3
        assert table.lookup("6") == "tcp"


class TestDefaultProtocolTable:
    def test_bundled_iana_table(self):
        table = ProtocolTable.default()
        assert table.lookup("6") == "tcp"
        assert table.lookup("17") == "udp"
        assert table.lookup("58") == "ipv6-icmp"
        assert table.lookup("132") == "sctp"

    def test_bundled_table_skips_unassigned(self):
        table = ProtocolTable.default()
        assert "61" not in table
        assert table.lookup("200") == "unknown"


def test_get_protocol_number():
    assert get_protocol_number("TCP") == 6
    assert get_protocol_number("udp") == 17


def test_undecodable_bytes_do_not_abort_load(tmp_path: Path):
    path = tmp_path / "protocols.csv"
    path.write_bytes(b"Decimal,Keyword\n6,TCP\n200,\xff\xfeBAD\n17,UDP\n")
    table = ProtocolTable.load(path)
    assert table.lookup("6") == "tcp"
    assert table.lookup("17") == "udp"
    assert table.lookup("200") == "��bad"


def test_missing_file_logs_single_error(tmp_path: Path, caplog):
    ProtocolTable.load(tmp_path / "missing.csv")
    errors = [r for r in caplog.records if r.levelname == "ERROR"]
    assert len(errors) == 1
    assert "check the table path" in errors[0].getMessage()
