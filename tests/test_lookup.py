"""LookupTable unit tests."""

from pathlib import Path

import pytest

from flowtag.errors import LookupTableError
from flowtag.lookup import LookupTable


class TestLookupTableLoad:
    def test_known_keys(self, lookup_table, interner):
        assert lookup_table.lookup(interner.intern(23, "tcp")) == "sv_P1"
        assert lookup_table.lookup(interner.intern(68, "udp")) == "sv_P2"
        assert lookup_table.lookup(interner.intern(993, "tcp")) == "email"

    def test_tag_case_is_preserved(self, lookup_table, interner):
        assert lookup_table.lookup(interner.intern(31, "udp")) == "SV_P3"

    def test_unknown_key_is_untagged(self, lookup_table, interner):
        assert lookup_table.lookup(interner.intern(23, "udp")) == "Untagged"
        assert lookup_table.lookup(interner.intern(8080, "tcp")) == "Untagged"

    def test_fields_are_trimmed_and_protocol_lowercased(self, interner):
        table = LookupTable.load(["dstport,protocol,tag", " 80 , TCP ,  web  "], interner)
        assert table.lookup(interner.intern(80, "tcp")) == "web"

    def test_keys_come_from_interner(self, lookup_table, interner):
        key = interner.intern(25, "tcp")
        stored = [k for k, _ in lookup_table.items() if k == key]
        assert stored[0] is key

    def test_short_rows_are_skipped(self, interner):
        table = LookupTable.load(["dstport,protocol,tag", "80,tcp", "", "80,tcp,"], interner)
        assert len(table) == 0

    def test_extra_columns_ignored(self, interner):
        table = LookupTable.load(["dstport,protocol,tag,note", "22,tcp,ssh,admin"], interner)
        assert table.lookup(interner.intern(22, "tcp")) == "ssh"

    def test_duplicate_keys_last_write_wins(self, interner):
        table = LookupTable.load(
            ["dstport,protocol,tag", "80,tcp,web", "80,TCP,http"], interner
        )
        assert len(table) == 1
        assert table.lookup(interner.intern(80, "tcp")) == "http"

    def test_non_integer_port_raises(self, interner):
        with pytest.raises(LookupTableError) as exc_info:
            LookupTable.load(["dstport,protocol,tag", "80,tcp,web", "http,tcp,web"], interner)
        assert exc_info.value.line_number == 3

    def test_non_integer_port_is_value_error(self, interner):
        with pytest.raises(ValueError):
            LookupTable.load(["dstport,protocol,tag", "8_0,tcp,web"], interner)

    def test_missing_file_gives_empty_table(self, tmp_path: Path, interner, caplog):
        table = LookupTable.load(tmp_path / "missing.csv", interner)
        assert len(table) == 0
        assert "Error reading lookup table" in caplog.text

    def test_load_from_file(self, input_files, interner):
        table = LookupTable.load(input_files["lookup"], interner)
        assert len(table) == 8

    def test_default_interner(self):
        table = LookupTable.load(["dstport,protocol,tag", "22,tcp,ssh"])
        key = table.interner.intern(22, "tcp")
        assert key in table


class TestLookupTablePortRange:
    @pytest.mark.parametrize("port", ["-5", "65536", "99999999999"])
    def test_out_of_range_port_raises(self, interner, port):
        with pytest.raises(LookupTableError, match="Invalid port"):
            LookupTable.load(["dstport,protocol,tag", f"{port},tcp,x"], interner)

    def test_range_bounds_accepted(self, interner):
        table = LookupTable.load(
            ["dstport,protocol,tag", "0,tcp,low", "65535,udp,high"], interner
        )
        assert table.lookup(interner.intern(0, "tcp")) == "low"
        assert table.lookup(interner.intern(65535, "udp")) == "high"


def test_undecodable_tag_bytes_are_replaced(tmp_path: Path, interner):
    path = tmp_path / "lookup.csv"
    path.write_bytes(b"dstport,protocol,tag\n23,tcp,caf\xe9\n25,tcp,sv_P1\n")
    table = LookupTable.load(path, interner)
    assert table.lookup(interner.intern(23, "tcp")) == "caf�"
    assert table.lookup(interner.intern(25, "tcp")) == "sv_P1"
