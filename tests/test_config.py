"""Configuration loading tests."""

import json
from pathlib import Path

import pytest

from flowtag.config import ConfigParser, FlowTagConfig, InputConfig, OutputConfig
from flowtag.errors import ConfigError


def _write_yaml(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "flowtag.yaml"
    path.write_text(text)
    return path


class TestConfigParser:
    def test_load_yaml(self, tmp_path: Path):
        path = _write_yaml(tmp_path, """
inputs:
  lookup_table: lookup.csv
  flow_log: flow.log
  protocol_table: protocols.csv
output:
  directory: out
  filename: report.log
  format: text
logging:
  level: info
""")
        config = ConfigParser.load(str(path))
        assert config.inputs.lookup_table == "lookup.csv"
        assert config.inputs.protocol_table == "protocols.csv"
        assert config.resolve_output_path() == Path("out") / "report.log"
        assert config.log_level == 20

    def test_load_json_defaults(self, tmp_path: Path):
        path = tmp_path / "flowtag.json"
        path.write_text(json.dumps({"inputs": {"lookup_table": "l.csv", "flow_log": "f.log"}}))
        config = ConfigParser.load(str(path))
        assert config.inputs.protocol_table is None
        assert config.output.directory == "result"
        assert config.output.format == "text"
        assert config.generator.records == 10000

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            ConfigParser.load(str(tmp_path / "nope.yaml"))

    def test_unsupported_suffix(self, tmp_path: Path):
        path = tmp_path / "flowtag.ini"
        path.write_text("[inputs]")
        with pytest.raises(ConfigError):
            ConfigParser.load(str(path))

    def test_missing_flow_log(self, tmp_path: Path):
        path = _write_yaml(tmp_path, "inputs:\n  lookup_table: lookup.csv\n")
        with pytest.raises(ConfigError, match="flow_log"):
            ConfigParser.load(str(path))

    def test_bad_format(self, tmp_path: Path):
        path = _write_yaml(tmp_path, """
inputs: {lookup_table: l.csv, flow_log: f.log}
output: {format: xml}
""")
        with pytest.raises(ConfigError, match="format"):
            ConfigParser.load(str(path))

    def test_bad_generator_ratio(self):
        with pytest.raises(ConfigError, match="hit_ratio"):
            ConfigParser.parse_dict({
                "inputs": {"lookup_table": "l.csv", "flow_log": "f.log"},
                "generator": {"hit_ratio": 1.5},
            })

    def test_root_must_be_mapping(self):
        with pytest.raises(ConfigError):
            ConfigParser.parse_dict(["not", "a", "mapping"])


class TestOutputPath:
    def test_timestamp_filename(self):
        config = FlowTagConfig(inputs=InputConfig("l.csv", "f.log"))
        path = config.resolve_output_path()
        assert path.parent == Path("result")
        assert path.suffix == ".log"
        assert path.stem.isdigit()

    def test_json_suffix(self):
        config = FlowTagConfig(inputs=InputConfig("l.csv", "f.log"),
                               output=OutputConfig(format="json"))
        assert config.resolve_output_path().suffix == ".json"


def test_lookup_entries_above_pair_limit():
    with pytest.raises(ConfigError, match="lookup_entries cannot exceed"):
        ConfigParser.parse_dict({
            "inputs": {"lookup_table": "l.csv", "flow_log": "f.log"},
            "generator": {"lookup_entries": 65536 * 3 + 1},
        })
