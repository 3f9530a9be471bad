"""
Configuration file parser and validator for FlowTag.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

from .errors import ConfigError
from .exporters import REPORT_FORMATS
from .generators import MAX_LOOKUP_ENTRIES
from .utils import timestamp_filename


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class InputConfig:
    """Input file locations"""
    lookup_table: str = ""
    flow_log: str = ""
    protocol_table: Optional[str] = None

    def validate(self) -> Tuple[bool, Optional[str]]:
        """Validate input configuration"""
        if not self.lookup_table:
            return False, "lookup_table must be set"

        if not self.flow_log:
            return False, "flow_log must be set"

        if self.protocol_table is not None and not self.protocol_table:
            return False, "protocol_table cannot be empty when given"

        return True, None


@dataclass
class OutputConfig:
    """Report output settings"""
    directory: str = "result"
    filename: Optional[str] = None
    format: str = "text"

    def validate(self) -> Tuple[bool, Optional[str]]:
        """Validate output configuration"""
        if self.format not in REPORT_FORMATS:
            return False, f"format must be one of {REPORT_FORMATS}, got '{self.format}'"

        if self.filename is not None and not self.filename:
            return False, "filename cannot be empty when given"

        return True, None


@dataclass
class LoggingConfig:
    """Logging settings"""
    level: str = "WARNING"

    def validate(self) -> Tuple[bool, Optional[str]]:
        if self.level.upper() not in LOG_LEVELS:
            return False, f"level must be one of {LOG_LEVELS}, got '{self.level}'"
        return True, None


@dataclass
class GeneratorConfig:
    """Synthetic test data parameters"""
    lookup_entries: int = 200
    records: int = 10000
    tags: int = 20
    hit_ratio: float = 0.8
    seed: Optional[int] = None

    def validate(self) -> Tuple[bool, Optional[str]]:
        """Validate generator configuration"""
        if self.lookup_entries <= 0:
            return False, f"lookup_entries must be positive, got {self.lookup_entries}"

        if self.lookup_entries > MAX_LOOKUP_ENTRIES:
            return False, (f"lookup_entries cannot exceed {MAX_LOOKUP_ENTRIES} "
                           f"distinct port/protocol pairs, got {self.lookup_entries}")

        if self.records < 0:
            return False, f"records cannot be negative, got {self.records}"

        if self.tags <= 0:
            return False, f"tags must be positive, got {self.tags}"

        if self.hit_ratio < 0.0 or self.hit_ratio > 1.0:
            return False, f"hit_ratio must be between 0.0 and 1.0, got {self.hit_ratio}"

        return True, None


@dataclass
class FlowTagConfig:
    """Complete FlowTag configuration"""
    inputs: InputConfig
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)

    def validate(self) -> Tuple[bool, Optional[str]]:
        """
        Validate complete configuration.

        Returns:
            (is_valid, error_message)
        """
        sections = (
            ("Input", self.inputs),
            ("Output", self.output),
            ("Logging", self.logging),
            ("Generator", self.generator),
        )
        for name, section in sections:
            valid, error = section.validate()
            if not valid:
                return False, f"{name} config error: {error}"

        return True, None

    @property
    def log_level(self) -> int:
        return getattr(logging, self.logging.level.upper())

    def resolve_output_path(self) -> Path:
        """
        Final report path.

        Returns:
            <directory>/<filename>, with a timestamp-derived file name when
            none is configured
        """
        filename = self.output.filename
        if filename is None:
            filename = timestamp_filename('.json' if self.output.format == 'json' else '.log')
        return Path(self.output.directory) / filename


class ConfigParser:
    """Parse and load configuration files"""

    @staticmethod
    def load(config_path: str) -> FlowTagConfig:
        """
        Load configuration from file.

        Supports: .yaml, .yml, .json

        Args:
            config_path: Path to configuration file

        Returns:
            Parsed FlowTagConfig object

        Raises:
            ConfigError: If the file is missing, unsupported or invalid
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        suffix = path.suffix.lower()

        if suffix in ['.yaml', '.yml']:
            return ConfigParser._load_yaml(path)
        elif suffix == '.json':
            return ConfigParser._load_json(path)
        else:
            raise ConfigError(f"Unsupported config format: {suffix}. Use .yaml, .yml, or .json")

    @staticmethod
    def _load_yaml(path: Path) -> FlowTagConfig:
        """Load YAML configuration"""
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        return ConfigParser.parse_dict(data or {})

    @staticmethod
    def _load_json(path: Path) -> FlowTagConfig:
        """Load JSON configuration"""
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
        return ConfigParser.parse_dict(data)

    @staticmethod
    def parse_dict(data: Dict) -> FlowTagConfig:
        """
        Parse dictionary into FlowTagConfig object.

        Args:
            data: Configuration dictionary

        Returns:
            FlowTagConfig object

        Raises:
            ConfigError: If configuration is invalid
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping")

        input_data = data.get('inputs', {})
        input_config = InputConfig(
            lookup_table=input_data.get('lookup_table', ''),
            flow_log=input_data.get('flow_log', ''),
            protocol_table=input_data.get('protocol_table')
        )

        output_data = data.get('output', {})
        output_config = OutputConfig(
            directory=output_data.get('directory', 'result'),
            filename=output_data.get('filename'),
            format=output_data.get('format', 'text')
        )

        logging_data = data.get('logging', {})
        logging_config = LoggingConfig(
            level=logging_data.get('level', 'WARNING')
        )

        gen_data = data.get('generator', {})
        generator_config = GeneratorConfig(
            lookup_entries=gen_data.get('lookup_entries', 200),
            records=gen_data.get('records', 10000),
            tags=gen_data.get('tags', 20),
            hit_ratio=gen_data.get('hit_ratio', 0.8),
            seed=gen_data.get('seed')
        )

        config = FlowTagConfig(
            inputs=input_config,
            output=output_config,
            logging=logging_config,
            generator=generator_config
        )

        is_valid, error_msg = config.validate()
        if not is_valid:
            raise ConfigError(f"Invalid configuration: {error_msg}")

        return config
