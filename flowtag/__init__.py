"""
FlowTag - Tag and count network flow log records

Maps each flow log record's destination port and protocol to a tag from a
lookup table, then reports how many records matched each tag and each
port/protocol combination.
"""

import logging
import sys

from .classifier import FlowLogClassifier, process_flow_log
from .config import ConfigParser, FlowTagConfig
from .errors import ConfigError, FlowTagError, LookupTableError
from .exporters import ReportWriter, render_report, write_report
from .interner import KeyInterner
from .lookup import LookupTable
from .models import UNKNOWN_PROTOCOL, UNTAGGED, CompositeKey, FlowCounts, FlowLogRecord
from .pipeline import FlowTagPipeline
from .protocols import ProtocolTable

# Public API
__version__ = "1.0.0"
__all__ = [
    "CompositeKey",
    "ConfigError",
    "ConfigParser",
    "FlowCounts",
    "FlowLogClassifier",
    "FlowLogRecord",
    "FlowTagConfig",
    "FlowTagError",
    "FlowTagPipeline",
    "KeyInterner",
    "LookupTable",
    "LookupTableError",
    "ProtocolTable",
    "ReportWriter",
    "UNKNOWN_PROTOCOL",
    "UNTAGGED",
    "process_flow_log",
    "render_report",
    "setup_logging",
    "write_report",
]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: int = logging.WARNING) -> logging.Logger:
    """
    Send flowtag log records to stderr.

    Args:
        level: Minimum level to emit

    Returns:
        The package logger
    """
    logger = logging.getLogger("flowtag")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
