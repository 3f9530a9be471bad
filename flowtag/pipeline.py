"""
End-to-end tagging run: load tables, classify the flow log, write the report.
"""

import logging
import time
from pathlib import Path
from typing import Optional

from .classifier import FlowLogClassifier
from .config import FlowTagConfig
from .exporters import ReportWriter
from .interner import KeyInterner
from .lookup import LookupTable
from .models import FlowCounts
from .protocols import ProtocolTable


logger = logging.getLogger("flowtag.pipeline")


class FlowTagPipeline:
    """
    One tagging run over a single flow log.

    Phases run strictly in order: initialize() loads both reference tables,
    run() consumes the flow log, write_report() renders the final counts.
    Each pipeline owns its own KeyInterner, so no key state leaks between
    runs.

    Example:
        >>> pipeline = FlowTagPipeline()
        >>> pipeline.initialize(config)
        >>> counts = pipeline.run()
        >>> pipeline.write_report()
    """

    def __init__(self):
        self._config: Optional[FlowTagConfig] = None
        self._initialized = False
        self.interner = KeyInterner()
        self.protocol_table: Optional[ProtocolTable] = None
        self.lookup_table: Optional[LookupTable] = None
        self.counts: Optional[FlowCounts] = None
        self.output_path: Optional[Path] = None
        self._load_seconds: float = 0.0
        self._process_seconds: float = 0.0

    def initialize(self, config: FlowTagConfig):
        """
        Load the protocol and lookup tables.

        Args:
            config: Validated configuration

        Raises:
            LookupTableError: If the lookup table has a non-integer port
        """
        start = time.perf_counter()
        self._config = config

        if config.inputs.protocol_table:
            self.protocol_table = ProtocolTable.load(config.inputs.protocol_table)
        else:
            self.protocol_table = ProtocolTable.default()

        self.lookup_table = LookupTable.load(config.inputs.lookup_table, self.interner)

        self._load_seconds = time.perf_counter() - start
        self._initialized = True
        logger.info("Loaded %d protocols and %d lookup entries in %.3fs",
                    len(self.protocol_table), len(self.lookup_table), self._load_seconds)

    def run(self) -> FlowCounts:
        """
        Classify the configured flow log.

        Returns:
            Aggregated FlowCounts

        Raises:
            RuntimeError: If called before initialize()
            OSError: If the flow log cannot be read
        """
        if not self._initialized:
            raise RuntimeError("Pipeline not initialized. Call initialize() first.")

        start = time.perf_counter()
        classifier = FlowLogClassifier(self.protocol_table, self.lookup_table, self.interner)
        self.counts = classifier.process(self._config.inputs.flow_log)
        self._process_seconds = time.perf_counter() - start
        return self.counts

    def write_report(self, destination: Optional[Path] = None) -> bool:
        """
        Write the report for the last run.

        Args:
            destination: Output path (config-derived if None)

        Returns:
            True if the report was written
        """
        if self.counts is None:
            raise RuntimeError("Nothing to report. Call run() first.")

        self.output_path = Path(destination) if destination else self._config.resolve_output_path()
        return ReportWriter.write(self.counts, self.output_path, self._config.output.format)

    @property
    def elapsed_seconds(self) -> float:
        """Table loading plus flow log processing time"""
        return self._load_seconds + self._process_seconds

    def get_stats(self) -> dict:
        """
        Get run statistics.

        Returns:
            Dictionary with run stats
        """
        if not self._initialized:
            return {}

        stats = {
            'protocols_loaded': len(self.protocol_table),
            'lookup_entries': len(self.lookup_table),
            'interned_keys': len(self.interner),
            'load_seconds': self._load_seconds,
            'process_seconds': self._process_seconds,
        }
        if self.counts is not None:
            stats.update(self.counts.to_dict())
        return stats
