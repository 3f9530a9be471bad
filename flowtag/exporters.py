"""
Render and write tag / port-protocol count reports.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Tuple, Union

from .models import CompositeKey, FlowCounts


logger = logging.getLogger("flowtag.exporters")

TAG_HEADER = "Tag Counts:"
PORT_PROTOCOL_HEADER = "Port/Protocol Combination Counts:"
REPORT_FORMATS = ("text", "json")


def sorted_tag_counts(counts: FlowCounts) -> List[Tuple[str, int]]:
    """Tag counts in ascending tag order"""
    return sorted(counts.tag_counts.items(), key=lambda item: item[0])


def sorted_port_protocol_counts(counts: FlowCounts) -> List[Tuple[CompositeKey, int]]:
    """Port/protocol counts ordered by port; equal ports keep first-seen order"""
    return sorted(counts.port_protocol_counts.items(), key=lambda item: item[0].port)


class ReportWriter:
    """Render FlowCounts as a report and write it out"""

    @staticmethod
    def render(counts: FlowCounts) -> str:
        """
        Render the text report.

        Args:
            counts: Aggregated counts

        Returns:
            Report text, newline terminated
        """
        lines = [TAG_HEADER]
        lines.extend(f"{tag},{count}" for tag, count in sorted_tag_counts(counts))

        lines.append("")
        lines.append(PORT_PROTOCOL_HEADER)
        lines.extend(key.to_csv_row(count)
                     for key, count in sorted_port_protocol_counts(counts))

        return '\n'.join(lines) + '\n'

    @staticmethod
    def render_json(counts: FlowCounts, pretty: bool = True) -> str:
        """
        Render the report as JSON, in the same order as the text report.

        Args:
            counts: Aggregated counts
            pretty: Whether to use pretty formatting

        Returns:
            JSON document
        """
        document: Dict = {
            'tag_counts': dict(sorted_tag_counts(counts)),
            'port_protocol_counts': [
                {'port': key.port, 'protocol': key.protocol, 'count': count}
                for key, count in sorted_port_protocol_counts(counts)
            ],
        }
        return json.dumps(document, indent=2 if pretty else None)

    @staticmethod
    def write(counts: FlowCounts, destination: Union[str, Path], fmt: str = "text") -> bool:
        """
        Write the report to a file, creating parent directories.

        Args:
            counts: Aggregated counts
            destination: Output file path
            fmt: 'text' or 'json'

        Returns:
            True if written, False if the file could not be written

        Raises:
            ValueError: If fmt is not a known report format
        """
        if fmt == "text":
            report = ReportWriter.render(counts)
        elif fmt == "json":
            report = ReportWriter.render_json(counts) + '\n'
        else:
            raise ValueError(f"Unknown report format: {fmt}. Use one of {REPORT_FORMATS}")

        path = Path(destination)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(report)
        except OSError as e:
            logger.error("Error writing output: %s", e)
            return False

        logger.info("Report written to %s", path)
        return True


def render_report(counts: FlowCounts) -> str:
    """
    Convenience function to render the text report.

    Args:
        counts: Aggregated counts

    Returns:
        Report text
    """
    return ReportWriter.render(counts)


def write_report(counts: FlowCounts, destination: Union[str, Path], fmt: str = "text") -> bool:
    """
    Convenience function to write a report file.

    Args:
        counts: Aggregated counts
        destination: Output file path
        fmt: 'text' or 'json'

    Returns:
        True if written
    """
    return ReportWriter.write(counts, destination, fmt)
