#!/usr/bin/env python3
"""
Streaming usage example - classify flow records as they are generated,
without writing the flow log to disk.

This example demonstrates:
- Building the reference tables in memory
- Feeding lines to the classifier one at a time
- Rendering the report to stdout
"""

import time

from flowtag import FlowCounts, FlowLogClassifier, KeyInterner, LookupTable, ProtocolTable
from flowtag.exporters import render_report
from flowtag.generators import FlowLogGenerator, LookupTableGenerator


def main():
    interner = KeyInterner()
    protocols = ProtocolTable.default()

    rows = LookupTableGenerator(num_entries=50, num_tags=5, seed=1).generate()
    lookup = LookupTable(interner)
    for port, protocol, tag in rows:
        lookup.add(port, protocol, tag)

    classifier = FlowLogClassifier(protocols, lookup, interner)
    counts = FlowCounts()

    start_time = time.time()
    for record in FlowLogGenerator(num_records=200000, lookup_rows=rows, seed=1):
        classifier.process_line(record.to_log_line(), counts)

        if counts.records_processed % 50000 == 0:
            elapsed = time.time() - start_time
            rate = counts.records_processed / elapsed if elapsed > 0 else 0
            print(f"Processed {counts.records_processed:,} records ({rate:,.0f} records/sec)...")

    print()
    print(render_report(counts))
    print(f"Distinct keys interned: {len(interner)}")


if __name__ == "__main__":
    main()
