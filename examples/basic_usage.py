#!/usr/bin/env python3
"""
Basic usage example for FlowTag library.

This example demonstrates:
- Generating a synthetic lookup table and flow log
- Loading configuration from YAML file
- Tagging the flow log and writing the count report
"""

from flowtag import ConfigParser, FlowTagPipeline, setup_logging
from flowtag.generators import FlowLogGenerator, LookupTableGenerator


def main():
    config_path = "configs/example_config.yaml"
    print(f"Loading configuration from {config_path}...")
    config = ConfigParser.load(config_path)
    setup_logging(config.log_level)

    # Synthetic inputs
    gen = config.generator
    rows = LookupTableGenerator(gen.lookup_entries, gen.tags, seed=gen.seed).write(
        config.inputs.lookup_table
    )
    count = FlowLogGenerator(gen.records, rows, gen.hit_ratio, seed=gen.seed).write(
        config.inputs.flow_log
    )
    print(f"Generated {len(rows)} lookup entries and {count:,} flow records")
    print()

    pipeline = FlowTagPipeline()
    pipeline.initialize(config)
    counts = pipeline.run()

    if not pipeline.write_report():
        print("Failed to write report")
        return

    stats = pipeline.get_stats()
    print(f"Parsed {config.inputs.flow_log} in {pipeline.elapsed_seconds:.2f} seconds")
    print(f"Records processed: {stats['records_processed']:,}")
    print(f"Records skipped: {stats['records_skipped']:,}")
    print(f"Result saved to {pipeline.output_path}")

    print(f"\nTop 5 tags:")
    for tag, n in counts.tag_counts.most_common(5):
        print(f"  {tag}: {n:,}")


if __name__ == "__main__":
    main()
