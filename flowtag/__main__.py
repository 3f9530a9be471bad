"""
Command line entry point: python -m flowtag
"""

import argparse
import sys
from typing import List, Optional

from . import __version__, setup_logging
from .config import (
    ConfigParser, FlowTagConfig, GeneratorConfig, InputConfig, LoggingConfig, OutputConfig
)
from .errors import FlowTagError
from .exporters import REPORT_FORMATS
from .generators import FlowLogGenerator, LookupTableGenerator
from .pipeline import FlowTagPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowtag",
        description="Tag flow log records by destination port/protocol and count them",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Tag a flow log and write the count report")
    run.add_argument("lookup_table", nargs="?", help="Lookup table CSV (dstport,protocol,tag)")
    run.add_argument("flow_log", nargs="?", help="Version 2 flow log")
    run.add_argument("output", nargs="?", help="Report file name (default: <epoch-ms>.log)")
    run.add_argument("-c", "--config", help="YAML or JSON configuration file")
    run.add_argument("--protocols", help="Protocol number CSV (default: bundled IANA table)")
    run.add_argument("--output-dir", help="Report directory (default: result)")
    run.add_argument("--format", choices=REPORT_FORMATS, help="Report format")
    run.add_argument("-v", "--verbose", action="count", default=0,
                     help="More logging (-v info, -vv debug)")

    gen = subparsers.add_parser("generate", help="Write a synthetic lookup table and flow log")
    gen.add_argument("--lookup-out", required=True, help="Lookup table CSV to write")
    gen.add_argument("--flow-log-out", required=True, help="Flow log to write")
    gen.add_argument("--lookup-entries", type=int, default=200)
    gen.add_argument("--records", type=int, default=10000)
    gen.add_argument("--tags", type=int, default=20)
    gen.add_argument("--hit-ratio", type=float, default=0.8)
    gen.add_argument("--seed", type=int)

    return parser


def _run_config(args: argparse.Namespace) -> FlowTagConfig:
    """Merge the optional config file with command line overrides"""
    if args.config:
        config = ConfigParser.load(args.config)
    else:
        config = FlowTagConfig(inputs=InputConfig(), output=OutputConfig(), logging=LoggingConfig())

    if args.lookup_table:
        config.inputs.lookup_table = args.lookup_table
    if args.flow_log:
        config.inputs.flow_log = args.flow_log
    if args.output:
        config.output.filename = args.output
    if args.protocols:
        config.inputs.protocol_table = args.protocols
    if args.output_dir:
        config.output.directory = args.output_dir
    if args.format:
        config.output.format = args.format
    if args.verbose:
        config.logging.level = "DEBUG" if args.verbose > 1 else "INFO"

    is_valid, error_msg = config.validate()
    if not is_valid:
        raise FlowTagError(f"Invalid configuration: {error_msg}")
    return config


def cmd_run(args: argparse.Namespace) -> int:
    config = _run_config(args)
    setup_logging(config.log_level)

    pipeline = FlowTagPipeline()
    pipeline.initialize(config)
    try:
        pipeline.run()
    except OSError as e:
        print(f"Error reading flow log: {e}", file=sys.stderr)
        return 1

    written = pipeline.write_report()
    print(f"Parsed {config.inputs.flow_log} in {pipeline.elapsed_seconds:.2f} seconds")
    if not written:
        stats = pipeline.get_stats()
        print(f"Report could not be written to {pipeline.output_path} "
              f"({stats['records_processed']} records counted)", file=sys.stderr)
        return 1

    print(f"Result saved to {pipeline.output_path}")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    gen_config = GeneratorConfig(
        lookup_entries=args.lookup_entries,
        records=args.records,
        tags=args.tags,
        hit_ratio=args.hit_ratio,
        seed=args.seed
    )
    is_valid, error_msg = gen_config.validate()
    if not is_valid:
        raise FlowTagError(f"Invalid generator options: {error_msg}")

    rows = LookupTableGenerator(gen_config.lookup_entries, gen_config.tags,
                                seed=gen_config.seed).write(args.lookup_out)
    count = FlowLogGenerator(gen_config.records, rows, gen_config.hit_ratio,
                             seed=gen_config.seed).write(args.flow_log_out)

    print(f"Wrote {len(rows)} lookup entries to {args.lookup_out}")
    print(f"Wrote {count:,} flow records to {args.flow_log_out}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """FlowTag CLI entry point"""
    args = build_parser().parse_args(argv)

    try:
        if args.command == "run":
            return cmd_run(args)
        return cmd_generate(args)
    except FlowTagError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
