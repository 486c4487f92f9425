"""Command line entry point: reconcile a CFONB120 file against expected payments.

Usage::

    cfonb-recon receipts.cfonb120 expected.json --sink json --output-dir out/
"""

import argparse
import codecs
import logging
import sys
from dataclasses import replace
from pathlib import Path

from cfonb_recon.config import ReconConfig, parse_reference_date
from cfonb_recon.exceptions import ReconError
from cfonb_recon.logging import setup_logging
from cfonb_recon.reconciliation.pipeline import load_expected_payments, reconcile
from cfonb_recon.sinks import ConsoleSink, JsonFileSink, KafkaSink, Sink, publish_report

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _encoding(value: str) -> str:
    try:
        return codecs.lookup(value).name
    except LookupError:
        raise argparse.ArgumentTypeError(f"unknown encoding {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cfonb-recon",
        description="Match incoming CFONB120 credits against expected payments.",
    )
    parser.add_argument("statement", type=Path, help="CFONB120 statement file")
    parser.add_argument("expected", type=Path, help="JSON array of expected payments")
    parser.add_argument(
        "--sink",
        choices=["console", "json", "kafka"],
        default="console",
        help="Where to hand results (default: console)",
    )
    parser.add_argument("--output-dir", type=Path, default=None, help="Directory for the json sink")
    parser.add_argument(
        "--reference-date",
        default=None,
        help="ISO date used to infer the century of two-digit years (default: today)",
    )
    parser.add_argument(
        "--encoding",
        type=_encoding,
        default="utf-8",
        help="Statement file encoding, e.g. latin-1 (default: utf-8)",
    )
    parser.add_argument("--workers", type=_positive_int, default=None, help="Accounts matched in parallel")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--log-format", choices=["standard", "json"], default=None)
    return parser


def make_sink(name: str, config: ReconConfig) -> Sink:
    """Create the sink selected on the command line."""
    if name == "json":
        return JsonFileSink(config.output.json_output_dir, pretty=config.output.pretty_json)
    if name == "kafka":
        return KafkaSink(config.kafka)
    return ConsoleSink(pretty=config.output.pretty_json)


def main(argv: list[str] | None = None) -> int:
    """Run a reconciliation and return the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        config = ReconConfig.from_env()
        if args.reference_date:
            config.reference_date = parse_reference_date(args.reference_date)
        if args.workers is not None:
            config.matching = replace(config.matching, max_workers=args.workers)
        if args.output_dir:
            config.output = replace(config.output, json_output_dir=args.output_dir)
        setup_logging(args.log_level or config.log_level, args.log_format or config.log_format)

        expected_payments = load_expected_payments(args.expected)
        content = args.statement.read_text(encoding=args.encoding)

        report = reconcile(
            content,
            expected_payments,
            clock=config.clock(),
            max_workers=config.matching.max_workers,
        )

        sink = make_sink(args.sink, config)
        prefix = config.kafka.topic_prefix if args.sink == "kafka" else ""
        try:
            publish_report(report, sink, prefix=prefix)
        finally:
            sink.close()
    except ReconError as exc:
        logger.error("Reconciliation failed: %s", exc)
        return 1
    except UnicodeDecodeError as exc:
        logger.error("Cannot decode %s as %s: %s", args.statement, args.encoding, exc)
        return 1
    except OSError as exc:
        logger.error("Cannot read input: %s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
