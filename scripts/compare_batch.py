#!/usr/bin/env python3
"""
Run a comparison batch from a YAML/JSON file and report the results.

Usage:
    python scripts/compare_batch.py batch.yaml
    python scripts/compare_batch.py batch.yaml --output-dir reports/ --batch-id nightly
    python scripts/compare_batch.py batch.yaml --tree

Environment:
    PC_PARALLEL_THRESHOLD  Flat units needed to use the worker pool (default 10)
    PC_MAX_WORKERS         Worker pool size cap (default 100)

Exit codes:
    0 - every result below the failure threshold
    1 - at least one result at or above the failure threshold
    2 - the batch could not be loaded or was empty
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from process_comparator.comparison.orchestrator import ComparisonOrchestrator
from process_comparator.config.settings import ComparatorSettings, load_batch
from process_comparator.exceptions import ProcessComparatorError
from process_comparator.reporting.report import ResultReporter, flatten_results

logger = logging.getLogger(__name__)


def print_tree(results) -> None:
    """Print one indented line per result node."""
    print("\n" + "=" * 80)
    print("RESULT TREE")
    print("=" * 80)
    for row in flatten_results(results):
        indent = "  " * row["depth"]
        print(f"{indent}[{row['severity']}] {row['kind']} {row['id']}")
    print("=" * 80 + "\n")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Compare ER/AR units described in a batch file")
    parser.add_argument("batch", type=Path, help="Batch file (YAML or JSON)")
    parser.add_argument("--schema", type=Path, help="Alternative configuration JSON schema")
    parser.add_argument("--output-dir", type=Path, help="Write JSON + Markdown reports here")
    parser.add_argument("--batch-id", help="Report name (defaults to the batch file stem)")
    parser.add_argument("--tree", action="store_true", help="Print the result tree")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        units = load_batch(args.batch, args.schema)
        settings = ComparatorSettings.from_env()
        results = ComparisonOrchestrator(settings=settings).compare(units)
    except (FileNotFoundError, ValueError, ProcessComparatorError) as e:
        logger.error(f"Batch failed: {e}")
        return 2

    batch_id = args.batch_id or args.batch.stem
    reporter = ResultReporter(args.output_dir)

    if args.tree:
        print_tree(results)

    if args.output_dir:
        reporter.write_reports(batch_id, results)
    else:
        print(reporter.generate_json_report(batch_id, results))

    return 1 if reporter.summarize(results)["status"] == "FAIL" else 0


if __name__ == "__main__":
    sys.exit(main())
