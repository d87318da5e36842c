"""Result Reporter - Generate JSON reports and markdown summaries of batch results."""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from ..domain.results import NodeResult
from ..domain.severity import SEVERITY_RANK, Severity, most_severe

logger = logging.getLogger(__name__)

# Overall status is FAIL once any result reaches this rank.
FAILURE_THRESHOLD = Severity.BROKEN_STEP_INDEX


class ResultReporter:
    """
    Generate comparison artifacts (JSON + Markdown) from NodeResults.

    Reports contain no timestamps, so identical results always produce
    byte-identical reports.
    """

    def __init__(self, output_dir: Path | None = None) -> None:
        self.output_dir = Path(output_dir) if output_dir is not None else Path.cwd()

    def summarize(self, results: Sequence[NodeResult]) -> Dict[str, Any]:
        """
        Count top-level results per severity.

        Returns:
            Stats dict with total, per-severity counts, overall severity and status
        """
        counts = Counter(result.severity for result in results)
        overall = most_severe(result.severity for result in results)
        return {
            "total_results": len(results),
            "severity_counts": {
                severity.value: counts[severity]
                for severity in sorted(counts, key=lambda s: SEVERITY_RANK[s], reverse=True)
            },
            "overall_severity": overall.value,
            "status": "FAIL" if overall.rank >= FAILURE_THRESHOLD.rank else "PASS",
        }

    def generate_json_report(self, batch_id: str, results: Sequence[NodeResult]) -> str:
        report = {
            "batch_id": batch_id,
            "statistics": self.summarize(results),
            "results": [result.to_dict() for result in results],
        }
        return json.dumps(report, indent=2, sort_keys=True, ensure_ascii=False)

    def generate_markdown_summary(self, batch_id: str, results: Sequence[NodeResult]) -> str:
        stats = self.summarize(results)
        md_lines = [
            f"# Comparison Report: {batch_id}",
            "",
            "## Summary",
            f"- **Total Results:** {stats['total_results']}",
            f"- **Overall Severity:** {stats['overall_severity']}",
            f"- **Status:** {stats['status']}",
            "",
        ]

        if stats["severity_counts"]:
            md_lines.append("| Severity | Count |")
            md_lines.append("|---|---|")
            for severity, count in stats["severity_counts"].items():
                md_lines.append(f"| {severity} | {count} |")
            md_lines.append("")

        problems = [r for r in results if r.severity.rank >= FAILURE_THRESHOLD.rank]
        if problems:
            md_lines.append("## Results Needing Attention")
            md_lines.append("")
            for result in problems:
                name = result.item.name if result.item is not None else result.id
                line = f"- **{result.severity.value}** {result.id} ({name})"
                if result.message is not None and result.message.description:
                    line += f": {result.message.description}"
                md_lines.append(line)
        else:
            md_lines.append("No differences above threshold.")

        return "\n".join(md_lines) + "\n"

    def write_reports(self, batch_id: str, results: Sequence[NodeResult]) -> Tuple[Path, Path]:
        self.output_dir.mkdir(parents=True, exist_ok=True)

        safe_batch_id = batch_id.replace("/", "_")
        json_path = self.output_dir / f"{safe_batch_id}.json"
        md_path = self.output_dir / f"{safe_batch_id}.md"

        json_path.write_text(self.generate_json_report(batch_id, results), encoding="utf-8")
        md_path.write_text(self.generate_markdown_summary(batch_id, results), encoding="utf-8")

        logger.info("Wrote comparison reports for %s", batch_id)
        logger.info("  JSON: %s", json_path)
        logger.info("  Markdown: %s", md_path)

        return json_path, md_path


def flatten_results(results: Sequence[NodeResult]) -> List[Dict[str, Any]]:
    """One row per node (id, kind, severity, depth), depth first."""
    rows: List[Dict[str, Any]] = []

    def visit(node: NodeResult, depth: int) -> None:
        rows.append(
            {"id": node.id, "kind": node.kind.value, "severity": node.severity.value, "depth": depth}
        )
        for child in node.children or []:
            visit(child, depth + 1)

    for result in results:
        visit(result, 0)
    return rows
