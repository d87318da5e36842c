"""
Reference comparators.

Full content-type comparators (JSON, XML, tables...) are plugged in through
ComparatorRegistry. These two cover plain values so a default registry is
usable out of the box.
"""

from typing import List, Optional

from ..config.configuration import ParameterBag
from ..domain.item import Item
from ..domain.results import DiffMessage
from ..domain.severity import Severity
from .transcoder import decode_content


def _lines(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


class PrimitivesComparator:
    """
    Order-insensitive comparison of line-separated values.

    Every ER value is matched against an unused equal AR value. Leftover
    values are paired positionally as CHANGED; the remainder is MISSED (ER
    only) or EXTRA (AR only). Identical content yields no diffs.
    """

    def compare(
        self, expected: Item, actual: Item, parameters: ParameterBag
    ) -> List[DiffMessage]:
        er_values = _lines(decode_content(expected.content, expected.content_type))
        ar_values = _lines(decode_content(actual.content, actual.content_type))

        unmatched_ar = list(range(len(ar_values)))
        unmatched_er = []
        for er_index, value in enumerate(er_values):
            match = next((i for i in unmatched_ar if ar_values[i] == value), None)
            if match is None:
                unmatched_er.append(er_index)
            else:
                unmatched_ar.remove(match)

        diffs: List[DiffMessage] = []
        for er_index, ar_index in zip(unmatched_er, unmatched_ar):
            diffs.append(
                DiffMessage(
                    order_id=len(diffs),
                    expected=f"line {er_index + 1}",
                    actual=f"line {ar_index + 1}",
                    severity=Severity.CHANGED,
                    expected_value=er_values[er_index],
                    actual_value=ar_values[ar_index],
                )
            )
        paired = min(len(unmatched_er), len(unmatched_ar))
        for er_index in unmatched_er[paired:]:
            diffs.append(
                DiffMessage(
                    order_id=len(diffs),
                    expected=f"line {er_index + 1}",
                    actual="",
                    severity=Severity.MISSED,
                    expected_value=er_values[er_index],
                )
            )
        for ar_index in unmatched_ar[paired:]:
            diffs.append(
                DiffMessage(
                    order_id=len(diffs),
                    expected="",
                    actual=f"line {ar_index + 1}",
                    severity=Severity.EXTRA,
                    actual_value=ar_values[ar_index],
                )
            )
        return diffs


class PlainTextComparator:
    """Positional line-by-line comparison of text content."""

    def compare(
        self, expected: Item, actual: Item, parameters: ParameterBag
    ) -> List[DiffMessage]:
        er_lines = (decode_content(expected.content, expected.content_type) or "").splitlines()
        ar_lines = (decode_content(actual.content, actual.content_type) or "").splitlines()

        diffs: List[DiffMessage] = []
        for index in range(max(len(er_lines), len(ar_lines))):
            er_line = er_lines[index] if index < len(er_lines) else None
            ar_line = ar_lines[index] if index < len(ar_lines) else None
            if er_line == ar_line:
                continue
            if ar_line is None:
                severity = Severity.MISSED
            elif er_line is None:
                severity = Severity.EXTRA
            else:
                severity = Severity.CHANGED
            diffs.append(
                DiffMessage(
                    order_id=len(diffs),
                    expected=f"line {index + 1}" if er_line is not None else "",
                    actual=f"line {index + 1}" if ar_line is not None else "",
                    severity=severity,
                    expected_value=er_line,
                    actual_value=ar_line,
                )
            )
        return diffs
