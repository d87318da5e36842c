"""
ER/AR step alignment.

Each ER step is paired with the first AR step of the same name. Matched AR
steps stay available, so ER steps sharing a name all pair with the same AR
step. AR steps that were never matched follow, in AR order, as AR-only
entries.
"""

from typing import List, Sequence, Set

from ..domain.results import AlignmentEntry, StepRef


def align_steps(er_names: Sequence[str], ar_names: Sequence[str]) -> List[AlignmentEntry]:
    """
    Align two ordered step name sequences.

    Args:
        er_names: ER step names in ER order
        ar_names: AR step names in AR order (may repeat)

    Returns:
        ER-derived entries in ER order, then AR-only entries in AR order.
        Every ER index and every AR index appears in exactly one entry.

    Example:
        >>> [(e.er and e.er.index, e.ar and e.ar.index) for e in align_steps(["a", "b"], ["b", "c"])]
        [(0, None), (1, 0), (None, 1)]
    """
    first_ar_index = {}
    for index, name in enumerate(ar_names):
        first_ar_index.setdefault(name, index)

    entries: List[AlignmentEntry] = []
    matched_ar: Set[int] = set()
    for er_index, name in enumerate(er_names):
        ar_index = first_ar_index.get(name)
        if ar_index is None:
            entries.append(AlignmentEntry(er=StepRef(name, er_index)))
        else:
            matched_ar.add(ar_index)
            entries.append(AlignmentEntry(er=StepRef(name, er_index), ar=StepRef(name, ar_index)))

    for ar_index, name in enumerate(ar_names):
        if ar_index not in matched_ar:
            entries.append(AlignmentEntry(ar=StepRef(name, ar_index)))

    return entries
