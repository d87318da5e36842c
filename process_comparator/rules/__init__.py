"""Rule evaluation: ER substitution and result remapping."""

from .remap import apply_remap_rules, parse_remap_rule, parse_remap_rules
from .substitution import apply_substitution_rules, parse_substitution_rules

__all__ = [
    "apply_remap_rules",
    "parse_remap_rule",
    "parse_remap_rules",
    "apply_substitution_rules",
    "parse_substitution_rules",
]
