"""
ER substitution rules.

A rule is a `name:value` pair (several pairs may share one entry, separated
by commas). Every `${name}` token in the ER content is replaced by its value
before the content is compared.
"""

from typing import Dict, Iterable, List, Mapping, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)


def parse_substitution_rules(rules: Iterable[str]) -> Dict[str, str]:
    """
    Parse rule entries into a name -> value mapping.

    Later entries override earlier ones. A pair without ':' maps the name to
    an empty string. Only the first ':' separates name from value.

    Example:
        >>> parse_substitution_rules(["host:localhost, port:8080", "empty"])
        {'host': 'localhost', 'port': '8080', 'empty': ''}
    """
    substitutes: Dict[str, str] = {}
    for row in rules:
        for pair in row.split(","):
            if not pair.strip():
                continue
            name, _, value = pair.partition(":")
            substitutes[name.strip()] = value.strip()
    return substitutes


def apply_substitution_rules(
    content: str,
    rules: Iterable[str],
    context: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Replace `${name}` tokens in content.

    Context values are used verbatim (commas included); explicit rules
    override a context value of the same name.

    Args:
        content: Decoded ER content
        rules: Rule entries (see parse_substitution_rules)
        context: Context parameter values by name

    Returns:
        Content with every known token replaced; unknown tokens are left as is
    """
    substitutes: Dict[str, str] = dict(context or {})
    substitutes.update(parse_substitution_rules(rules))
    if not substitutes or not content:
        return content

    replaced: List[str] = []
    for name, value in substitutes.items():
        token = "${" + name + "}"
        if token in content:
            content = content.replace(token, value)
            replaced.append(name)

    if replaced:
        logger.debug(
            f"Applied {len(replaced)} ER substitution(s)",
            operation="apply_substitution_rules",
            context={"names": replaced},
        )
    return content
