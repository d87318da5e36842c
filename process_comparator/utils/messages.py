"""
Numbered response messages used in diagnostics and supplementary results.

Codes 1xxxx describe comparison outcomes, 2xxxx describe failures.
"""

from typing import Dict

MESSAGES: Dict[int, str] = {
    10102: "Expected %s steps",
    10103: "Actually %s steps",
    10106: 'Expected parameter "%s"',
    10107: 'Actually parameter "%s"',
    20001: "Exception. Read log for more information",
    20002: "Exception: %s",
    20104: "Comparator for content type %s is not found",
    20105: "Comparison units are empty",
    20107: "Steps count in ar process %s does not equal er steps count",
}


def msg(code: int, *args: object) -> str:
    """
    Format a numbered message.

    Args:
        code: Message code from MESSAGES
        *args: Values substituted into the message template

    Returns:
        Formatted message, or a generic fallback for unknown codes

    Example:
        >>> msg(20002, "boom")
        'Exception: boom'
    """
    template = MESSAGES.get(code)
    if template is None:
        return f"Unknown message code {code}"
    if args:
        return template % args
    return template
