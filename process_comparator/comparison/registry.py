"""
Comparator plugin contract and registry.

A comparator is any object with
`compare(expected: Item, actual: Item, parameters: ParameterBag) -> List[DiffMessage]`.
Comparators are registered per content type; resolving an unregistered type
raises ComparatorNotFoundError, which fails only the unit being compared.
"""

from typing import Dict, List, Protocol, runtime_checkable

from ..config.configuration import ParameterBag
from ..domain.item import ContentType, Item
from ..domain.results import DiffMessage
from ..exceptions import ComparatorNotFoundError
from ..utils.logger import get_logger
from ..utils.messages import msg

logger = get_logger(__name__)


@runtime_checkable
class Comparator(Protocol):
    """Per-content-type diff algorithm."""

    def compare(
        self, expected: Item, actual: Item, parameters: ParameterBag
    ) -> List[DiffMessage]:
        ...


class ComparatorRegistry:
    """Maps content type tags to comparator instances."""

    def __init__(self):
        self._comparators: Dict[ContentType, Comparator] = {}

    def register(self, content_type: ContentType, comparator: Comparator) -> None:
        """
        Register a comparator for a content type, replacing any previous one.

        Raises:
            TypeError: If comparator has no callable `compare`
        """
        if not callable(getattr(comparator, "compare", None)):
            raise TypeError(f"Comparator must define compare(), got {type(comparator)}")

        self._comparators[content_type] = comparator
        logger.debug(
            f"Registered comparator for {content_type.value}: {type(comparator).__name__}"
        )

    def get(self, content_type: ContentType) -> Comparator:
        """
        Resolve the comparator for a content type.

        Raises:
            ComparatorNotFoundError: If nothing is registered for it
        """
        comparator = self._comparators.get(content_type)
        if comparator is None:
            message = msg(20104, content_type.value)
            logger.error(message, operation="resolve_comparator")
            raise ComparatorNotFoundError(message)
        return comparator

    def content_types(self) -> List[ContentType]:
        return list(self._comparators)

    def __contains__(self, content_type: ContentType) -> bool:
        return content_type in self._comparators


def default_registry() -> ComparatorRegistry:
    """Registry with the reference PRIMITIVES and PLAIN_TEXT comparators."""
    from .comparators import PlainTextComparator, PrimitivesComparator

    registry = ComparatorRegistry()
    registry.register(ContentType.PRIMITIVES, PrimitivesComparator())
    registry.register(ContentType.PLAIN_TEXT, PlainTextComparator())
    return registry
