"""
Comparison input model.

Items are tree nodes (test case -> step -> parameter) carried in transport
encoding. A ComparisonUnit groups one ER item with its AR variants and the
configuration that applies to them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.configuration import ComparatorConfiguration


class ContentType(Enum):
    """Format of an item's content; selects the comparator."""

    PRIMITIVES = "PRIMITIVES"
    XML = "XML"
    MASKED_XML = "MASKED_XML"
    JSON = "JSON"
    CSV = "CSV"
    EXCEL = "EXCEL"
    PLAIN_TEXT = "PLAIN_TEXT"
    FULL_TEXT = "FULL_TEXT"
    BITMAP = "BITMAP"
    TASK_LIST = "TASK_LIST"
    XSD = "XSD"
    TABLE = "TABLE"

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional["ContentType"]:
        """Return the content type with this name, or None when unknown."""
        if not name:
            return None
        return cls.__members__.get(name.strip().upper())


class UnitKind(Enum):
    """Role of a comparison unit within a batch."""

    PROCESS = "PROCESS"
    PROCESS_STEP = "PROCESS_STEP"
    SIMPLE = "SIMPLE"
    CONTEXT_PARAMETER = "CONTEXT_PARAMETER"


@dataclass
class Item:
    """
    Tree node compared by the orchestrator.

    Attributes:
        id: External identifier supplied by the caller
        name: Node name; steps and parameters are matched by it
        content: Transport-encoded content, None when the side is absent
        content_type: Content type tag used to resolve a comparator
        data_type: Role of the node (process, step, simple, context parameter)
        children: Ordered child items
    """

    id: str
    name: str
    content: Optional[str] = None
    content_type: ContentType = ContentType.PRIMITIVES
    data_type: UnitKind = UnitKind.SIMPLE
    children: List["Item"] = field(default_factory=list)

    def __post_init__(self):
        self.name = (self.name or "").strip()

    def child_by_name(self, name: str) -> Optional["Item"]:
        """Return the first child with this name, or None."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def child_index_by_name(self, name: str) -> Optional[int]:
        """Return the index of the first child with this name, or None."""
        for index, child in enumerate(self.children):
            if child.name == name:
                return index
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        """
        Create an Item from a plain dictionary (e.g., a parsed YAML batch).

        Unknown content types raise ValueError so that a malformed batch is
        rejected before orchestration starts.
        """
        content_type_name = data.get("content_type", ContentType.PRIMITIVES.value)
        content_type = ContentType.parse(content_type_name)
        if content_type is None:
            raise ValueError(f"Unknown content type: {content_type_name}")

        data_type = UnitKind(str(data.get("data_type", UnitKind.SIMPLE.value)).upper())

        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            content=data.get("content"),
            content_type=content_type,
            data_type=data_type,
            children=[cls.from_dict(child) for child in data.get("children") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "content": self.content,
            "content_type": self.content_type.value,
            "data_type": self.data_type.value,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class ComparisonUnit:
    """
    One compared entity: an ER item, its AR variants and resolved configuration.

    Treated as read-only once handed to the orchestrator.
    """

    er: Item
    ar: List[Item] = field(default_factory=list)
    configuration: ComparatorConfiguration = field(default_factory=ComparatorConfiguration)
    kind: Optional[UnitKind] = None

    def __post_init__(self):
        if self.kind is None:
            self.kind = self.er.data_type

    @property
    def id(self) -> str:
        return self.er.id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComparisonUnit":
        """
        Create a ComparisonUnit from a dictionary with 'er', 'ar', optional
        'configuration' and optional 'kind' keys.
        """
        if "er" not in data:
            raise ValueError("Comparison unit missing required field: 'er'")

        kind = data.get("kind")
        return cls(
            er=Item.from_dict(data["er"]),
            ar=[Item.from_dict(ar) for ar in data.get("ar") or []],
            configuration=ComparatorConfiguration.from_dict(data.get("configuration") or {}),
            kind=UnitKind(str(kind).upper()) if kind else None,
        )
