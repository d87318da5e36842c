"""
Content transcoder.

Item content travels in transport encoding: PRIMITIVES and TASK_LIST are
plain text, every other content type is base64 over UTF-8.
"""

import base64
import binascii
import dataclasses
from typing import Optional

from ..domain.item import ContentType, Item
from ..exceptions import ContentConversionError

PLAIN_CONTENT_TYPES = frozenset({ContentType.PRIMITIVES, ContentType.TASK_LIST})


def decode_content(content: Optional[str], content_type: ContentType) -> Optional[str]:
    """
    Convert transport-encoded content to logical text.

    Raises:
        ContentConversionError: If base64 content cannot be decoded as UTF-8 text
    """
    if content is None or content_type in PLAIN_CONTENT_TYPES:
        return content
    try:
        return base64.b64decode(content).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ContentConversionError(
            f"Cannot decode {content_type.value} content: {e}"
        ) from e


def encode_content(content: Optional[str], content_type: ContentType) -> Optional[str]:
    """Convert logical text to transport encoding for the content type."""
    if content is None or content_type in PLAIN_CONTENT_TYPES:
        return content
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


def convert_content(
    content: Optional[str], source: ContentType, target: ContentType
) -> Optional[str]:
    """Re-encode content from one content type's transport form to another's."""
    if content is None or not content.strip() or source == target:
        return content
    return encode_content(decode_content(content, source), target)


def convert_item(item: Item, target: ContentType) -> Item:
    """
    Return a copy of the item re-tagged (and re-encoded) as `target`.

    The original item is left untouched.
    """
    if item.content_type == target:
        return item
    return dataclasses.replace(
        item,
        content=convert_content(item.content, item.content_type, target),
        content_type=target,
    )
