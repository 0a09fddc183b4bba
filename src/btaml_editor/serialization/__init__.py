"""Conversion between documents and their HTML, JSON and plain text forms."""

from .html_deserializer import HtmlDeserializer, deserialize
from .html_serializer import HtmlSerializer, serialize
from .json_serializer import (
    DocumentSerializer,
    deserialize_document,
    selection_from_dict,
    serialize_document,
    state_to_dict,
)
from .report import ParseIssue, ParseReport
from .text import generate_excerpt, to_plain_text

__all__ = [
    "HtmlSerializer",
    "HtmlDeserializer",
    "serialize",
    "deserialize",
    "DocumentSerializer",
    "serialize_document",
    "deserialize_document",
    "state_to_dict",
    "selection_from_dict",
    "ParseIssue",
    "ParseReport",
    "generate_excerpt",
    "to_plain_text",
]
