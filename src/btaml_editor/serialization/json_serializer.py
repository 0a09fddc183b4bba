"""Serialization and deserialization of documents and editor state as JSON."""

import json
from typing import Any

from ..commands.state import EditorState
from ..models.document import Document, Mark, Node, normalize_inline, text_node
from ..models.enums import TEXTBLOCK_KINDS, MarkKind, NodeKind
from ..models.exceptions import InvalidArgument, SchemaViolation
from ..models.schema import validate_document
from ..models.selection import Position, Selection


class DocumentSerializer:
    """
    Handles serialization and deserialization of Document trees.

    Ensures round-trip consistency: serialize(deserialize(json)) == json
    and deserialize(serialize(doc)) == doc
    """

    @staticmethod
    def serialize(doc: Document) -> str:
        """
        Serialize a Document to JSON string.

        Args:
            doc: The Document to serialize.

        Returns:
            JSON string representation of the document.
        """
        return json.dumps(DocumentSerializer.doc_to_dict(doc), ensure_ascii=False, indent=2)

    @staticmethod
    def deserialize(json_str: str) -> Document:
        """
        Deserialize a JSON string to a Document.

        Raises:
            InvalidArgument: If the JSON is invalid or malformed.
            SchemaViolation: If the tree breaks the schema.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise InvalidArgument(f"Invalid JSON: {str(e)}")
        return DocumentSerializer.dict_to_doc(data)

    @staticmethod
    def doc_to_dict(doc: Document) -> dict[str, Any]:
        return {"type": "doc", "content": [DocumentSerializer.node_to_dict(b) for b in doc.blocks]}

    @staticmethod
    def dict_to_doc(data: dict[str, Any]) -> Document:
        """Convert dictionary to Document, validating it against the schema."""
        if not isinstance(data, dict) or data.get("type") != "doc":
            raise InvalidArgument("Expected a dictionary with type 'doc'")
        content = data.get("content") or []
        if not isinstance(content, list):
            raise InvalidArgument("Document content must be a list")
        blocks = tuple(DocumentSerializer.dict_to_node(item) for item in content)
        doc = Document(blocks=blocks) if blocks else Document.create_empty()
        validate_document(doc)
        return doc

    @staticmethod
    def node_to_dict(node: Node) -> dict[str, Any]:
        if node.is_text:
            result: dict[str, Any] = {"type": "text", "text": node.text}
            if node.marks:
                result["marks"] = [DocumentSerializer._mark_to_dict(m) for m in node.marks]
            return result
        result = {"type": node.kind.value}
        if node.attrs:
            result["attrs"] = dict(node.attrs)
        if node.children:
            result["content"] = [DocumentSerializer.node_to_dict(c) for c in node.children]
        return result

    @staticmethod
    def dict_to_node(data: dict[str, Any]) -> Node:
        if not isinstance(data, dict) or "type" not in data:
            raise InvalidArgument("Expected a dictionary with a 'type' field")
        try:
            kind = NodeKind(data["type"])
        except ValueError:
            raise SchemaViolation(f"Unknown node type: {data['type']!r}")

        if kind == NodeKind.TEXT:
            try:
                marks = tuple(
                    Mark(kind=MarkKind(m["type"]), value=(m.get("attrs") or {}).get("value"))
                    for m in data.get("marks", [])
                )
            except (KeyError, TypeError, ValueError) as e:
                raise SchemaViolation(f"Invalid mark: {e}")
            return text_node(str(data.get("text", "")), marks)

        children = tuple(DocumentSerializer.dict_to_node(c) for c in data.get("content", []))
        if kind in TEXTBLOCK_KINDS:
            children = normalize_inline(children)
        return Node(kind=kind, attrs=dict(data.get("attrs") or {}), children=children)

    @staticmethod
    def _mark_to_dict(mark: Mark) -> dict[str, Any]:
        result: dict[str, Any] = {"type": mark.kind.value}
        if mark.value is not None:
            result["attrs"] = {"value": mark.value}
        return result


def state_to_dict(state: EditorState) -> dict[str, Any]:
    """Editor state as a JSON-ready dictionary."""
    result = {
        "doc": DocumentSerializer.doc_to_dict(state.doc),
        "selection": state.selection.to_dict(),
    }
    if state.stored_marks is not None:
        result["stored_marks"] = [DocumentSerializer._mark_to_dict(m) for m in state.stored_marks]
    return result


def selection_from_dict(data: dict[str, Any]) -> Selection:
    """
    Build a selection from ``{"anchor": ..., "head": ...}``.

    A missing head collapses the selection onto the anchor.

    Raises:
        InvalidArgument: If the positions are malformed.
    """
    try:
        anchor = Position.coerce(data["anchor"])
        head = Position.coerce(data.get("head", data["anchor"]))
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidArgument(f"Malformed selection: {e}")
    return Selection(anchor=anchor, head=head)


def serialize_document(doc: Document) -> str:
    """Convenience function to serialize a document."""
    return DocumentSerializer.serialize(doc)


def deserialize_document(json_str: str) -> Document:
    """Convenience function to deserialize a document."""
    return DocumentSerializer.deserialize(json_str)
