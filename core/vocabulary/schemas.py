"""
Vocabulary Pydantic Schemas
Portable Text document shapes and vocabulary items.

Field names on the wire follow Portable Text (``_type``, ``_key``,
``markDefs``, ``_ref``, ``_id``); Python attributes use snake_case aliases.
"""
from typing import Annotated, Any, Iterable, List, Optional, Union

from pydantic import BaseModel, Discriminator, Field, Tag, TypeAdapter, field_validator


# ==================== CONSTANTS ====================

SPAN_TYPE = "span"
BLOCK_TYPE = "block"
REFERENCE_TYPE = "reference"


class PortableTextModel(BaseModel):
    """Base for all document values: immutable, alias-aware, keeps unknown fields."""

    class Config:
        populate_by_name = True
        extra = "allow"
        frozen = True


# ==================== VOCABULARY ====================

class VocabularyItem(PortableTextModel):
    """A glossary entry eligible to be auto-linked."""
    id: str = Field(..., alias="_id", description="Document id in the vocabulary store")
    type: str = Field(..., alias="_type", description="Namespaced schema type, e.g. 'glossary.vocabularyItem'")
    word: str = Field(..., description="Term to look for in text")

    @property
    def annotation_type(self) -> str:
        """Schema type with any namespace prefix stripped."""
        return self.type.split(".")[-1]


# ==================== DOCUMENT ====================

class Reference(PortableTextModel):
    """Pointer from an annotation to an external document."""
    ref: str = Field(..., alias="_ref")
    type: str = Field(default=REFERENCE_TYPE, alias="_type")


class AnnotationDefinition(PortableTextModel):
    """
    Block-scoped mark definition.

    Vocabulary annotations carry ``item``; other kinds (links etc.)
    keep their own payload as extra fields.
    """
    key: str = Field(..., alias="_key")
    type: str = Field(..., alias="_type")
    item: Optional[Reference] = None


class Span(PortableTextModel):
    """A run of text with decorator and annotation marks."""
    type: str = Field(default=SPAN_TYPE, alias="_type")
    key: Optional[str] = Field(default=None, alias="_key")
    text: str
    marks: List[str] = Field(default_factory=list)


class OpaqueChild(PortableTextModel):
    """Any inline child that is not a well-formed span. Never inspected."""
    type: Optional[Any] = Field(default=None, alias="_type")
    key: Optional[Any] = Field(default=None, alias="_key")


def _child_tag(value: Any) -> str:
    """Pick the child variant. Span-typed children with a broken shape go opaque."""
    if isinstance(value, Span):
        return "span"
    if isinstance(value, BaseModel):
        return "opaque"
    if not isinstance(value, dict):
        return "opaque"

    child_type = value.get("_type", value.get("type"))
    if child_type != SPAN_TYPE:
        return "opaque"
    key = value.get("_key", value.get("key"))
    if key is not None and not isinstance(key, str):
        return "opaque"
    if not isinstance(value.get("text"), str):
        return "opaque"
    marks = value.get("marks", [])
    if not isinstance(marks, list) or not all(isinstance(m, str) for m in marks):
        return "opaque"
    return "span"


Child = Annotated[
    Union[
        Annotated[Span, Tag("span")],
        Annotated[OpaqueChild, Tag("opaque")],
    ],
    Discriminator(_child_tag),
]


class Block(PortableTextModel):
    """A content block: ordered children plus its own mark definitions."""
    key: Optional[str] = Field(default=None, alias="_key")
    type: str = Field(default=BLOCK_TYPE, alias="_type")
    style: Optional[str] = None
    mark_defs: List[AnnotationDefinition] = Field(default_factory=list, alias="markDefs")
    children: List[Child] = Field(default_factory=list)

    @field_validator("children", "mark_defs", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return [] if v is None else v


class OpaqueBlock(PortableTextModel):
    """
    A block that cannot be annotated safely.

    Null children, a non-list ``markDefs`` or a mark definition without a
    string ``_key``/``_type`` land here. Never inspected; every field is kept
    as received.
    """
    key: Optional[Any] = Field(default=None, alias="_key")
    type: Optional[Any] = Field(default=None, alias="_type")


def _wire_value(value: dict, alias: str, name: str, default: Any = None) -> Any:
    if alias in value:
        return value[alias]
    return value.get(name, default)


def _is_reference(value: Any) -> bool:
    if value is None or isinstance(value, Reference):
        return True
    if not isinstance(value, dict):
        return False
    return (
        isinstance(_wire_value(value, "_ref", "ref"), str)
        and isinstance(_wire_value(value, "_type", "type", REFERENCE_TYPE), str)
    )


def _is_definition(value: Any) -> bool:
    if isinstance(value, AnnotationDefinition):
        return True
    if not isinstance(value, dict):
        return False
    return (
        isinstance(_wire_value(value, "_key", "key"), str)
        and isinstance(_wire_value(value, "_type", "type"), str)
        and _is_reference(value.get("item"))
    )


def _block_tag(value: Any) -> str:
    """Pick the block variant. Anything a Block would reject goes opaque."""
    if isinstance(value, Block):
        return "block"
    if isinstance(value, BaseModel) or not isinstance(value, dict):
        return "opaque"

    for alias, name in (("_key", "key"), ("style", "style")):
        field = _wire_value(value, alias, name)
        if field is not None and not isinstance(field, str):
            return "opaque"
    if not isinstance(_wire_value(value, "_type", "type", BLOCK_TYPE), str):
        return "opaque"

    children = value.get("children", [])
    if not isinstance(children, list):
        return "opaque"
    if not all(isinstance(c, (dict, Span, OpaqueChild)) for c in children):
        return "opaque"

    mark_defs = _wire_value(value, "markDefs", "mark_defs")
    if mark_defs is None:
        return "block"
    if not isinstance(mark_defs, list) or not all(_is_definition(d) for d in mark_defs):
        return "opaque"
    return "block"


DocumentBlock = Annotated[
    Union[
        Annotated[Block, Tag("block")],
        Annotated[OpaqueBlock, Tag("opaque")],
    ],
    Discriminator(_block_tag),
]


_document_adapter = TypeAdapter(List[DocumentBlock])


def parse_document(data: Iterable[dict]) -> List[DocumentBlock]:
    """Validate a JSON-compatible list of blocks."""
    return _document_adapter.validate_python(list(data))


def dump_document(blocks: Iterable[DocumentBlock]) -> List[dict]:
    """Serialize blocks back to Portable Text JSON, omitting fields the input never had."""
    return _document_adapter.dump_python(list(blocks), by_alias=True, exclude_unset=True)


# ==================== API ====================

class AnnotateRequest(BaseModel):
    """Request to annotate a document with vocabulary items."""
    content: List[DocumentBlock] = Field(..., description="Portable Text blocks")
    vocabulary_ids: List[str] = Field(default_factory=list, description="Vocabulary item ids to link")


class AnnotateResponse(BaseModel):
    """Annotated document."""
    content: List[DocumentBlock]
    annotation_count: int
