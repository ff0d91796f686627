# filepath: morpholabels/entities/annotation.py
"""Annotation entity module.

This module defines the Annotation model: a labeled rectangle, point or polygon
overlaid on a media item, as the client works with it in memory.
"""

from enum import Enum
from typing import Annotated, Any, TypeAlias
from pydantic import BeforeValidator, Field
from .base_entity import BaseEntity
from .annotations.geometry import Geometry, geometry_for
from morpholabels.utils.number_utils import LenientNumber


def _as_optional_text(value: Any) -> str | None:
    if isinstance(value, Enum):
        value = value.value
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _as_text(value: Any) -> str:
    text = _as_optional_text(value)
    return '' if text is None else text


def _as_identifier(value: Any) -> int | str | None:
    # Ids are integers on the server but may travel as strings.
    if value is None or isinstance(value, (int, str)):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return str(value)


# Fields the server stores loosely typed: any value is read, never rejected.
Text: TypeAlias = Annotated[str, BeforeValidator(_as_text)]
OptionalText: TypeAlias = Annotated[str | None, BeforeValidator(_as_optional_text)]
Identifier: TypeAlias = Annotated[int | str | None, BeforeValidator(_as_identifier)]


class Annotation(BaseEntity):
    """Pydantic Model representing an annotation (label) on a media item.

    Fields can be given either by name or by their public key (``type``,
    ``showDefaultText``, ``contextType``, ``contextId``). Values are read
    leniently, as the server stores them loosely typed: numeric fields accept
    numeric strings and hold None when unreadable, text fields accept any value.

    Attributes:
        annotation_id: Server-assigned identifier. None until the annotation is first saved.
        label: Text of the label. Required (non-blank) for persistence.
        description: Optional free text.
        shape_type: Geometry kind: ``'rect'``, ``'point'`` or ``'poly'``.
            Other values are kept but treated as unknown.
        x: Anchor X coordinate (top-left corner for rectangles).
        y: Anchor Y coordinate.
        w: Width. Meaningful for rectangles only.
        h: Height. Meaningful for rectangles only.
        points: Flat ``[x0, y0, x1, y1, ...]`` list of polygon vertices.
        tx: X position of the label text box.
        ty: Y position of the label text box.
        tw: Width of the label text box.
        th: Height of the label text box.
        show_default_text: 1 when the label text is displayed, 0 otherwise.
        locked: 1 when the annotation is locked against edits.
        user_name: Author, as reported by the server.
        created_on: Creation time, as reported by the server.
        updated_on: Last update time, as reported by the server.
        link_id: Identifier of the parent entity instance (e.g. a media view) the annotation belongs to.
        context_type: Secondary scoping dimension (e.g. a matrix cell vs. a media view).
        context_id: Identifier within ``context_type``.
    """

    annotation_id: Identifier = None
    label: Text = ''
    description: Text = ''
    shape_type: OptionalText = Field(default=None, alias='type')
    x: LenientNumber = None
    y: LenientNumber = None
    w: LenientNumber = None
    h: LenientNumber = None
    points: Any = None
    tx: LenientNumber = None
    ty: LenientNumber = None
    tw: LenientNumber = None
    th: LenientNumber = None
    show_default_text: LenientNumber = Field(default=1, alias='showDefaultText')
    locked: LenientNumber = 0
    user_name: OptionalText = None
    created_on: Any = None
    updated_on: Any = None
    link_id: Identifier = None
    context_type: OptionalText = Field(default=None, alias='contextType')
    context_id: Identifier = Field(default=None, alias='contextId')

    @property
    def is_saved(self) -> bool:
        """Whether the annotation has been persisted (has a server-assigned id)."""
        return self.annotation_id is not None

    @property
    def geometry(self) -> Geometry | None:
        """The shape-specific geometry, or None when the shape type is missing or unknown."""
        return geometry_for(self)
