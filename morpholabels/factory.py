from collections.abc import Mapping
from typing import Any
from morpholabels.entities.annotation import Annotation
from morpholabels.entities.annotations.geometry import ShapeType, parse_shape_type
from morpholabels.utils.number_utils import Number

DEFAULT_RECT_SIZE = (100, 50)
"""Width and height of a newly drawn rectangle."""


def _position_xy(position: Mapping[str, Number] | tuple[Number, Number] | None) -> tuple[Number, Number]:
    if position is None:
        return 0, 0
    if isinstance(position, Mapping):
        return position.get('x', 0), position.get('y', 0)
    x, y = position
    return x, y


def make_default_annotation(shape_type: ShapeType | str,
                            position: Mapping[str, Number] | tuple[Number, Number] | None = None
                            ) -> Annotation:
    """
    Create a new, unsaved annotation of the given shape at a canvas position.

    Args:
        shape_type: ``'rect'``, ``'point'`` or ``'poly'``.
        position: Anchor position, as ``(x, y)`` or ``{'x': ..., 'y': ...}``. Defaults to the origin.

    Returns:
        An annotation without id or label. Rectangles are 100x50, polygons are a
        small triangle. An unknown shape type gives an annotation without
        geometry, which fails validation.
    """
    x, y = _position_xy(position)
    shape = parse_shape_type(shape_type)
    fields: dict[str, Any] = dict(
        annotation_id=None,
        label='',
        description='',
        shape_type=shape.value if shape is not None else shape_type,
        x=x,
        y=y,
        tx=x + 10,
        ty=y - 10,
        tw=1,
        th=1,
        show_default_text=1,
        locked=0,
    )

    if shape == ShapeType.RECT:
        fields.update(w=DEFAULT_RECT_SIZE[0], h=DEFAULT_RECT_SIZE[1])
    elif shape == ShapeType.POINT:
        fields.update(w=1, h=1)
    elif shape == ShapeType.POLY:
        fields.update(w=1, h=1,
                      points=[x, y,
                              x + 50, y,
                              x + 25, y + 50])

    return Annotation(**fields)
