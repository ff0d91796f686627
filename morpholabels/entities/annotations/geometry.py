"""
Geometry variants of an annotation.

Each shape type has its own variant holding only the fields that shape uses,
its validity rules and the shape-specific part of the wire record. The
:data:`GEOMETRY_TYPES` registry maps every :class:`ShapeType` to its variant.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, TypeAlias, TYPE_CHECKING
from morpholabels.utils.number_utils import coerce_number, is_number, number_or

if TYPE_CHECKING:
    from morpholabels.entities.annotation import Annotation


class ShapeType(str, Enum):
    RECT = 'rect'
    POINT = 'point'
    POLY = 'poly'


def _coordinate_errors(x: Any, y: Any, shape_name: str) -> list[str]:
    errors = []
    if not is_number(x) or x < 0:
        errors.append(f'Invalid X coordinate for {shape_name}')
    if not is_number(y) or y < 0:
        errors.append(f'Invalid Y coordinate for {shape_name}')
    return errors


@dataclass(frozen=True)
class RectGeometry:
    shape_type: ClassVar[ShapeType] = ShapeType.RECT

    x: Any = None
    y: Any = None
    w: Any = None
    h: Any = None

    @classmethod
    def from_annotation(cls, annotation: 'Annotation') -> 'RectGeometry':
        return cls(x=annotation.x, y=annotation.y, w=annotation.w, h=annotation.h)

    def errors(self) -> list[str]:
        errors = _coordinate_errors(self.x, self.y, 'rectangle')
        if not is_number(self.w) or self.w <= 0:
            errors.append('Invalid width for rectangle')
        if not is_number(self.h) or self.h <= 0:
            errors.append('Invalid height for rectangle')
        return errors

    def wire_fields(self) -> dict[str, Any]:
        return {'w': number_or(self.w, 1),
                'h': number_or(self.h, 1)}


@dataclass(frozen=True)
class PointGeometry:
    shape_type: ClassVar[ShapeType] = ShapeType.POINT

    x: Any = None
    y: Any = None

    @classmethod
    def from_annotation(cls, annotation: 'Annotation') -> 'PointGeometry':
        return cls(x=annotation.x, y=annotation.y)

    def errors(self) -> list[str]:
        return _coordinate_errors(self.x, self.y, 'point')

    def wire_fields(self) -> dict[str, Any]:
        # The server stores a size for every label, points included.
        return {'w': 1, 'h': 1}


@dataclass(frozen=True)
class PolygonGeometry:
    MIN_COORDINATES: ClassVar[int] = 6
    shape_type: ClassVar[ShapeType] = ShapeType.POLY

    points: Any = None

    @classmethod
    def from_annotation(cls, annotation: 'Annotation') -> 'PolygonGeometry':
        return cls(points=annotation.points)

    def errors(self) -> list[str]:
        if not isinstance(self.points, list):
            return ['Polygon must have points array']
        errors = []
        if len(self.points) < self.MIN_COORDINATES:
            errors.append(f'Polygon must have at least 3 points ({self.MIN_COORDINATES} coordinates)')
        if len(self.points) % 2 != 0:
            errors.append('Polygon points must be in x,y pairs')
        return errors

    def wire_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {'w': 1, 'h': 1}
        if isinstance(self.points, list):
            # Non-numeric entries are sent as null.
            fields['points'] = [coerce_number(p) for p in self.points]
        return fields


Geometry: TypeAlias = RectGeometry | PointGeometry | PolygonGeometry

GEOMETRY_TYPES: dict[ShapeType, type[Geometry]] = {
    ShapeType.RECT: RectGeometry,
    ShapeType.POINT: PointGeometry,
    ShapeType.POLY: PolygonGeometry,
}


def parse_shape_type(value: Any) -> ShapeType | None:
    """The :class:`ShapeType` named by ``value``, or None for unknown/missing shape types."""
    if isinstance(value, ShapeType):
        return value
    try:
        return ShapeType(value)
    except ValueError:
        return None


def geometry_for(annotation: 'Annotation') -> Geometry | None:
    """
    Build the geometry variant matching the annotation's shape type.

    Returns:
        The variant, or None when the shape type is missing or unknown.
    """
    shape = parse_shape_type(annotation.shape_type)
    if shape is None:
        return None
    return GEOMETRY_TYPES[shape].from_annotation(annotation)
