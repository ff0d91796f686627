"""morpholabels entities package."""

from .annotation import Annotation
from .annotation_stats import AnnotationStats
from .base_entity import BaseEntity
from .annotations.geometry import PointGeometry, PolygonGeometry, RectGeometry, ShapeType

__all__ = [
    'Annotation',
    'AnnotationStats',
    'BaseEntity',
    'PointGeometry',
    'PolygonGeometry',
    'RectGeometry',
    'ShapeType',
]
