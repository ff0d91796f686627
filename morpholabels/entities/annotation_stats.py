from collections import Counter
from typing import Iterable
from pydantic import Field
from .base_entity import BaseEntity
from .annotation import Annotation


class AnnotationStats(BaseEntity):
    """Aggregate counts over the annotations of one media item.

    Attributes:
        total: Number of annotations.
        by_type: Count per shape type (``'unknown'`` for annotations without one).
        by_user: Count per author (``'Unknown'`` for annotations without one).
        has_unsaved: Number of annotations without a server-assigned id.
        ok: False when the annotations could not be loaded. The counts are then all zero.
        error: Description of the failure when ``ok`` is False.
    """

    total: int = 0
    by_type: dict[str, int] = Field(default_factory=dict, alias='byType')
    by_user: dict[str, int] = Field(default_factory=dict, alias='byUser')
    has_unsaved: int = Field(default=0, alias='hasUnsaved')
    ok: bool = True
    error: str | None = None

    @classmethod
    def from_annotations(cls, annotations: Iterable[Annotation]) -> 'AnnotationStats':
        annotations = list(annotations)
        by_type = Counter(ann.shape_type or 'unknown' for ann in annotations)
        by_user = Counter(ann.user_name or 'Unknown' for ann in annotations)
        has_unsaved = sum(1 for ann in annotations if not ann.annotation_id)
        return cls(total=len(annotations),
                   by_type=dict(by_type),
                   by_user=dict(by_user),
                   has_unsaved=has_unsaved)

    @classmethod
    def failed(cls, error: str) -> 'AnnotationStats':
        """Zeroed statistics standing in for annotations that could not be loaded."""
        return cls(ok=False, error=error)
