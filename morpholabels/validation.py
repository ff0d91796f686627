"""
Structural checks run on an annotation before it is persisted.

Validation never raises: problems come back as data so the caller decides
whether to block a save or just show a hint.
"""
from collections.abc import Mapping
from typing import Any
import logging
from pydantic import BaseModel, Field
from morpholabels.entities.annotation import Annotation

_LOGGER = logging.getLogger(__name__)

MAX_LABEL_LENGTH = 255


class ValidationResult(BaseModel):
    """Outcome of :func:`validate_annotation`.

    Attributes:
        errors: Problems that must block persistence.
        warnings: Non-blocking remarks.
    """
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0


def validate_annotation(annotation: Annotation | Mapping[str, Any]) -> ValidationResult:
    """
    Check an annotation against the rules of its shape type.

    Errors are reported for a blank label, a missing shape type and geometry that
    violates the shape's rules. Unknown shape types and labels longer than
    255 characters only produce warnings.

    Args:
        annotation: The annotation, or a mapping readable as one (e.g. ``{'type': 'poly', 'points': [...]}``).
            Unreadable numbers in a mapping count as missing.

    Returns:
        The errors and warnings found.
    """
    if isinstance(annotation, Mapping):
        annotation = Annotation.model_validate(annotation)
    elif not isinstance(annotation, Annotation):
        _LOGGER.debug(f"Cannot validate {annotation!r}: not an annotation")
        return ValidationResult(errors=['Annotation must be an object'])

    result = ValidationResult()

    if not annotation.label or not annotation.label.strip():
        result.errors.append('Label is required')

    if not annotation.shape_type:
        result.errors.append('Annotation type is required')

    geometry = annotation.geometry
    if geometry is None:
        result.warnings.append('Unknown annotation type')
    else:
        result.errors.extend(geometry.errors())

    if annotation.label and len(annotation.label) > MAX_LABEL_LENGTH:
        result.warnings.append('Label is very long and may be truncated')

    return result
