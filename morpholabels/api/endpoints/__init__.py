"""API endpoint handlers."""

from .annotations_api import AnnotationsApi

__all__ = [
    'AnnotationsApi',
]
