"""Access to the labels endpoints of the backend."""

from .client import Api
from .scope import AnnotationScope

__all__ = [
    'Api',
    'AnnotationScope',
]
