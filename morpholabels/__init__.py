"""
morpholabels: client for the media labels (annotations) of a specimen data-curation platform.
"""

import importlib.metadata
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .api.client import Api
    from .api.scope import AnnotationScope
    from .entities.annotation import Annotation
    from .entities.annotation_stats import AnnotationStats
    from .factory import make_default_annotation
    from .validation import ValidationResult, validate_annotation

else:
    import lazy_loader as lazy

    __getattr__, __dir__, __all__ = lazy.attach(
        __name__,
        submod_attrs={
            "api.client": ["Api"],
            "api.scope": ["AnnotationScope"],
            "entities.annotation": ["Annotation"],
            "entities.annotation_stats": ["AnnotationStats"],
            "factory": ["make_default_annotation"],
            "validation": ["ValidationResult", "validate_annotation"],
        },
    )

__version__ = importlib.metadata.version("morpholabels")
