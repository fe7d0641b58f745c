"""
adaptsift - Adaptive SIFT feature extraction

Drives a shared SIFT engine and lowers the peak threshold until enough
keypoints are found.
"""

from .context import ExtractionContext, ExtractionParameters
from .core import AdaptiveExtractor, create_extractor, extract, get_default_extractor
from .dispatcher import SerializedDispatcher
from .flatten import FlattenedOutput, flatten

__all__ = [
    'AdaptiveExtractor',
    'ExtractionContext',
    'ExtractionParameters',
    'FlattenedOutput',
    'SerializedDispatcher',
    'create_extractor',
    'extract',
    'flatten',
    'get_default_extractor',
]
__version__ = '1.0.0'
