"""
adaptsift Core Extractor
Main entry point for adaptive feature extraction
"""

import atexit
import logging
import threading
from typing import Callable, Optional

import numpy as np

from adaptsift.config import DEFAULT_CONFIG
from adaptsift.context import ExtractionContext, ExtractionParameters
from adaptsift.dispatcher import SerializedDispatcher
from adaptsift.engine.base import EngineConfig, SiftEngine
from adaptsift.flatten import FlattenedOutput, flatten
from adaptsift.schedule import DECAY, FLOOR, threshold_schedule
from adaptsift.utils.metrics import PerformanceMetrics

logger = logging.getLogger(__name__)

_SIFT_DEFAULTS = DEFAULT_CONFIG["sift"]


class AdaptiveExtractor:
    """Lowers the peak threshold until enough keypoints are found"""

    def __init__(self, dispatcher: SerializedDispatcher, decay: float = DECAY,
                 floor: float = FLOOR):
        """
        Initialize extractor

        Args:
            dispatcher: Serialized access to the shared engine context
            decay: Factor applied to the peak threshold after each short attempt
            floor: Threshold below which the last result is returned as is
        """
        self.dispatcher = dispatcher
        self.decay = decay
        self.floor = floor

    def extract(self, image: np.ndarray,
                peak_threshold: float = _SIFT_DEFAULTS["peak_threshold"],
                edge_threshold: float = _SIFT_DEFAULTS["edge_threshold"],
                target_num_features: int = _SIFT_DEFAULTS["target_num_features"],
                use_root: bool = _SIFT_DEFAULTS["use_root"],
                downsampling: float = _SIFT_DEFAULTS["downsampling"]) -> Optional[FlattenedOutput]:
        """
        Extract keypoints and descriptors from a grayscale image

        Args:
            image: 2-D array (height, width), cast to uint8
            peak_threshold: Starting detection threshold
            edge_threshold: Edge response limit, fixed across attempts
            target_num_features: Minimum number of keypoints wanted
            use_root: Use RootSIFT descriptor normalization
            downsampling: Image downsampling exponent passed to the engine

        Returns:
            (points, descriptors) or None for an empty image
        """
        image = np.asarray(image)
        if image.size == 0:
            return None
        if image.ndim != 2:
            raise ValueError(f"Expected a single-channel 2-D image, got shape {image.shape}")

        pixels = np.ascontiguousarray(image, dtype=np.uint8)
        height, width = pixels.shape

        metrics = PerformanceMetrics()
        result = None
        for attempt, threshold in enumerate(
                threshold_schedule(peak_threshold, self.decay, self.floor), start=1):
            params = ExtractionParameters(threshold, edge_threshold, use_root, downsampling)
            metrics.start_timer(f"attempt_{attempt}")
            result = self.dispatcher.dispatch(params, width, height, pixels)
            duration = metrics.stop_timer(f"attempt_{attempt}")
            num_features = len(result)
            logger.debug("Attempt %d: peak_threshold=%.6g, keypoints=%d, %.1f ms",
                         attempt, threshold, num_features, duration)

            if num_features >= target_num_features:
                break
        else:
            logger.info("Peak threshold floor reached after %d attempts with %d/%d keypoints",
                        attempt, num_features, target_num_features)

        logger.debug("Extraction took %.1f ms over %d attempts", metrics.total(), attempt)
        return flatten(result, width, height)


def _default_engine_factory(config: EngineConfig) -> SiftEngine:
    from adaptsift.engine.opencv_engine import OpenCVSiftEngine
    return OpenCVSiftEngine(config)


_default_extractor: Optional[AdaptiveExtractor] = None
_default_lock = threading.Lock()


def create_extractor(engine_factory: Callable[[EngineConfig], SiftEngine],
                     lock: Optional[threading.Lock] = None,
                     decay: float = DECAY, floor: float = FLOOR) -> AdaptiveExtractor:
    """Build an extractor with its own context around ``engine_factory``."""
    context = ExtractionContext(engine_factory)
    return AdaptiveExtractor(SerializedDispatcher(context, lock), decay=decay, floor=floor)


def get_default_extractor() -> AdaptiveExtractor:
    """Process-wide extractor, created on first use and closed at exit."""
    global _default_extractor
    if _default_extractor is None:
        with _default_lock:
            if _default_extractor is None:
                extractor = create_extractor(_default_engine_factory)
                atexit.register(extractor.dispatcher.context.close)
                _default_extractor = extractor
    return _default_extractor


def extract(image: np.ndarray,
            peak_threshold: float = _SIFT_DEFAULTS["peak_threshold"],
            edge_threshold: float = _SIFT_DEFAULTS["edge_threshold"],
            target_num_features: int = _SIFT_DEFAULTS["target_num_features"],
            use_root: bool = _SIFT_DEFAULTS["use_root"],
            downsampling: float = _SIFT_DEFAULTS["downsampling"]) -> Optional[FlattenedOutput]:
    """Extract features with the process-wide extractor."""
    return get_default_extractor().extract(
        image,
        peak_threshold=peak_threshold,
        edge_threshold=edge_threshold,
        target_num_features=target_num_features,
        use_root=use_root,
        downsampling=downsampling,
    )
