"""Reference SIFT engine backed by OpenCV."""

import logging
from itertools import groupby
from typing import List, Optional, Tuple

import cv2
import numpy as np

from adaptsift.engine.base import (
    EngineConfig, EngineError, FilterSorting, Keypoint, NormMode, ResultSet,
    SiftEngine, SiftJob, SiftMode, check_pixel_buffer,
)

logger = logging.getLogger(__name__)


def _detector_params(config: EngineConfig) -> Tuple[float, float]:
    return config.threshold, config.edge_limit


class OpenCVSiftJob(SiftJob):
    """Job holding the detector and configuration it was submitted with."""

    def __init__(self, detector, config: EngineConfig, image: np.ndarray,
                 rng: Optional[np.random.Generator] = None):
        super().__init__()
        self.detector = detector
        self.config = config
        self.image = image
        self.rng = rng or np.random.default_rng()

    def _run(self) -> ResultSet:
        # OpenCV doubles the base image itself, which matches downsampling=-1.
        scale = 2.0 ** (-self.config.downsampling - 1.0)
        image = self.image
        if scale != 1.0:
            height, width = image.shape
            dsize = (int(round(width * scale)), int(round(height * scale)))
            if dsize[0] == 0 or dsize[1] == 0:
                return ResultSet()
            interpolation = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_LINEAR
            image = cv2.resize(image, dsize, interpolation=interpolation)

        cv_keypoints, descriptors = self.detector.detectAndCompute(image, None)
        if descriptors is None or len(cv_keypoints) == 0:
            return ResultSet()

        descriptors = normalize_descriptors(descriptors, self.config.norm_mode)
        keypoints = group_orientations(cv_keypoints, descriptors, scale)
        return ResultSet(sort_keypoints(keypoints, self.config.filter_sorting, self.rng))

    def release(self):
        super().release()
        self.image = None
        self.detector = None


class OpenCVSiftEngine(SiftEngine):
    """SIFT engine on ``cv2.SIFT_create``.

    The detector is rebuilt only when detector parameters change or when
    ``force_reallocate`` is set; other settings are applied per job.
    """

    def __init__(self, config: EngineConfig, seed: Optional[int] = None):
        super().__init__(config)
        self._check_mode(config)
        self.rng = np.random.default_rng(seed)
        self.allocations = 0
        self._detector = None
        self._allocate(config)

    @staticmethod
    def _check_mode(config: EngineConfig):
        if config.mode is not SiftMode.OPENCV:
            raise EngineError(f"OpenCVSiftEngine only supports {SiftMode.OPENCV}, got {config.mode}")

    def _allocate(self, config: EngineConfig):
        try:
            self._detector = cv2.SIFT_create(
                contrastThreshold=config.threshold,
                edgeThreshold=config.edge_limit,
            )
        except cv2.error as e:
            raise EngineError(f"Failed to create SIFT detector: {e}") from e
        self.allocations += 1
        logger.debug("Allocated SIFT detector (threshold=%s, edge=%s)",
                     config.threshold, config.edge_limit)

    def configure(self, config: EngineConfig, force_reallocate: bool = False) -> None:
        self._check_mode(config)
        if force_reallocate or _detector_params(config) != _detector_params(self.config):
            self._allocate(config)
        self.config = config

    def submit(self, width: int, height: int, pixels: np.ndarray) -> OpenCVSiftJob:
        if self._detector is None:
            raise EngineError("Engine has been closed")
        image = check_pixel_buffer(width, height, pixels)
        return OpenCVSiftJob(self._detector, self.config, image, self.rng)

    def close(self) -> None:
        self._detector = None


def normalize_descriptors(descriptors: np.ndarray, norm_mode: NormMode) -> np.ndarray:
    """Normalize descriptors to unit length (classic) or apply RootSIFT."""
    desc = descriptors.astype(np.float32)
    if norm_mode is NormMode.ROOT_SIFT:
        l1 = np.abs(desc).sum(axis=1, keepdims=True)
        desc = np.sqrt(desc / np.maximum(l1, 1e-12))
    else:
        l2 = np.linalg.norm(desc, axis=1, keepdims=True)
        desc = desc / np.maximum(l2, 1e-12)
    return desc


def group_orientations(cv_keypoints, descriptors: np.ndarray, scale: float = 1.0) -> List[Keypoint]:
    """Merge OpenCV's per-orientation duplicates into multi-orientation keypoints.

    OpenCV emits one keypoint per orientation and sorts duplicates next to each
    other, so consecutive entries with the same position and size belong to
    one detection.
    """
    def location(index):
        kp = cv_keypoints[index]
        return kp.pt[0], kp.pt[1], kp.size

    keypoints = []
    for (x, y, size), indices in groupby(range(len(cv_keypoints)), key=location):
        indices = list(indices)
        keypoints.append(Keypoint(
            x=x / scale,
            y=y / scale,
            sigma=size / (2.0 * scale),
            orientations=[float(np.deg2rad(cv_keypoints[i].angle)) for i in indices],
            descriptors=[descriptors[i] for i in indices],
        ))
    return keypoints


def sort_keypoints(keypoints: List[Keypoint], sorting: FilterSorting,
                   rng: np.random.Generator) -> List[Keypoint]:
    if sorting is FilterSorting.LARGEST_SCALE_FIRST:
        return sorted(keypoints, key=lambda kp: kp.sigma, reverse=True)
    if sorting is FilterSorting.SMALLEST_SCALE_FIRST:
        return sorted(keypoints, key=lambda kp: kp.sigma)
    return [keypoints[i] for i in rng.permutation(len(keypoints))]
