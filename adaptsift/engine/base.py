"""Engine interface for SIFT job processors."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List

import numpy as np


DESCRIPTOR_SIZE = 128


class EngineError(RuntimeError):
    """Raised by an engine when it cannot configure or process a job."""


class JobStateError(EngineError):
    """Raised when a job is collected more than once or after release."""


class NormMode(Enum):
    CLASSIC = "classic"
    ROOT_SIFT = "root_sift"


class FilterSorting(Enum):
    RANDOM_SCALE = "random_scale"
    LARGEST_SCALE_FIRST = "largest_scale_first"
    SMALLEST_SCALE_FIRST = "smallest_scale_first"


class SiftMode(Enum):
    POPSIFT = "popsift"
    OPENCV = "opencv"
    VLFEAT = "vlfeat"


@dataclass(frozen=True)
class EngineConfig:
    """Configuration handed to an engine on construction or reconfiguration."""
    threshold: float
    edge_limit: float
    norm_mode: NormMode = NormMode.CLASSIC
    filter_sorting: FilterSorting = FilterSorting.LARGEST_SCALE_FIRST
    mode: SiftMode = SiftMode.OPENCV
    downsampling: float = -1.0


@dataclass
class Keypoint:
    """A detected location with one descriptor per assigned orientation."""
    x: float
    y: float
    sigma: float
    orientations: List[float] = field(default_factory=list)
    descriptors: List[np.ndarray] = field(default_factory=list)

    @property
    def num_orientations(self) -> int:
        return len(self.orientations)


@dataclass
class ResultSet:
    """Ordered keypoints collected from one job."""
    keypoints: List[Keypoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.keypoints)

    def __iter__(self) -> Iterator[Keypoint]:
        return iter(self.keypoints)

    @property
    def feature_count(self) -> int:
        return len(self.keypoints)

    @property
    def descriptor_count(self) -> int:
        return sum(kp.num_orientations for kp in self.keypoints)


class SiftJob(ABC):
    """One image submitted at one configuration.

    A job is collected exactly once. Use it as a context manager so that it is
    released on every exit path.
    """

    def __init__(self):
        self._collected = False
        self._released = False

    def collect(self) -> ResultSet:
        """Block until the job finishes and hand its result to the caller."""
        if self._released:
            raise JobStateError("Job has already been released")
        if self._collected:
            raise JobStateError("Job has already been collected")
        self._collected = True
        return self._run()

    @abstractmethod
    def _run(self) -> ResultSet:
        pass

    def release(self):
        """Drop any resources held by the job."""
        self._released = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()


class SiftEngine(ABC):
    """Stateful feature-extraction engine.

    Engines are constructed once with an initial configuration and afterwards
    reconfigured in place through ``configure``.
    """

    def __init__(self, config: EngineConfig):
        self.config = config

    @abstractmethod
    def configure(self, config: EngineConfig, force_reallocate: bool = False) -> None:
        """Apply a new configuration. Must be idempotent for identical inputs."""
        pass

    @abstractmethod
    def submit(self, width: int, height: int, pixels: np.ndarray) -> SiftJob:
        """Queue one row-major 8-bit image of the given size."""
        pass

    def close(self) -> None:
        """Release engine resources. Called once at shutdown."""
        pass


def check_pixel_buffer(width: int, height: int, pixels: np.ndarray) -> np.ndarray:
    """Return ``pixels`` as a (height, width) uint8 view or raise EngineError."""
    buffer = np.asarray(pixels)
    if buffer.dtype != np.uint8:
        raise EngineError(f"Expected uint8 pixels, got {buffer.dtype}")
    if width <= 0 or height <= 0 or buffer.size != width * height:
        raise EngineError(
            f"Pixel buffer of size {buffer.size} does not match {width}x{height} image"
        )
    return buffer.reshape(height, width)
