"""Flatten keypoint result sets into aligned point and descriptor arrays."""

from typing import NamedTuple

import numpy as np

from adaptsift.engine.base import DESCRIPTOR_SIZE, ResultSet


class FlattenedOutput(NamedTuple):
    """Row i of ``points`` and ``descriptors`` describe the same (keypoint, orientation).

    points: (N, 4) float32 rows of x, y, scale, orientation.
    descriptors: (N, 128) float32.
    """
    points: np.ndarray
    descriptors: np.ndarray

    @property
    def num_features(self) -> int:
        return len(self.points)


def round_half_away(value: float) -> float:
    """Round to nearest integer, ties away from zero."""
    return float(np.copysign(np.floor(abs(value) + 0.5), value))


def flatten(result_set: ResultSet, width: int, height: int) -> FlattenedOutput:
    """Emit one point and one descriptor per orientation of every keypoint.

    Rounded coordinates are clamped to ``width - 1`` / ``height - 1`` so that
    rounding never lands on the exclusive image bound. Descriptors are copied
    as-is.
    """
    total = result_set.descriptor_count
    points = np.empty((total, 4), dtype=np.float32)
    descriptors = np.empty((total, DESCRIPTOR_SIZE), dtype=np.float32)

    index = 0
    for kp in result_set:
        x = min(round_half_away(kp.x), width - 1)
        y = min(round_half_away(kp.y), height - 1)
        for k, orientation in enumerate(kp.orientations):
            points[index] = (x, y, kp.sigma, orientation)
            descriptors[index] = kp.descriptors[k]
            index += 1

    return FlattenedOutput(points, descriptors)
