"""Visualization utilities for debugging and display."""

import cv2
import numpy as np
from typing import Tuple


def draw_keypoints(image: np.ndarray, points: np.ndarray,
                  color: Tuple[int, int, int] = (0, 255, 255),
                  show_orientation: bool = True) -> np.ndarray:
    """Draw extracted points (x, y, scale, orientation) on image."""
    if image.ndim == 2:
        output = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    else:
        output = image.copy()

    for x, y, scale, angle in points:
        center = (int(x), int(y))
        radius = max(int(round(scale)), 1)
        cv2.circle(output, center, radius, color, 1)
        if show_orientation:
            tip = (int(x + radius * np.cos(angle)), int(y + radius * np.sin(angle)))
            cv2.line(output, center, tip, color, 1)
    return output
