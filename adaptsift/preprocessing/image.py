"""Image preparation before extraction."""

import cv2
import numpy as np
from skimage.util import img_as_ubyte


def prepare_image(image: np.ndarray) -> np.ndarray:
    """
    Convert an image to the 8-bit single-channel layout the extractor expects.

    Args:
        image: BGR, BGRA or grayscale image; uint8 or float in [0, 1]

    Returns:
        (height, width) uint8 image
    """
    image = np.asarray(image)
    if image.size == 0:
        return image.reshape(image.shape[:2]).astype(np.uint8)

    if image.dtype != np.uint8:
        image = img_as_ubyte(image)

    if image.ndim == 3:
        channels = image.shape[2]
        if channels == 1:
            image = image[:, :, 0]
        elif channels == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        elif channels == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        else:
            raise ValueError(f"Unsupported number of channels: {channels}")
    elif image.ndim != 2:
        raise ValueError(f"Unsupported image shape: {image.shape}")

    return np.ascontiguousarray(image)


def normalized_image_coordinates(points: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Map pixel points to coordinates normalized by the largest image side.

    The image centre maps to (0, 0) and the longest side spans [-0.5, 0.5].
    Scale is divided by the same factor; orientation is left unchanged.
    """
    size = float(max(width, height))
    normalized = np.array(points, dtype=np.float32, copy=True)
    if normalized.size == 0:
        return normalized.reshape(0, 4)
    normalized[:, 0] = (normalized[:, 0] + 0.5 - width / 2.0) / size
    normalized[:, 1] = (normalized[:, 1] + 0.5 - height / 2.0) / size
    normalized[:, 2] = normalized[:, 2] / size
    return normalized
