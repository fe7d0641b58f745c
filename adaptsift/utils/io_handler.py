"""I/O handling for images, feature files, and JSON output."""

import cv2
import json
import numpy as np
from pathlib import Path
from typing import Dict, Optional

from adaptsift.flatten import FlattenedOutput


class JSONWriter:
    """Write run summaries to JSON."""

    @staticmethod
    def save_results(output_dict: Dict, output_path: str, indent: int = 2):
        """Save results to JSON file."""
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(output_dict, f, indent=indent)

    @staticmethod
    def load_results(input_path: str) -> Dict:
        """Load results from JSON file."""
        with open(input_path, 'r') as f:
            return json.load(f)


def save_features(output_path: str, features: FlattenedOutput) -> Path:
    """Save points and descriptors to a compressed .npz file."""
    output_path = Path(output_path).with_suffix('.npz')
    output_path.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(output_path, points=features.points,
                        descriptors=features.descriptors)
    return output_path


def load_features(input_path: str) -> FlattenedOutput:
    """Load points and descriptors saved by ``save_features``."""
    with np.load(input_path) as data:
        return FlattenedOutput(data['points'], data['descriptors'])


def save_image(image: np.ndarray, output_path: str):
    """Save image to file."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(output_path, image)


def load_image(image_path: str) -> Optional[np.ndarray]:
    """Load image from file as 8-bit grayscale."""
    return cv2.imread(str(image_path), cv2.IMREAD_GRAYSCALE)
