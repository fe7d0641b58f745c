"""Basic usage example for adaptsift."""

import cv2
from adaptsift import extract
from adaptsift.preprocessing.image import prepare_image
from adaptsift.utils.visualization import draw_keypoints
from adaptsift.utils.io_handler import save_image, save_features


def main():
    """Extract features from one image."""
    # Load image
    image_path = "test_data/frames/sample_frame.jpg"
    image = cv2.imread(image_path)

    if image is None:
        print(f"Error: Could not load image from {image_path}")
        return

    gray = prepare_image(image)

    # Extract at least 2000 features
    print("Extracting features...")
    result = extract(gray, peak_threshold=0.04, edge_threshold=10.0,
                     target_num_features=2000, use_root=True, downsampling=-1.0)
    if result is None:
        print("Empty image, nothing extracted")
        return
    print(f"Extracted {result.num_features} features")

    # Save output
    features_path = save_features("output/basic_features", result)
    output_path = "output/basic_keypoints.jpg"
    save_image(draw_keypoints(image, result.points), output_path)
    print(f"Results saved to {features_path} and {output_path}")


if __name__ == "__main__":
    main()
