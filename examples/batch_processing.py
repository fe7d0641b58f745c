"""Batch processing example for multiple frames."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from adaptsift import create_extractor
from adaptsift.config import load_config, schedule_kwargs, sift_kwargs
from adaptsift.engine.opencv_engine import OpenCVSiftEngine
from adaptsift.utils.io_handler import load_image, save_features, JSONWriter
from adaptsift.utils.logger import setup_from_config
from adaptsift.utils.metrics import PerformanceMetrics


def process_frame(frame_path, extractor, kwargs, output_dir):
    """Process a single frame."""
    image = load_image(str(frame_path))
    if image is None:
        return None
    result = extractor.extract(image, **kwargs)
    if result is None:
        return None
    save_features(str(output_dir / frame_path.stem), result)
    return {
        'frame_name': frame_path.name,
        'num_features': result.num_features
    }


def main():
    """Extract features from many frames with a shared extractor."""
    config = load_config("config.yaml") if Path("config.yaml").exists() else load_config()
    logger = setup_from_config(config)
    kwargs = sift_kwargs(config)

    extractor = create_extractor(OpenCVSiftEngine, **schedule_kwargs(config))
    metrics = PerformanceMetrics()

    # Get all frames
    frames_dir = Path("test_data/frames")
    output_dir = Path("output/features")
    frame_files = sorted(frames_dir.glob("*.jpg"))

    logger.info(f"Processing {len(frame_files)} frames...")

    metrics.start_timer('batch')
    with ThreadPoolExecutor(max_workers=4) as pool:
        futures = [pool.submit(process_frame, path, extractor, kwargs, output_dir)
                   for path in frame_files]
        results = []
        for path, future in zip(frame_files, futures):
            result = future.result()
            if result is None:
                logger.warning(f"Could not process {path}")
                continue
            logger.info(f"{result['frame_name']}: {result['num_features']} features")
            results.append(result)
    duration = metrics.stop_timer('batch')

    # Save results
    JSONWriter.save_results({'frames': results, 'duration_ms': duration},
                            "output/batch_results.json")
    logger.info("Batch processing complete!")


if __name__ == "__main__":
    main()
