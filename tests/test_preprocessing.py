"""Tests for image preparation."""

import pytest
import numpy as np
from adaptsift.preprocessing.image import normalized_image_coordinates, prepare_image


class TestPrepareImage:
    """Test conversion to 8-bit grayscale."""

    def test_grayscale_passthrough(self):
        """Test a uint8 grayscale image is returned unchanged."""
        image = np.random.randint(0, 256, (20, 30), dtype=np.uint8)
        prepared = prepare_image(image)
        assert prepared.shape == (20, 30)
        np.testing.assert_array_equal(prepared, image)

    def test_bgr_to_gray(self):
        """Test BGR images are converted to one channel."""
        image = np.zeros((20, 30, 3), dtype=np.uint8)
        image[:, :, 1] = 200
        prepared = prepare_image(image)
        assert prepared.shape == (20, 30)
        assert prepared.dtype == np.uint8
        assert prepared.max() > 0

    def test_bgra_to_gray(self):
        """Test BGRA images are converted to one channel."""
        image = np.full((10, 12, 4), 255, dtype=np.uint8)
        prepared = prepare_image(image)
        assert prepared.shape == (10, 12)
        assert prepared.min() == 255

    def test_single_channel_3d(self):
        """Test (H, W, 1) images are squeezed."""
        image = np.full((5, 6, 1), 7, dtype=np.uint8)
        assert prepare_image(image).shape == (5, 6)

    def test_float_image(self):
        """Test float images in [0, 1] are scaled to uint8."""
        image = np.linspace(0, 1, 100, dtype=np.float64).reshape(10, 10)
        prepared = prepare_image(image)
        assert prepared.dtype == np.uint8
        assert prepared[0, 0] == 0
        assert prepared[-1, -1] == 255

    def test_contiguous(self):
        """Test the result is C-contiguous."""
        image = np.random.randint(0, 256, (20, 30), dtype=np.uint8)[:, ::2]
        assert prepare_image(image).flags['C_CONTIGUOUS']

    def test_empty_image(self):
        """Test empty images stay empty."""
        assert prepare_image(np.zeros((0, 5, 3), dtype=np.uint8)).size == 0

    def test_unsupported_channels(self):
        """Test unsupported channel counts."""
        with pytest.raises(ValueError):
            prepare_image(np.zeros((4, 4, 2), dtype=np.uint8))


class TestNormalizedCoordinates:
    """Test pixel to normalized coordinate mapping."""

    def test_normalize(self):
        """Test centre and scale normalization."""
        points = np.array([[49.5, 24.5, 10.0, 1.0], [0.0, 0.0, 5.0, 2.0]], dtype=np.float32)
        normalized = normalized_image_coordinates(points, 100, 50)

        np.testing.assert_allclose(normalized[0], [0.0, 0.0, 0.1, 1.0], atol=1e-6)
        np.testing.assert_allclose(normalized[1], [-0.495, -0.245, 0.05, 2.0], atol=1e-6)

    def test_input_not_modified(self):
        """Test the input array is copied."""
        points = np.array([[1.0, 2.0, 3.0, 0.5]], dtype=np.float32)
        normalized_image_coordinates(points, 10, 10)
        np.testing.assert_array_equal(points, [[1.0, 2.0, 3.0, 0.5]])

    def test_empty(self):
        """Test empty input."""
        assert normalized_image_coordinates(np.zeros((0, 4)), 10, 10).shape == (0, 4)
