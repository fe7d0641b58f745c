"""Shared fixtures."""

import numpy as np
import pytest

from adaptsift.core import create_extractor
from fakes import EngineFactory


@pytest.fixture
def test_image():
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, (48, 64), dtype=np.uint8)


@pytest.fixture
def empty_factory():
    return EngineFactory()


@pytest.fixture
def make_extractor():
    def _make(factory, **kwargs):
        return create_extractor(factory, **kwargs)
    return _make
