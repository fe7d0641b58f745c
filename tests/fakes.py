"""Scripted engine standing in for the GPU engine."""

import threading
import time

import numpy as np

from adaptsift.engine.base import Keypoint, ResultSet, SiftEngine, SiftJob


def make_keypoint(x, y, sigma=1.5, num_orientations=1, seed=0):
    rng = np.random.default_rng(seed)
    orientations = [0.1 * (k + 1) for k in range(num_orientations)]
    descriptors = [rng.random(128).astype(np.float32) for _ in range(num_orientations)]
    return Keypoint(x=x, y=y, sigma=sigma, orientations=orientations, descriptors=descriptors)


class FakeJob(SiftJob):
    def __init__(self, engine, result):
        super().__init__()
        self.engine = engine
        self.result = result

    def _run(self):
        time.sleep(self.engine.delay)
        if self.engine.fail_on_collect:
            raise RuntimeError("device lost")
        return self.result

    def release(self):
        super().release()
        self.engine.busy = False
        self.engine.released += 1


class FakeEngine(SiftEngine):
    """Returns keypoints according to ``responder(threshold)``."""

    def __init__(self, config, responder, delay=0.0, fail_on_collect=False):
        super().__init__(config)
        self.responder = responder
        self.delay = delay
        self.fail_on_collect = fail_on_collect
        self.configure_calls = []
        self.submissions = []
        self.released = 0
        self.overlaps = 0
        self.busy = False
        self.closed = False

    def configure(self, config, force_reallocate=False):
        if self.busy:
            self.overlaps += 1
        self.configure_calls.append((config, force_reallocate))
        self.config = config

    def submit(self, width, height, pixels):
        if self.busy:
            self.overlaps += 1
        self.busy = True
        self.submissions.append((self.config.threshold, width, height))
        return FakeJob(self, ResultSet(list(self.responder(self.config.threshold))))

    def close(self):
        self.closed = True


class EngineFactory:
    """Records every engine it builds."""

    def __init__(self, responder=lambda threshold: [], **engine_kwargs):
        self.responder = responder
        self.engine_kwargs = engine_kwargs
        self.engines = []
        self.lock = threading.Lock()

    def __call__(self, config):
        with self.lock:
            engine = FakeEngine(config, self.responder, **self.engine_kwargs)
            self.engines.append(engine)
            return engine

    @property
    def engine(self):
        assert len(self.engines) == 1
        return self.engines[0]


