"""Lock-serialized access to a shared extraction context."""

import threading
from typing import Optional

import numpy as np

from adaptsift.context import ExtractionContext, ExtractionParameters
from adaptsift.engine.base import ResultSet


class SerializedDispatcher:
    """Runs configure, submit and collect as one critical section."""

    def __init__(self, context: ExtractionContext, lock: Optional[threading.Lock] = None):
        self.context = context
        self.lock = lock or threading.Lock()

    def dispatch(self, params: ExtractionParameters, width: int, height: int,
                 pixels: np.ndarray) -> ResultSet:
        with self.lock:
            engine = self.context.ensure_configured(params)
            with engine.submit(width, height, pixels) as job:
                return job.collect()
