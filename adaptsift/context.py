"""
Extraction context
Owns the single engine instance and the parameters last applied to it
"""

import logging
from dataclasses import dataclass, fields
from typing import Callable, List, Optional

from adaptsift.engine.base import (
    EngineConfig, FilterSorting, NormMode, SiftEngine, SiftMode,
)

logger = logging.getLogger(__name__)

# Not exposed as tunable parameters.
FILTER_SORTING = FilterSorting.LARGEST_SCALE_FIRST
SIFT_MODE = SiftMode.OPENCV


@dataclass(frozen=True)
class ExtractionParameters:
    peak_threshold: float
    edge_threshold: float
    use_root_normalization: bool
    downsampling: float

    def changed_fields(self, other: Optional["ExtractionParameters"]) -> List[str]:
        """Names of the fields that differ from ``other`` (all of them if None)."""
        names = [f.name for f in fields(self)]
        if other is None:
            return names
        return [name for name in names if getattr(self, name) != getattr(other, name)]

    def to_engine_config(self) -> EngineConfig:
        return EngineConfig(
            threshold=self.peak_threshold,
            edge_limit=self.edge_threshold,
            norm_mode=NormMode.ROOT_SIFT if self.use_root_normalization else NormMode.CLASSIC,
            filter_sorting=FILTER_SORTING,
            mode=SIFT_MODE,
            downsampling=self.downsampling,
        )


class ExtractionContext:
    """Long-lived holder of one engine.

    The engine is built on first use through ``engine_factory`` and is
    reconfigured in place afterwards. Not thread-safe: callers serialize
    access (see ``SerializedDispatcher``).
    """

    def __init__(self, engine_factory: Callable[[EngineConfig], SiftEngine]):
        self.engine_factory = engine_factory
        self._engine: Optional[SiftEngine] = None
        self._params: Optional[ExtractionParameters] = None

    @property
    def engine(self) -> Optional[SiftEngine]:
        return self._engine

    @property
    def parameters(self) -> Optional[ExtractionParameters]:
        return self._params

    def ensure_configured(self, params: ExtractionParameters) -> SiftEngine:
        changed = params.changed_fields(self._params)
        if not changed:
            return self._engine

        config = params.to_engine_config()
        if self._engine is None:
            logger.debug("Creating engine with %s", config)
            self._engine = self.engine_factory(config)
        else:
            logger.debug("Reconfiguring engine, changed: %s", ", ".join(changed))
            self._engine.configure(config, False)

        self._params = params
        return self._engine

    def close(self):
        """Shut the engine down. The context can be reused afterwards."""
        if self._engine is not None:
            self._engine.close()
        self._engine = None
        self._params = None
