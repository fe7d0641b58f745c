"""
SIFT engines

The orchestrator only talks to engines through ``SiftEngine`` / ``SiftJob``.
"""

from .base import (
    DESCRIPTOR_SIZE,
    EngineConfig,
    EngineError,
    FilterSorting,
    JobStateError,
    Keypoint,
    NormMode,
    ResultSet,
    SiftEngine,
    SiftJob,
    SiftMode,
)

__all__ = [
    'DESCRIPTOR_SIZE',
    'EngineConfig',
    'EngineError',
    'FilterSorting',
    'JobStateError',
    'Keypoint',
    'NormMode',
    'ResultSet',
    'SiftEngine',
    'SiftJob',
    'SiftMode',
]
