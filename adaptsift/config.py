"""
Configuration management for adaptsift
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG = {
    "sift": {
        "peak_threshold": 0.1,
        "edge_threshold": 10.0,
        "target_num_features": 4000,
        "use_root": True,
        "downsampling": -1.0
    },
    "schedule": {
        "decay": 2.0 / 3.0,
        "floor": 0.0001
    },
    "logging": {
        "level": "INFO",
        "log_dir": None
    }
}


def _merge(base: Dict[str, Any], override: Dict[str, Any], section: str = "") -> Dict[str, Any]:
    for key, value in override.items():
        where = f"{section}.{key}" if section else key
        if key not in base:
            raise ValueError(f"Unknown config key: {where}")
        if isinstance(base[key], dict):
            if not isinstance(value, dict):
                raise ValueError(f"Config section {where} must be a mapping")
            _merge(base[key], value, where)
        else:
            base[key] = value
    return base


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load a YAML config file merged over DEFAULT_CONFIG."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is None:
        return config

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return _merge(config, data)


def sift_kwargs(config: Dict[str, Any]) -> Dict[str, Any]:
    """Keyword arguments for ``extract`` taken from the sift section."""
    sift = config["sift"]
    return {
        "peak_threshold": float(sift["peak_threshold"]),
        "edge_threshold": float(sift["edge_threshold"]),
        "target_num_features": int(sift["target_num_features"]),
        "use_root": bool(sift["use_root"]),
        "downsampling": float(sift["downsampling"]),
    }


def schedule_kwargs(config: Dict[str, Any]) -> Dict[str, Any]:
    """Keyword arguments for ``create_extractor`` taken from the schedule section."""
    schedule = config["schedule"]
    return {
        "decay": float(schedule["decay"]),
        "floor": float(schedule["floor"]),
    }
