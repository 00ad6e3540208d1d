"""Configuration management."""

import copy
import json
import yaml
from pathlib import Path
from typing import Dict, Any, Optional


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        if path.suffix.lower() in ['.yaml', '.yml']:
            return yaml.safe_load(f) or {}
        elif path.suffix.lower() == '.json':
            return json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        'working_hours': {
            'weekly_schedule': {
                'Mon': 8, 'Tue': 8, 'Wed': 8, 'Thu': 8, 'Fri': 8, 'Sat': 0, 'Sun': 0,
            },
        },
        'timeline': {
            'zoom': 'week',
            'padding_days': 7,
            'min_width': 600,
            'bar_height': 30,
            'bar_gap': 10,
            'label_width': 250,
            'label_width_min': 150,
            'label_width_max': 500,
        },
        'router': {
            'arrow_size': 6,
            'same_row_tolerance': 5,
            'near_vertical_threshold': 30,
            'jog': 20,
            'gap': 12,
        },
        'workload': {
            'max_display_intensity': 1.5,
            'bands': {
                'low': 0.8,
                'medium': 1.0,
                'high': 1.2,
            },
        },
        'sample': {
            'task_count': 20,
            'project_count': 3,
            'span_days': 45,
        },
        'logging': {
            'level': 'INFO',
        },
    }


def merge_config(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Deep-merge a (possibly partial) configuration over the defaults."""
    merged = get_default_config()
    _deep_update(merged, overrides or {})

    # An explicit legacy schedule replaces the default weekly one
    hours = (overrides or {}).get('working_hours', {})
    if 'weekly_schedule' not in hours and ('hours_per_day' in hours or 'working_days' in hours):
        merged['working_hours'].pop('weekly_schedule', None)

    return merged


def load_merged_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a config file when one exists, layered over the defaults."""
    if config_path and Path(config_path).exists():
        return merge_config(load_config(config_path))
    return get_default_config()


def _deep_update(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
