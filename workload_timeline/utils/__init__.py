"""Utility functions."""

from .config import load_config, load_merged_config, get_default_config, merge_config
from .datetime_utils import parse_date, iter_days
from .errors import MutationError, TimelineError, error_to_string, friendly_relation_error

__all__ = [
    'load_config',
    'load_merged_config',
    'get_default_config',
    'merge_config',
    'parse_date',
    'iter_days',
    'MutationError',
    'TimelineError',
    'error_to_string',
    'friendly_relation_error',
]
