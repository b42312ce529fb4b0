"""
Engine settings: defaults merged with an optional YAML file.
"""
import os
import yaml

from .errors import InvalidInputError

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))
SETTINGS_FILE = os.path.join(DATA_DIR, 'settings.yaml')

MODES = ('solo', 'team')
PER_MODE_KEYS = ('min_entrants', 'series_length')


def get_default_settings():
    """Default engine settings."""
    return {
        'min_entrants': {'solo': 2, 'team': 2},
        'series_length': {'solo': 3, 'team': 5},
        'points_for_win': 3,
        'points_for_draw': 1,
        'bye_name': 'BYE (Dummy Player)',
        'lock_timeout': 10,
    }


def load_settings(path=None):
    """Load settings from YAML file, merging with defaults."""
    defaults = get_default_settings()
    path = path or SETTINGS_FILE
    if not os.path.exists(path):
        return defaults
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if not data:
        return defaults
    if not isinstance(data, dict):
        raise InvalidInputError(f"Settings file {path} must contain a mapping")
    for key, value in defaults.items():
        if key not in data:
            data[key] = value
        elif isinstance(value, dict) and isinstance(data[key], dict):
            # Per-mode tables: keep defaults for modes the file leaves out
            data[key] = {**value, **data[key]}
    validate_settings(data)
    return data


def validate_settings(settings):
    """Check per-mode tables and series lengths, raising InvalidInputError."""
    for key in PER_MODE_KEYS:
        table = settings.get(key)
        if not isinstance(table, dict):
            raise InvalidInputError(f"Setting '{key}' must map each mode to a value, got {table!r}")
        for mode in MODES:
            value = table.get(mode)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidInputError(f"Setting '{key}' for {mode} must be an integer, got {value!r}")
    for mode in MODES:
        best_of = settings['series_length'][mode]
        # An even series can end level
        if best_of < 1 or best_of % 2 == 0:
            raise InvalidInputError(f"series_length for {mode} must be a positive odd number, got {best_of}")


def setting_for_mode(settings, key, mode):
    if mode not in MODES:
        raise InvalidInputError(f"Unknown tournament mode: {mode}")
    return settings[key][mode]
