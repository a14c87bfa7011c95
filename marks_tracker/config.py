"""
Configuration settings for the marks tracker.

Every value can be overridden from the environment by prefixing its name
with MARKS_TRACKER_. For example, to move the board-exam term id:
    MARKS_TRACKER_BOARD_EXAM_TERM=9

Values are read lazily so tests can patch the environment.
"""
import os

_PREFIX = "MARKS_TRACKER_"

_DEFAULTS = {
    # Term id used for board-exam submissions (grades 10 and 12)
    'BOARD_EXAM_TERM': 8,

    # Stored per-subject maxima above this are treated as corrupted
    'SUBJECT_MAX_SANITY_LIMIT': 150,

    # Display
    'PERCENT_DECIMALS': 1,

    'LOG_LEVEL': 'INFO',

    # Identity used by the single-user Streamlit front end
    'DEFAULT_IDENTITY': 'local-user',
}


def _get_setting(name, default):
    """Get a setting from the environment or use the default."""
    raw = os.environ.get(f'{_PREFIX}{name}')
    if raw is None:
        return default
    if isinstance(default, int):
        return int(raw)
    return raw


class _ConfigProxy:
    """Lazy configuration proxy that reads settings only when accessed."""

    def __getattr__(self, name):
        if name in _DEFAULTS:
            return _get_setting(name, _DEFAULTS[name])
        raise AttributeError(f"Unknown config setting: {name}")


settings = _ConfigProxy()


def __getattr__(name):
    """Enable module-level attribute access via the config proxy."""
    return getattr(settings, name)
