"""Load monitor settings from a YAML file."""

from pathlib import Path
import yaml

from monitor.models import Config, DEFAULT_CONFIG

_INTEGER_FIELDS = ("stats_window", "alert_window", "maximum_timestamp_error")


def load_config(path: str | Path, base: Config = DEFAULT_CONFIG) -> Config:
    """Parse *path* and return *base* with the file's values applied.

    Every key is optional. An empty file yields *base* unchanged.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        definition = yaml.safe_load(f) or {}

    if not isinstance(definition, dict):
        raise ValueError(f"{path.name}: expected a mapping at top level")

    _validate(path, definition)
    try:
        return base.replace(**definition)
    except ValueError as e:
        raise ValueError(f"{path.name}: {e}") from e


def _validate(path: Path, definition: dict) -> None:
    known = Config.field_names()
    for field in definition:
        if field not in known:
            raise ValueError(f"{path.name}: unknown field '{field}'")

    for field, value in definition.items():
        # bool is an int subclass; "true" is never a sensible window.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{path.name}: field '{field}' must be a number")
        if field in _INTEGER_FIELDS and not isinstance(value, int):
            raise ValueError(f"{path.name}: field '{field}' must be an integer")