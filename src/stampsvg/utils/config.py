"""Editor configuration persisted as JSON.

Only the settings the document core needs: where assets live, the nominal
canvas and stamp size for new drawings, and the log level for the CLI.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Union

from stampsvg.constants import DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT, DEFAULT_STAMP_SIZE

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    assets_root: str = '.'
    canvas_width: int = DEFAULT_CANVAS_WIDTH
    canvas_height: int = DEFAULT_CANVAS_HEIGHT
    stamp_size: int = DEFAULT_STAMP_SIZE
    log_level: str = 'WARNING'

    @classmethod
    def from_dict(cls, data: dict) -> 'EditorConfig':
        """Build from a parsed JSON object; unknown keys are ignored."""
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a JSON object, got {type(data).__name__}")
        known = {f.name: f for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.debug(f"Ignoring unknown config key '{key}'")
                continue
            expected = known[key].type
            if expected == 'int' or expected is int:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValueError(f"Config key '{key}' must be an integer, got {value!r}")
            elif not isinstance(value, str):
                raise ValueError(f"Config key '{key}' must be a string, got {value!r}")
            values[key] = value
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: Union[str, Path]) -> EditorConfig:
    """Read a config file.

    Raises:
        OSError: file cannot be read
        ValueError: file is not valid JSON or a value has the wrong type
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Malformed config {path}: {e}")
            raise ValueError(f"Malformed config {path}: {e}") from e
    config = EditorConfig.from_dict(data)
    logger.debug(f"Loaded config from {path}: {config}")
    return config


def save_config(config: EditorConfig, path: Union[str, Path]) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.debug(f"Saved config to {path}")
