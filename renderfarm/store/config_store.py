import json
import logging
import os

from pydantic import ValidationError

from renderfarm.api.schemas import SimulationConfig
from renderfarm.errors import ConfigError

DEFAULT_CONFIG_PATH = os.getenv("RENDERFARM_CONFIG", "renderfarm.json")

DEFAULT_CONFIG = SimulationConfig(
    repetitions=5,
    max_cycles=2000,
    cpu_count=100,
    job_count=20,
    frames_range=(10, 500),
    chunk_size_range=(1, 20),
    startup_cycles_range=(0, 5),
)


def save_config(config: SimulationConfig, path: str = DEFAULT_CONFIG_PATH):
    """Write the config as indented JSON."""
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    with open(path, "w") as f:
        f.write(config.model_dump_json(indent=2))


def load_config(path: str = DEFAULT_CONFIG_PATH) -> SimulationConfig:
    """
    Load the config at ``path``.

    A missing or unreadable file is replaced with the defaults, which are
    returned. A file that parses but fails validation raises ConfigError
    and is left as it is.
    """
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except FileNotFoundError:
        logging.warning(f"[config] {path} not found, writing defaults")
        save_config(DEFAULT_CONFIG, path)
        return DEFAULT_CONFIG
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logging.warning(f"[config] {path} is not valid JSON ({e}), writing defaults")
        save_config(DEFAULT_CONFIG, path)
        return DEFAULT_CONFIG

    if not isinstance(data, dict):
        logging.warning(f"[config] {path} does not hold a JSON object, writing defaults")
        save_config(DEFAULT_CONFIG, path)
        return DEFAULT_CONFIG

    try:
        config = SimulationConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path}:\n{e}") from e

    logging.info(f"[config] Loaded {path}")
    return config
