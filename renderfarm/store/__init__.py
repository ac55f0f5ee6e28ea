# renderfarm/store/__init__.py
from .config_store import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH, load_config, save_config
