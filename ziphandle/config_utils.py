import json
import logging
import os

log = logging.getLogger(__name__)

CONFIG_FILE = 'ziphandle.json'


def _read_config(path):
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError:
        log.warning("Ignoring malformed settings file %s", path)
        return {}
    if not isinstance(config, dict):
        log.warning("Ignoring settings file %s: expected a JSON object", path)
        return {}
    return config


def save_setting(key, value, path=CONFIG_FILE):
    """Saves a setting to the settings file, keeping the others."""
    config = _read_config(path)
    config[key] = value

    with open(path, 'w') as f:
        json.dump(config, f, indent=4)


def load_setting(key, default=None, path=CONFIG_FILE):
    """Loads a setting from the settings file."""
    if not os.path.exists(path):
        return default
    return _read_config(path).get(key, default)
