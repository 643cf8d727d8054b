"""
DocChunk: YAML Configuration Loader

Loads:
- settings.yaml  (chunking + extraction sections)

Usage:
    from config.system_loader import get_chunking_config
"""

import os
import yaml

# -------------------------------------------------
# Base Config Path
# -------------------------------------------------

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
SETTINGS_FILE = os.getenv("DOCCHUNK_SETTINGS_FILE", "settings.yaml")


def _load_yaml(filename: str):
    path = filename if os.path.isabs(filename) else os.path.join(BASE_DIR, filename)

    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


# -------------------------------------------------
# Public Config Getters
# -------------------------------------------------

def get_system_config():
    return _load_yaml(SETTINGS_FILE)


def get_chunking_config():
    return get_system_config().get("chunking", {})


def get_extraction_config():
    return get_system_config().get("extraction", {})
