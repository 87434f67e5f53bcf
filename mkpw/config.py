# mkpw/config.py
"""
Default generation settings for mkpw.
Settings saved as JSON in %APPDATA%/mkpw/config.json (Windows) or ~/.mkpw/config.json (fallback).
Only settings are stored here, never generated passwords.
"""

import os
import json
import logging
from typing import Dict, Any

from .generator import (
    DEFAULT_LENGTH,
    LOWERCASE_CANDIDATES,
    UPPERCASE_CANDIDATES,
    NUMBER_CANDIDATES,
    SYMBOL_CANDIDATES,
)

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "length": DEFAULT_LENGTH,
    "count": 1,
    "lowercase_candidates": LOWERCASE_CANDIDATES,
    "lowercase_minimum_count": 1,
    "uppercase_candidates": UPPERCASE_CANDIDATES,
    "uppercase_minimum_count": 1,
    "number_candidates": NUMBER_CANDIDATES,
    "number_minimum_count": 1,
    "symbol_candidates": SYMBOL_CANDIDATES,
    "symbol_minimum_count": 1,
    "other_candidates": [],
    "other_minimum_count": [],
    "exclude_similar": False,
    "include_whitespace": False,
    "encoding": "utf-8",
}

def _appdata_dir() -> str:
    appdata = os.getenv("APPDATA")
    if appdata:
        d = os.path.join(appdata, "mkpw")
    else:
        d = os.path.join(os.path.expanduser("~"), ".mkpw")
    return d

def _valid_value(key: str, value: Any) -> bool:
    default = DEFAULTS[key]
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int):
        return _count(value)
    if isinstance(default, str):
        return isinstance(value, str)
    # list settings
    if not isinstance(value, list):
        return False
    if key == "other_minimum_count":
        return all(_count(v) for v in value)
    return all(isinstance(v, str) for v in value)

def _count(value: Any) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0

def _describe(key: str) -> str:
    if key == "other_minimum_count":
        return "a list of non-negative integers"
    if key == "other_candidates":
        return "a list of strings"
    default = DEFAULTS[key]
    if isinstance(default, bool):
        return "true or false"
    if isinstance(default, int):
        return "a non-negative integer"
    return "a string"

def config_path() -> str:
    return os.path.join(_appdata_dir(), "config.json")

def load_config() -> Dict[str, Any]:
    p = config_path()
    if not os.path.exists(p):
        return DEFAULTS.copy()
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", p, e)
        return DEFAULTS.copy()
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", p)
        return DEFAULTS.copy()
    # merge defaults, unknown keys and wrongly typed values are dropped
    out = DEFAULTS.copy()
    for k, v in data.items():
        if k not in DEFAULTS:
            continue
        if not _valid_value(k, v):
            logger.warning("Ignoring config value %s=%r in %s: expected %s", k, v, p, _describe(k))
            continue
        out[k] = v
    logger.debug("Loaded config from %s", p)
    return out

def save_config(cfg: Dict[str, Any]) -> str:
    p = config_path()
    os.makedirs(os.path.dirname(p), exist_ok=True)
    data = {k: v for k, v in cfg.items() if k in DEFAULTS}
    with open(p, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    logger.info("Saved config to %s", p)
    return p
