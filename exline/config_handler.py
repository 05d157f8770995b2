# exline/config_handler.py

import os
import sys
import json
import re
import logging
from typing import Any, Dict, Optional

# --- Module-specific logger ---
logger = logging.getLogger(__name__)

# Strips // line comments and /* */ block comments before parsing.
_COMMENT_PATTERN = re.compile(r'//.*?$|/\*.*?\*/', re.DOTALL | re.MULTILINE)

def load_jsonc_file(filepath: str) -> Optional[Dict[str, Any]]:
    """
    Loads a JSON settings file that may contain // and /* */ comments.

    Args:
        filepath (str): The full path to the .jsonc or .json file.

    Returns:
        Optional[Dict[str, Any]]: The parsed settings, or None if the file is
                                  missing, unreadable or not valid JSON.
    """
    if not os.path.exists(filepath):
        logger.info(f"Settings file not found at: {filepath}")
        return None

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            raw = f.read()
        return json.loads(re.sub(_COMMENT_PATTERN, '', raw))

    except json.JSONDecodeError as e:
        logger.error(f"Error decoding settings from {filepath}: {e}", exc_info=True)
        print(f"Error: could not parse the settings file at {filepath}. Check it for syntax errors.", file=sys.stderr)
        return None
    except IOError as e:
        logger.error(f"Error reading settings file {filepath}: {e}", exc_info=True)
        print(f"Error: could not read the settings file at {filepath}.", file=sys.stderr)
        return None

def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merges ``override`` on top of ``base``; neither input is modified."""
    merged = base.copy()
    for key, value in override.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value
    return merged

def get_option(config: Optional[Dict[str, Any]], key_path: str, default: Any = None) -> Any:
    """Reads a value from nested settings using a dot-separated path, e.g. ``fallback.enable_neovim``."""
    value: Any = config or {}
    for key in key_path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
