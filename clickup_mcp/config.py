"""
clickup-mcp shared configuration, constants, and module-level state.
Standalone module - no imports from other project files.
"""

import os

# ---------------------------------------------------------------------------
# .env path and helpers
# ---------------------------------------------------------------------------

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(_PACKAGE_DIR)

ENV_PATH = os.path.join(_PROJECT_ROOT, ".env")

# Keys that may also come from the process environment (containers, MCP hosts).
KNOWN_ENV_KEYS = (
    "CLICKUP_API_TOKEN",
    "CLICKUP_TEAM_ID",
    "CLICKUP_HTTP_TIMEOUT_SECONDS",
    "CLICKUP_HTTP_LOG",
    "CLICKUP_HTTP_LOG_SAMPLE_RATE",
    "CLICKUP_CACHE_LOG",
    "CLICKUP_TAG_CACHE_TTL",
    "CLICKUP_HIERARCHY_CACHE_TTL",
    "CLICKUP_MEMBER_CACHE_TTL",
    "CLICKUP_DEFAULT_DETAIL_LEVEL",
    "CLICKUP_DOCUMENT_SUPPORT",
)


def load_env():
    """Read KEY=VALUE pairs from .env; known keys fall back to os.environ."""
    env = {}
    if os.path.exists(ENV_PATH):
        with open(ENV_PATH) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, val = line.split("=", 1)
                    env[key.strip()] = val.strip()
    for key in KNOWN_ENV_KEYS:
        if key not in env and os.environ.get(key):
            env[key] = os.environ[key]
    return env


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(key, default):
    """Parse float env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.3.0"

BASE_URL = "https://api.clickup.com/api/v2"
BASE_URL_V3 = "https://api.clickup.com/api/v3"

VALID_DETAIL_LEVELS = ("minimal", "standard", "detailed")

# ClickUp priority ids are 1 (urgent) .. 4 (low).
PRIORITY_IDS = {"urgent": 1, "high": 2, "normal": 3, "low": 4}
PRIORITY_LABELS = {v: k for k, v in PRIORITY_IDS.items()}

SEARCH_DEFAULT_LIMIT = 25
SEARCH_MAX_LIMIT = 100

# v3 docs parent types
DOC_PARENT_TYPES = {"SPACE": 4, "FOLDER": 5, "LIST": 6, "WORKSPACE": 7, "EVERYTHING": 12}

# ---------------------------------------------------------------------------
# Module-level state (loaded from .env)
# ---------------------------------------------------------------------------

env = load_env()

API_TOKEN = env.get("CLICKUP_API_TOKEN", "")
TEAM_ID = env.get("CLICKUP_TEAM_ID", "")
HTTP_TIMEOUT_SECONDS = _env_int("CLICKUP_HTTP_TIMEOUT_SECONDS", 30)
HTTP_LOG_ENABLED = _env_bool("CLICKUP_HTTP_LOG", False)
HTTP_LOG_SAMPLE_RATE = min(1.0, max(0.0, _env_float("CLICKUP_HTTP_LOG_SAMPLE_RATE", 1.0)))
CACHE_LOG_ENABLED = _env_bool("CLICKUP_CACHE_LOG", False)

TAG_CACHE_TTL = _env_float("CLICKUP_TAG_CACHE_TTL", 900.0)
HIERARCHY_CACHE_TTL = _env_float("CLICKUP_HIERARCHY_CACHE_TTL", 300.0)
MEMBER_CACHE_TTL = _env_float("CLICKUP_MEMBER_CACHE_TTL", 600.0)

DEFAULT_DETAIL_LEVEL = env.get("CLICKUP_DEFAULT_DETAIL_LEVEL", "standard")
if DEFAULT_DETAIL_LEVEL not in VALID_DETAIL_LEVELS:
    DEFAULT_DETAIL_LEVEL = "standard"
DOCUMENT_SUPPORT = _env_bool("CLICKUP_DOCUMENT_SUPPORT", False)
