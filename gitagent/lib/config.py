"""
Configuration loader for gitagent.

Settings come from an optional gitagent.yaml overlaid by environment
variables. A missing or unreadable file yields defaults.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from gitagent.git.binary import BINARY_ENV_VARS
from gitagent.git.overview import DEFAULT_MAX_REPOS

logger = logging.getLogger(__name__)

CONFIG_ENV = "GITAGENT_CONFIG"
CONFIG_FILENAME = "gitagent.yaml"
LOG_LEVEL_ENV = "GITAGENT_LOG_LEVEL"

# First non-empty ones become the allowed roots, in this order
ROOT_ENV_VARS = ("ASSISTOS_FS_ROOT", "WORKSPACE_ROOT", "PLOINKY_WORKSPACE_ROOT")

KNOWN_KEYS = {"roots", "binary_env_vars", "max_repos", "log_level"}


@dataclass
class Settings:
    """Runtime settings."""
    roots: list[Path] = field(default_factory=list)  # Allowed repository roots
    binary_env_vars: tuple[str, ...] = BINARY_ENV_VARS  # git override variables, in priority order
    max_repos: int = DEFAULT_MAX_REPOS  # Default repos_overview limit
    log_level: str = "WARNING"


def _load_file(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        data = yaml.safe_load(config_path.read_text())
    except (yaml.YAMLError, OSError) as e:
        logger.warning(f"Failed to parse {config_path}: {e}")
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {config_path}: expected a mapping, got {type(data).__name__}")
        return {}
    unknown = set(data) - KNOWN_KEYS
    if unknown:
        logger.warning(f"Unknown keys in {config_path}: {', '.join(sorted(unknown))}")
    return data


def load_settings(config_path: Path | None = None, environ: dict | None = None) -> Settings:
    """
    Load settings.

    Precedence, lowest first: defaults, YAML file, environment variables.
    The YAML path is config_path, else $GITAGENT_CONFIG, else ./gitagent.yaml.
    Roots default to the current directory when nothing else names one.
    """
    env = os.environ if environ is None else environ
    if config_path is None:
        config_path = Path(env.get(CONFIG_ENV) or CONFIG_FILENAME)
    data = _load_file(config_path)
    settings = Settings()

    roots = data.get("roots")
    if isinstance(roots, str):
        roots = [roots]
    if isinstance(roots, list):
        settings.roots = [Path(r).resolve() for r in roots if isinstance(r, str) and r.strip()]

    binary_env_vars = data.get("binary_env_vars")
    if isinstance(binary_env_vars, list) and all(isinstance(v, str) for v in binary_env_vars):
        settings.binary_env_vars = tuple(binary_env_vars)

    max_repos = data.get("max_repos")
    if isinstance(max_repos, int) and not isinstance(max_repos, bool) and max_repos > 0:
        settings.max_repos = max_repos
    elif max_repos is not None:
        logger.warning(f"Invalid max_repos {max_repos!r}, using {settings.max_repos}")

    if isinstance(data.get("log_level"), str):
        settings.log_level = data["log_level"].upper()

    env_roots = [env[name] for name in ROOT_ENV_VARS if env.get(name, "").strip()]
    if env_roots:
        settings.roots = [Path(r).resolve() for r in env_roots]
    if not settings.roots:
        settings.roots = [Path.cwd().resolve()]

    if env.get(LOG_LEVEL_ENV):
        settings.log_level = env[LOG_LEVEL_ENV].upper()

    return settings
