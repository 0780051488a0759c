"""Configuration management for browser-finder."""

from pathlib import Path
from typing import Mapping, Optional

import yaml

from .models import FinderConfig

CONFIG_DIR = Path.home() / ".config" / "browser-finder"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config(config_file: Path) -> FinderConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_file: Path to config.yaml

    Returns:
        FinderConfig; missing keys take their defaults

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is malformed or names an unknown browser
    """
    from .darwin import BROWSERS

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")

    with open(config_file) as f:
        data = yaml.safe_load(f)

    if data is None:
        return FinderConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_file}")

    log_level = str(data.get("log_level", "INFO")).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Invalid log_level: {data['log_level']}")

    preferred_paths = data.get("preferred_paths") or {}
    if not isinstance(preferred_paths, dict):
        raise ValueError("preferred_paths must be a mapping of browser name to path")
    for name in preferred_paths:
        if name not in BROWSERS:
            raise ValueError(f"Unknown browser in preferred_paths: {name}")

    return FinderConfig(
        log_level=log_level,
        preferred_paths={k: str(v) for k, v in preferred_paths.items() if v},
        home=data.get("home"),
    )


def save_config(config: FinderConfig, config_file: Path) -> None:
    """
    Save configuration to a YAML file.

    Args:
        config: FinderConfig to save
        config_file: Path to config.yaml
    """
    config_file.parent.mkdir(parents=True, exist_ok=True)

    data = {"log_level": config.log_level}

    # Only include optional fields if they have values
    if config.preferred_paths:
        data["preferred_paths"] = dict(config.preferred_paths)
    if config.home is not None:
        data["home"] = config.home

    with open(config_file, "w") as f:
        yaml.dump(data, f, default_flow_style=False)


def resolve_preferred_path(
    browser: str,
    env_var: str,
    config: Optional[FinderConfig] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Pick the preferred install path for a browser.

    The environment variable (e.g. FIREFOX_PATH) wins over the config file.
    Empty values count as unset.
    """
    if env is not None and env.get(env_var):
        return env[env_var]
    if config is not None and config.preferred_paths.get(browser):
        return config.preferred_paths[browser]
    return None


def resolve_home(
    config: Optional[FinderConfig] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Home directory used for ~/Applications rules: config, then $HOME."""
    if config is not None and config.home:
        return config.home
    if env is not None and env.get("HOME"):
        return env["HOME"]
    return None

