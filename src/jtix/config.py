"""Configuration utilities for jtix."""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

from jtix.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "jtix" / "config.json"

# Environment variables that override values from the config file.
ENV_OVERRIDES = {
    "base_url": "JTIX_BASE_URL",
    "email": "JTIX_EMAIL",
    "api_token": "JTIX_API_TOKEN",
}


@dataclass
class JiraConfig:
    """Jira connection settings and saved searches."""

    base_url: str = ""
    email: str = ""
    api_token: str = ""
    saved_queries: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    @property
    def is_complete(self) -> bool:
        return bool(self.base_url and self.email and self.api_token)


def get_config_path() -> Path:
    """Get config file path from JTIX_CONFIG_PATH or default location.

    Returns:
        Path object for the config file. Uses JTIX_CONFIG_PATH if set,
        otherwise defaults to ~/.config/jtix/config.json.
    """
    config_path = os.environ.get("JTIX_CONFIG_PATH")
    if config_path:
        return Path(config_path)
    return DEFAULT_CONFIG_PATH


def _read_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} does not contain a JSON object")
    return data


def load_config(apply_env: bool = True) -> JiraConfig:
    """Load configuration from the config file and environment.

    Args:
        apply_env: Whether JTIX_BASE_URL, JTIX_EMAIL and JTIX_API_TOKEN
            override the values stored in the file

    Returns:
        The configuration; fields missing everywhere are empty.

    Raises:
        ConfigError: If the config file exists but cannot be parsed.
    """
    data = _read_file(get_config_path())
    values = {key: str(data.get(key) or "") for key in ENV_OVERRIDES}

    if apply_env:
        for key, env_var in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                values[key] = value

    saved_queries = data.get("saved_queries")
    if not isinstance(saved_queries, dict):
        saved_queries = {}

    return JiraConfig(
        saved_queries={str(k): str(v) for k, v in saved_queries.items()},
        **values,
    )


def save_config(config: JiraConfig) -> Path:
    """Write configuration to the config file.

    Returns:
        Path of the written file.
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(config), indent=2) + "\n")
    path.chmod(0o600)
    logger.debug(f"Saved configuration to {path}")
    return path


def clear_config() -> None:
    """Remove the config file if it exists."""
    path = get_config_path()
    if path.exists():
        path.unlink()
        logger.debug(f"Removed configuration at {path}")


def is_configured() -> bool:
    """Return True if base URL, email and API token are all available."""
    try:
        return load_config().is_complete
    except ConfigError:
        return False


def require_config() -> JiraConfig:
    """Load configuration, insisting that credentials are present.

    Raises:
        ConfigError: If any of base URL, email or API token is missing.
    """
    config = load_config()
    if not config.is_complete:
        raise ConfigError('Jira is not configured. Run "jtix config set" first.')
    return config
