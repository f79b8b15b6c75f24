"""Rolodex configuration loader.

Loads settings from ~/.rolodex/config.json, with optional overrides from
environment variables for the command-line driver.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .contacts.backend import DEFAULT_BACKUP_SUFFIX
from .contacts.store import DEFAULT_CONTACTS_PATH
from .logging import DEFAULT_LOG_DIR

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".rolodex" / "config.json"

_TRUTHY = ("1", "true", "yes")


@dataclass
class RolodexConfig:
    """Configuration for the contact book.

    Attributes:
        contacts_path: JSON file holding the contacts.
        email_required: Reject contacts without an email.
        backup_suffix: Suffix of the backup written before each save.
        log_dir: Directory for the JSONL event log.
        event_log: Whether to write the event log at all.
    """

    contacts_path: Path | None = None
    email_required: bool = False
    backup_suffix: str = DEFAULT_BACKUP_SUFFIX
    log_dir: Path | None = None
    event_log: bool = True

    def __post_init__(self) -> None:
        """Validate config and set defaults."""
        if self.contacts_path is None:
            self.contacts_path = DEFAULT_CONTACTS_PATH
        self.contacts_path = Path(self.contacts_path).expanduser()

        if self.log_dir is None:
            self.log_dir = DEFAULT_LOG_DIR
        self.log_dir = Path(self.log_dir).expanduser()

        if not self.backup_suffix:
            raise ValueError("backup_suffix cannot be empty")


def load_config(config_path: Path | None = None) -> RolodexConfig:
    """Load RolodexConfig from a JSON file.

    The config file should have this structure:
    ```json
    {
      "contacts": {
        "path": "~/Documents/contacts.json",
        "email_required": false,
        "backup_suffix": ".bak"
      },
      "logging": {
        "dir": "~/.rolodex/logs",
        "enabled": true
      }
    }
    ```

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.

    Returns:
        RolodexConfig instance with loaded values.
    """
    path = config_path or DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return RolodexConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        return RolodexConfig()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s. Using defaults.", path, e)
        return RolodexConfig()

    if not isinstance(data, dict):
        logger.warning("Config in %s is not an object. Using defaults.", path)
        return RolodexConfig()

    return _parse_config(data)


def _parse_config(data: dict[str, Any]) -> RolodexConfig:
    """Parse config dictionary into RolodexConfig.

    Values of the wrong type are ignored one by one.
    """
    contacts_data = data.get("contacts", {})
    if not isinstance(contacts_data, dict):
        contacts_data = {}

    logging_data = data.get("logging", {})
    if not isinstance(logging_data, dict):
        logging_data = {}

    contacts_path = contacts_data.get("path")
    if not isinstance(contacts_path, str) or not contacts_path:
        contacts_path = None

    email_required = contacts_data.get("email_required", False)
    if not isinstance(email_required, bool):
        email_required = False

    backup_suffix = contacts_data.get("backup_suffix", DEFAULT_BACKUP_SUFFIX)
    if not isinstance(backup_suffix, str) or not backup_suffix:
        backup_suffix = DEFAULT_BACKUP_SUFFIX

    log_dir = logging_data.get("dir")
    if not isinstance(log_dir, str) or not log_dir:
        log_dir = None

    event_log = logging_data.get("enabled", True)
    if not isinstance(event_log, bool):
        event_log = True

    return RolodexConfig(
        contacts_path=Path(contacts_path) if contacts_path else None,
        email_required=email_required,
        backup_suffix=backup_suffix,
        log_dir=Path(log_dir) if log_dir else None,
        event_log=event_log,
    )


def save_config(config: RolodexConfig, config_path: Path | None = None) -> None:
    """Save RolodexConfig to a JSON file.

    Only values that differ from the defaults are written.

    Args:
        config: The config to save.
        config_path: Path to write to. Uses DEFAULT_CONFIG_PATH if None.
    """
    path = config_path or DEFAULT_CONFIG_PATH

    path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {}

    contacts_data: dict[str, Any] = {}
    if config.contacts_path != DEFAULT_CONTACTS_PATH:
        contacts_data["path"] = str(config.contacts_path)
    if config.email_required:
        contacts_data["email_required"] = True
    if config.backup_suffix != DEFAULT_BACKUP_SUFFIX:
        contacts_data["backup_suffix"] = config.backup_suffix
    if contacts_data:
        data["contacts"] = contacts_data

    logging_data: dict[str, Any] = {}
    if config.log_dir != DEFAULT_LOG_DIR:
        logging_data["dir"] = str(config.log_dir)
    if not config.event_log:
        logging_data["enabled"] = False
    if logging_data:
        data["logging"] = logging_data

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise


def apply_env_overrides(config: RolodexConfig) -> RolodexConfig:
    """Apply ROLODEX_* environment variables on top of a config.

    Recognized variables: ROLODEX_CONTACTS_PATH, ROLODEX_EMAIL_REQUIRED,
    ROLODEX_LOG_DIR.
    """
    contacts_path = os.getenv("ROLODEX_CONTACTS_PATH")
    if contacts_path:
        config.contacts_path = Path(contacts_path).expanduser()

    email_required = os.getenv("ROLODEX_EMAIL_REQUIRED")
    if email_required is not None:
        config.email_required = email_required.strip().lower() in _TRUTHY

    log_dir = os.getenv("ROLODEX_LOG_DIR")
    if log_dir:
        config.log_dir = Path(log_dir).expanduser()

    return config
