"""Tests for configuration loading and saving."""

import json
from pathlib import Path

import pytest

from rolodex.config import (
    RolodexConfig,
    apply_env_overrides,
    load_config,
    save_config,
)
from rolodex.contacts import DEFAULT_CONTACTS_PATH
from rolodex.logging import DEFAULT_LOG_DIR


class TestRolodexConfig:
    """Tests for RolodexConfig dataclass."""

    def test_default_values(self) -> None:
        """Should have sensible defaults."""
        config = RolodexConfig()

        assert config.contacts_path == DEFAULT_CONTACTS_PATH
        assert config.contacts_path == Path.home() / ".rolodex" / "contacts.json"
        assert config.email_required is False
        assert config.backup_suffix == ".bak"
        assert config.log_dir == DEFAULT_LOG_DIR
        assert config.event_log is True

    def test_expands_user(self) -> None:
        config = RolodexConfig(contacts_path=Path("~/book.json"))
        assert config.contacts_path == Path.home() / "book.json"

    def test_empty_backup_suffix(self) -> None:
        """Should reject an empty backup suffix."""
        with pytest.raises(ValueError, match="backup_suffix"):
            RolodexConfig(backup_suffix="")


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "nope.json") == RolodexConfig()

    def test_loads_from_file(self, tmp_path: Path) -> None:
        """Should load config from JSON file."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "contacts": {
                "path": str(tmp_path / "book.json"),
                "email_required": True,
                "backup_suffix": ".old",
            },
            "logging": {"dir": str(tmp_path / "logs"), "enabled": False},
        }))

        config = load_config(config_path)

        assert config.contacts_path == tmp_path / "book.json"
        assert config.email_required is True
        assert config.backup_suffix == ".old"
        assert config.log_dir == tmp_path / "logs"
        assert config.event_log is False

    def test_invalid_json_uses_defaults(self, tmp_path: Path, caplog) -> None:
        """Should fall back to defaults on broken JSON."""
        config_path = tmp_path / "config.json"
        config_path.write_text("{not valid")

        with caplog.at_level("WARNING"):
            config = load_config(config_path)

        assert config == RolodexConfig()
        assert "Invalid JSON" in caplog.text

    def test_undecodable_file_uses_defaults(self, tmp_path: Path, caplog) -> None:
        """Bytes that are not UTF-8 fall back to defaults."""
        config_path = tmp_path / "config.json"
        config_path.write_bytes(b"\xff\xfe\x00bad")

        with caplog.at_level("WARNING"):
            config = load_config(config_path)

        assert config == RolodexConfig()
        assert "Cannot read" in caplog.text

    def test_non_object_uses_defaults(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text("[1, 2]")
        assert load_config(config_path) == RolodexConfig()

    def test_wrong_types_ignored(self, tmp_path: Path) -> None:
        """Should ignore wrong-typed values one by one."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "contacts": {"path": 7, "email_required": "yes", "backup_suffix": ""},
            "logging": "verbose",
        }))

        assert load_config(config_path) == RolodexConfig()


class TestSaveConfig:
    def test_round_trip(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        config = RolodexConfig(
            contacts_path=tmp_path / "book.json",
            email_required=True,
            event_log=False,
        )

        save_config(config, config_path)

        assert load_config(config_path) == config

    def test_defaults_write_empty_object(self, tmp_path: Path) -> None:
        """Only non-default values are written."""
        config_path = tmp_path / "nested" / "config.json"
        save_config(RolodexConfig(), config_path)
        assert json.loads(config_path.read_text()) == {}


class TestEnvOverrides:
    def test_overrides(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("ROLODEX_CONTACTS_PATH", str(tmp_path / "env.json"))
        monkeypatch.setenv("ROLODEX_EMAIL_REQUIRED", "true")
        monkeypatch.setenv("ROLODEX_LOG_DIR", str(tmp_path / "logs"))

        config = apply_env_overrides(RolodexConfig())

        assert config.contacts_path == tmp_path / "env.json"
        assert config.email_required is True
        assert config.log_dir == tmp_path / "logs"

    def test_false_value(self, monkeypatch) -> None:
        monkeypatch.setenv("ROLODEX_EMAIL_REQUIRED", "0")
        config = apply_env_overrides(RolodexConfig(email_required=True))
        assert config.email_required is False

    def test_no_env_keeps_config(self, monkeypatch) -> None:
        for name in ("ROLODEX_CONTACTS_PATH", "ROLODEX_EMAIL_REQUIRED", "ROLODEX_LOG_DIR"):
            monkeypatch.delenv(name, raising=False)
        assert apply_env_overrides(RolodexConfig()) == RolodexConfig()
