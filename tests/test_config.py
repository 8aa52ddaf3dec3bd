import tomllib

import pytest

from config import Config, load_config


class TestLoadConfig:
    """Tests for load_config."""

    def test_creates_default_config(self, tmp_path, monkeypatch):
        """Test a missing config file is written with defaults."""
        monkeypatch.setenv("HOME", str(tmp_path))
        config_path = tmp_path / ".config" / "duebook.toml"

        config = load_config(config_path)

        assert config_path.exists()
        assert config.db_filename == "duebook.db"
        assert config.store_backend == "sqlite"
        assert config.monthly_months == 6
        assert config.upcoming_days == 7
        assert config.db_path == tmp_path / "data" / "duebook" / "db" / "duebook.db"

        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        assert data["database"]["backend"] == "sqlite"
        assert data["analytics"]["upcoming_days"] == 7

    def test_reads_existing_config(self, tmp_path):
        """Test values in the file override defaults."""
        config_path = tmp_path / "duebook.toml"
        config_path.write_text(
            f"""
base_dir = "{tmp_path / 'base'}"

[database]
filename = "money.db"
backend = "memory"

[logging]
level = "DEBUG"

[analytics]
monthly_months = 12
upcoming_days = 3
"""
        )

        config = load_config(config_path)

        assert config.db_path == tmp_path / "base" / "db" / "money.db"
        assert config.log_dir == tmp_path / "base" / "logs"
        assert config.log_level == "DEBUG"
        assert config.store_backend == "memory"
        assert config.monthly_months == 12
        assert config.upcoming_days == 3

    def test_rejects_unknown_backend(self, tmp_path):
        config_path = tmp_path / "duebook.toml"
        config_path.write_text('[database]\nbackend = "postgres"\n')

        with pytest.raises(ValueError, match="Unknown store backend"):
            load_config(config_path)

    def test_round_trip_default(self, tmp_path, monkeypatch):
        """Test a written default file loads back to the same config."""
        monkeypatch.setenv("HOME", str(tmp_path))
        config_path = tmp_path / "duebook.toml"

        written = load_config(config_path)
        loaded = load_config(config_path)

        assert loaded == written == Config.default()
