"""Configuration management for Duebook.

Reads configuration from ~/.config/duebook.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
import tomllib
import tomli_w

STORE_BACKENDS = ("sqlite", "memory")


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    store_backend: str = "sqlite"
    monthly_months: int = 6
    upcoming_days: int = 7

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "duebook"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="duebook.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "duebook.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def load_config(config_path: Path = None) -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Args:
        config_path: Optional override for the config file location.

    Returns:
        Config object with loaded or default values.

    Raises:
        ValueError: If the configured store backend is unknown.
    """
    config_path = config_path or get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config, config_path)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse with defaults for any missing values
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "duebook"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "duebook.db")
    store_backend = db_config.get("backend", "sqlite")
    if store_backend not in STORE_BACKENDS:
        raise ValueError(
            f"Unknown store backend '{store_backend}'. "
            f"Must be one of: {', '.join(STORE_BACKENDS)}"
        )

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    analytics_config = data.get("analytics", {})
    monthly_months = int(analytics_config.get("monthly_months", 6))
    upcoming_days = int(analytics_config.get("upcoming_days", 7))

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        store_backend=store_backend,
        monthly_months=monthly_months,
        upcoming_days=upcoming_days,
    )


def _write_config(config: Config, config_path: Path = None) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
        config_path: Optional override for the config file location.
    """
    config_path = config_path or get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
            "backend": config.store_backend,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "analytics": {
            "monthly_months": config.monthly_months,
            "upcoming_days": config.upcoming_days,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
