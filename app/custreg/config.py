import os
from dataclasses import dataclass


class ConfigurationError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    database_path: str
    env: str
    log_level: str

    @property
    def database_url(self) -> str:
        return f"sqlite:///{require_database_path(self)}"


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def load_settings() -> Settings:
    return Settings(
        database_path=_getenv("CUSTREG_DATABASE_PATH", ""),
        env=_getenv("CUSTREG_ENV", "development"),
        log_level=_getenv("CUSTREG_LOG_LEVEL", "INFO").upper(),
    )


def require_database_path(settings: Settings) -> str:
    path = (settings.database_path or "").strip()
    if not path:
        raise ConfigurationError("Database path not set (CUSTREG_DATABASE_PATH).")
    return path
