from typing import Any, Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Optional default connection. Left unset, connections are added in code.
    DB_DRIVER: Optional[str] = None
    DB_DATABASE: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: Optional[int] = None
    DB_USERNAME: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_CHARSET: Optional[str] = None
    DB_COLLATION: Optional[str] = None
    DB_PREFIX: Optional[str] = None

    # Initial state of the model event system for the default bootstrap
    EVENTS_ENABLED: bool = False

    # echo=True logs every statement; keep it off outside local debugging
    ECHO_SQL: bool = False

    LOG_LEVEL: str = "INFO"

    # Reads FOLDED_* variables, falling back to a .env file in the working directory
    model_config = SettingsConfigDict(env_prefix="FOLDED_", env_file=".env", extra="ignore")

    def default_connection(self) -> Optional[Dict[str, Any]]:
        """
        Builds a connection descriptor from the DB_* settings.
        Returns None when no driver is configured.
        """
        if self.DB_DRIVER is None:
            return None

        fields = {
            "driver": self.DB_DRIVER,
            "database": self.DB_DATABASE,
            "host": self.DB_HOST,
            "port": self.DB_PORT,
            "username": self.DB_USERNAME,
            "password": self.DB_PASSWORD,
            "charset": self.DB_CHARSET,
            "collation": self.DB_COLLATION,
            "prefix": self.DB_PREFIX,
        }
        return {key: value for key, value in fields.items() if value is not None}

# Singleton instance
settings = Settings()
