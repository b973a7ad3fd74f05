"""
Environment-driven settings for the Courtside rotation application.

Values are read from the process environment after loading an optional
``.env`` file.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def get_env_variable(var_name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(var_name, default)
    if value is not None and not value.strip():
        return default
    return value


@dataclass
class Settings:
    """
    Deployment settings.

    Attributes:
        supabase_url: Base URL of the hosted roster database (optional)
        supabase_key: Service-role or anon key for the roster database
        admin_password: Password required for administrative resets
        roster_file: JSON roster file used when no remote store is configured
        host: Web server bind address
        port: Web server port
        log_level: Root logging level name
    """
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    admin_password: Optional[str] = None
    roster_file: str = "roster.json"
    host: str = "127.0.0.1"
    port: int = 7122
    log_level: str = "INFO"

    @property
    def remote_store_configured(self) -> bool:
        return bool(self.supabase_url or self.supabase_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            supabase_url=get_env_variable("SUPABASE_URL"),
            supabase_key=(
                get_env_variable("SUPABASE_SERVICE_ROLE")
                or get_env_variable("SUPABASE_ANON_KEY")
            ),
            admin_password=get_env_variable("ADMIN_PASSWORD"),
            roster_file=get_env_variable("COURTSIDE_ROSTER_FILE", "roster.json"),
            host=get_env_variable("COURTSIDE_HOST", "127.0.0.1"),
            port=int(get_env_variable("COURTSIDE_PORT", "7122")),
            log_level=get_env_variable("COURTSIDE_LOG_LEVEL", "INFO").upper(),
        )
