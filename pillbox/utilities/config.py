"""Configuration management for the Pillbox application."""
import os
from typing import Final, Optional
from pathlib import Path

from dotenv import load_dotenv

from pillbox.utilities.errors import ConfigurationError

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)


def _flag(name: str, default: str = 'False') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


# Backend connection
SUPABASE_URL: Final[str] = os.getenv('SUPABASE_URL', '')
SUPABASE_ANON_KEY: Final[str] = os.getenv('SUPABASE_ANON_KEY', '')

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = _flag('DEBUG')
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()

# Household behaviour
DEFAULT_FAMILY_NAME: Final[str] = os.getenv('DEFAULT_FAMILY_NAME', 'Famiglia')
INTAKE_GUARD_TRANSITIONS: Final[bool] = _flag('INTAKE_GUARD_TRANSITIONS')
BULK_MAX_WORKERS: Final[int] = int(os.getenv('BULK_MAX_WORKERS', '8'))

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
TEMPLATES_DIR: Final[Path] = BASE_DIR / 'templates'


class Settings:
    """Snapshot of the configuration handed to the app factory.

    Tests build their own instance instead of patching module constants.
    """

    def __init__(self, supabase_url: str = "", supabase_key: str = "",
                 default_family_name: str = DEFAULT_FAMILY_NAME,
                 guard_transitions: bool = INTAKE_GUARD_TRANSITIONS,
                 bulk_max_workers: int = BULK_MAX_WORKERS):
        self.supabase_url = (supabase_url or "").strip()
        self.supabase_key = (supabase_key or "").strip()
        self.default_family_name = default_family_name
        self.guard_transitions = guard_transitions
        self.bulk_max_workers = max(1, int(bulk_max_workers))

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            supabase_url=os.getenv('SUPABASE_URL', SUPABASE_URL),
            supabase_key=os.getenv('SUPABASE_ANON_KEY', SUPABASE_ANON_KEY),
            default_family_name=os.getenv('DEFAULT_FAMILY_NAME', DEFAULT_FAMILY_NAME),
            guard_transitions=_flag('INTAKE_GUARD_TRANSITIONS', str(INTAKE_GUARD_TRANSITIONS)),
            bulk_max_workers=int(os.getenv('BULK_MAX_WORKERS', str(BULK_MAX_WORKERS))),
        )

    def missing(self) -> list[str]:
        """Names of the connection parameters that are not set."""
        names = []
        if not self.supabase_url:
            names.append('SUPABASE_URL')
        if not self.supabase_key:
            names.append('SUPABASE_ANON_KEY')
        return names

    @property
    def is_configured(self) -> bool:
        return not self.missing()

    def require(self) -> "Settings":
        missing = self.missing()
        if missing:
            raise ConfigurationError(
                f"Missing environment variables: {', '.join(missing)}. "
                "Add them to .env and restart the server."
            )
        return self

    def __repr__(self) -> str:
        host: Optional[str] = self.supabase_url or None
        return f"Settings(supabase_url={host!r}, configured={self.is_configured})"
