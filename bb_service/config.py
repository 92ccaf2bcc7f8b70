"""
Service configuration

Settings are read from the environment once at startup and passed down
explicitly; nothing below the app factory reads os.environ.
"""

import os
import tempfile
from dataclasses import dataclass, field
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for bb-service"""
    bb_path: str = "bb"
    scheme: str = "ultra_honk"
    noir_execute_path: str = "noir-execute"
    workspace_root: str = field(default_factory=tempfile.gettempdir)
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    json_logs: bool = True

    @classmethod
    def from_env(cls, workspace_root: Optional[str] = None) -> 'Settings':
        return cls(
            bb_path=os.getenv('BB_PATH', 'bb'),
            scheme=os.getenv('BB_SCHEME', 'ultra_honk'),
            noir_execute_path=os.getenv('NOIR_EXECUTE_PATH', 'noir-execute'),
            workspace_root=workspace_root or os.getenv('BB_WORKSPACE_ROOT') or tempfile.gettempdir(),
            host=os.getenv('BB_SERVICE_HOST', '0.0.0.0'),
            port=int(os.getenv('BB_SERVICE_PORT', '3000')),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            json_logs=_env_bool('LOG_JSON', True),
        )
