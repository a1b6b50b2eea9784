"""Connection data models."""

from typing import Dict, Optional
from urllib.parse import quote
from pydantic import BaseModel, ConfigDict, Field


class ConnectionConfig(BaseModel):
    """Parsed connection parameters plus forced session parameters."""

    model_config = ConfigDict(frozen=True)

    host: str = 'localhost'
    port: int = 5432
    user: str = 'postgres'
    password: Optional[str] = None
    database: str = 'postgres'
    ssl: Optional[str] = None  # sslmode, e.g. 'disable', 'require'
    connect_timeout: Optional[float] = None  # seconds
    min_size: int = 1
    max_size: int = 10
    runtime_params: Dict[str, str] = Field(default_factory=dict)
    lazy: bool = False

    def server_settings(self) -> Dict[str, str]:
        """Return a copy of the session parameters for the driver."""
        return dict(self.runtime_params)

    def safe_dsn(self) -> str:
        """Render the address as a URL with the password masked."""
        credentials = quote(self.user, safe='')
        if self.password is not None:
            credentials += ':***'
        host = f'[{self.host}]' if ':' in self.host else self.host
        return f"postgresql://{credentials}@{host}:{self.port}/{quote(self.database, safe='')}"


class SettingObservation(BaseModel):
    """A server setting read during startup validation."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    description: Optional[str] = None
