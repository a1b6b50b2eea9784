"""Configuration management for pgboot."""

import os
from urllib.parse import quote
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class DatabaseConfig:
    """Database configuration."""
    
    def __init__(self):
        self.url = os.getenv('DATABASE_URL')
        self.user = os.getenv('DB_USER', 'postgres')
        self.host = os.getenv('DB_HOST', 'localhost')
        self.database = os.getenv('DB_NAME', 'postgres')
        self.password = os.getenv('DB_PASSWORD', 'postgres')
        self.port = int(os.getenv('DB_PORT', '5432'))
        self.lazy = os.getenv('DB_LAZY_CONNECT', 'false').lower() == 'true'

    @property
    def dsn(self) -> str:
        """DATABASE_URL if set, otherwise a URL built from the DB_* variables."""
        if self.url:
            return self.url
        credentials = quote(self.user, safe='')
        if self.password:
            credentials += ':' + quote(self.password, safe='')
        return f"postgresql://{credentials}@{self.host}:{self.port}/{quote(self.database, safe='')}"


class AppConfig:
    """Application configuration."""
    
    def __init__(self):
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.debug = os.getenv('DEBUG', 'false').lower() == 'true'


# Global configuration instances
db_config = DatabaseConfig()
app_config = AppConfig()
