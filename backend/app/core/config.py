"""
Centralized application configuration
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application configuration"""

    # API Settings
    API_TITLE: str = "Fresh Choice Inventory API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Inventory, vendor, invoice and shopping list management for Fresh Choice"
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "postgresql://localhost:5432/freshchoice"
    INIT_DB_ON_STARTUP: bool = True

    # Auth
    JWT_SECRET: Optional[str] = None
    JWT_EXPIRE_HOURS: int = 24
    AUTH_RATE_LIMIT: int = 5
    AUTH_RATE_WINDOW_SECONDS: int = 15 * 60
    # Honour X-Forwarded-For only behind a trusted reverse proxy
    TRUST_PROXY_HEADERS: bool = False

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:5000,https://yourdomain.com" or '["http://localhost:5000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:5000,http://127.0.0.1:5000,http://localhost:5001,http://127.0.0.1:5001"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:5000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
