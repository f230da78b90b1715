from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables (prefix ``NCG_``)."""

    model_config = SettingsConfigDict(
        env_prefix="NCG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")
    allowed_origins: str = Field(default="http://localhost:5173", description="CORS allowed origins")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # Canvas Configuration
    default_canvas_width: float = Field(default=800.0, description="Default drawing width")
    default_canvas_height: float = Field(default=600.0, description="Default drawing height")

    # Storage / reproducibility
    data_dir: str = Field(default="./graphs", description="Directory for saved graph files")
    random_seed: Optional[str] = Field(
        default=None, description="Seed for session random sources (unset = unpredictable)"
    )

    @property
    def cors_origins(self) -> list[str]:
        """Split the comma separated CORS origins."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


# Instantiate singleton settings object
settings = Settings()
