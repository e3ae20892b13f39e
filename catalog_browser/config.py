from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    data_path: Path = Path("data/items.json")
    api_prefix: str = ""
    default_page_size: int = 10
    cors_allow_origins: List[str] = ["http://localhost:3000"]
    environment: str = "development"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3001

    model_config = SettingsConfigDict(env_prefix="CATALOG_", env_file=".env")


settings = Settings()
