from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from typing import List, Optional
import os
from pathlib import Path

root_dir = Path(__file__).parent.parent
env_path = root_dir / ".env"
load_dotenv(env_path)

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "FileDispatch"
    DEBUG: bool = False

    # Base de données (SQLite embarquée par défaut)
    DATABASE_URL: str = "sqlite:///./filedispatch.db"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # Journal et annulation
    UNDO_HISTORY_LIMIT: int = 50
    LOG_PAGE_LIMIT: int = 100

    # Interface
    CORS_ORIGINS: List[str] = ["*"]

    # Client de la surface de commandes
    BACKEND_URL: str = "http://127.0.0.1:8000"
    BACKEND_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = "ignore"
        case_sensitive = True

try:
    settings = Settings()
except Exception as e:
    print(f"❌ Settings creation failed: {e}")
    print(f"❌ Available environment variables:")
    for key, value in os.environ.items():
        if any(prefix in key for prefix in ['DATABASE', 'LOG_', 'APP', 'DEBUG', 'BACKEND', 'UNDO']):
            print(f"   {key}: {value}")
    raise
