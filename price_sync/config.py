"""
Configuration settings for Price Sync Service

환경 변수를 통해 설정을 관리합니다.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_FILE = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings"""

    # Environment
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # iTick quote API
    # 값이 비어 있어도 시작 시 검증하지 않음 (호출 시점에 실패)
    ITICK_API_KEY: str = ""
    ITICK_BASE_URL: str = "https://api.itick.org"
    ITICK_TIMEOUT: Optional[float] = None  # None = 타임아웃 없음

    # Supabase store
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    TRANSACTIONS_TABLE: str = "transactions"

    class Config:
        env_file = str(ENV_FILE)
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings (loaded once)"""
    return Settings()
