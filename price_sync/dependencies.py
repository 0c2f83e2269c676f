"""
API 의존성 주입 (Dependency Injection)

FastAPI의 Depends를 사용하여 서비스 레이어를 주입합니다.
호출마다 새 서비스를 만들고, 요청이 끝나면 HTTP 클라이언트를 닫습니다.
"""

from typing import AsyncGenerator

from fastapi import Depends

from price_sync.config import Settings, get_settings
from price_sync.itick_client import ITickClient
from price_sync.store import SupabaseStore
from price_sync.sync_service import PriceSyncService


async def get_price_sync_service(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[PriceSyncService, None]:
    """
    PriceSyncService 의존성 주입

    Returns:
        PriceSyncService: 가격 동기화 서비스 인스턴스
    """
    quote_client = ITickClient(settings)
    try:
        yield PriceSyncService(
            store=SupabaseStore(settings),
            quote_provider=quote_client,
        )
    finally:
        await quote_client.close()
