"""
Price Sync Service - Main Entry Point

대기 주문 심볼의 현재가를 iTick API로 조회해 Supabase에 반영하고
대기 주문 처리를 트리거하는 HTTP 서비스입니다.

Architecture:
- 호출 1회 = 동기화 1회 (요청 메서드/본문 무시)
- 심볼별 순차 처리, 재시도 없음
- 스케줄링/호출자 인증은 외부(호스팅 플랫폼)에서 담당

Usage:
    python3 -m price_sync.main
"""

import logging
import sys

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from price_sync import __version__
from price_sync.config import get_settings
from price_sync.dependencies import get_price_sync_service
from price_sync.models import ErrorResponse
from price_sync.sync_service import PriceSyncService

settings = get_settings()

# Logging setup
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

# httpx 로그 레벨을 WARNING으로 설정 (HTTP 요청 로그 숨기기)
logging.getLogger('httpx').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

INVOKE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

app = FastAPI(
    title="Price Sync Service",
    description="대기 주문 심볼 현재가 동기화",
    version=__version__,
)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "price-sync",
    }


@app.api_route("/", methods=INVOKE_METHODS)
@app.api_route("/fetch_market_prices", methods=INVOKE_METHODS)
async def fetch_market_prices(
    service: PriceSyncService = Depends(get_price_sync_service),
):
    """
    가격 동기화 1회 실행

    Returns:
        200: {success: true, prices_updated: [...], orders_processed: ...}
        500: {success: false, error: "..."}
    """
    try:
        result = await service.run()
    except Exception as e:
        logger.error(f"❌ 가격 동기화 실패: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=str(e)).model_dump(),
        )

    return JSONResponse(content=result.to_json())


if __name__ == "__main__":
    logger.info("🚀 Price Sync Service Starting...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Log Level: {settings.LOG_LEVEL}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
