"""
iTick REST API Client

iTick 시세 API로 종목/코인/외환/지수의 현재가를 조회합니다.

Features:
- 시장 종류별 엔드포인트 선택 ({endpoint}/quote)
- token 헤더 인증
- 재시도 없음 (실패 시 QuoteError, 호출 측에서 처리)
"""

import httpx
import logging
from typing import Any, Dict, Optional

from price_sync.config import Settings
from price_sync.markets import MarketClassification, quote_endpoint

logger = logging.getLogger(__name__)


class QuoteError(Exception):
    """시세 조회 실패 (네트워크, HTTP 상태, 응답 형식, API 오류 코드)"""


class ITickClient:
    """iTick REST API 클라이언트"""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.base_url = settings.ITICK_BASE_URL
        self.api_key = settings.ITICK_API_KEY

        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=settings.ITICK_TIMEOUT,
        )

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()

    async def fetch_quote(self, symbol: str, classification: MarketClassification) -> Dict[str, Any]:
        """
        단일 심볼 시세조회

        Args:
            symbol: 심볼 (예: 'AAPL', 'BTCUSDT')
            classification: classify_symbol() 결과

        Returns:
            응답의 data 객체 (예: {'ld': 189.5, 'o': 187.0, ...})

        Raises:
            QuoteError: 조회 실패
        """
        endpoint = quote_endpoint(classification.market_type)
        url = f"/{endpoint}/quote"

        headers = {
            "token": self.api_key,
            "Content-Type": "application/json",
        }
        params = {
            "code": symbol,
            "region": classification.region.value,
        }

        try:
            response = await self.client.get(url, headers=headers, params=params)
        except httpx.HTTPError as e:
            raise QuoteError(f"{symbol} 요청 실패: {e}") from e

        if response.status_code != 200:
            raise QuoteError(f"{symbol} API 응답 실패 ({response.status_code}): {response.text}")

        try:
            body = response.json()
        except ValueError as e:
            raise QuoteError(f"{symbol} 응답 JSON 파싱 실패: {e}") from e

        if not isinstance(body, dict):
            raise QuoteError(f"{symbol} 응답 형식 오류: {body!r}")

        # API 응답 확인 (code == 0 이 정상)
        if body.get("code") != 0:
            raise QuoteError(f"{symbol} API 오류 (code={body.get('code')}): {body.get('msg')}")

        data = body.get("data")
        if not data or not isinstance(data, dict):
            raise QuoteError(f"{symbol} 응답 데이터 없음")

        logger.debug(f"{symbol} 시세 수신: {data}")
        return data
