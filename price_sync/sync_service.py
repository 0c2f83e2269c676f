"""
Price Sync Service

대기 주문의 심볼별 현재가를 조회해 store에 반영하고,
가격이 하나라도 갱신되면 대기 주문 처리를 실행합니다.

Sync Strategy:
1. transactions에서 status='pending' 주문의 심볼 조회
2. 심볼 중복 제거
3. 심볼별 순차 처리: 시장 판별 → iTick 시세조회 → update_current_price
4. 갱신된 가격이 있으면 process_pending_orders 실행
5. 결과 요약 반환

Note:
- 심볼 단위 실패(시세조회/가격 저장)는 로그만 남기고 다음 심볼 진행
- 대기 주문 조회 실패는 전체 실패 (예외 전파)
- 대기 주문 처리 실패는 로그만 남김 (orders_processed = None)
- 동기 store 호출은 스레드풀에서 실행
- 재시도 없음
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Protocol

from fastapi.concurrency import run_in_threadpool

from price_sync.markets import MarketClassification, Price, classify_symbol, extract_price
from price_sync.models import PriceUpdate, SyncResponse

logger = logging.getLogger(__name__)


class QuoteProvider(Protocol):
    """시세 제공자 (ITickClient)"""

    async def fetch_quote(self, symbol: str, classification: MarketClassification) -> Dict[str, Any]:
        ...


class PriceStore(Protocol):
    """가격 저장소 (SupabaseStore)"""

    def fetch_pending_symbols(self) -> List[str]:
        ...

    def update_price(self, symbol: str, price: Price) -> None:
        ...

    def process_pending_orders(self) -> Any:
        ...


def unique_symbols(symbols: Iterable[str]) -> List[str]:
    """중복 제거 (첫 등장 순서 유지)"""
    return list(dict.fromkeys(symbols))


class PriceSyncService:
    """가격 동기화 서비스"""

    def __init__(self, store: PriceStore, quote_provider: QuoteProvider):
        self.store = store
        self.quote_provider = quote_provider

    async def run(self) -> SyncResponse:
        """
        1회 동기화 실행

        Returns:
            SyncResponse (prices_updated, orders_processed)

        Raises:
            Exception: 대기 주문 조회 실패 등 치명적인 오류
        """
        cycle_start = time.time()

        # 1. 대기 주문 심볼 (실패 시 전파)
        symbols = unique_symbols(await run_in_threadpool(self.store.fetch_pending_symbols))
        logger.info(f"🔄 가격 동기화 시작 ({len(symbols)}개 심볼)")

        # 2. 심볼별 순차 처리
        price_updates: List[PriceUpdate] = []
        for symbol in symbols:
            update = await self._sync_symbol(symbol)
            if update is not None:
                price_updates.append(update)

        # 3. 대기 주문 처리
        orders_processed = None
        if price_updates:
            try:
                orders_processed = await run_in_threadpool(self.store.process_pending_orders)
            except Exception as e:
                logger.error(f"❌ 대기 주문 처리 실패: {e}")

        cycle_time = time.time() - cycle_start
        logger.info(
            f"✅ 가격 동기화 완료 "
            f"({cycle_time:.1f}초 | 성공 {len(price_updates)}개 | "
            f"실패/건너뜀 {len(symbols) - len(price_updates)}개)"
        )

        return SyncResponse(
            prices_updated=price_updates,
            orders_processed=orders_processed,
        )

    async def _sync_symbol(self, symbol: str) -> Optional[PriceUpdate]:
        """단일 심볼 시세조회 + 저장 (실패 시 None)"""
        classification = classify_symbol(symbol)

        try:
            data = await self.quote_provider.fetch_quote(symbol, classification)
            price = extract_price(data)
        except Exception as e:
            logger.error(f"❌ Error fetching price for {symbol}: {e}")
            return None

        if price is None:
            logger.warning(f"⚠️ {symbol} 현재가 없음 - 건너뜀")
            return None

        try:
            await run_in_threadpool(self.store.update_price, symbol, price)
        except Exception as e:
            logger.error(f"❌ Error updating price for {symbol}: {e}")
            return None

        return PriceUpdate(
            symbol=symbol,
            price=price,
            market_type=classification.market_type,
        )
