"""
Store operations for Price Sync Service

supabase-py 클라이언트로 transactions 테이블을 조회하고
update_current_price / process_pending_orders RPC를 호출합니다.
"""

import httpx
import logging
from typing import Any, List, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from price_sync.config import Settings

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Store 쿼리/RPC 실패"""


def _error_message(error: Exception) -> str:
    """APIError는 message 필드, 그 외는 str()"""
    message = getattr(error, "message", None)
    return message or str(error)


class SupabaseStore:
    """Supabase store operations"""

    def __init__(self, settings: Settings, client: Optional[Client] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> Client:
        """
        Supabase 클라이언트 (첫 호출 시 생성)

        URL/키가 비어 있으면 여기서 실패합니다.
        """
        if self._client is None:
            try:
                self._client = create_client(
                    self.settings.SUPABASE_URL,
                    self.settings.SUPABASE_SERVICE_ROLE_KEY,
                )
            except Exception as e:
                raise StoreError(_error_message(e)) from e
        return self._client

    def fetch_pending_symbols(self) -> List[str]:
        """
        대기 주문 심볼 조회 (status='pending', symbol 정렬)

        Returns:
            심볼 리스트 (중복 포함, 예: ['AAPL', 'AAPL', 'BTCUSDT'])

        Raises:
            StoreError: 쿼리 실패
        """
        try:
            response = (
                self.client.table(self.settings.TRANSACTIONS_TABLE)
                .select("symbol, order_type")
                .eq("status", "pending")
                .order("symbol")
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise StoreError(_error_message(e)) from e

        rows = response.data or []
        logger.info(f"📊 대기 주문 {len(rows)}건 조회")
        return [row["symbol"] for row in rows]

    def update_price(self, symbol: str, price: Any) -> None:
        """
        현재가 업데이트 (update_current_price RPC)

        Raises:
            StoreError: RPC 실패
        """
        try:
            self.client.rpc(
                "update_current_price",
                {"p_symbol": symbol, "p_price": price},
            ).execute()
        except (APIError, httpx.HTTPError) as e:
            raise StoreError(_error_message(e)) from e

    def process_pending_orders(self) -> Any:
        """
        대기 주문 처리 (process_pending_orders RPC)

        Returns:
            RPC 결과 (형식은 store 구현에 따름)

        Raises:
            StoreError: RPC 실패
        """
        try:
            response = self.client.rpc("process_pending_orders", {}).execute()
        except (APIError, httpx.HTTPError) as e:
            raise StoreError(_error_message(e)) from e

        return response.data
