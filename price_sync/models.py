"""
Price Sync 응답 모델

호출 결과(업데이트된 가격 목록, 주문 처리 결과)를 JSON으로 직렬화합니다.
"""

from pydantic import BaseModel, Field
from typing import Any, List, Optional, Union

from price_sync.markets import MarketType


class PriceUpdate(BaseModel):
    """가격 업데이트 결과 (응답 전용, 저장하지 않음)"""

    symbol: str = Field(..., description="심볼 (예: AAPL)")
    price: Union[int, float] = Field(..., description="현재가")
    market_type: MarketType = Field(..., alias="marketType", description="시장 종류")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "symbol": "BTCUSDT",
                "price": 67250.5,
                "marketType": "crypto"
            }
        }


class SyncResponse(BaseModel):
    """성공 응답"""

    success: bool = True
    prices_updated: List[PriceUpdate] = Field(default_factory=list)
    orders_processed: Optional[Any] = Field(None, description="process_pending_orders 결과")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ErrorResponse(BaseModel):
    """실패 응답"""

    success: bool = False
    error: str
