"""
Market classification

심볼 형식으로 시장 종류(stock/crypto/forex/indices)와 iTick region을 판별하고,
시세 응답에서 현재가를 추출합니다.

Classification (first match wins):
- "USD" 포함 or "USDT"로 끝남 → crypto / ba
- "/" 포함                   → forex / gb
- "^"로 시작                  → indices / gb
- 그 외                       → stock / us
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

Price = Union[int, float]

# 현재가 후보 필드 (우선순위 순)
PRICE_FIELDS = ("ld", "price", "c")


class MarketType(str, Enum):
    """시장 종류"""
    STOCK = "stock"
    CRYPTO = "crypto"
    FOREX = "forex"
    INDICES = "indices"


class Region(str, Enum):
    """iTick region 코드"""
    US = "us"
    BA = "ba"
    GB = "gb"


@dataclass(frozen=True)
class MarketClassification:
    market_type: MarketType
    region: Region


def classify_symbol(symbol: str) -> MarketClassification:
    """
    심볼의 시장 종류와 region 판별

    Args:
        symbol: 종목/상품 심볼 (예: 'AAPL', 'BTCUSDT', 'EUR/USD', '^GSPC')

    Returns:
        MarketClassification
    """
    if "USD" in symbol or symbol.endswith("USDT"):
        return MarketClassification(MarketType.CRYPTO, Region.BA)
    if "/" in symbol:
        return MarketClassification(MarketType.FOREX, Region.GB)
    if symbol.startswith("^"):
        return MarketClassification(MarketType.INDICES, Region.GB)
    return MarketClassification(MarketType.STOCK, Region.US)


def quote_endpoint(market_type: MarketType) -> str:
    """시세 API 경로 세그먼트 ('stock', 'crypto', 'forex', 'indices')"""
    if market_type == MarketType.STOCK:
        return "stock"
    return market_type.value


def extract_price(data: Dict[str, Any]) -> Optional[Price]:
    """
    시세 응답의 data 객체에서 현재가 추출

    ld → price → c 순서로 첫 번째 truthy 값을 사용합니다.
    모두 비어 있거나 0이면 None (해당 심볼은 업데이트하지 않음).

    Raises:
        ValueError: 숫자로 변환할 수 없는 값, NaN/inf
    """
    value = None
    for field in PRICE_FIELDS:
        value = data.get(field)
        if value:
            break

    if not value:
        return None

    if isinstance(value, bool):
        raise ValueError(f"malformed price: {value!r}")
    if not isinstance(value, (int, float)):
        # 문자열 등은 숫자로 변환 시도
        value = float(value)

    if not math.isfinite(value):
        raise ValueError(f"non-finite price: {value!r}")
    return value
