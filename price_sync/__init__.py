"""
Price Sync Service

대기 주문이 참조하는 심볼의 현재가를 iTick API로 조회하여
Supabase에 반영하고 대기 주문 처리를 트리거하는 마이크로서비스입니다.

Architecture:
- Supabase transactions 테이블 (status='pending')
- 심볼별 시장 판별 (stock/crypto/forex/indices)
- iTick 시세조회 → update_current_price RPC
- process_pending_orders RPC
"""

__version__ = "1.0.0"
