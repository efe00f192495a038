# backend/stayhub/core/exceptions.py
"""
Notification 경로 에러 분류

Repository 에서 SQLAlchemyError 를 아래 타입으로 변환하고,
Service 가 발생 지점에서 잡아서 로그 후 no-op 으로 바꾼다.
(알림 실패가 예약/결제 등 비즈니스 로직으로 전파되면 안 됨)
"""
from __future__ import annotations


class NotificationError(Exception):
    """알림 서브시스템 공통 베이스"""


class StoreReadFailure(NotificationError):
    """DB 조회 실패"""


class StoreWriteFailure(NotificationError):
    """DB insert / update / upsert 실패"""


class ChannelEmitFailure(NotificationError):
    """실시간 채널(WebSocket) 전송 실패"""


class ValidationFailure(NotificationError):
    """호출자가 잘못된 인자를 넘김 (tenant_id 누락, recipient 불명확 등)"""
