# backend/stayhub/services/ws_manager.py
"""
WebSocket Manager - 실시간 알림 채널

채널 2종류:
- dashboard:{tenant_id}  → 해당 tenant 대시보드에 접속한 스태프 전체
- customer:{customer_id} → 고객 포털에 접속한 해당 고객

전송 확인(ack)은 받지 않는다. (fire-and-forget)
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def dashboard_channel(tenant_id: str) -> str:
    return f"dashboard:{tenant_id}"


def customer_channel(customer_id: str) -> str:
    return f"customer:{customer_id}"


@dataclass
class WSClient:
    """WebSocket 클라이언트"""
    websocket: WebSocket
    client_id: str
    channel: str
    connected_at: datetime = field(default_factory=datetime.utcnow)


class WebSocketManager:
    """
    WebSocket 연결 관리자

    - 채널별 클라이언트 연결/해제 관리
    - 채널 단위 알림 전송
    """

    def __init__(self):
        self._channels: Dict[str, Dict[str, WSClient]] = {}
        self._lock = asyncio.Lock()

    @property
    def client_count(self) -> int:
        return sum(len(clients) for clients in self._channels.values())

    def channel_count(self, channel: str) -> int:
        return len(self._channels.get(channel, {}))

    async def connect(self, websocket: WebSocket, channel: str, client_id: str):
        """클라이언트 연결"""
        await websocket.accept()

        async with self._lock:
            self._channels.setdefault(channel, {})[client_id] = WSClient(
                websocket=websocket,
                client_id=client_id,
                channel=channel,
            )

        logger.info(f"WS client connected: {client_id[:8]}... channel={channel} (total: {self.client_count})")

        # 연결 성공 메시지 전송
        try:
            await websocket.send_json({
                "type": "connected",
                "client_id": client_id[:8],
                "channel": channel,
                "timestamp": datetime.utcnow().isoformat(),
            })
        except Exception as e:
            logger.warning(f"Failed to send to client {client_id[:8]}...: {e}")

    async def disconnect(self, channel: str, client_id: str):
        """클라이언트 연결 해제"""
        async with self._lock:
            clients = self._channels.get(channel)
            if clients is not None:
                clients.pop(client_id, None)
                if not clients:
                    self._channels.pop(channel, None)
        logger.info(f"WS client disconnected: {client_id[:8]}... channel={channel} (total: {self.client_count})")

    async def send_to_channel(self, channel: str, data: Dict[str, Any]) -> int:
        """채널의 모든 클라이언트에게 전송. 전송 성공 수 반환"""
        clients = self._channels.get(channel)
        if not clients:
            return 0

        if "timestamp" not in data:
            data["timestamp"] = datetime.utcnow().isoformat()

        sent_count = 0
        dead_clients: List[str] = []

        async with self._lock:
            for client_id, client in list(clients.items()):
                try:
                    await client.websocket.send_json(data)
                    sent_count += 1
                except Exception as e:
                    logger.warning(f"Failed to send to {client_id[:8]}... on {channel}: {e}")
                    dead_clients.append(client_id)

        # 죽은 연결 정리
        for client_id in dead_clients:
            await self.disconnect(channel, client_id)

        logger.debug(f"WS send: {data.get('type')} to {sent_count} clients on {channel}")
        return sent_count

    async def emit_dashboard(self, tenant_id: str, notification: Dict[str, Any]) -> int:
        """스태프 대시보드로 알림 전송"""
        return await self.send_to_channel(
            dashboard_channel(tenant_id),
            {"type": "notification", "notification": notification},
        )

    async def emit_customer(self, customer_id: str, notification: Dict[str, Any]) -> int:
        """고객 포털로 알림 전송"""
        return await self.send_to_channel(
            customer_channel(customer_id),
            {"type": "notification", "notification": notification},
        )


# 전역 싱글톤
ws_manager = WebSocketManager()
