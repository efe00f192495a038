# backend/stayhub/api/v1/events.py
"""
실시간 알림 WebSocket

- /events/ws/dashboard/{tenant_id}: 스태프 대시보드 (tenant 단위 채널)
- /events/ws/customer/{customer_id}: 고객 포털 (고객 단위 채널)

서버 → 클라이언트 이벤트:
- connected: 연결 성공
- notification: 새 알림 (저장된 row 그대로)
"""
import logging
import uuid

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from stayhub.services.ws_manager import customer_channel, dashboard_channel, ws_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"])


async def _serve(websocket: WebSocket, channel: str):
    client_id = str(uuid.uuid4())

    try:
        await ws_manager.connect(websocket, channel, client_id)

        # 연결 유지 (클라이언트 메시지 대기)
        while True:
            try:
                data = await websocket.receive_text()

                # ping 메시지에 pong 응답
                if data == "ping":
                    await websocket.send_json({"type": "pong"})

            except WebSocketDisconnect:
                logger.info(f"WS client {client_id[:8]}... disconnected normally")
                break
            except Exception as e:
                logger.warning(f"WS error for {client_id[:8]}...: {e}")
                break

    except Exception as e:
        logger.error(f"WS connection error on {channel}: {e}")
    finally:
        await ws_manager.disconnect(channel, client_id)


@router.websocket("/ws/dashboard/{tenant_id}")
async def dashboard_websocket(websocket: WebSocket, tenant_id: str):
    await _serve(websocket, dashboard_channel(tenant_id))


@router.websocket("/ws/customer/{customer_id}")
async def customer_websocket(websocket: WebSocket, customer_id: str):
    await _serve(websocket, customer_channel(customer_id))


@router.get("/status")
async def get_status():
    """연결 상태 조회"""
    return {
        "websocket_clients": ws_manager.client_count,
    }
