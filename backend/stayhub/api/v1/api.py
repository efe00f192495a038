# backend/stayhub/api/v1/api.py
"""
StayHub API Router
- 알림 (대시보드 / 고객 포털)
- 실시간 이벤트 (WebSocket)
- 스케줄러 관리
"""
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from stayhub.api.v1 import (
    events,
    notifications,
    portal_notifications,
)

api_router = APIRouter()

# ✅ 스태프 대시보드 알림
api_router.include_router(notifications.router)

# ✅ 고객 포털 알림
api_router.include_router(portal_notifications.router)

# ✅ 실시간 알림 채널
api_router.include_router(events.router)


# ============================================================
# Scheduler API (관리용)
# ============================================================

class SchedulerStatusResponse(BaseModel):
    running: bool
    schedule: Optional[str] = None
    next_run: Optional[str] = None


class SchedulerRunResponse(BaseModel):
    status: str
    counts: Dict[str, int]


@api_router.get("/scheduler/status", response_model=SchedulerStatusResponse, tags=["Scheduler"])
def get_scheduler_status():
    """스케줄러 상태 조회"""
    from stayhub.core.config import settings
    from stayhub.services.scheduler import JOB_ID, get_scheduler

    scheduler = get_scheduler()
    if scheduler is None:
        return SchedulerStatusResponse(running=False)

    job = scheduler.get_job(JOB_ID)
    next_run = None
    if job and job.next_run_time:
        next_run = job.next_run_time.isoformat()

    return SchedulerStatusResponse(
        running=scheduler.running,
        schedule=(
            f"daily {settings.SCHEDULED_NOTIFICATIONS_HOUR:02d}:"
            f"{settings.SCHEDULED_NOTIFICATIONS_MINUTE:02d}"
        ),
        next_run=next_run,
    )


@api_router.post("/scheduler/run-now", response_model=SchedulerRunResponse, tags=["Scheduler"])
async def run_scheduler_now():
    """스케줄 알림 Job 즉시 실행"""
    from stayhub.services.scheduler import run_job_now

    try:
        counts = await run_job_now()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    return SchedulerRunResponse(status="ok", counts=counts)
