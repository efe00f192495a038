# backend/stayhub/services/scheduler.py
"""
StayHub Scheduler Service (APScheduler 기반)

매일 1회 (기본 08:00) 시간 기반 고객 알림을 생성합니다.
- 내일 체크인 예정 → 예약 리마인더
- 오늘 체크인 → 체크인 리마인더 (객실 체크인 시간 포함)
- 체크인 지났는데 미결제 → 결제 연체 알림

중복 발송 방지 키는 없음. 같은 날 두 번 돌리면 두 번 발송된다.

사용법:
    from stayhub.services.scheduler import start_scheduler, shutdown_scheduler

    # FastAPI lifespan에서
    start_scheduler()
    ...
    shutdown_scheduler()
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from stayhub.core.config import settings
from stayhub.core.exceptions import NotificationError
from stayhub.repositories.booking_repository import BookingRepository
from stayhub.services.notification_events import NotificationEvents

# 로거 설정
logger = logging.getLogger("stayhub.scheduler")
logger.setLevel(logging.INFO)

# 콘솔 핸들러 추가 (서버 로그에 출력)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s [SCHEDULER] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

JOB_ID = "scheduled_notifications_job"

# 전역 스케줄러 인스턴스
_scheduler: Optional[AsyncIOScheduler] = None


def _timezone() -> Optional[ZoneInfo]:
    if not settings.SCHEDULER_TIMEZONE:
        return None
    return ZoneInfo(settings.SCHEDULER_TIMEZONE)


def local_today() -> date:
    """스케줄러 기준 '오늘' (SCHEDULER_TIMEZONE 없으면 서버 로컬)"""
    return datetime.now(_timezone()).date()


def _booking_target(booking) -> Dict[str, Any]:
    """
    알림에 필요한 값만 미리 복사.
    발송 중 rollback 으로 ORM 객체가 만료돼도 다시 조회하지 않도록 한다.
    """
    room = booking.room
    return {
        "tenant_id": booking.tenant_id,
        "customer_id": booking.customer_id,
        "booking_id": booking.id,
        "room_name": room.name if room is not None else "your room",
        "check_in_time": room.check_in_time if room is not None else None,
        "check_in": booking.check_in,
        "check_out": booking.check_out,
        "amount": booking.total_amount,
        "currency": booking.currency,
    }


def _load_targets(query, label: str) -> List[Dict[str, Any]]:
    try:
        return [_booking_target(b) for b in query()]
    except NotificationError as e:
        logger.error(f"  → {label} 대상 조회 실패: {e}")
        return []


async def run_scheduled_notifications(
    db: Optional[Session] = None,
    today: Optional[date] = None,
    events: Optional[NotificationEvents] = None,
) -> Dict[str, int]:
    """
    시간 기반 알림 생성

    카운트는 '시도' 횟수 (notify 는 fire-and-forget 이라 실제 저장 여부는 모름).
    예약 1건 실패는 다음 예약에, 카테고리 1개 실패는 다음 카테고리에 영향 없음.
    도중에 예상 못한 오류가 나도 그때까지의 카운트를 돌려준다.
    """
    from stayhub.db.session import SessionLocal

    counts = {"booking_reminders": 0, "check_in_reminders": 0, "payment_overdue": 0}

    owns_session = db is None
    if owns_session:
        db = SessionLocal()

    today = today or local_today()
    tomorrow = today + timedelta(days=1)

    start_time = datetime.utcnow()
    logger.info("=" * 60)
    logger.info("Scheduled Notifications Job 시작")
    logger.info(f"  기준일: {today.isoformat()} (내일: {tomorrow.isoformat()})")
    logger.info("=" * 60)

    try:
        repo = BookingRepository(db)
        events = events or NotificationEvents(db)

        # 1) 내일 체크인 → 예약 리마인더
        logger.info("[Step 1/3] 예약 리마인더 (내일 체크인)")
        targets = _load_targets(lambda: repo.list_confirmed_arrivals(tomorrow), "예약 리마인더")

        for t in targets:
            try:
                counts["booking_reminders"] += 1
                await events.notify_customer_booking_reminder(
                    tenant_id=t["tenant_id"],
                    customer_id=t["customer_id"],
                    booking_id=t["booking_id"],
                    room_name=t["room_name"],
                    check_in=t["check_in"],
                    check_out=t["check_out"],
                )
            except Exception as e:
                logger.error(f"  → booking {t['booking_id']} 예약 리마인더 실패: {e}")
        logger.info(f"  → {counts['booking_reminders']}건")

        # 2) 오늘 체크인 → 체크인 리마인더
        logger.info("[Step 2/3] 체크인 리마인더 (오늘 체크인)")
        targets = _load_targets(lambda: repo.list_confirmed_arrivals(today), "체크인 리마인더")

        for t in targets:
            try:
                counts["check_in_reminders"] += 1
                await events.notify_customer_check_in_reminder(
                    tenant_id=t["tenant_id"],
                    customer_id=t["customer_id"],
                    booking_id=t["booking_id"],
                    room_name=t["room_name"],
                    check_in_time=t["check_in_time"],
                )
            except Exception as e:
                logger.error(f"  → booking {t['booking_id']} 체크인 리마인더 실패: {e}")
        logger.info(f"  → {counts['check_in_reminders']}건")

        # 3) 체크인 지났는데 미결제 → 연체 알림
        logger.info("[Step 3/3] 결제 연체 알림")
        targets = _load_targets(lambda: repo.list_payment_overdue(today), "결제 연체")

        for t in targets:
            try:
                counts["payment_overdue"] += 1
                await events.notify_customer_payment_overdue(
                    tenant_id=t["tenant_id"],
                    customer_id=t["customer_id"],
                    booking_id=t["booking_id"],
                    room_name=t["room_name"],
                    amount=t["amount"],
                    currency=t["currency"],
                    check_in=t["check_in"],
                )
            except Exception as e:
                logger.error(f"  → booking {t['booking_id']} 결제 연체 알림 실패: {e}")
        logger.info(f"  → {counts['payment_overdue']}건")

    except Exception as e:
        logger.error(f"Scheduled Notifications Job 중단: {e}")
        logger.exception("상세 에러:")

    finally:
        if owns_session:
            db.close()

    duration = (datetime.utcnow() - start_time).total_seconds()
    logger.info("-" * 60)
    logger.info("Scheduled Notifications Job 완료")
    logger.info(f"  소요 시간: {duration:.1f}초")
    logger.info(f"  예약 리마인더: {counts['booking_reminders']}건")
    logger.info(f"  체크인 리마인더: {counts['check_in_reminders']}건")
    logger.info(f"  결제 연체: {counts['payment_overdue']}건")
    logger.info("=" * 60)

    return counts


async def scheduled_notifications_job():
    """APScheduler 진입점. 예외를 스케줄러로 올리지 않음"""
    try:
        await run_scheduled_notifications()
    except Exception as e:
        logger.error(f"Scheduled Notifications Job 실패: {e}")
        logger.exception("상세 에러:")


def start_scheduler(
    hour: Optional[int] = None,
    minute: Optional[int] = None,
):
    """
    스케줄러 시작

    Args:
        hour / minute: 매일 실행 시각, 기본값은 settings (08:00)
    """
    global _scheduler

    if _scheduler is not None:
        logger.warning("스케줄러가 이미 실행 중입니다")
        return

    hour = settings.SCHEDULED_NOTIFICATIONS_HOUR if hour is None else hour
    minute = settings.SCHEDULED_NOTIFICATIONS_MINUTE if minute is None else minute
    timezone = _timezone()

    _scheduler = AsyncIOScheduler(timezone=timezone) if timezone else AsyncIOScheduler()

    _scheduler.add_job(
        scheduled_notifications_job,
        trigger=CronTrigger(hour=hour, minute=minute, timezone=timezone),
        id=JOB_ID,
        name="예약 리마인더 / 체크인 리마인더 / 결제 연체 알림",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    _scheduler.start()

    logger.info("=" * 60)
    logger.info("StayHub Scheduler 시작됨")
    logger.info(f"  [Job] Scheduled Notifications: 매일 {hour:02d}:{minute:02d}")
    logger.info(f"        다음 실행: {_scheduler.get_job(JOB_ID).next_run_time}")
    logger.info("=" * 60)


def shutdown_scheduler():
    """스케줄러 종료"""
    global _scheduler

    if _scheduler is None:
        return

    _scheduler.shutdown(wait=False)
    _scheduler = None
    logger.info("StayHub Scheduler 종료됨")


def get_scheduler() -> Optional[AsyncIOScheduler]:
    """현재 스케줄러 인스턴스 반환"""
    return _scheduler


async def run_job_now() -> Dict[str, int]:
    """
    수동으로 Job 즉시 실행 (운영 점검용)
    """
    logger.info("Job 수동 실행 요청됨")
    return await run_scheduled_notifications()
