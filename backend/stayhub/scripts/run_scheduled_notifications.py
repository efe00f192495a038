"""
Scheduled Notifications 수동 실행 스크립트

스케줄러(매일 08:00)와 같은 Job 을 한 번 실행합니다.
같은 날 두 번 실행하면 알림도 두 번 생성되니 주의.

사용법:
    # 오늘 기준
    python -m stayhub.scripts.run_scheduled_notifications

    # 특정 날짜 기준 (누락된 날 재처리)
    python -m stayhub.scripts.run_scheduled_notifications --date 2026-03-12
"""
from __future__ import annotations

import argparse
import asyncio
from datetime import date

from sqlalchemy.orm import Session

from stayhub.db.session import SessionLocal
from stayhub.services.scheduler import local_today, run_scheduled_notifications


def run(*, today: date) -> None:
    db: Session = SessionLocal()
    try:
        print(
            "\n=== StayHub Scheduled Notifications 시작 ===\n"
            f"- 기준일 : {today.isoformat()}\n"
        )

        counts = asyncio.run(run_scheduled_notifications(db=db, today=today))

        print(
            f"\n✅ 예약 리마인더   : {counts['booking_reminders']}건\n"
            f"✅ 체크인 리마인더 : {counts['check_in_reminders']}건\n"
            f"✅ 결제 연체       : {counts['payment_overdue']}건\n"
        )
        print("=== StayHub Scheduled Notifications 종료 ===\n")

    finally:
        db.close()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="예약 리마인더 / 체크인 리마인더 / 결제 연체 알림을 즉시 생성하는 스크립트",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="기준일 YYYY-MM-DD (기본: 오늘)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    run(today=args.date or local_today())


if __name__ == "__main__":
    main()
