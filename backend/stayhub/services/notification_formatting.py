# backend/stayhub/services/notification_formatting.py
"""알림 title/message 문구 포맷 유틸"""
from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Union

Number = Union[int, float, Decimal]


def format_money(amount: Optional[Number], currency: Optional[str]) -> str:
    """ZAR 1,250.00"""
    value = float(amount or 0)
    if currency:
        return f"{currency} {value:,.2f}"
    return f"{value:,.2f}"


def format_date(value: date) -> str:
    """Mar 12, 2026"""
    return f"{value:%b} {value.day}, {value.year}"


def format_date_range(start: date, end: date) -> str:
    """
    Mar 12 - Mar 15, 2026
    연도가 다르면 양쪽 모두 연도 표기: Dec 30, 2025 - Jan 2, 2026
    """
    if start.year != end.year:
        return f"{format_date(start)} - {format_date(end)}"
    return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"


def format_time(value: Optional[time]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime("%H:%M")


def pluralize(count: int, singular: str, plural: Optional[str] = None) -> str:
    """1 night / 3 nights"""
    if count == 1:
        return f"{count} {singular}"
    return f"{count} {plural or singular + 's'}"


def nights_between(check_in: date, check_out: date) -> int:
    return max((check_out - check_in).days, 0)


def with_reason(message: str, reason: Optional[str]) -> str:
    """사유가 있으면 'Reason: ...' 덧붙임"""
    if not reason:
        return message
    return f"{message}. Reason: {reason}"
