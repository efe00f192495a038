# backend/stayhub/domain/dtos/recipient.py
"""
알림 수신자

member_id 또는 customer_id 중 정확히 하나만 설정되어야 한다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from stayhub.core.exceptions import ValidationFailure


@dataclass(frozen=True)
class Recipient:
    member_id: Optional[str] = None
    customer_id: Optional[str] = None

    def __post_init__(self) -> None:
        # 빈 문자열은 미설정으로 취급
        object.__setattr__(self, "member_id", self.member_id or None)
        object.__setattr__(self, "customer_id", self.customer_id or None)

        if bool(self.member_id) == bool(self.customer_id):
            raise ValidationFailure(
                "Recipient requires exactly one of member_id / customer_id"
            )

    @classmethod
    def member(cls, member_id: str) -> "Recipient":
        return cls(member_id=member_id)

    @classmethod
    def customer(cls, customer_id: str) -> "Recipient":
        return cls(customer_id=customer_id)

    @property
    def is_member(self) -> bool:
        return self.member_id is not None

    @property
    def kind(self) -> str:
        return "member" if self.is_member else "customer"

    @property
    def label(self) -> str:
        """로그용 (member:xxx / customer:xxx)"""
        return f"{self.kind}:{self.member_id or self.customer_id}"
