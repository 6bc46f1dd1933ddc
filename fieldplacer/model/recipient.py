"""Recipient model as seen by the placement editor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RecipientRole(str, Enum):
    SIGNER = "SIGNER"
    APPROVER = "APPROVER"
    CC = "CC"
    VIEWER = "VIEWER"


class SendStatus(str, Enum):
    NOT_SENT = "NOT_SENT"
    SENT = "SENT"


@dataclass(frozen=True, slots=True)
class Recipient:
    id: int
    email: str
    name: str = ""
    role: RecipientRole = RecipientRole.SIGNER
    send_status: SendStatus = SendStatus.NOT_SENT

    @property
    def has_been_sent(self) -> bool:
        return self.send_status is SendStatus.SENT

    @property
    def can_place_fields(self) -> bool:
        if self.has_been_sent:
            return False
        return self.role not in (RecipientRole.CC, RecipientRole.VIEWER)
