"""
Responder — Turns a triggered payload into a durable balance-change record.

With a guardian configured only that identity may call ``respond``; without
one the call is open and the host network's own access control applies.
"""
from datetime import datetime, timezone
from typing import Optional
from web3 import Web3
from agents.balance_trap.config import ERR_UNAUTHORIZED
from agents.balance_trap.errors import NotAuthorizedError
from agents.balance_trap.models.schemas import BalanceChangeEvent
from agents.balance_trap.services.codec import decode_payload
import structlog

logger = structlog.get_logger()


class Responder:
    def __init__(self, guardian: Optional[str] = None):
        self.guardian = Web3.to_checksum_address(guardian) if guardian else None
        self.events: list[BalanceChangeEvent] = []

    @property
    def gated(self) -> bool:
        return self.guardian is not None

    def respond(self, caller: Optional[str], data: bytes) -> BalanceChangeEvent:
        if self.gated:
            if not caller or not Web3.is_address(caller) or Web3.to_checksum_address(caller) != self.guardian:
                logger.warning("respond_rejected", caller=caller)
                raise NotAuthorizedError(ERR_UNAUTHORIZED)

        payload = decode_payload(data)
        event = BalanceChangeEvent(
            tracked_address=payload.tracked_address,
            previous_balance=payload.previous_balance,
            new_balance=payload.current_balance,
            emitted_at=datetime.now(timezone.utc),
        )
        self.events.append(event)
        logger.info(
            "balance_changed",
            address=event.tracked_address,
            previous=event.previous_balance,
            new=event.new_balance,
        )

        return event
