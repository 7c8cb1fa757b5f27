"""
Snapshot Collector — Reads the tracked address's token balance and encodes it
as an observation for the host's history buffer.

The resilient variant never fails on a missing or reverting token: it records
a zero balance instead, so the host's polling loop keeps running on networks
where the token is not deployed. The strict variant gates on the access list
and lets read failures propagate.

Transport failures (connection refused, timeouts) propagate in both variants.
A zero recorded during an RPC outage would read as a full drain on the next
comparison.
"""
from typing import Optional, Protocol
from pydantic import BaseModel
from web3.exceptions import Web3Exception
from agents.balance_trap.config import VARIANT_STRICT
from agents.balance_trap.models.schemas import Observation, ThresholdConfig
from agents.balance_trap.services.access import AccessList
from agents.balance_trap.services.codec import encode_observation
import structlog

logger = structlog.get_logger()

# Substituted when the token cannot be read
ZERO_BALANCE = 0


class TokenReader(Protocol):
    def has_code(self) -> bool: ...

    def balance_of(self, account: str) -> int: ...


class BalanceRead(BaseModel):
    """Outcome of one balance query: a value or the reason there is none."""

    value: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def read_balance(token: TokenReader, account: str) -> BalanceRead:
    try:
        if not token.has_code():
            return BalanceRead(error="no_code")
        return BalanceRead(value=token.balance_of(account))
    except (Web3Exception, ValueError) as e:
        # ValueError covers JSON-RPC error responses on older providers
        return BalanceRead(error=str(e) or type(e).__name__)


class BalanceCollector:
    def __init__(self, config: ThresholdConfig, token: TokenReader, access: AccessList):
        self.config = config
        self.token = token
        self.access = access

    def observe(self, caller: str | None = None) -> Observation:
        if self.config.variant == VARIANT_STRICT:
            # The access check runs before the read is attempted
            self.access.require_whitelisted(caller)
            balance = self.token.balance_of(self.config.tracked_address)
        else:
            result = read_balance(self.token, self.config.tracked_address)
            if result.ok:
                balance = result.value
            else:
                logger.warning(
                    "balance_read_failed",
                    token=self.config.token_address,
                    reason=result.error,
                    substituted=ZERO_BALANCE,
                )
                balance = ZERO_BALANCE

        return Observation(tracked_address=self.config.tracked_address, balance=balance)

    def collect(self, caller: str | None = None) -> bytes:
        return encode_observation(self.observe(caller))
