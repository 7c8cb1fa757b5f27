from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional
from web3 import Web3
from agents.balance_trap.config import UINT256_MAX, VARIANTS, VARIANT_RESILIENT


def _checksum(value: str) -> str:
    if not Web3.is_address(value):
        raise ValueError(f"invalid address: {value!r}")
    return Web3.to_checksum_address(value)


class ThresholdConfig(BaseModel):
    """Immutable trap configuration, fixed when the trap is built."""

    tracked_address: str
    token_address: str
    absolute_threshold: int = Field(..., ge=0, le=UINT256_MAX)
    relative_threshold_bps: Optional[int] = Field(None, ge=0, le=UINT256_MAX)
    variant: str = VARIANT_RESILIENT
    deployer: str
    guardian: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("tracked_address", "token_address", "deployer")
    @classmethod
    def _addresses(cls, v: str) -> str:
        return _checksum(v)

    @field_validator("guardian")
    @classmethod
    def _guardian(cls, v: Optional[str]) -> Optional[str]:
        return _checksum(v) if v else None

    @field_validator("variant")
    @classmethod
    def _variant(cls, v: str) -> str:
        v = v.lower()
        if v not in VARIANTS:
            raise ValueError(f"variant must be one of {VARIANTS}")
        return v

    @property
    def uses_relative_rule(self) -> bool:
        return self.variant == VARIANT_RESILIENT and self.relative_threshold_bps is not None


class Observation(BaseModel):
    tracked_address: str
    balance: int = Field(..., ge=0, le=UINT256_MAX)

    model_config = {"frozen": True}

    @field_validator("tracked_address")
    @classmethod
    def _address(cls, v: str) -> str:
        return _checksum(v)


class ResponsePayload(BaseModel):
    tracked_address: str
    previous_balance: int = Field(..., ge=0, le=UINT256_MAX)
    current_balance: int = Field(..., ge=0, le=UINT256_MAX)

    model_config = {"frozen": True}

    @field_validator("tracked_address")
    @classmethod
    def _address(cls, v: str) -> str:
        return _checksum(v)


class Decision(BaseModel):
    should_respond: bool
    payload: bytes = b""

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _empty_unless_triggered(self):
        if not self.should_respond and self.payload:
            raise ValueError("payload must be empty when not responding")
        return self


NO_TRIGGER = Decision(should_respond=False, payload=b"")


class BalanceChangeEvent(BaseModel):
    tracked_address: str
    previous_balance: int
    new_balance: int
    emitted_at: datetime


# --- HTTP layer ---

class ObservationResponse(BaseModel):
    data: str
    tracked_address: str
    balance: str  # decimal string, uint256 overflows JSON numbers in most clients


class ShouldRespondRequest(BaseModel):
    history: list[str] = Field(default_factory=list, description="Hex-encoded observations, most recent first")


class ShouldRespondResponse(BaseModel):
    should_respond: bool
    payload: str
    tracked_address: Optional[str] = None
    previous_balance: Optional[str] = None
    current_balance: Optional[str] = None


class RespondRequest(BaseModel):
    payload: str


class EventResponse(BaseModel):
    tracked_address: str
    previous_balance: str
    new_balance: str
    emitted_at: datetime

    @classmethod
    def from_event(cls, event: BalanceChangeEvent) -> "EventResponse":
        return cls(
            tracked_address=event.tracked_address,
            previous_balance=str(event.previous_balance),
            new_balance=str(event.new_balance),
            emitted_at=event.emitted_at,
        )


class WhitelistRequest(BaseModel):
    account: str = Field(..., min_length=42, max_length=42)


class WhitelistResponse(BaseModel):
    account: str
    whitelisted: bool


class HealthResponse(BaseModel):
    status: str = "ok"
    agent: str = "balance_trap"
    version: str = "1.0.0"
    variant: str = VARIANT_RESILIENT
    tracked_address: str = ""
    token_address: str = ""
    absolute_threshold: str = "0"
    relative_threshold_bps: Optional[int] = None
    guardian_gated: bool = False
    events_emitted: int = 0
