"""Shared test doubles and builders."""
from agents.balance_trap.models.schemas import Observation, ThresholdConfig
from agents.balance_trap.services.codec import encode_observation

TRACKED = "0x1111111111111111111111111111111111111111"
TOKEN = "0x2222222222222222222222222222222222222222"
DEPLOYER = "0x3333333333333333333333333333333333333333"
GUARDIAN = "0x4444444444444444444444444444444444444444"
STRANGER = "0x5555555555555555555555555555555555555555"

ETHER = 10**18


class FakeToken:
    """In-memory stand-in for an ERC-20 contract."""

    def __init__(self, balance: int = 0, deployed: bool = True, error: Exception | None = None):
        self.balance = balance
        self.deployed = deployed
        self.error = error
        self.reads = 0

    def has_code(self) -> bool:
        return self.deployed

    def balance_of(self, account: str) -> int:
        self.reads += 1
        if self.error is not None:
            raise self.error
        return self.balance


def obs(balance: int, address: str = TRACKED) -> bytes:
    return encode_observation(Observation(tracked_address=address, balance=balance))


def make_config(**overrides) -> ThresholdConfig:
    values = {
        "tracked_address": TRACKED,
        "token_address": TOKEN,
        "absolute_threshold": 1000 * ETHER,
        "relative_threshold_bps": 100,
        "variant": "resilient",
        "deployer": DEPLOYER,
        "guardian": None,
    }
    values.update(overrides)
    return ThresholdConfig(**values)


