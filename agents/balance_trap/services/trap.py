"""
Balance Trap — The surface the host detection network calls.

collect() snapshots the tracked balance, should_respond() compares the two
most recent snapshots, and respond() records a significant change.
"""
from typing import Optional, Sequence
from agents.balance_trap.errors import ConfigurationError
from agents.balance_trap.models.schemas import BalanceChangeEvent, Decision, ThresholdConfig
from agents.balance_trap.services import decider
from agents.balance_trap.services.access import AccessList
from agents.balance_trap.services.collector import BalanceCollector, TokenReader
from agents.balance_trap.services.responder import Responder
from shared.config import Settings
import structlog

logger = structlog.get_logger()


class BalanceTrap:
    def __init__(self, config: ThresholdConfig, token: TokenReader):
        self.config = config
        self.access = AccessList(config.deployer)
        self.collector = BalanceCollector(config, token, self.access)
        self.responder = Responder(config.guardian)

    def collect(self, caller: Optional[str] = None) -> bytes:
        return self.collector.collect(caller)

    def should_respond(self, history: Sequence[bytes]) -> Decision:
        return decider.should_respond(history, self.config)

    def respond(self, caller: Optional[str], data: bytes) -> BalanceChangeEvent:
        return self.responder.respond(caller, data)

    def add_whitelisted(self, caller: str, account: str) -> None:
        self.access.add_whitelisted(caller, account)

    def remove_whitelisted(self, caller: str, account: str) -> None:
        self.access.remove_whitelisted(caller, account)

    def is_whitelisted(self, account: str) -> bool:
        return self.access.is_whitelisted(account)


def config_from_settings(settings: Settings) -> ThresholdConfig:
    try:
        return ThresholdConfig(
            tracked_address=settings.TRACKED_ADDRESS,
            token_address=settings.TOKEN_ADDRESS,
            absolute_threshold=settings.ABSOLUTE_THRESHOLD,
            relative_threshold_bps=settings.RELATIVE_THRESHOLD_BPS or None,
            variant=settings.TRAP_VARIANT,
            deployer=settings.DEPLOYER_ADDRESS,
            guardian=settings.GUARDIAN_ADDRESS or None,
        )
    except ValueError as e:
        raise ConfigurationError(f"invalid trap settings: {e}") from e


def build_trap(settings: Settings, token: TokenReader | None = None) -> BalanceTrap:
    config = config_from_settings(settings)
    if token is None:
        from shared.contracts import ERC20Contract
        token = ERC20Contract(config.token_address)

    logger.info(
        "balance_trap_built",
        variant=config.variant,
        tracked=config.tracked_address,
        token=config.token_address,
        absolute_threshold=config.absolute_threshold,
        relative_threshold_bps=config.relative_threshold_bps,
        guardian_gated=config.guardian is not None,
    )
    return BalanceTrap(config, token)
