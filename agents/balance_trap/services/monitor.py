"""
Dry-run Monitor — Stands in for the host network's polling cadence locally.

Each cycle collects one observation, keeps a bounded most-recent-first
history, asks the trap whether to respond, and responds as the guardian
(or the deployer when ungated) when it does.
"""
from collections import deque
from agents.balance_trap.config import HISTORY_SIZE
from agents.balance_trap.models.schemas import BalanceChangeEvent
from agents.balance_trap.services.trap import BalanceTrap
import structlog

logger = structlog.get_logger()


class DryRunMonitor:
    def __init__(self, trap: BalanceTrap, history_size: int = HISTORY_SIZE):
        self.trap = trap
        self.history: deque[bytes] = deque(maxlen=max(history_size, 2))
        self.cycles = 0

    @property
    def operator(self) -> str:
        # The deployer is whitelisted from creation, so strict collect() passes
        return self.trap.config.deployer

    @property
    def responder_identity(self) -> str:
        return self.trap.config.guardian or self.trap.config.deployer

    def run_cycle(self) -> BalanceChangeEvent | None:
        self.history.appendleft(self.trap.collect(self.operator))
        self.cycles += 1

        decision = self.trap.should_respond(list(self.history))
        if not decision.should_respond:
            logger.debug("dryrun_no_trigger", cycle=self.cycles, history=len(self.history))
            return None

        event = self.trap.respond(self.responder_identity, decision.payload)
        logger.info("dryrun_triggered", cycle=self.cycles, address=event.tracked_address)
        return event
