"""
Deviation Decider — Compares the two most recent balance observations and
decides whether the change is significant enough to respond to.

Stateless: every call works only from the history it is handed.
"""
from typing import Sequence
from agents.balance_trap.config import BPS_DENOMINATOR
from agents.balance_trap.models.schemas import (
    Decision, NO_TRIGGER, ResponsePayload, ThresholdConfig,
)
from agents.balance_trap.services.codec import decode_observation, encode_payload
import structlog

logger = structlog.get_logger()


def absolute_diff(previous: int, current: int) -> int:
    """|current - previous| without ever going negative."""
    return max(previous, current) - min(previous, current)


def bps_change(previous: int, diff: int) -> int | None:
    """Relative change in basis points, truncated. None when previous is zero."""
    if previous == 0:
        return None
    return diff * BPS_DENOMINATOR // previous


def describe_deviation(previous: int, current: int) -> dict:
    diff = absolute_diff(previous, current)
    return {
        "previous": previous,
        "current": current,
        "diff": diff,
        "direction": "up" if current > previous else "down" if current < previous else "flat",
        "bps": bps_change(previous, diff),
    }


def exceeds_thresholds(previous: int, current: int, config: ThresholdConfig) -> bool:
    diff = absolute_diff(previous, current)
    if diff > config.absolute_threshold:
        return True

    # Relative rule only runs when the absolute one did not fire
    if config.uses_relative_rule and previous > 0:
        return bps_change(previous, diff) > config.relative_threshold_bps

    return False


def should_respond(history: Sequence[bytes], config: ThresholdConfig) -> Decision:
    """Decide whether the latest balance move warrants a response.

    ``history[0]`` is the most recent observation and ``history[1]`` the one
    before it. Fewer than two entries, or entries that disagree on the
    tracked address, never trigger.
    """
    if len(history) < 2:
        return NO_TRIGGER

    current = decode_observation(history[0])
    previous = decode_observation(history[1])

    tracked = config.tracked_address
    if current.tracked_address != previous.tracked_address or current.tracked_address != tracked:
        logger.warning(
            "observation_address_mismatch",
            current=current.tracked_address,
            previous=previous.tracked_address,
            tracked=tracked,
        )
        return NO_TRIGGER

    if not exceeds_thresholds(previous.balance, current.balance, config):
        return NO_TRIGGER

    logger.info(
        "balance_change_detected",
        address=tracked,
        **describe_deviation(previous.balance, current.balance),
    )
    payload = ResponsePayload(
        tracked_address=tracked,
        previous_balance=previous.balance,
        current_balance=current.balance,
    )
    return Decision(should_respond=True, payload=encode_payload(payload))
