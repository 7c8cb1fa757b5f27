"""
End-to-end trap behaviour: collect, decide, respond, and the dry-run loop.
"""

import pytest
from pydantic import ValidationError

from agents.balance_trap.errors import ConfigurationError, NotAuthorizedError
from agents.balance_trap.services.monitor import DryRunMonitor
from agents.balance_trap.services.trap import BalanceTrap, build_trap, config_from_settings
from shared.config import Settings
from tests.helpers import (
    DEPLOYER, ETHER, GUARDIAN, STRANGER, TOKEN, TRACKED, FakeToken, make_config,
)


def _settings(**overrides) -> Settings:
    values = {
        "TRACKED_ADDRESS": TRACKED,
        "TOKEN_ADDRESS": TOKEN,
        "DEPLOYER_ADDRESS": DEPLOYER,
        "GUARDIAN_ADDRESS": "",
        "ABSOLUTE_THRESHOLD": 1000 * ETHER,
        "RELATIVE_THRESHOLD_BPS": 100,
        "TRAP_VARIANT": "resilient",
    }
    values.update(overrides)
    return Settings(**values)


class TestSettings:

    def test_config_from_settings(self):
        config = config_from_settings(_settings(GUARDIAN_ADDRESS=GUARDIAN))
        assert config.tracked_address == TRACKED
        assert config.relative_threshold_bps == 100
        assert config.guardian == GUARDIAN
        assert config.uses_relative_rule

    def test_zero_bps_disables_relative_rule(self):
        config = config_from_settings(_settings(RELATIVE_THRESHOLD_BPS=0))
        assert config.relative_threshold_bps is None
        assert not config.uses_relative_rule

    def test_invalid_settings_raise(self):
        with pytest.raises(ConfigurationError):
            config_from_settings(_settings(TRAP_VARIANT="lenient"))
        with pytest.raises(ConfigurationError):
            config_from_settings(_settings(TRACKED_ADDRESS="0x1234"))

    def test_config_is_frozen(self, config):
        with pytest.raises(ValidationError):
            config.absolute_threshold = 0

    def test_build_trap_with_injected_token(self, token):
        trap = build_trap(_settings(TRAP_VARIANT="STRICT"), token=token)
        assert trap.config.variant == "strict"
        assert trap.is_whitelisted(DEPLOYER)


class TestTrapFlow:

    def test_collect_decide_respond(self, trap, token):
        first = trap.collect()
        token.balance = 12_000 * ETHER
        second = trap.collect()

        decision = trap.should_respond([second, first])
        assert decision.should_respond is True

        event = trap.respond(STRANGER, decision.payload)
        assert event.previous_balance == 10_000 * ETHER
        assert event.new_balance == 12_000 * ETHER

    def test_token_disappearing_reads_as_drain(self, trap, token):
        before = trap.collect()
        token.deployed = False
        after = trap.collect()
        assert trap.should_respond([after, before]).should_respond is True

    def test_strict_trap_gates(self, strict_trap):
        with pytest.raises(NotAuthorizedError):
            strict_trap.collect(STRANGER)
        strict_trap.add_whitelisted(DEPLOYER, STRANGER)
        strict_trap.collect(STRANGER)

        strict_trap.remove_whitelisted(DEPLOYER, STRANGER)
        assert not strict_trap.is_whitelisted(STRANGER)

    def test_strict_respond_requires_guardian(self, strict_trap, token):
        first = strict_trap.collect(DEPLOYER)
        token.balance = 0
        decision = strict_trap.should_respond([strict_trap.collect(DEPLOYER), first])

        with pytest.raises(NotAuthorizedError):
            strict_trap.respond(DEPLOYER, decision.payload)
        assert strict_trap.respond(GUARDIAN, decision.payload).new_balance == 0


class TestDryRunMonitor:

    def test_first_cycle_never_triggers(self, trap):
        monitor = DryRunMonitor(trap)
        assert monitor.run_cycle() is None
        assert len(monitor.history) == 1

    def test_triggers_after_significant_move(self, trap, token):
        monitor = DryRunMonitor(trap)
        monitor.run_cycle()
        monitor.run_cycle()
        token.balance = 20_000 * ETHER
        event = monitor.run_cycle()

        assert event is not None
        assert event.previous_balance == 10_000 * ETHER
        assert trap.responder.events == [event]

    def test_history_is_bounded(self, trap):
        monitor = DryRunMonitor(trap, history_size=3)
        for _ in range(5):
            monitor.run_cycle()
        assert len(monitor.history) == 3
        assert monitor.cycles == 5

    def test_minimum_history_is_two(self, trap):
        assert DryRunMonitor(trap, history_size=1).history.maxlen == 2

    def test_strict_monitor_uses_privileged_identities(self, token):
        trap = BalanceTrap(make_config(variant="strict", guardian=GUARDIAN), token)
        monitor = DryRunMonitor(trap)
        monitor.run_cycle()
        token.balance = 1
        event = monitor.run_cycle()
        assert event is not None
        assert event.new_balance == 1

    def test_monitor_keeps_zero_substitution(self):
        token = FakeToken(balance=5000 * ETHER)
        trap = BalanceTrap(make_config(), token)
        monitor = DryRunMonitor(trap)
        monitor.run_cycle()
        token.deployed = False
        event = monitor.run_cycle()
        assert event.new_balance == 0
