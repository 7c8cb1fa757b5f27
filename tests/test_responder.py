import pytest
from eth_abi.exceptions import DecodingError

from agents.balance_trap.errors import NotAuthorizedError
from agents.balance_trap.models.schemas import ResponsePayload
from agents.balance_trap.services.codec import encode_payload
from agents.balance_trap.services.responder import Responder
from tests.helpers import ETHER, GUARDIAN, STRANGER, TRACKED


def _payload(previous=10_000 * ETHER, current=12_000 * ETHER) -> bytes:
    return encode_payload(ResponsePayload(
        tracked_address=TRACKED, previous_balance=previous, current_balance=current,
    ))


class TestUngatedResponder:

    def test_anyone_can_respond(self):
        responder = Responder()
        event = responder.respond(STRANGER, _payload())

        assert not responder.gated
        assert event.tracked_address == TRACKED
        assert event.previous_balance == 10_000 * ETHER
        assert event.new_balance == 12_000 * ETHER
        assert responder.events == [event]

    def test_malformed_payload_raises(self):
        with pytest.raises(DecodingError):
            Responder().respond(STRANGER, b"\x01\x02")


class TestGuardianResponder:

    def test_guardian_can_respond(self):
        responder = Responder(GUARDIAN)
        responder.respond(GUARDIAN.lower(), _payload())
        assert len(responder.events) == 1

    def test_other_callers_rejected(self):
        responder = Responder(GUARDIAN)
        for caller in (STRANGER, None):
            with pytest.raises(NotAuthorizedError) as exc:
                responder.respond(caller, _payload())
            assert exc.value.message == "unauthorized"
        assert responder.events == []

