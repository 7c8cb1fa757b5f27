"""
Payload Codec — ABI encoding for observations and response payloads.

Observations travel as ``(address, uint256)`` and response payloads as
``(address, uint256, uint256)``, matching what the host network stores and
forwards. Decoding errors from eth_abi are not caught here.
"""
from eth_abi import decode, encode
from agents.balance_trap.models.schemas import Observation, ResponsePayload

OBSERVATION_TYPES = ["address", "uint256"]
PAYLOAD_TYPES = ["address", "uint256", "uint256"]


def encode_observation(observation: Observation) -> bytes:
    return encode(OBSERVATION_TYPES, [observation.tracked_address, observation.balance])


def decode_observation(data: bytes) -> Observation:
    address, balance = decode(OBSERVATION_TYPES, data)
    return Observation(tracked_address=address, balance=balance)


def encode_payload(payload: ResponsePayload) -> bytes:
    return encode(
        PAYLOAD_TYPES,
        [payload.tracked_address, payload.previous_balance, payload.current_balance],
    )


def decode_payload(data: bytes) -> ResponsePayload:
    address, previous, current = decode(PAYLOAD_TYPES, data)
    return ResponsePayload(
        tracked_address=address,
        previous_balance=previous,
        current_balance=current,
    )


def from_hex(value: str) -> bytes:
    """Parse a 0x-prefixed (or bare) hex string."""
    value = value.strip()
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return bytes.fromhex(value)


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()
