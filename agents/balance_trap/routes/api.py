"""
Balance Trap REST API routes.
"""
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from eth_abi.exceptions import DecodingError
from web3 import Web3
from shared.auth import verify_api_key
from agents.balance_trap.errors import NotAuthorizedError
from agents.balance_trap.models.schemas import (
    EventResponse, HealthResponse, ObservationResponse, RespondRequest,
    ShouldRespondRequest, ShouldRespondResponse, WhitelistRequest, WhitelistResponse,
)
from agents.balance_trap.services.codec import (
    decode_observation, decode_payload, from_hex, to_hex,
)
from agents.balance_trap.services.trap import BalanceTrap

router = APIRouter(prefix="/api/v1/balance-trap", tags=["balance-trap"])


def get_trap(request: Request) -> BalanceTrap:
    return request.app.state.trap


def _parse_hex(value: str) -> bytes:
    try:
        return from_hex(value)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid hex data: {value[:20]}")


def _require_address(value: str) -> str:
    if not Web3.is_address(value):
        raise HTTPException(status_code=422, detail=f"Invalid address: {value}")
    return Web3.to_checksum_address(value)


@router.get("/health", response_model=HealthResponse)
async def health(trap: BalanceTrap = Depends(get_trap)):
    config = trap.config
    return HealthResponse(
        variant=config.variant,
        tracked_address=config.tracked_address,
        token_address=config.token_address,
        absolute_threshold=str(config.absolute_threshold),
        relative_threshold_bps=config.relative_threshold_bps if config.uses_relative_rule else None,
        guardian_gated=trap.responder.gated,
        events_emitted=len(trap.responder.events),
    )


@router.post("/collect", response_model=ObservationResponse)
async def collect(
    x_caller: str | None = Header(None),
    trap: BalanceTrap = Depends(get_trap),
    _key: bool = Depends(verify_api_key),
):
    try:
        data = trap.collect(x_caller)
    except NotAuthorizedError as e:
        raise HTTPException(status_code=403, detail=e.message)
    observation = decode_observation(data)
    return ObservationResponse(
        data=to_hex(data),
        tracked_address=observation.tracked_address,
        balance=str(observation.balance),
    )


@router.post("/should-respond", response_model=ShouldRespondResponse)
async def should_respond(
    req: ShouldRespondRequest,
    trap: BalanceTrap = Depends(get_trap),
    _key: bool = Depends(verify_api_key),
):
    history = [_parse_hex(entry) for entry in req.history]
    try:
        decision = trap.should_respond(history)
    except DecodingError as e:
        raise HTTPException(status_code=422, detail=f"Malformed observation: {e}")

    resp = ShouldRespondResponse(
        should_respond=decision.should_respond,
        payload=to_hex(decision.payload),
    )
    if decision.should_respond:
        payload = decode_payload(decision.payload)
        resp.tracked_address = payload.tracked_address
        resp.previous_balance = str(payload.previous_balance)
        resp.current_balance = str(payload.current_balance)
    return resp


@router.post("/respond", response_model=EventResponse, status_code=201)
async def respond(
    req: RespondRequest,
    x_caller: str | None = Header(None),
    trap: BalanceTrap = Depends(get_trap),
    _key: bool = Depends(verify_api_key),
):
    data = _parse_hex(req.payload)
    try:
        event = trap.respond(x_caller, data)
    except NotAuthorizedError as e:
        raise HTTPException(status_code=403, detail=e.message)
    except DecodingError as e:
        raise HTTPException(status_code=422, detail=f"Malformed payload: {e}")
    return EventResponse.from_event(event)


@router.get("/events", response_model=list[EventResponse])
async def list_events(
    trap: BalanceTrap = Depends(get_trap),
    _key: bool = Depends(verify_api_key),
):
    return [EventResponse.from_event(e) for e in reversed(trap.responder.events)]


@router.get("/whitelist", response_model=list[str])
async def list_whitelisted(
    trap: BalanceTrap = Depends(get_trap),
    _key: bool = Depends(verify_api_key),
):
    return trap.access.members()


@router.get("/whitelist/{account}", response_model=WhitelistResponse)
async def get_whitelisted(
    account: str,
    trap: BalanceTrap = Depends(get_trap),
    _key: bool = Depends(verify_api_key),
):
    account = _require_address(account)
    return WhitelistResponse(account=account, whitelisted=trap.is_whitelisted(account))


@router.post("/whitelist", response_model=WhitelistResponse, status_code=201)
async def add_whitelisted(
    req: WhitelistRequest,
    x_caller: str | None = Header(None),
    trap: BalanceTrap = Depends(get_trap),
    _key: bool = Depends(verify_api_key),
):
    account = _require_address(req.account)
    try:
        trap.add_whitelisted(x_caller, account)
    except NotAuthorizedError as e:
        raise HTTPException(status_code=403, detail=e.message)
    return WhitelistResponse(account=account, whitelisted=True)


@router.delete("/whitelist/{account}", response_model=WhitelistResponse)
async def remove_whitelisted(
    account: str,
    x_caller: str | None = Header(None),
    trap: BalanceTrap = Depends(get_trap),
    _key: bool = Depends(verify_api_key),
):
    account = _require_address(account)
    try:
        trap.remove_whitelisted(x_caller, account)
    except NotAuthorizedError as e:
        raise HTTPException(status_code=403, detail=e.message)
    return WhitelistResponse(account=account, whitelisted=False)
