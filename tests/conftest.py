import pytest
from web3.exceptions import ContractLogicError
from agents.balance_trap.services.trap import BalanceTrap
from tests.helpers import ETHER, GUARDIAN, FakeToken, make_config


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def absolute_only():
    return make_config(relative_threshold_bps=None)


@pytest.fixture
def token():
    return FakeToken(balance=10_000 * ETHER)


@pytest.fixture
def reverting_token():
    return FakeToken(error=ContractLogicError("execution reverted"))


@pytest.fixture
def trap(config, token):
    return BalanceTrap(config, token)


@pytest.fixture
def strict_trap(token):
    return BalanceTrap(make_config(variant="strict", guardian=GUARDIAN), token)
