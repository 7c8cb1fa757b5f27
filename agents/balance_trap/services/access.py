"""
Access List — Whitelist gate for the strict trap variant.

One deployer identity, fixed at creation, may add or remove accounts. The
deployer starts out whitelisted.
"""
from web3 import Web3
from agents.balance_trap.config import (
    ERR_NOT_WHITELISTED, ERR_ONLY_DEPLOYER_ADD, ERR_ONLY_DEPLOYER_REMOVE,
)
from agents.balance_trap.errors import NotAuthorizedError
import structlog

logger = structlog.get_logger()


class AccessList:
    def __init__(self, deployer: str):
        self.deployer = Web3.to_checksum_address(deployer)
        self._members: dict[str, bool] = {self.deployer: True}

    def is_whitelisted(self, account: str) -> bool:
        return self._members.get(Web3.to_checksum_address(account), False)

    def require_whitelisted(self, caller: str | None) -> None:
        if not caller or not Web3.is_address(caller) or not self.is_whitelisted(caller):
            raise NotAuthorizedError(ERR_NOT_WHITELISTED)

    def is_deployer(self, caller: str | None) -> bool:
        return bool(caller) and Web3.is_address(caller) and Web3.to_checksum_address(caller) == self.deployer

    def add_whitelisted(self, caller: str | None, account: str) -> None:
        if not self.is_deployer(caller):
            logger.warning("whitelist_add_rejected", caller=caller, account=account)
            raise NotAuthorizedError(ERR_ONLY_DEPLOYER_ADD)
        self._members[Web3.to_checksum_address(account)] = True
        logger.info("whitelist_added", account=account)

    def remove_whitelisted(self, caller: str | None, account: str) -> None:
        if not self.is_deployer(caller):
            logger.warning("whitelist_remove_rejected", caller=caller, account=account)
            raise NotAuthorizedError(ERR_ONLY_DEPLOYER_REMOVE)
        self._members[Web3.to_checksum_address(account)] = False
        logger.info("whitelist_removed", account=account)

    def members(self) -> list[str]:
        return [account for account, allowed in self._members.items() if allowed]
