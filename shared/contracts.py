from web3 import Web3
from shared.web3_client import w3

# Minimal ERC-20 ABI: the trap only ever reads balances
ERC20_ABI = [
    {"constant": True, "inputs": [{"name": "", "type": "address"}], "name": "balanceOf", "outputs": [{"name": "", "type": "uint256"}], "type": "function"},
    {"constant": True, "inputs": [], "name": "symbol", "outputs": [{"name": "", "type": "string"}], "type": "function"},
]


def has_code(address: str, web3: Web3 | None = None) -> bool:
    """True when the address holds deployed bytecode."""
    code = (web3 or w3).eth.get_code(Web3.to_checksum_address(address))
    return bool(code) and code != b"\x00"


class ERC20Contract:
    def __init__(self, token_address: str, web3: Web3 | None = None):
        self.web3 = web3 or w3
        self.address = Web3.to_checksum_address(token_address)
        self.contract = self.web3.eth.contract(address=self.address, abi=ERC20_ABI)

    def has_code(self) -> bool:
        return has_code(self.address, self.web3)

    def balance_of(self, account: str) -> int:
        return self.contract.functions.balanceOf(
            Web3.to_checksum_address(account)
        ).call()

    def symbol(self) -> str:
        return self.contract.functions.symbol().call()
