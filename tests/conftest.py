"""Shared fixtures: in-memory chain and price readers plus an API client."""

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from gas_gateway.config import GatewayConfig
from gas_gateway.errors import FeeUnavailable
from gas_gateway.gateway import GasGateway
from gas_gateway.main import app, get_gateway
from gas_gateway.models import BlockSummary, FunctionDescriptor


USDT = "0xdac17f958d2ee523a2206206994597c13d831ec7"
HOLDER = "0x28c6c06298d514db089934071355e5743bf21d60"

ERC20_ABI: List[Dict[str, Any]] = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "decimals",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
    {
        "type": "function",
        "name": "totalSupply",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "symbol",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "value", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "event",
        "name": "Transfer",
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
]


class FakeChain:
    """Stands in for ChainReader; records every call it receives."""

    def __init__(
        self,
        height: int = 100,
        blocks: Optional[Dict[int, BlockSummary]] = None,
        gas_price: Optional[int] = 50 * 10 ** 9,
        call_result: Any = None,
        gas: int = 21000,
        estimate_error: Optional[Exception] = None,
        call_error: Optional[Exception] = None,
    ):
        self.height = height
        self.blocks = blocks if blocks is not None else {}
        self.gas_price = gas_price
        self.call_result = call_result
        self.gas = gas
        self.estimate_error = estimate_error
        self.call_error = call_error
        self.calls: List[tuple] = []

    def current_block_height(self) -> int:
        self.calls.append(("current_block_height",))
        return self.height

    def block_at(self, number: int) -> Optional[BlockSummary]:
        self.calls.append(("block_at", number))
        return self.blocks.get(number)

    def current_fee(self) -> int:
        self.calls.append(("current_fee",))
        if self.gas_price is None:
            raise FeeUnavailable()
        return self.gas_price

    def call(self, address: str, abi: List[Any], descriptor: FunctionDescriptor, args: List[Any]) -> Any:
        self.calls.append(("call", address, descriptor.name, list(args)))
        if self.call_error is not None:
            raise self.call_error
        return self.call_result

    def estimate_gas(self, address, abi, descriptor, args, sender=None) -> int:
        self.calls.append(("estimate_gas", address, descriptor.name, list(args), sender))
        if self.estimate_error is not None:
            raise self.estimate_error
        return self.gas

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]


class FakePrices:
    def __init__(self, price: str = "3456.78", error: Optional[Exception] = None):
        self.price = price
        self.error = error
        self.requests = 0

    def spot_price(self, asset: Optional[str] = None) -> str:
        self.requests += 1
        if self.error is not None:
            raise self.error
        return self.price


def make_block(number: int, timestamp: int = 1700000000, tx_count: int = 3) -> BlockSummary:
    return BlockSummary(
        number=number,
        timestamp=f"{timestamp}",
        transactions=tx_count,
        hash="0x" + f"{number:064x}",
        validator="0x95222290dd7278aa3ddd389cc1e1d165cc4bafe5",
    )


@pytest.fixture
def config() -> GatewayConfig:
    return GatewayConfig(rpc_url="http://localhost:8545")


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def prices() -> FakePrices:
    return FakePrices()


@pytest.fixture
def gateway(config: GatewayConfig, chain: FakeChain, prices: FakePrices) -> GasGateway:
    return GasGateway(config, chain=chain, prices=prices)


@pytest.fixture
def client(gateway: GasGateway):
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
