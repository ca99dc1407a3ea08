from datetime import datetime, timezone
from typing import Any, List, Optional

from web3 import Web3
from web3.exceptions import BlockNotFound, ContractLogicError
from web3.middleware import ExtraDataToPOAMiddleware

from .abi import coerce_arguments, function_signature, is_address
from .config import GatewayConfig
from .errors import ChainError, FeeUnavailable, WouldRevert
from .log import get_logger
from .models import BlockSummary, FunctionDescriptor

logger = get_logger(__name__)

REVERT_MARKER = "revert"


def iso_timestamp(seconds: int) -> str:
    """Unix seconds -> ``2024-01-01T00:00:00.000Z``"""
    moment = datetime.fromtimestamp(int(seconds), tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_revert(exc: Exception) -> bool:
    if isinstance(exc, ContractLogicError):
        return True
    return REVERT_MARKER in str(exc).lower()


def _reason(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)


class ChainReader:
    """Read-only access to one Ethereum JSON-RPC endpoint"""

    def __init__(self, config: GatewayConfig, web3: Optional[Web3] = None):
        if web3 is None:
            if not config.rpc_url:
                raise ChainError("ETH_RPC_URL is not configured")
            # one attempt per call: web3 retries timeouts by default
            provider = Web3.HTTPProvider(
                config.rpc_url,
                request_kwargs={"timeout": config.rpc_timeout},
                exception_retry_configuration=None,
            )
            web3 = Web3(provider)
            if config.poa:
                web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        self.web3 = web3

    def current_block_height(self) -> int:
        try:
            return self.web3.eth.block_number
        except Exception as e:
            logger.warning(f"eth_blockNumber failed: {e}")
            raise ChainError(f"Failed to fetch blocks: {e}") from e

    def block_at(self, number: int) -> Optional[BlockSummary]:
        """Summary of block ``number``, or None when the node has no such block"""
        try:
            block = self.web3.eth.get_block(number)
        except BlockNotFound:
            return None
        except Exception as e:
            logger.warning(f"eth_getBlockByNumber({number}) failed: {e}")
            raise ChainError(f"Failed to fetch blocks: {e}") from e
        if not block:
            return None

        return BlockSummary(
            number=block["number"],
            timestamp=iso_timestamp(block["timestamp"]),
            transactions=len(block.get("transactions") or []),
            hash=Web3.to_hex(block["hash"]),
            validator=block.get("miner"),
        )

    def current_fee(self) -> int:
        """Current gas price in wei"""
        try:
            gas_price = self.web3.eth.gas_price
        except Exception as e:
            logger.warning(f"eth_gasPrice failed: {e}")
            raise ChainError(f"Failed to fetch gas price: {e}") from e
        if gas_price is None:
            raise FeeUnavailable()
        return int(gas_price)

    def _bind(self, address: str, abi: List[Any], descriptor: FunctionDescriptor, args: List[Any]):
        contract = self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        function = contract.get_function_by_signature(function_signature(descriptor))
        return function(*coerce_arguments(args, descriptor.inputs))

    def call(self, address: str, abi: List[Any], descriptor: FunctionDescriptor, args: List[Any]) -> Any:
        """Execute a view/pure function and return the decoded result"""
        try:
            return self._bind(address, abi, descriptor, args).call()
        except Exception as e:
            logger.warning(f"call {descriptor.name} on {address} failed: {e}")
            raise ChainError(f"Failed to execute view function: {_reason(e)}") from e

    def estimate_gas(
        self,
        address: str,
        abi: List[Any],
        descriptor: FunctionDescriptor,
        args: List[Any],
        sender: Optional[str] = None,
    ) -> int:
        """Simulate a state-changing call and return the gas it would use.

        ``sender`` is used as the ``from`` of the simulation only when it is a
        valid address.

        Raises:
            WouldRevert: the simulated execution reverts.
            ChainError: any other failure.
        """
        tx = {"from": Web3.to_checksum_address(sender)} if is_address(sender) else {}
        try:
            return int(self._bind(address, abi, descriptor, args).estimate_gas(tx))
        except Exception as e:
            if is_revert(e):
                logger.info(f"{descriptor.name} on {address} would revert: {_reason(e)}")
                raise WouldRevert(_reason(e)) from e
            logger.warning(f"estimate_gas {descriptor.name} on {address} failed: {e}")
            raise ChainError(_reason(e)) from e
