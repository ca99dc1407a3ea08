from typing import Any, List, Optional

from .chain import ChainReader
from .classifier import Mode, classify
from .config import GatewayConfig
from .errors import BlockRangeInvalid
from .log import get_logger
from .models import GasEstimateRequest, GasEstimateResponse
from .prices import PriceReader
from . import normalizer

logger = get_logger(__name__)

DEFAULT_BLOCK_COUNT = 5
MIN_BLOCK_COUNT = 1
MAX_BLOCK_COUNT = 100


def parse_block_count(args: List[Any]) -> int:
    """Block count from ``args[0]``; 5 when no argument is given"""
    if not args or args[0] is None:
        return DEFAULT_BLOCK_COUNT

    raw = args[0]
    if isinstance(raw, bool):
        raise BlockRangeInvalid()
    if isinstance(raw, int):
        count = raw
    elif isinstance(raw, float) and raw.is_integer():
        count = int(raw)
    elif isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        count = int(raw.strip())
    else:
        raise BlockRangeInvalid()

    if not MIN_BLOCK_COUNT <= count <= MAX_BLOCK_COUNT:
        raise BlockRangeInvalid()
    return count


class GasGateway:
    """Handles one request: classify, call out, normalize.

    Readers are created on first use so that modes which never touch the chain
    work without an RPC endpoint.
    """

    def __init__(
        self,
        config: GatewayConfig,
        chain: Optional[ChainReader] = None,
        prices: Optional[PriceReader] = None,
    ):
        self.config = config
        self._chain = chain
        self._prices = prices

    @property
    def chain(self) -> ChainReader:
        if self._chain is None:
            self._chain = ChainReader(self.config)
        return self._chain

    @property
    def prices(self) -> PriceReader:
        if self._prices is None:
            self._prices = PriceReader(self.config)
        return self._prices

    def handle(self, request: GasEstimateRequest) -> GasEstimateResponse:
        classification = classify(request)
        mode = classification.mode
        logger.info(f"{request.functionName}: {mode.value}")

        if mode is Mode.LATEST_BLOCKS:
            return self.latest_blocks(request.args)
        if mode is Mode.SPOT_PRICE:
            return normalizer.spot_price(self.prices.spot_price())
        if mode is Mode.NETWORK_FEE:
            return normalizer.network_fee(self.chain.current_fee())

        descriptor = classification.descriptor
        if mode is Mode.READ_CALL:
            raw = self.chain.call(request.contractAddress, request.abi, descriptor, request.args)
            decimals = request.decimals
            if decimals is None:
                decimals = self.config.balance_of_decimals
            return normalizer.read_call(descriptor, raw, decimals)

        gas = self.chain.estimate_gas(
            request.contractAddress, request.abi, descriptor, request.args, request.sender
        )
        gas_price = self.chain.current_fee()
        logger.debug(f"{descriptor.name}: gas={gas} price={gas_price}")
        return normalizer.write_estimate(gas, gas_price)

    def latest_blocks(self, args: List[Any]) -> GasEstimateResponse:
        count = parse_block_count(args)
        height = self.chain.current_block_height()

        blocks = []
        for offset in range(count):
            number = height - offset
            if number < 0:
                break
            block = self.chain.block_at(number)
            if block is not None:
                blocks.append(block)
        return normalizer.latest_blocks(blocks)
