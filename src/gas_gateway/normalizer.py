"""Builds the uniform response envelope for every mode."""

from typing import Any, List

from web3 import Web3

from .abi import AbiKind, parse_abi_type
from .models import BlockSummary, FunctionDescriptor, GasEstimateResponse
from .units import fee_in_wei, format_ether, format_gwei, format_units

BALANCE_OF = "balanceOf"


def to_jsonable(value: Any, ints_as_str: bool = False) -> Any:
    """bytes -> 0x hex, tuples -> lists, recursively"""
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(value)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v, ints_as_str) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v, ints_as_str) for k, v in value.items()}
    if ints_as_str and isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def format_return_value(descriptor: FunctionDescriptor, raw: Any, balance_decimals: int = 6) -> Any:
    """Render a read-call result according to the first declared output.

    ``balanceOf`` returning an unsigned integer is scaled by
    ``balance_decimals``; other integers become exact decimal strings, also
    inside lists when the first output is an integer or integer array; the rest
    is passed through.
    """
    output = parse_abi_type(descriptor.outputs[0].type) if descriptor.outputs else None
    is_int = isinstance(raw, int) and not isinstance(raw, bool)

    if output is not None and is_int:
        if output.kind is AbiKind.UINT and descriptor.name == BALANCE_OF:
            return format_units(raw, balance_decimals)
        if output.is_integer:
            return str(raw)

    element = output
    while element is not None and element.kind is AbiKind.ARRAY:
        element = element.item
    return to_jsonable(raw, ints_as_str=element is not None and element.is_integer)


def latest_blocks(blocks: List[BlockSummary]) -> GasEstimateResponse:
    return GasEstimateResponse(
        message=f"Latest {len(blocks)} Ethereum blocks.",
        result=[block.model_dump() for block in blocks],
    )


def spot_price(price: str) -> GasEstimateResponse:
    return GasEstimateResponse(message="Current Ethereum price in USD.", result=price)


def network_fee(gas_price: int) -> GasEstimateResponse:
    return GasEstimateResponse(
        message="Current Ethereum network gas price.",
        gasPrice=format_gwei(gas_price),
    )


def read_call(descriptor: FunctionDescriptor, raw: Any, balance_decimals: int = 6) -> GasEstimateResponse:
    return GasEstimateResponse(
        message=f"Function {descriptor.name} is a view or pure function and does not consume gas.",
        result=format_return_value(descriptor, raw, balance_decimals),
    )


def write_estimate(gas: int, gas_price: int) -> GasEstimateResponse:
    return GasEstimateResponse(
        estimatedGas=str(gas),
        gasPrice=format_gwei(gas_price),
        estimatedFeeInETH=format_ether(fee_in_wei(gas, gas_price)),
    )
