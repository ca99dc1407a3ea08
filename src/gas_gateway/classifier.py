"""Request classification.

Pure decision logic: picks the handling mode from the request shape without
touching the network.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .abi import AbiKind, find_function, is_address, parse_abi_type
from .errors import FunctionNotFound, InvalidAddress, MissingParameters
from .models import FunctionDescriptor, GasEstimateRequest


class Mode(Enum):
    LATEST_BLOCKS = "latest-blocks"
    SPOT_PRICE = "spot-price"
    NETWORK_FEE = "network-fee"
    READ_CALL = "read-call"
    WRITE_ESTIMATE = "write-estimate"


BUILTIN_MODES = {
    "getLatestBlocks": Mode.LATEST_BLOCKS,
    "getEthPrice": Mode.SPOT_PRICE,
    "getGasPrice": Mode.NETWORK_FEE,
}


@dataclass(frozen=True)
class Classification:
    mode: Mode
    descriptor: Optional[FunctionDescriptor] = None


def classify(request: GasEstimateRequest) -> Classification:
    """Select the handling mode for ``request``.

    The reserved names win over any ABI only when neither ``contractAddress``
    nor ``abi`` is supplied.

    Raises:
        MissingParameters: contract dispatch without address, ABI or name.
        InvalidAddress: malformed contract address or address argument.
        FunctionNotFound: the name is not in the ABI.
    """
    name = request.functionName
    if name in BUILTIN_MODES and not request.contractAddress and not request.abi:
        return Classification(BUILTIN_MODES[name])

    if not request.contractAddress or not request.abi or not name:
        raise MissingParameters()

    if not is_address(request.contractAddress):
        raise InvalidAddress("Invalid contract address.")

    descriptor = find_function(request.abi, name)
    if descriptor is None:
        raise FunctionNotFound(name)

    _check_address_argument(request, descriptor)

    if descriptor.is_read_only:
        return Classification(Mode.READ_CALL, descriptor)
    return Classification(Mode.WRITE_ESTIMATE, descriptor)


def _check_address_argument(request: GasEstimateRequest, descriptor: FunctionDescriptor) -> None:
    # Only validated when the first parameter is declared as an address
    if not request.args or request.args[0] is None or not descriptor.inputs:
        return
    if parse_abi_type(descriptor.inputs[0].type).kind is not AbiKind.ADDRESS:
        return
    if not is_address(request.args[0]):
        raise InvalidAddress("Invalid address in arguments.")
