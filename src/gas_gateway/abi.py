"""ABI type tags, function lookup and argument coercion."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional

from eth_utils import is_checksum_address, is_hex_address, remove_0x_prefix
from pydantic import ValidationError
from web3 import Web3

from .models import AbiParameter, FunctionDescriptor


class AbiKind(Enum):
    UINT = "uint"
    INT = "int"
    ADDRESS = "address"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"
    ARRAY = "array"
    TUPLE = "tuple"
    OTHER = "other"


@dataclass(frozen=True)
class AbiType:
    """Parsed form of an ABI type string such as ``uint256`` or ``address[]``"""

    kind: AbiKind
    raw: str
    bits: Optional[int] = None
    size: Optional[int] = None
    item: Optional["AbiType"] = None

    @property
    def is_integer(self) -> bool:
        return self.kind in (AbiKind.UINT, AbiKind.INT)


_SIZED = re.compile(r"^(uint|int|bytes)(\d*)$")


def parse_abi_type(type_str: str) -> AbiType:
    raw = type_str.strip()
    if raw.endswith("]") and "[" in raw:
        return AbiType(AbiKind.ARRAY, raw, item=parse_abi_type(raw[: raw.rindex("[")]))
    if raw.startswith("tuple") or raw.startswith("("):
        return AbiType(AbiKind.TUPLE, raw)
    if raw == "address":
        return AbiType(AbiKind.ADDRESS, raw)
    if raw == "bool":
        return AbiType(AbiKind.BOOL, raw)
    if raw == "string":
        return AbiType(AbiKind.STRING, raw)

    match = _SIZED.match(raw)
    if match:
        prefix, width = match.group(1), match.group(2)
        if prefix == "bytes":
            return AbiType(AbiKind.BYTES, raw, size=int(width) if width else None)
        kind = AbiKind.UINT if prefix == "uint" else AbiKind.INT
        return AbiType(kind, raw, bits=int(width) if width else 256)
    return AbiType(AbiKind.OTHER, raw)


def canonical_type(param: AbiParameter) -> str:
    """Type as it appears in a function signature; tuples are expanded"""
    if param.type.startswith("tuple"):
        suffix = param.type[len("tuple"):]
        inner = ",".join(canonical_type(c) for c in param.components or [])
        return f"({inner}){suffix}"
    return param.type


def function_signature(descriptor: FunctionDescriptor) -> str:
    types = ",".join(canonical_type(p) for p in descriptor.inputs)
    return f"{descriptor.name}({types})"


def find_function(abi: Iterable[Any], name: str) -> Optional[FunctionDescriptor]:
    """First ``function`` entry matching ``name`` (or a full signature)"""
    by_signature = "(" in name
    for entry in abi:
        if not isinstance(entry, dict):
            continue
        if entry.get("type", "function") != "function":
            continue
        if not by_signature and entry.get("name") != name:
            continue
        try:
            descriptor = FunctionDescriptor.model_validate(entry)
        except ValidationError:
            continue
        if by_signature and function_signature(descriptor) != name.replace(" ", ""):
            continue
        return descriptor
    return None


def is_address(value: Any) -> bool:
    """20-byte hex address; mixed case must carry a valid EIP-55 checksum"""
    if not isinstance(value, str) or not is_hex_address(value):
        return False
    body = remove_0x_prefix(value)
    if body.islower() or body.isupper() or body.isdigit():
        return True
    return is_checksum_address("0x" + body)


def _to_int(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, str):
        return value
    text = value.strip()
    try:
        if text.lower().startswith(("0x", "-0x")):
            return int(text, 16)
        return int(text, 10)
    except ValueError:
        return value


def coerce_argument(value: Any, param: AbiParameter) -> Any:
    """Convert a loosely typed JSON argument into what web3 expects for ``param``.

    Values that cannot be converted are returned unchanged and left for the
    encoder to reject.
    """
    abi_type = parse_abi_type(param.type)

    if abi_type.kind is AbiKind.ADDRESS:
        return Web3.to_checksum_address(value) if is_address(value) else value
    if abi_type.is_integer:
        return _to_int(value)
    if abi_type.kind is AbiKind.BYTES:
        if isinstance(value, str) and value.startswith("0x"):
            try:
                return Web3.to_bytes(hexstr=value)
            except ValueError:
                return value
        return value
    if abi_type.kind is AbiKind.ARRAY and isinstance(value, (list, tuple)):
        item = param.model_copy(update={"type": param.type[: param.type.rindex("[")]})
        return [coerce_argument(v, item) for v in value]
    if abi_type.kind is AbiKind.TUPLE and param.components:
        if isinstance(value, dict):
            coerced = dict(value)
            for component in param.components:
                if component.name in value:
                    coerced[component.name] = coerce_argument(value[component.name], component)
            return coerced
        if isinstance(value, (list, tuple)):
            return tuple(coerce_argument(v, c) for v, c in zip(value, param.components))
    return value


def coerce_arguments(args: List[Any], inputs: List[AbiParameter]) -> List[Any]:
    coerced = [coerce_argument(value, param) for value, param in zip(args, inputs)]
    # surplus arguments go through untouched so the encoder reports the mismatch
    return coerced + list(args[len(inputs):])
