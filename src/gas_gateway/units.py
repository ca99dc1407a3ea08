"""Exact decimal rendering of integer token amounts.

Named denominations go through ``Web3.from_wei``; any other decimal count is
split with integer arithmetic. Nothing goes through float.
"""

from web3 import Web3

WEI_PER_GWEI = 10 ** 9
WEI_PER_ETHER = 10 ** 18

GWEI_DECIMALS = 9
ETHER_DECIMALS = 18

# decimals -> web3 unit name
UNIT_NAMES = {
    3: "kwei",
    6: "mwei",
    GWEI_DECIMALS: "gwei",
    12: "szabo",
    15: "finney",
    ETHER_DECIMALS: "ether",
}

MAX_WEI = 2 ** 256 - 1


def _render(amount) -> str:
    """ethers-style: trailing zeros dropped, at least one fraction digit"""
    whole, _, fraction = format(amount, "f").partition(".")
    return f"{whole}.{fraction.rstrip('0') or '0'}"


def format_units(value: int, decimals: int) -> str:
    """Render ``value / 10**decimals`` as a decimal string.

    The fraction keeps at least one digit and drops trailing zeros::

        >>> format_units(50 * WEI_PER_GWEI, GWEI_DECIMALS)
        '50.0'
        >>> format_units(1050000000000000, ETHER_DECIMALS)
        '0.00105'
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer amount, got {type(value).__name__}")
    if decimals < 0:
        raise ValueError("decimals must be non-negative")

    unit = UNIT_NAMES.get(decimals)
    if unit is not None and 0 <= value <= MAX_WEI:
        return _render(Web3.from_wei(value, unit))

    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10 ** decimals)
    digits = str(fraction).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{sign}{whole}.{digits or '0'}"


def format_gwei(wei: int) -> str:
    return format_units(wei, GWEI_DECIMALS) + " gwei"


def format_ether(wei: int) -> str:
    return format_units(wei, ETHER_DECIMALS)


def fee_in_wei(gas: int, gas_price: int) -> int:
    """Total fee for ``gas`` units at ``gas_price`` wei each"""
    if gas < 0 or gas_price < 0:
        raise ValueError("gas and gas price must be non-negative")
    return gas * gas_price
