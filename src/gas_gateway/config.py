import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_PRICE_API_URL = "https://api.coingecko.com/api/v3/simple/price"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class GatewayConfig(BaseModel):
    """Process configuration, passed explicitly to the readers"""

    model_config = ConfigDict(frozen=True)

    rpc_url: Optional[str] = Field(None, description="Ethereum JSON-RPC endpoint")
    chain_id: int = Field(1, description="Chain ID reported by the status route")
    poa: bool = Field(False, description="Inject the extraData POA middleware")
    rpc_timeout: float = Field(10.0, gt=0, description="Seconds per JSON-RPC call")
    price_api_url: str = Field(DEFAULT_PRICE_API_URL, description="Simple price endpoint")
    price_asset: str = Field("ethereum", description="Price index asset id")
    price_currency: str = Field("usd", description="Price index quote currency")
    price_timeout: float = Field(3.0, gt=0, description="Seconds per price request")
    balance_of_decimals: int = Field(6, ge=0, le=77, description="Display decimals for balanceOf")
    log_level: str = Field("INFO", description="Root log level")
    log_color: bool = Field(False, description="Colour log output")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    host: str = Field("0.0.0.0", description="Bind address for uvicorn")
    port: int = Field(3000, description="Listen port for uvicorn")


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{key} must be a boolean, got {raw!r}")


def _env_number(key: str, default, cast):
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


def load_config(dotenv: bool = True) -> GatewayConfig:
    """Build the configuration from the environment (and ``.env`` if present)"""
    if dotenv:
        load_dotenv()

    origins = os.getenv("CORS_ORIGINS", "*")
    return GatewayConfig(
        rpc_url=os.getenv("ETH_RPC_URL") or os.getenv("INFURA_URL") or None,
        chain_id=_env_number("ETH_CHAIN_ID", 1, int),
        poa=_env_bool("ETH_POA", False),
        rpc_timeout=_env_number("RPC_TIMEOUT", 10.0, float),
        price_api_url=os.getenv("PRICE_API_URL") or DEFAULT_PRICE_API_URL,
        price_asset=os.getenv("PRICE_ASSET") or "ethereum",
        price_currency=os.getenv("PRICE_CURRENCY") or "usd",
        price_timeout=_env_number("PRICE_TIMEOUT", 3.0, float),
        balance_of_decimals=_env_number("BALANCE_OF_DECIMALS", 6, int),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_color=_env_bool("LOG_COLOR", False),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        host=os.getenv("HOST") or "0.0.0.0",
        port=_env_number("PORT", 3000, int),
    )
