from decimal import Decimal
from typing import Optional

import requests

from .config import GatewayConfig
from .errors import PriceServiceError
from .log import get_logger

logger = get_logger(__name__)


class PriceReader:
    """Spot prices from a CoinGecko-style ``simple/price`` endpoint"""

    def __init__(self, config: GatewayConfig, session: Optional[requests.Session] = None):
        self.url = config.price_api_url
        self.asset = config.price_asset
        self.currency = config.price_currency
        self.timeout = config.price_timeout
        self.session = session

    def spot_price(self, asset: Optional[str] = None) -> str:
        """Price of ``asset`` in the configured currency, as a decimal string.

        One request, no retry. Any failure is raised as ``PriceServiceError``.
        """
        asset = asset or self.asset
        try:
            get = self.session.get if self.session is not None else requests.get
            response = get(
                self.url,
                params={"ids": asset, "vs_currencies": self.currency},
                timeout=self.timeout,
            )
            response.raise_for_status()
            # Decimal keeps the quoted digits exactly
            price = response.json(parse_float=Decimal)[asset][self.currency]
        except requests.RequestException as e:
            logger.warning(f"Price request for {asset} failed: {e}")
            raise PriceServiceError(f"Failed to fetch ETH price: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Unexpected price payload for {asset}: {e!r}")
            raise PriceServiceError(f"Failed to fetch ETH price: unexpected response ({e!r})") from e

        if isinstance(price, bool) or not isinstance(price, (int, Decimal)):
            raise PriceServiceError(f"Failed to fetch ETH price: non-numeric price {price!r}")
        return str(price)
