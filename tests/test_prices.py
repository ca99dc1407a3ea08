"""Tests for PriceReader with a mocked requests session."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from gas_gateway.config import DEFAULT_PRICE_API_URL, GatewayConfig
from gas_gateway.errors import PriceServiceError
from gas_gateway.prices import PriceReader


def session_returning(text: str, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.side_effect = lambda **kwargs: json.loads(text, **kwargs)
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Client Error")
    session = MagicMock()
    session.get.return_value = response
    return session


class TestSpotPrice:
    """Test price extraction and failure translation."""

    def test_price_keeps_quoted_digits(self) -> None:
        session = session_returning('{"ethereum": {"usd": 3456.789012345678901}}')
        reader = PriceReader(GatewayConfig(), session=session)

        assert reader.spot_price() == "3456.789012345678901"
        session.get.assert_called_once_with(
            DEFAULT_PRICE_API_URL,
            params={"ids": "ethereum", "vs_currencies": "usd"},
            timeout=3.0,
        )

    def test_integer_price(self) -> None:
        reader = PriceReader(GatewayConfig(), session=session_returning('{"ethereum": {"usd": 3000}}'))
        assert reader.spot_price() == "3000"

    def test_configured_asset_and_currency(self) -> None:
        session = session_returning('{"bitcoin": {"eur": 61000.5}}')
        config = GatewayConfig(price_asset="bitcoin", price_currency="eur", price_timeout=1.5)
        assert PriceReader(config, session=session).spot_price() == "61000.5"
        session.get.assert_called_once_with(
            DEFAULT_PRICE_API_URL,
            params={"ids": "bitcoin", "vs_currencies": "eur"},
            timeout=1.5,
        )

    def test_transport_failure(self) -> None:
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("Name or service not known")
        with pytest.raises(PriceServiceError, match="Failed to fetch ETH price: Name or service not known"):
            PriceReader(GatewayConfig(), session=session).spot_price()
        assert session.get.call_count == 1

    def test_http_error_status(self) -> None:
        reader = PriceReader(GatewayConfig(), session=session_returning("{}", status_code=429))
        with pytest.raises(PriceServiceError, match="429"):
            reader.spot_price()

    def test_missing_field(self) -> None:
        reader = PriceReader(GatewayConfig(), session=session_returning('{"ethereum": {}}'))
        with pytest.raises(PriceServiceError):
            reader.spot_price()

    def test_not_json(self) -> None:
        reader = PriceReader(GatewayConfig(), session=session_returning("<html>busy</html>"))
        with pytest.raises(PriceServiceError):
            reader.spot_price()

    def test_non_numeric_price(self) -> None:
        reader = PriceReader(GatewayConfig(), session=session_returning('{"ethereum": {"usd": "n/a"}}'))
        with pytest.raises(PriceServiceError, match="non-numeric"):
            reader.spot_price()

    def test_status_code(self) -> None:
        assert PriceServiceError("x").status_code == 500

    def test_without_session_uses_module_get(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """No Session object is created, so nothing is left open per request."""
        stub = session_returning('{"ethereum": {"usd": 2500.5}}')
        monkeypatch.setattr(requests, "get", stub.get)
        monkeypatch.setattr(requests, "Session", MagicMock(side_effect=AssertionError("no session")))

        reader = PriceReader(GatewayConfig())
        assert reader.session is None
        assert reader.spot_price() == "2500.5"
        stub.get.assert_called_once_with(
            DEFAULT_PRICE_API_URL,
            params={"ids": "ethereum", "vs_currencies": "usd"},
            timeout=3.0,
        )
