"""Tests for bridggy/proxy/exchange.py — proxy token exchange."""

import json
import time

import pytest

from bridggy.errors import ExchangeFailedError, InvalidTokenFormatError, MissingClaimError
from bridggy.proxy.exchange import exchange_token, exchange_url
from tests.conftest import AUD, make_response, make_token


class TestExchangeUrl:

    def test_built_from_aud(self, proxy_token):
        assert exchange_url(proxy_token) == f"{AUD}/token/exchange"

    def test_missing_aud(self):
        with pytest.raises(MissingClaimError) as exc_info:
            exchange_url(make_token({"exp": 1}))
        assert exc_info.value.claim == "aud"


class TestExchangeToken:

    async def test_successful_exchange(self, mock_transport, proxy_token, access_token):
        mock_transport.send.return_value = make_response(200, json={"token": access_token})

        token = await exchange_token(mock_transport, proxy_token)

        assert token == access_token
        mock_transport.send.assert_called_once()
        url, options = mock_transport.send.call_args.args
        assert url == "http://localhost:8787/token/exchange"
        assert options.method == "POST"

    async def test_request_shape(self, mock_transport, proxy_token, access_token):
        mock_transport.send.return_value = make_response(200, json={"token": access_token})
        before = int(time.time() * 1000)

        await exchange_token(mock_transport, proxy_token)

        _, options = mock_transport.send.call_args.args
        assert options.headers["content-type"] == "application/json"
        assert options.headers["gg-x-source"] == "client"
        timestamp = options.headers["gg-x-timestamp"]
        assert timestamp.isdigit()
        assert before <= int(timestamp) <= int(time.time() * 1000)
        assert json.loads(options.content) == {"token": proxy_token}

    async def test_non_2xx_raises(self, mock_transport, proxy_token):
        mock_transport.send.return_value = make_response(401)

        with pytest.raises(ExchangeFailedError) as exc_info:
            await exchange_token(mock_transport, proxy_token)
        assert str(exc_info.value) == "status: 401 proxy: Token exchange failed"
        assert exc_info.value.status_code == 401
        assert mock_transport.send.call_count == 1

    async def test_no_retry_on_5xx(self, mock_transport, proxy_token):
        mock_transport.send.return_value = make_response(503)

        with pytest.raises(ExchangeFailedError):
            await exchange_token(mock_transport, proxy_token)
        assert mock_transport.send.call_count == 1

    async def test_missing_token_field(self, mock_transport, proxy_token):
        mock_transport.send.return_value = make_response(200, json={"access_token": "x"})

        with pytest.raises(ExchangeFailedError, match="missing token"):
            await exchange_token(mock_transport, proxy_token)

    async def test_non_json_body(self, mock_transport, proxy_token):
        mock_transport.send.return_value = make_response(200, text="<html>oops</html>")

        with pytest.raises(ExchangeFailedError, match="missing token"):
            await exchange_token(mock_transport, proxy_token)

    async def test_undecodable_proxy_token_fails_before_network(self, mock_transport):
        with pytest.raises(InvalidTokenFormatError):
            await exchange_token(mock_transport, "not-a-jwt")
        mock_transport.send.assert_not_called()

    async def test_missing_aud_fails_before_network(self, mock_transport):
        with pytest.raises(MissingClaimError):
            await exchange_token(mock_transport, make_token({"exp": 1}))
        mock_transport.send.assert_not_called()
