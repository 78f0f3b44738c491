import unittest
from unittest import mock

import requests

from pumpfun_api.errors import NetworkError, NotFound
from pumpfun_api.http_client import HttpClient
from pumpfun_api.price_client import PumpPriceClient

COIN = {
    "mint": "mint-addr",
    "bonding_curve": "curve-addr",
    "associated_bonding_curve": "assoc-addr",
    "virtual_sol_reserves": 1_000_000_000,
    "virtual_token_reserves": "500000000000",
    "market_cap": 40.5,
}


class _FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.urls = []

    def get_json(self, url, params=None):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


class PumpPriceClientTests(unittest.TestCase):
    def test_fetch_reserves_parses_coin(self) -> None:
        http = _FakeHttp(response=COIN)
        client = PumpPriceClient("https://api.example/", http)

        reserves = client.fetch_reserves("mint-addr")

        self.assertEqual(http.urls, ["https://api.example/coins/mint-addr"])
        self.assertEqual(reserves.virtual_sol_reserves, 1_000_000_000)
        self.assertEqual(reserves.virtual_token_reserves, 500_000_000_000)
        self.assertEqual(reserves.bonding_curve, "curve-addr")
        self.assertEqual(reserves.associated_bonding_curve, "assoc-addr")

    def test_missing_bonding_curve_is_not_found(self) -> None:
        coin = dict(COIN, bonding_curve=None)
        with self.assertRaises(NotFound):
            PumpPriceClient.parse_reserves(coin, "mint-addr")

    def test_missing_reserves_are_not_defaulted(self) -> None:
        coin = {k: v for k, v in COIN.items() if k != "virtual_sol_reserves"}
        with self.assertRaises(NotFound):
            PumpPriceClient.parse_reserves(coin, "mint-addr")

    def test_empty_body_is_not_found(self) -> None:
        client = PumpPriceClient("https://api.example", _FakeHttp(response=None))
        with self.assertRaises(NotFound):
            client.fetch_coin("mint-addr")

    def test_network_errors_propagate(self) -> None:
        client = PumpPriceClient("https://api.example", _FakeHttp(error=NetworkError("boom")))
        with self.assertRaises(NetworkError):
            client.fetch_reserves("mint-addr")


class HttpClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = HttpClient(timeout=1.0, max_retries=0, user_agent="test-agent")

    def _response(self, status: int, payload=None) -> mock.Mock:
        response = mock.Mock(status_code=status)
        response.json.return_value = payload
        if status >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(f"{status}")
        return response

    def test_sets_user_agent(self) -> None:
        self.assertEqual(self.client.session.headers["User-Agent"], "test-agent")

    def test_404_maps_to_not_found(self) -> None:
        with mock.patch.object(self.client.session, "get", return_value=self._response(404)):
            with self.assertRaises(NotFound):
                self.client.get_json("https://api.example/coins/x")

    def test_server_error_maps_to_network_error(self) -> None:
        with mock.patch.object(self.client.session, "get", return_value=self._response(503)):
            with self.assertRaises(NetworkError):
                self.client.get_json("https://api.example/coins/x")

    def test_connection_error_maps_to_network_error(self) -> None:
        with mock.patch.object(self.client.session, "get", side_effect=requests.ConnectionError("down")):
            with self.assertRaises(NetworkError):
                self.client.get_json("https://api.example/coins/x")

    def test_invalid_json_maps_to_network_error(self) -> None:
        response = self._response(200)
        response.json.side_effect = ValueError("bad json")
        with mock.patch.object(self.client.session, "get", return_value=response):
            with self.assertRaises(NetworkError):
                self.client.get_json("https://api.example/coins/x")

    def test_returns_payload(self) -> None:
        with mock.patch.object(self.client.session, "get", return_value=self._response(200, {"a": 1})):
            self.assertEqual(self.client.get_json("https://api.example/coins/x"), {"a": 1})


if __name__ == "__main__":
    unittest.main()
