import unittest
from decimal import Decimal

from fastapi.testclient import TestClient

from pumpfun_api.api import create_app
from pumpfun_api.errors import InvalidReserves, NetworkError, NotFound, TransactionFailed, UnconfirmedTransaction


class _FakeTrader:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def buy(self, private_key, mint, sol_in, priority_fee_sol=None, slippage=None):
        self.calls.append(("buy", private_key, mint, sol_in, priority_fee_sol, slippage))
        if self.error is not None:
            raise self.error
        return "buy-signature"

    def sell(self, private_key, mint, token_balance, priority_fee_sol=None, slippage=None):
        self.calls.append(("sell", private_key, mint, token_balance, priority_fee_sol, slippage))
        if self.error is not None:
            raise self.error
        return {"err": None, "logs": ["ok"], "unitsConsumed": 42}


class _FakePriceClient:
    def __init__(self, coin=None, error=None):
        self.coin = coin
        self.error = error

    def fetch_coin(self, mint):
        if self.error is not None:
            raise self.error
        return self.coin


class TradeRouteTests(unittest.TestCase):
    def _client(self, trader) -> TestClient:
        self.trader = trader
        return TestClient(create_app(trader, _FakePriceClient()))

    def test_buy_from_json_body(self) -> None:
        client = self._client(_FakeTrader())
        response = client.post(
            "/buy",
            json={"privateKey": "key", "mintAddress": "mint", "solIn": "0.1", "slippageDecimal": "0.3"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "result": "buy-signature"})
        _, key, mint, sol_in, priority, slippage = self.trader.calls[0]
        self.assertEqual((key, mint), ("key", "mint"))
        self.assertEqual(sol_in, Decimal("0.1"))
        self.assertIsNone(priority)
        self.assertEqual(slippage, Decimal("0.3"))

    def test_sell_from_query_string(self) -> None:
        client = self._client(_FakeTrader())
        response = client.post("/sell", params={"privateKey": "key", "mintAddress": "mint", "tokenBalance": "1000"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["result"]["unitsConsumed"], 42)
        self.assertEqual(self.trader.calls[0][3], Decimal("1000"))

    def test_body_wins_over_query(self) -> None:
        client = self._client(_FakeTrader())
        client.post("/buy?solIn=5", json={"privateKey": "key", "mintAddress": "mint", "solIn": 1})

        self.assertEqual(self.trader.calls[0][3], Decimal("1"))

    def test_missing_field_is_bad_request(self) -> None:
        client = self._client(_FakeTrader())
        response = client.post("/buy", json={"privateKey": "key"})

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])
        self.assertEqual(self.trader.calls, [])

    def test_domain_error_is_bad_request(self) -> None:
        client = self._client(_FakeTrader(error=InvalidReserves("virtual reserves must be positive")))
        response = client.post("/sell", json={"privateKey": "key", "mintAddress": "mint", "tokenBalance": 10})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(),
            {"success": False, "error": "Sell operation failed", "details": "virtual reserves must be positive"},
        )

    def test_unexpected_error_is_server_error(self) -> None:
        client = self._client(_FakeTrader(error=RuntimeError("kaboom")))
        response = client.post("/buy", json={"privateKey": "key", "mintAddress": "mint", "solIn": 1})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"success": False, "error": "An unexpected error occurred during the buy operation"},
        )

    def test_unconfirmed_trade_is_not_reported_as_failed(self) -> None:
        error = UnconfirmedTransaction("transaction sig-1 was not confirmed; it may still land", signature="sig-1")
        client = self._client(_FakeTrader(error=error))
        response = client.post("/buy", json={"privateKey": "key", "mintAddress": "mint", "solIn": 1})

        self.assertEqual(response.status_code, 202)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Transaction not confirmed; it may still land")
        self.assertEqual(body["signature"], "sig-1")
        self.assertNotIn("failed", body["error"])

    def test_on_chain_failure_carries_signature(self) -> None:
        error = TransactionFailed("transaction sig-2 failed on-chain: Custom(6002)", signature="sig-2")
        client = self._client(_FakeTrader(error=error))
        response = client.post("/sell", json={"privateKey": "key", "mintAddress": "mint", "tokenBalance": 10})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Sell operation failed")
        self.assertEqual(response.json()["signature"], "sig-2")

    def test_non_object_body_is_bad_request(self) -> None:
        client = self._client(_FakeTrader())
        response = client.post("/buy", json=[1, 2, 3])

        self.assertEqual(response.status_code, 400)


class CoinRouteTests(unittest.TestCase):
    COIN = {"mint": "mint", "market_cap": 1_000, "volume_24h": 300, "price_change_24h": 6, "total_supply": 10}

    def _client(self, price_client) -> TestClient:
        return TestClient(create_app(_FakeTrader(), price_client))

    def test_ping_and_index(self) -> None:
        client = self._client(_FakePriceClient())

        self.assertEqual(client.get("/ping").json(), {"status": "ok"})
        self.assertIn("/buy", client.get("/").json()["endpoints"])

    def test_coin_returns_raw_data(self) -> None:
        response = self._client(_FakePriceClient(coin=self.COIN)).get("/coin/mint")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), self.COIN)

    def test_coin_not_found(self) -> None:
        response = self._client(_FakePriceClient(error=NotFound("gone"))).get("/coin/mint")
        self.assertEqual(response.status_code, 404)

    def test_coin_upstream_failure(self) -> None:
        response = self._client(_FakePriceClient(error=NetworkError("down"))).get("/coin/mint")

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["details"], "down")

    def test_analyze(self) -> None:
        response = self._client(_FakePriceClient(coin=self.COIN)).get("/analyze/mint")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["mintAddress"], "mint")
        self.assertEqual(body["trendIndicator"], "Strongly Bullish")

    def test_analyze_not_found(self) -> None:
        response = self._client(_FakePriceClient(error=NotFound("gone"))).get("/analyze/mint")
        self.assertEqual(response.status_code, 404)


if __name__ == "__main__":
    unittest.main()
