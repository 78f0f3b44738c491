import logging
from typing import Any, Dict

from .errors import NotFound
from .http_client import HttpClient
from .models import ReserveState

logger = logging.getLogger(__name__)

RESERVE_FIELDS = ("virtual_token_reserves", "virtual_sol_reserves", "bonding_curve", "associated_bonding_curve")


class PumpPriceClient:
    """Reads coin metadata and bonding-curve reserves from the pump.fun frontend API."""

    def __init__(self, base_url: str, http: HttpClient) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http

    def coin_url(self, mint: str) -> str:
        return f"{self.base_url}/coins/{mint}"

    def fetch_coin(self, mint: str) -> Dict[str, Any]:
        data = self.http.get_json(self.coin_url(mint))
        if not data or not isinstance(data, dict):
            raise NotFound(f"coin data not found for {mint}")
        return data

    def fetch_reserves(self, mint: str) -> ReserveState:
        coin = self.fetch_coin(mint)
        reserves = self.parse_reserves(coin, mint)
        logger.debug(
            "reserves for %s: sol=%d token=%d", mint, reserves.virtual_sol_reserves, reserves.virtual_token_reserves
        )
        return reserves

    @staticmethod
    def parse_reserves(coin: Dict[str, Any], mint: str) -> ReserveState:
        missing = [name for name in RESERVE_FIELDS if coin.get(name) in (None, "")]
        if missing:
            raise NotFound(f"coin {mint} is missing {', '.join(missing)}")

        try:
            token_reserves = int(coin["virtual_token_reserves"])
            sol_reserves = int(coin["virtual_sol_reserves"])
        except (TypeError, ValueError):
            raise NotFound(f"coin {mint} reserve figures are not integers") from None

        return ReserveState(
            virtual_token_reserves=token_reserves,
            virtual_sol_reserves=sol_reserves,
            bonding_curve=str(coin["bonding_curve"]),
            associated_bonding_curve=str(coin["associated_bonding_curve"]),
        )
