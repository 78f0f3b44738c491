from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter, Retry

from .errors import NetworkError, NotFound

BROWSER_HEADERS = {
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.5",
    "Referer": "https://www.pump.fun/",
    "Origin": "https://www.pump.fun",
}


class HttpClient:
    def __init__(self, timeout: float, max_retries: int, user_agent: str) -> None:
        self.timeout = timeout
        self.session = requests.Session()
        # only idempotent reads are retried at the transport level
        retry_policy = Retry(
            total=max_retries,
            backoff_factor=0.2,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_policy, pool_connections=4, pool_maxsize=16)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update(BROWSER_HEADERS)
        self.session.headers.update({"User-Agent": user_agent})

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"GET {url} failed", cause=exc) from exc

        if response.status_code == 404:
            raise NotFound(f"GET {url} returned 404")
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise NetworkError(f"GET {url} returned status {response.status_code}", cause=exc) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(f"GET {url} returned invalid JSON", cause=exc) from exc
