"""
Data ingestion module for fetching cryptocurrency market data.

Provides a CoinGecko API client with:
- Optional retry with exponential backoff
- Rate limiting for free tier
- Structured responses instead of raised network errors
"""

import re
import time
import logging
from typing import Any, Dict, Optional
from dataclasses import dataclass

import requests

logger = logging.getLogger(__name__)

COIN_ID_PATTERN = re.compile(r"^[a-z0-9][a-z0-9._-]*$")


@dataclass
class APIResponse:
    """Structured API response."""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    status_code: Optional[int] = None


class CoinGeckoClient:
    """
    CoinGecko API client with retry logic and rate limiting.

    Features:
    - Optional retry with exponential backoff (single attempt by default)
    - Rate limiting for free tier (10-50 calls/minute)
    - Error handling and logging
    """

    BASE_URL = "https://api.coingecko.com/api/v3"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 1,
        backoff_factor: float = 2.0,
        rate_limit_delay: float = 0.0,
        api_key: Optional[str] = None
    ):
        """
        Initialize CoinGecko client.

        Args:
            base_url: API root (defaults to the public v3 API)
            timeout: Request timeout in seconds
            max_retries: Maximum attempts per request
            backoff_factor: Exponential backoff multiplier
            rate_limit_delay: Delay between requests (seconds)
            api_key: Optional demo API key
        """
        self.base_url = (base_url or self.BASE_URL).rstrip('/')
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.backoff_factor = backoff_factor
        self.rate_limit_delay = rate_limit_delay
        self._last_request_time = 0.0

        # Session for connection pooling
        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': 'CryptoTracker/1.0'
        })
        if api_key:
            self.session.headers['x-cg-demo-api-key'] = api_key

    @classmethod
    def from_config(cls, config) -> "CoinGeckoClient":
        """Build a client from a Config object."""
        api = config.api_config
        return cls(
            base_url=api.base_url,
            timeout=api.timeout,
            max_retries=api.max_retries,
            backoff_factor=api.backoff_factor,
            rate_limit_delay=api.rate_limit_delay,
            api_key=api.api_key
        )

    def _rate_limit(self) -> None:
        """Apply rate limiting between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self.rate_limit_delay:
            sleep_time = self.rate_limit_delay - elapsed
            time.sleep(sleep_time)
        self._last_request_time = time.time()

    def _make_request(
        self,
        endpoint: str,
        params: Optional[Dict] = None
    ) -> APIResponse:
        """
        Make API request with retry logic.

        Args:
            endpoint: API endpoint path
            params: Query parameters

        Returns:
            APIResponse with data or error
        """
        url = f"{self.base_url}{endpoint}"
        last_error = None
        last_status = None

        for attempt in range(self.max_retries):
            try:
                self._rate_limit()

                logger.debug(f"API request: {endpoint} (attempt {attempt + 1})")

                response = self.session.get(
                    url,
                    params=params,
                    timeout=self.timeout
                )
                last_status = response.status_code

                if response.status_code == 200:
                    try:
                        data = response.json()
                    except ValueError as e:
                        logger.warning(f"Could not decode response from {endpoint}: {e}")
                        return APIResponse(
                            success=False,
                            error=f"Decode error: {e}",
                            status_code=200
                        )

                    return APIResponse(
                        success=True,
                        data=data,
                        status_code=200
                    )

                elif response.status_code == 429:
                    last_error = "Rate limited"
                    if attempt < self.max_retries - 1:
                        # Rate limited - wait longer
                        wait_time = (self.backoff_factor ** attempt) * 10
                        logger.warning(f"Rate limited. Waiting {wait_time:.1f}s...")
                        time.sleep(wait_time)
                        continue
                    logger.warning(f"Rate limited on {endpoint}")

                else:
                    last_error = f"HTTP {response.status_code}"
                    logger.warning(
                        f"API error {response.status_code}: {response.text[:200]}"
                    )

            except requests.exceptions.Timeout:
                last_error = "Timeout"
                logger.warning(f"Request timeout (attempt {attempt + 1})")

            except requests.exceptions.RequestException as e:
                last_error = str(e)
                logger.warning(f"Request failed (attempt {attempt + 1}): {e}")

            # Exponential backoff
            if attempt < self.max_retries - 1:
                wait_time = self.backoff_factor ** attempt
                logger.info(f"Retrying in {wait_time:.1f}s...")
                time.sleep(wait_time)

        if self.max_retries > 1:
            last_error = f"Max retries ({self.max_retries}) exceeded: {last_error}"

        return APIResponse(
            success=False,
            error=last_error,
            status_code=last_status
        )

    def get_coin_markets(
        self,
        vs_currency: str = "usd",
        per_page: int = 250,
        page: int = 1,
        sparkline: bool = True
    ) -> APIResponse:
        """
        Fetch the market list ordered by market cap.

        Args:
            vs_currency: Quote currency
            per_page: Coins per page (max 250)
            page: Page number
            sparkline: Include 7 day sparkline prices

        Returns:
            APIResponse with a list of coin market rows
        """
        endpoint = "/coins/markets"
        params = {
            'vs_currency': vs_currency,
            'order': 'market_cap_desc',
            'per_page': per_page,
            'page': page,
            'sparkline': 'true' if sparkline else 'false',
            'price_change_percentage': '24h'
        }

        return self._make_request(endpoint, params)

    def get_global(self) -> APIResponse:
        """Fetch global market figures."""
        return self._make_request("/global")

    def get_coin_detail(self, coin_id: str) -> APIResponse:
        """
        Fetch descriptive details about a coin.

        Invalid ids never reach the network.
        """
        if not coin_id or not COIN_ID_PATTERN.match(coin_id):
            logger.error(f"Invalid coin id: {coin_id!r}")
            return APIResponse(success=False, error=f"Invalid coin id: {coin_id!r}")

        endpoint = f"/coins/{coin_id}"
        params = {
            'localization': 'false',
            'tickers': 'false',
            'market_data': 'false',
            'community_data': 'false',
            'developer_data': 'false',
            'sparkline': 'false'
        }

        return self._make_request(endpoint, params)

    def ping(self) -> bool:
        """Check API connectivity."""
        response = self._make_request("/ping")
        return response.success
