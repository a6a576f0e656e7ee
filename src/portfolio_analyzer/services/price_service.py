"""Price service with caching over a price provider."""

import logging
from datetime import datetime
from typing import Optional

from portfolio_analyzer.core.timezone import now_jst
from portfolio_analyzer.domain.views import PriceQuote
from portfolio_analyzer.providers.price_provider import PriceProvider

logger = logging.getLogger(__name__)


class PriceService:
    """
    Service for fetching current asset prices.

    Caches quotes for ``cache_ttl_seconds`` and keeps serving them when the
    provider is down.
    """

    def __init__(
        self,
        provider: PriceProvider,
        cache_ttl_seconds: int = 1800,
    ):
        self._provider = provider
        self._cache_ttl = cache_ttl_seconds
        self._price_cache: dict[str, PriceQuote] = {}
        # When each cached quote was fetched; freshness is checked per symbol
        self._fetched_at: dict[str, datetime] = {}
        self._cache_time: Optional[datetime] = None

    def get_prices(self, symbols: list[str]) -> dict[str, PriceQuote]:
        """
        Fetch prices for symbols with caching.

        Returns dict mapping symbol -> PriceQuote; symbols without a price are omitted.
        Only symbols without a fresh cached quote go to the provider.
        """
        if not symbols:
            return {}

        symbols = [s.upper() for s in symbols]
        now = now_jst()

        cached_result = {s: self._price_cache[s] for s in symbols if self._is_fresh(s, now)}
        missing = [s for s in symbols if s not in cached_result]
        if not missing:
            return cached_result

        try:
            new_prices = self._provider.get_prices(missing)
        except Exception:
            logger.warning(
                "Price provider failed for %s; serving cached prices",
                ",".join(missing),
                exc_info=True,
            )
            cached_result.update(
                {s: self._price_cache[s] for s in missing if s in self._price_cache}
            )
        else:
            self._price_cache.update(new_prices)
            for symbol in new_prices:
                self._fetched_at[symbol] = now
            self._cache_time = now
            cached_result.update(new_prices)

        return {s: cached_result[s] for s in symbols if s in cached_result}

    def clear_cache(self) -> None:
        self._price_cache.clear()
        self._fetched_at.clear()
        self._cache_time = None

    @property
    def last_fetched_at(self) -> Optional[datetime]:
        return self._cache_time

    def _is_fresh(self, symbol: str, now: datetime) -> bool:
        """True while the cached quote for ``symbol`` is younger than the TTL."""
        fetched_at = self._fetched_at.get(symbol)
        if fetched_at is None:
            return False
        return (now - fetched_at).total_seconds() < self._cache_ttl
