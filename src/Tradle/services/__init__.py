"""Services: price sources, caching, the request gate, and challenge assembly.

Re-exports the main classes so consumers can import directly:
    from Tradle.services import ChallengeAssembler, FallbackPriceService
"""

from Tradle.services.cache import ServiceCache
from Tradle.services.catalog import SymbolCatalog
from Tradle.services.challenge import ChallengeAssembler, iter_candidates
from Tradle.services.price_data import (
    FallbackPriceService,
    PriceDataSource,
    PriceSeries,
    TiingoPriceSource,
    YFinancePriceSource,
    build_price_source,
)
from Tradle.services.rate_limiter import RateLimiter
from Tradle.services.synthetic import generate_fallback_series

__all__ = [
    "ChallengeAssembler",
    "FallbackPriceService",
    "PriceDataSource",
    "PriceSeries",
    "RateLimiter",
    "ServiceCache",
    "SymbolCatalog",
    "TiingoPriceSource",
    "YFinancePriceSource",
    "build_price_source",
    "generate_fallback_series",
    "iter_candidates",
]
