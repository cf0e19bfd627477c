"""Catalog of tradable stocks the daily challenge is drawn from.

The built-in list holds large-cap US names with long, liquid histories. A
JSON file (a list of ``SymbolInfo`` objects) can replace it, e.g. to run a
themed season.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Final
from urllib.parse import quote_plus

from pydantic import ValidationError

from Tradle.models.market_data import SymbolInfo

logger = logging.getLogger(__name__)

WIKI_BASE_URL: Final[str] = "https://en.wikipedia.org/wiki/"
SEARCH_BASE_URL: Final[str] = "https://www.google.com/search?q="

# (ticker, company name, sector, wikipedia article)
_BUILTIN_SYMBOLS: Final[tuple[tuple[str, str, str, str], ...]] = (
    ("AAPL", "Apple Inc.", "Technology", "Apple_Inc"),
    ("MSFT", "Microsoft Corporation", "Technology", "Microsoft_Corporation"),
    ("GOOGL", "Alphabet Inc.", "Technology", "Alphabet_Inc"),
    ("AMZN", "Amazon.com Inc.", "Technology", "Amazon.com_Inc"),
    ("NVDA", "NVIDIA Corporation", "Technology", "NVIDIA_Corporation"),
    ("TSLA", "Tesla Inc.", "Technology", "Tesla_Inc"),
    ("META", "Meta Platforms Inc.", "Technology", "Meta_Platforms_Inc"),
    ("NFLX", "Netflix Inc.", "Technology", "Netflix_Inc"),
    ("CRM", "Salesforce Inc.", "Technology", "Salesforce_Inc"),
    ("ORCL", "Oracle Corporation", "Technology", "Oracle_Corporation"),
    ("ADBE", "Adobe Inc.", "Technology", "Adobe_Inc"),
    ("INTC", "Intel Corporation", "Technology", "Intel"),
    ("AMD", "Advanced Micro Devices Inc.", "Technology", "AMD"),
    ("CSCO", "Cisco Systems Inc.", "Technology", "Cisco"),
    ("IBM", "International Business Machines", "Technology", "IBM"),
    ("JPM", "JPMorgan Chase & Co.", "Financial", "JPMorgan_Chase_%26_Co"),
    ("BAC", "Bank of America Corp.", "Financial", "Bank_of_America_Corp"),
    ("WFC", "Wells Fargo & Company", "Financial", "Wells_Fargo_%26_Company"),
    ("GS", "The Goldman Sachs Group Inc.", "Financial", "The_Goldman_Sachs_Group_Inc"),
    ("MS", "Morgan Stanley", "Financial", "Morgan_Stanley"),
    ("C", "Citigroup Inc.", "Financial", "Citigroup_Inc"),
    ("AXP", "American Express Company", "Financial", "American_Express_Company"),
    ("V", "Visa Inc.", "Financial", "Visa_Inc."),
    ("MA", "Mastercard Inc.", "Financial", "Mastercard"),
    ("JNJ", "Johnson & Johnson", "Healthcare", "Johnson_%26_Johnson"),
    ("PFE", "Pfizer Inc.", "Healthcare", "Pfizer"),
    ("UNH", "UnitedHealth Group Inc.", "Healthcare", "UnitedHealth_Group"),
    ("MRK", "Merck & Co. Inc.", "Healthcare", "Merck_%26_Co."),
    ("ABBV", "AbbVie Inc.", "Healthcare", "AbbVie"),
    ("LLY", "Eli Lilly and Company", "Healthcare", "Eli_Lilly_and_Company"),
    ("KO", "The Coca-Cola Company", "Consumer", "The_Coca-Cola_Company"),
    ("PEP", "PepsiCo Inc.", "Consumer", "PepsiCo"),
    ("WMT", "Walmart Inc.", "Consumer", "Walmart"),
    ("COST", "Costco Wholesale Corporation", "Consumer", "Costco"),
    ("MCD", "McDonald's Corporation", "Consumer", "McDonald%27s"),
    ("NKE", "Nike Inc.", "Consumer", "Nike,_Inc."),
    ("SBUX", "Starbucks Corporation", "Consumer", "Starbucks"),
    ("DIS", "The Walt Disney Company", "Communication", "The_Walt_Disney_Company"),
    ("XOM", "Exxon Mobil Corporation", "Energy", "ExxonMobil"),
    ("CVX", "Chevron Corporation", "Energy", "Chevron_Corporation"),
    ("BA", "The Boeing Company", "Industrials", "Boeing"),
    ("CAT", "Caterpillar Inc.", "Industrials", "Caterpillar_Inc."),
    ("GE", "General Electric Company", "Industrials", "General_Electric"),
    ("HD", "The Home Depot Inc.", "Consumer", "The_Home_Depot"),
)


def _builtin_catalog() -> list[SymbolInfo]:
    return [
        SymbolInfo(
            ticker=ticker,
            name=name,
            sector=sector,
            wiki_link=f"{WIKI_BASE_URL}{article}",
            info_link=f"{SEARCH_BASE_URL}{quote_plus(name + ' stock')}",
        )
        for ticker, name, sector, article in _BUILTIN_SYMBOLS
    ]


class SymbolCatalog:
    """Ordered list of candidate stocks.

    Order matters: symbol selection indexes into the list, so reordering the
    catalog changes which stock a given seed picks.
    """

    def __init__(self, override_path: Path | None = None) -> None:
        self._override_path = override_path
        self._symbols: list[SymbolInfo] | None = None

    def list_symbols(self) -> list[SymbolInfo]:
        """Return the catalog, loading the override file on first use.

        A missing or malformed override file is logged and the built-in list
        is used instead.
        """
        if self._symbols is None:
            self._symbols = self._load()
        return list(self._symbols)

    def _load(self) -> list[SymbolInfo]:
        if self._override_path is None:
            return _builtin_catalog()

        if not self._override_path.exists():
            logger.warning(
                "Catalog override %s not found; using built-in catalog", self._override_path
            )
            return _builtin_catalog()

        try:
            raw = json.loads(self._override_path.read_text(encoding="utf-8"))
            symbols = [SymbolInfo.model_validate(item) for item in raw]
        except (json.JSONDecodeError, TypeError, ValidationError) as exc:
            logger.warning(
                "Catalog override %s is invalid (%s); using built-in catalog",
                self._override_path,
                exc,
            )
            return _builtin_catalog()

        if not symbols:
            logger.warning(
                "Catalog override %s is empty; using built-in catalog", self._override_path
            )
            return _builtin_catalog()

        logger.info("Loaded %d symbols from %s", len(symbols), self._override_path)
        return symbols
