"""Seeded symbol selection from a catalog."""

import math
from collections.abc import Sequence

from Tradle.models.market_data import SymbolInfo
from Tradle.simulation.seeded import seeded_random_from_seed


def select_symbol(catalog: Sequence[SymbolInfo], seed: int) -> SymbolInfo:
    """Pick one catalog entry as a pure function of ``(catalog, seed)``.

    Raises:
        ValueError: If the catalog is empty.
    """
    if not catalog:
        msg = "Cannot select a symbol from an empty catalog."
        raise ValueError(msg)
    # frac() can round up to 1.0 for a tiny negative sine
    index = min(math.floor(seeded_random_from_seed(seed) * len(catalog)), len(catalog) - 1)
    return catalog[index]
