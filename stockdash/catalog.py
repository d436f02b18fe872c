"""
Symbol catalog: the fixed, ordered table of simulated instruments.

The catalog is built once (from the built-in table or a YAML file) and
injected into the engine. It is read-only for the life of the process.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Tuple, Union
import yaml
from stockdash.entities import SymbolProfile
from stockdash.errors import ConfigError, UnknownSymbolError

logger = logging.getLogger(__name__)

DEFAULT_PROFILES: Tuple[SymbolProfile, ...] = (
    SymbolProfile("AAPL", "Apple Inc.", 187.32, 0.015),
    SymbolProfile("MSFT", "Microsoft Corporation", 418.35, 0.012),
    SymbolProfile("GOOGL", "Alphabet Inc.", 154.85, 0.018),
    SymbolProfile("AMZN", "Amazon.com, Inc.", 178.75, 0.020),
    SymbolProfile("META", "Meta Platforms, Inc.", 472.22, 0.025),
    SymbolProfile("TSLA", "Tesla, Inc.", 193.57, 0.035),
    SymbolProfile("NVDA", "NVIDIA Corporation", 880.18, 0.028),
    SymbolProfile("BRK.A", "Berkshire Hathaway Inc.", 614340.00, 0.008),
)


class SymbolCatalog(Mapping):
    """
    Immutable, ordered mapping from symbol to SymbolProfile.

    Iteration order is the order the profiles were given in; it defines
    the row/column order of correlation matrices and the display order
    of snapshots.

    Representation Invariants:
        - at least one profile
        - symbols are unique
    """

    def __init__(self, profiles: Iterable[SymbolProfile]):
        """
        Initialize the catalog.

        Raises:
            ValueError: If profiles is empty or contains duplicate symbols
        """
        table = {}
        for profile in profiles:
            if profile.symbol in table:
                raise ValueError(f"duplicate symbol: {profile.symbol}")
            table[profile.symbol] = profile

        if not table:
            raise ValueError("catalog must contain at least one symbol")

        self._profiles = MappingProxyType(table)

    def __getitem__(self, symbol: str) -> SymbolProfile:
        return self._profiles[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    @property
    def symbols(self) -> Tuple[str, ...]:
        """Return the symbols in catalog order."""
        return tuple(self._profiles)

    def profile(self, symbol: str) -> SymbolProfile:
        """
        Look up the profile for a symbol.

        Raises:
            UnknownSymbolError: If the symbol is not in the catalog
        """
        try:
            return self._profiles[symbol]
        except KeyError:
            raise UnknownSymbolError(symbol) from None

    def __repr__(self) -> str:
        return f"SymbolCatalog({', '.join(self.symbols)})"


def default_catalog() -> SymbolCatalog:
    """Return the built-in 8-symbol catalog."""
    return SymbolCatalog(DEFAULT_PROFILES)


def load_catalog(path: Union[str, Path]) -> SymbolCatalog:
    """
    Load a catalog from a YAML file.

    Expected layout:

        symbols:
          - symbol: AAPL
            name: Apple Inc.
            base_price: 187.32
            volatility: 0.015

    Args:
        path: Path to the YAML file

    Returns:
        SymbolCatalog in file order

    Raises:
        ConfigError: If the file is missing, unparsable, or has invalid entries
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Catalog file not found: {path}")

    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse catalog file {path}: {e}") from e

    if not isinstance(raw, dict) or not isinstance(raw.get("symbols"), list):
        raise ConfigError(f"Catalog file {path} must contain a 'symbols' list")

    profiles = []
    for i, entry in enumerate(raw["symbols"]):
        if not isinstance(entry, dict):
            raise ConfigError(f"Catalog entry {i} must be a mapping")
        try:
            profiles.append(SymbolProfile(
                symbol=str(entry["symbol"]).strip().upper(),
                name=str(entry["name"]),
                base_price=float(entry["base_price"]),
                volatility=float(entry["volatility"])
            ))
        except KeyError as e:
            raise ConfigError(f"Catalog entry {i} is missing key {e}") from e
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Catalog entry {i} is invalid: {e}") from e

    try:
        catalog = SymbolCatalog(profiles)
    except ValueError as e:
        raise ConfigError(f"Invalid catalog {path}: {e}") from e

    logger.info("Loaded %d symbols from %s", len(catalog), path)
    return catalog
