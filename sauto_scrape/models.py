from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

# attribute -> cache JSON key; order is the export column order
CACHE_KEYS: Dict[str, str] = {
    'link': 'link',
    'title': 'info',
    'price': 'price',
    'driven': 'driven',
    'power': 'power',
    'year': 'year',
    'bodywork': 'bodywork',
    'seller': 'seller',
    'locality': 'locality',
}

NUMERIC_FIELDS = ('price', 'driven', 'power', 'year')
ENRICHMENT_FIELDS = ('power', 'bodywork')


@dataclass
class CarRecord:
    """One used-car listing, identified by its detail page link.

    price: thousands of CZK. driven: thousands of km.
    power (kW) and bodywork stay 0 / '' until the detail page is read.
    """
    link: str
    title: str = ''
    price: int = 0
    driven: int = 0
    power: int = 0
    year: int = 0
    bodywork: str = ''
    seller: str = ''
    locality: str = ''

    def to_cache_row(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in CACHE_KEYS.items()}

    @classmethod
    def from_cache_row(cls, row: Mapping[str, Any]) -> "CarRecord":
        """Build a record from a cache row written by this or a prior run.

        Missing keys fall back to defaults and unknown keys are ignored.
        Raises ValueError on a wrongly typed value.
        """
        if not isinstance(row, Mapping):
            raise ValueError(f"row is not an object: {type(row).__name__}")
        values: Dict[str, Any] = {}
        for attr, key in CACHE_KEYS.items():
            if key not in row or row[key] is None:
                continue
            val = row[key]
            if attr in NUMERIC_FIELDS:
                if isinstance(val, bool) or not isinstance(val, int) or val < 0:
                    raise ValueError(f"{key} must be an unsigned integer, got {val!r}")
            elif not isinstance(val, str):
                raise ValueError(f"{key} must be a string, got {val!r}")
            values[attr] = val
        if not values.get('link'):
            raise ValueError("row has no link")
        return cls(**values)

    def to_csv_row(self) -> List[str]:
        return [str(getattr(self, attr)) for attr in CACHE_KEYS]
