from __future__ import annotations
import csv
from pathlib import Path
from typing import List, Union

from .errors import ExportError
from .logger import Logger
from .store import Store

log = Logger.bind(__name__)

# column order matches CarRecord.to_csv_row
HEADER: List[str] = [
    'link',
    'nadpis',
    'cena (tis. kč)',
    'najeto (tis. km)',
    'výkon (kW)',
    'rok výroby',
    'karoserie',
    'prodejce',
    'lokalita',
]


def export_path(cache_path: Union[str, Path]) -> Path:
    p = Path(cache_path)
    return p.with_name(p.name + '.csv')


def export_csv(store: Store, path: Union[str, Path]) -> int:
    """Write every stored record, ordered by link, below the fixed header."""
    p = Path(path)
    count = 0
    try:
        with p.open('w', encoding='utf-8', newline='') as f:
            writer = csv.writer(f, lineterminator='\n')
            writer.writerow(HEADER)
            for record in store:
                writer.writerow(record.to_csv_row())
                count += 1
    except OSError as e:
        raise ExportError(f"export fail path={p} error={e}") from e
    log.info(f"export done path={p} rows={count}")
    return count
