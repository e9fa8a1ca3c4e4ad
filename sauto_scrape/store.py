from __future__ import annotations
"""Link-keyed car record cache backed by a JSON file.

The whole file is read once at startup and written once at the end of a run
(or after each category when checkpointing). Writes go to a sibling temp file
that replaces the cache only after a complete dump, so a failed save leaves
the previous cache intact.
"""
import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from .errors import StoreLoadError, StoreSaveError
from .logger import Logger
from .models import CarRecord

log = Logger.bind(__name__)

PathLike = Union[str, Path]


class Store:

    def __init__(self, records: Optional[Dict[str, CarRecord]] = None):
        self._records: Dict[str, CarRecord] = dict(records or {})
        self._lock = threading.Lock()

    # ---- persistence ----
    @classmethod
    def load(cls, path: PathLike) -> "Store":
        """Read the cache file; a missing file gives an empty store."""
        p = Path(path)
        try:
            with p.open('r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            log.info(f"cache not found, starting empty path={p}")
            return cls()
        except (OSError, ValueError) as e:
            raise StoreLoadError(f"cache load fail path={p} error={e}") from e
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise StoreLoadError(f"cache load fail path={p} error=top level is {type(data).__name__}, expected object")
        records: Dict[str, CarRecord] = {}
        for key, row in data.items():
            try:
                if isinstance(row, dict) and not row.get('link'):
                    row = {**row, 'link': key}
                records[key] = CarRecord.from_cache_row(row)
            except ValueError as e:
                raise StoreLoadError(f"cache load fail path={p} key={key} error={e}") from e
        log.info(f"cache loaded path={p} records={len(records)}")
        return cls(records)

    def save(self, path: PathLike) -> None:
        p = Path(path)
        tmp = p.with_name(p.name + '.tmp')
        with self._lock:
            payload = {link: self._records[link].to_cache_row() for link in sorted(self._records)}
        try:
            with tmp.open('w', encoding='utf-8') as f:
                json.dump(payload, f, ensure_ascii=False, indent='\t')
                f.write('\n')
            os.replace(tmp, p)
        except (OSError, TypeError, ValueError) as e:
            try:
                tmp.unlink()
            except OSError:
                pass
            raise StoreSaveError(f"cache save fail path={p} error={e}") from e
        log.info(f"cache saved path={p} records={len(payload)}")

    # ---- access ----
    def upsert(self, record: CarRecord) -> bool:
        """Insert or fully replace the record at ``record.link``.

        Returns True when the link was not stored before.
        """
        with self._lock:
            is_new = record.link not in self._records
            self._records[record.link] = record
        return is_new

    def get(self, link: str) -> Optional[CarRecord]:
        with self._lock:
            return self._records.get(link)

    def update(self, link: str, **fields: Any) -> Optional[CarRecord]:
        """Set ``fields`` on the stored record in place; None if link is absent."""
        with self._lock:
            rec = self._records.get(link)
            if rec is None:
                return None
            for name, value in fields.items():
                if not hasattr(rec, name) or name == 'link':
                    raise AttributeError(f"CarRecord has no updatable field {name!r}")
                setattr(rec, name, value)
            return rec

    def links(self) -> List[str]:
        with self._lock:
            return sorted(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, link: object) -> bool:
        with self._lock:
            return link in self._records

    def __iter__(self) -> Iterator[CarRecord]:
        """Records ordered by link (snapshot)."""
        with self._lock:
            snapshot = [self._records[link] for link in sorted(self._records)]
        return iter(snapshot)
