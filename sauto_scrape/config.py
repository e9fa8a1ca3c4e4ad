"""Run configuration.

Resolution order (later wins):
  1. CrawlConfig defaults
  2. sauto.config.json (CWD, or the file named by $SAUTO_CONFIG)
  3. command line flags (see cli.py)
"""
from __future__ import annotations
import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .client import SautoClientConfig
from .logger import Logger

log = Logger.bind(__name__)

CONFIG_FILENAME = 'sauto.config.json'
CONFIG_ENV = 'SAUTO_CONFIG'

DEFAULT_BLUEPRINT = ("https://www.sauto.cz/inzerce/osobni/mazda/3?cena-do=400000&vyrobeno-od=2014"
                     "&palivo=benzin&vybava=bluetooth&typ=%s")
DEFAULT_CACHE = 'sauto.json'
DEFAULT_ARGS = 'sedanlimuzina|hatchback'


def parse_tokens(raw: Union[str, List[str], None]) -> List[str]:
    """'a|b' -> ['a', 'b']; list input is passed through. Empty parts dropped."""
    if raw is None:
        return []
    parts = raw.split('|') if isinstance(raw, str) else [str(p) for p in raw]
    return [p.strip() for p in parts if p and p.strip()]


@dataclass
class CrawlConfig:
    blueprint: str = DEFAULT_BLUEPRINT
    cache: str = DEFAULT_CACHE
    args: List[str] = field(default_factory=lambda: parse_tokens(DEFAULT_ARGS))
    csv: bool = False
    timeout: float = 15.0
    max_retries: int = 3
    backoff_factor: float = 0.5
    deadline: Optional[float] = None  # seconds for the whole crawl, None = unlimited
    checkpoint: bool = False
    verbose: bool = False

    def client_config(self) -> SautoClientConfig:
        return SautoClientConfig(
            timeout=self.timeout,
            max_retries=self.max_retries,
            backoff_factor=self.backoff_factor,
        )

    def apply(self, values: Dict[str, Any]) -> "CrawlConfig":
        """Override fields from a mapping; None values and unknown keys are ignored."""
        known = {f.name for f in fields(self)}
        for key, val in values.items():
            if key not in known or val is None:
                continue
            if key == 'args':
                val = parse_tokens(val)
            setattr(self, key, val)
        return self


def _config_path(path: Optional[Union[str, Path]]) -> Path:
    if path:
        return Path(path)
    env = os.environ.get(CONFIG_ENV)
    if env:
        return Path(env)
    return Path.cwd() / CONFIG_FILENAME


def load_config(path: Optional[Union[str, Path]] = None) -> CrawlConfig:
    cfg = CrawlConfig()
    p = _config_path(path)
    if not p.is_file():
        log.debug(f"no config file path={p}")
        return cfg
    try:
        with p.open('r', encoding='utf-8') as f:
            data = json.load(f) or {}
    except (OSError, ValueError) as e:
        log.warn(f"config load fail path={p} error={e}")
        return cfg
    if not isinstance(data, dict):
        log.warn(f"config ignored path={p} error=top level is not an object")
        return cfg
    log.debug(f"config loaded path={p}")
    return cfg.apply(data)
