"""Entry point: crawl sauto.cz categories into the JSON cache.

Usage:
    python run.py --args "sedanlimuzina|hatchback"
    python run.py --csv              # export sauto.json to sauto.json.csv
"""

from __future__ import annotations

from sauto_scrape.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
