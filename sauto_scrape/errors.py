"""Error taxonomy shared by the crawl pipeline."""


class SautoError(Exception):
    """Base class for every error raised by sauto_scrape."""


class ParseError(SautoError, ValueError):
    """No usable number in a text fragment."""


class FetchError(SautoError):
    """A page could not be retrieved."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"fetch fail url={url} error={reason}")
        self.url = url
        self.reason = reason


class DeadlineExceeded(FetchError):
    """The overall crawl budget ran out before a fetch."""


class StoreLoadError(SautoError):
    """Cache file exists but cannot be read or decoded."""


class StoreSaveError(SautoError):
    """Cache file cannot be written."""


class LookupFault(SautoError, KeyError):
    """Enrichment targeted a link the store does not hold."""

    def __init__(self, link: str):
        super().__init__(link)
        self.link = link

    def __str__(self) -> str:
        return f"link not in store link={self.link}"


class ExportError(SautoError):
    """Export file cannot be written."""
