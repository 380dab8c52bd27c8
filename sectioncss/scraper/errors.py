from __future__ import annotations


class SectionCSSError(Exception):
    pass


class FetchError(SectionCSSError):
    """A single resource could not be retrieved.

    Raised for transport failures and non-success HTTP statuses alike; the
    underlying exception is kept on ``cause`` (and chained as ``__cause__``).
    """

    def __init__(self, url: str, cause: BaseException | None = None) -> None:
        self.url = url
        self.cause = cause
        text = f"Failed to fetch {url}"
        if cause is not None:
            text = f"{text}: {cause}"
        super().__init__(text)
