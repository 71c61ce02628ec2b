"""Shared HTTP session with retry/backoff."""

from __future__ import annotations

from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def create_session(
    api_key: str | None = None,
    retries: int = 3,
    backoff_factor: float = 0.5,
    status_forcelist: tuple[int, ...] = (429, 500, 502, 503, 504),
) -> Session:
    """Create a requests Session with exponential backoff retry.

    Airtable rate-limits at 5 requests/second per base and answers 429,
    so 429 is retried along with the usual 5xx codes. When *api_key* is
    given it is sent as a bearer token on every request.
    """
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session = Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    if api_key:
        session.headers["Authorization"] = f"Bearer {api_key}"
    return session
