"""Fetch the incident CSV from NYC Open Data (or a local copy) into a DataFrame."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import httpx
import pandas as pd

from .config import HTTP_TIMEOUT, REQUIRED_COLUMNS
from .errors import ParseError, RetrievalError

log = logging.getLogger(__name__)


def _is_remote(source: str) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def fetch_bytes(
    url: str,
    *,
    timeout: float = HTTP_TIMEOUT,
    client: httpx.Client | None = None,
) -> bytes:
    """Single GET of ``url``; any transport or status failure is a RetrievalError."""
    try:
        if client is not None:
            resp = client.get(url)
            resp.raise_for_status()
            content = resp.content
        else:
            with httpx.Client(timeout=timeout, follow_redirects=True) as owned:
                resp = owned.get(url)
                resp.raise_for_status()
                content = resp.content
    except httpx.HTTPStatusError as exc:
        raise RetrievalError(
            f"GET {url} returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise RetrievalError(f"GET {url} failed: {exc}") from exc

    log.info("Fetched %s (%.1f KB)", url, len(content) / 1024)
    return content


def parse_csv(buffer, *, limit: int | None = None, origin: str = "<buffer>") -> pd.DataFrame:
    try:
        df = pd.read_csv(buffer, nrows=limit)
    except pd.errors.EmptyDataError as exc:
        raise ParseError(f"{origin} is empty") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise ParseError(f"{origin} is not valid delimited text: {exc}") from exc

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ParseError(f"{origin} is missing expected columns: {', '.join(missing)}")
    return df


def load_incidents(
    source: str | Path,
    *,
    limit: int | None = None,
    timeout: float = HTTP_TIMEOUT,
    client: httpx.Client | None = None,
) -> pd.DataFrame:
    """Load the raw incident table from a URL or a local CSV path."""
    source = str(source)
    if _is_remote(source):
        content = fetch_bytes(source, timeout=timeout, client=client)
        df = parse_csv(io.BytesIO(content), limit=limit, origin=source)
    else:
        path = Path(source).expanduser()
        if not path.is_file():
            raise RetrievalError(f"Data file not found: {path}")
        df = parse_csv(path, limit=limit, origin=str(path))

    log.info("Loaded %s rows x %s columns", f"{len(df):,}", df.shape[1])
    return df
