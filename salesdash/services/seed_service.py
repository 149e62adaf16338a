import json
import logging
from typing import Any, List, Optional, Sequence
from urllib import error, request
from urllib.parse import urlparse

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import delete, insert
from sqlalchemy.exc import SQLAlchemyError

from salesdash.config import get_settings
from salesdash.core.errors import FetchError, QueryError
from salesdash.database.store import SaleStore
from salesdash.models.sale import SaleRecord
from salesdash.schemas.sale import InitializeResult, SaleRecordIn

logger = logging.getLogger(__name__)

_ALLOWED_HTTP_SCHEMES = {"http", "https"}

INITIALIZED_MESSAGE = "Database initialized successfully"


def validate_seed_url(url):
    parsed = urlparse(url or "")
    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_HTTP_SCHEMES or not parsed.netloc:
        raise FetchError("Seed URL must be an absolute HTTP(S) URL")
    return url


def _raise_http_error(exc):
    body = ""
    try:
        body_bytes = exc.read()
        if body_bytes:
            body = body_bytes.decode("utf-8", errors="replace").strip()
    except (OSError, ValueError):
        body = ""

    if body:
        raise FetchError("Seed feed error: HTTP {} {}".format(exc.code, body)) from exc
    raise FetchError("Seed feed error: HTTP {}".format(exc.code)) from exc


def decode_seed_payload(raw: bytes) -> List[Any]:
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise FetchError("Seed feed returned invalid JSON: {}".format(exc)) from exc
    if not isinstance(payload, list):
        raise FetchError("Seed feed must be a JSON array of sale records")
    return payload


def fetch_seed_records(url: str, timeout: float = 30) -> List[Any]:
    url = validate_seed_url(url)
    req = request.Request(url, method="GET", headers={"Accept": "application/json"})

    try:
        with request.urlopen(req, timeout=timeout) as response:  # nosec B310
            status_code = response.getcode()
            if status_code < 200 or status_code >= 300:
                raise FetchError("Seed feed error: HTTP {}".format(status_code))
            raw = response.read()
    except error.HTTPError as exc:
        _raise_http_error(exc)
    except error.URLError as exc:
        raise FetchError("Seed feed error: {}".format(exc.reason)) from exc
    except (OSError, ValueError) as exc:
        raise FetchError("Seed feed error: {}".format(exc)) from exc

    return decode_seed_payload(raw)


def parse_seed_records(items: Sequence[Any]) -> List[SaleRecordIn]:
    records = []
    for index, item in enumerate(items):
        try:
            records.append(SaleRecordIn.model_validate(item))
        except SchemaValidationError as exc:
            raise FetchError(
                "Seed record {} is not a valid sale record: {}".format(
                    index, exc.errors(include_url=False)
                )
            ) from exc
    return records


def replace_records(store: SaleStore, records: Sequence[SaleRecordIn]) -> int:
    """Swap the whole sales table for ``records`` in one transaction."""
    rows = [record.to_row() for record in records]
    try:
        with store.transaction() as conn:
            deleted = conn.execute(delete(SaleRecord)).rowcount
            if rows:
                conn.execute(insert(SaleRecord), rows)
    except SQLAlchemyError as exc:
        raise QueryError(str(exc)) from exc
    logger.info("Replaced %s sale records with %s new records.", deleted, len(rows))
    return len(rows)


def initialize_store(
    store: SaleStore,
    url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> InitializeResult:
    settings = get_settings()
    url = url or settings.SEED_URL
    if timeout is None:
        timeout = settings.SEED_TIMEOUT_SECONDS

    items = fetch_seed_records(url, timeout=timeout)
    logger.info("Fetched %s seed records from %s", len(items), url)
    records = parse_seed_records(items)
    inserted = replace_records(store, records)
    return InitializeResult(message=INITIALIZED_MESSAGE, inserted=inserted)


__all__ = [
    "INITIALIZED_MESSAGE",
    "decode_seed_payload",
    "fetch_seed_records",
    "initialize_store",
    "parse_seed_records",
    "replace_records",
    "validate_seed_url",
]
