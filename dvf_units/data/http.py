import logging
from typing import Any, Dict, Optional

import httpx

from .base import UpstreamError
from ..core.config import settings
from ..core.metrics import UPSTREAM_CALLS

logger = logging.getLogger(__name__)

async def get_json(
    source: str,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    allow_statuses: tuple[int, ...] = (),
) -> Optional[Any]:
    """
    GET `url` and decode JSON. Statuses listed in `allow_statuses` yield None
    (e.g. 404 for "nothing here"); any other failure raises UpstreamError.
    No retry: a failed hop fails the lookup.
    """
    try:
        async with httpx.AsyncClient(
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
            headers={"Accept": "application/json"},
        ) as client:
            r = await client.get(url, params=params)
            if r.status_code in allow_statuses:
                UPSTREAM_CALLS.labels(source=source, outcome="empty").inc()
                return None
            r.raise_for_status()
            payload = r.json()
    except httpx.HTTPError as exc:
        UPSTREAM_CALLS.labels(source=source, outcome="error").inc()
        logger.warning("upstream request failed: %s", exc, extra={"source": source})
        raise UpstreamError(source, str(exc) or type(exc).__name__) from exc
    except ValueError as exc:
        UPSTREAM_CALLS.labels(source=source, outcome="error").inc()
        logger.warning("upstream returned invalid JSON", extra={"source": source})
        raise UpstreamError(source, "invalid JSON") from exc
    UPSTREAM_CALLS.labels(source=source, outcome="ok").inc()
    return payload
