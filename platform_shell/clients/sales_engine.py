"""
Sales Engine API client - thin read-only HTTP proxy.

Forwards the caller's Authorization header and returns the decoded JSON body
together with the upstream status code. Transport and decoding failures are
raised as SalesEngineError so routes can swap in their mock payload.
"""

import json
import logging
import time
from typing import Optional, Tuple
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from platform_shell.config import SALES_ENGINE_TIMEOUT, sales_engine_base_url
from platform_shell.error_handler import SalesEngineError

logger = logging.getLogger("shell.clients.sales_engine")


class SalesEngineClient:
    """Read-only client for the external Sales Engine API."""

    def __init__(self, base_url: str, timeout: float = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or SALES_ENGINE_TIMEOUT

    def get_json(self, path: str, authorization: Optional[str] = None) -> Tuple[int, object]:
        """GET base_url + path.

        Returns:
            (status_code, decoded_json). Upstream 4xx/5xx with a JSON body are
            returned as-is so the caller can pass the status through.

        Raises:
            SalesEngineError: unreachable backend, timeout, or non-JSON body.
        """
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if authorization:
            headers["Authorization"] = authorization

        start = time.time()
        req = Request(url, headers=headers, method="GET")
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                status, body = resp.status, resp.read()
        except HTTPError as e:
            status, body = e.code, e.read()
        except (URLError, OSError) as e:
            raise SalesEngineError(f"Sales Engine unreachable at {url}: {e}") from e

        duration_ms = int((time.time() - start) * 1000)
        logger.debug("GET %s -> %s (%dms)", path, status,
                     duration_ms, extra={"upstream": path, "status_code": status, "duration_ms": duration_ms})

        try:
            return status, json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SalesEngineError(f"Sales Engine returned non-JSON body for {path} (status {status})") from e


def get_sales_engine_client() -> Optional[SalesEngineClient]:
    """Client for the configured backend, or None to serve mock data."""
    base_url = sales_engine_base_url()
    if not base_url:
        return None
    return SalesEngineClient(base_url)
