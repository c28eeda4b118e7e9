"""Shared proxy-or-mock handling for the Sales Engine read routes."""

from typing import Callable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from platform_shell.clients.sales_engine import SalesEngineClient
from platform_shell.error_handler import safe_execute


def proxy_or_mock(request: Request, client: Optional[SalesEngineClient], path: str,
                  mock_factory: Callable[[], object], route: str,
                  campaign_id: str = None,
                  transform: Callable[[object], object] = None) -> JSONResponse:
    """Forward a GET to the Sales Engine, or serve the route's mock payload.

    The mock is used when no backend is configured or the call fails for any
    reason. Upstream status codes are passed through otherwise.
    """
    if client is None:
        return JSONResponse(mock_factory())

    result = safe_execute(
        client.get_json,
        args=(path,),
        kwargs={"authorization": request.headers.get("authorization")},
        route=route,
        campaign_id=campaign_id,
        fallback=None,
    )
    if result is None:
        return JSONResponse(mock_factory())

    status, data = result
    if transform is not None:
        data = transform(data)
    return JSONResponse(data, status_code=status)
