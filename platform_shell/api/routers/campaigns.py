"""Per-campaign Sales Engine routes (metrics, throughput, execution status, run)."""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from platform_shell.api.proxy import proxy_or_mock
from platform_shell.clients.sales_engine import get_sales_engine_client
from platform_shell.mocks import (
    mock_campaign_metrics,
    mock_campaign_throughput,
    mock_execution_status,
)
from platform_shell.observability.execution_status import (
    normalize_run_status,
    project_status,
    short_run_id,
)

logger = logging.getLogger("shell.api.campaigns")

router = APIRouter(prefix="/api/v1/campaigns", tags=["campaigns"])


def _campaign_path(campaign_id: str, suffix: str) -> str:
    return f"/campaigns/{quote(campaign_id, safe='')}/{suffix}"


def with_display(payload):
    """Attach the execution status display block to a status payload.

    Backends that report the raw run-record status (RUNNING, COMPLETED, ...)
    get it mapped onto the execution status vocabulary first.
    """
    if not isinstance(payload, dict) or "status" not in payload:
        return payload
    payload = dict(payload)
    status = payload.get("status")
    if isinstance(status, str) and status.isupper():
        payload["status"] = normalize_run_status(status)
    display = project_status(
        payload["status"],
        current_stage=payload.get("current_stage"),
        leads_awaiting_approval=payload.get("leads_awaiting_approval"),
        blocking_reason=payload.get("blocking_reason"),
    )
    payload["display"] = display.to_dict()
    if payload.get("status") == "running" and payload.get("active_run_id"):
        payload["active_run_label"] = short_run_id(payload["active_run_id"])
    return payload


@router.get("/{campaign_id}/metrics")
def campaign_metrics(campaign_id: str, request: Request,
                     client=Depends(get_sales_engine_client)):
    return proxy_or_mock(
        request, client, _campaign_path(campaign_id, "metrics"),
        lambda: mock_campaign_metrics(campaign_id),
        route="campaign-metrics", campaign_id=campaign_id,
    )


@router.get("/{campaign_id}/throughput")
def campaign_throughput(campaign_id: str, request: Request,
                        client=Depends(get_sales_engine_client)):
    return proxy_or_mock(
        request, client, _campaign_path(campaign_id, "throughput"),
        lambda: mock_campaign_throughput(campaign_id),
        route="campaign-throughput", campaign_id=campaign_id,
    )


@router.get("/{campaign_id}/observability/status")
def execution_status(campaign_id: str, request: Request,
                     client=Depends(get_sales_engine_client)):
    return proxy_or_mock(
        request, client, _campaign_path(campaign_id, "observability/status"),
        lambda: with_display(mock_execution_status(campaign_id)),
        route="execution-status", campaign_id=campaign_id,
        transform=with_display,
    )


@router.post("/{campaign_id}/run")
def run_campaign(campaign_id: str):
    """Retired. Runs are scheduled and executed by the Sales Engine."""
    logger.warning("Deprecated run endpoint called for campaign %s", campaign_id,
                   extra={"campaign_id": campaign_id, "route": "campaign-run"})
    return JSONResponse(
        {
            "error": "ENDPOINT_DEPRECATED",
            "message": ("Campaign execution can no longer be triggered from the platform shell. "
                        "Runs are scheduled and executed by the Sales Engine."),
            "campaign_id": campaign_id,
            "execution_authority": "sales-engine",
            "observability": f"/api/v1/campaigns/{campaign_id}/observability/status",
        },
        status_code=410,
    )
