"""Cross-campaign Sales Engine routes (attention, notices, readiness, throughput)."""

import re

from fastapi import APIRouter, Depends, Request

from platform_shell.api.proxy import proxy_or_mock
from platform_shell.clients.sales_engine import get_sales_engine_client
from platform_shell.mocks import (
    mock_attention_items,
    mock_global_throughput,
    mock_notices,
    mock_readiness,
)

router = APIRouter(prefix="/api/v1/campaigns", tags=["portfolio"])

_RUN_LABEL = re.compile(r"^(start|run|launch|execute)", re.IGNORECASE)


def transform_action_label(label) -> str:
    """The shell never offers execution; run-style labels become observability links."""
    if not label:
        return "View Campaign"
    if _RUN_LABEL.match(label):
        return "View Observability"
    return label


def govern_attention_items(data):
    if not isinstance(data, list):
        return data
    items = []
    for item in data:
        if not isinstance(item, dict):
            items.append(item)
            continue
        action = item.get("primaryAction") or {}
        items.append({
            **item,
            "primaryAction": {
                **action,
                "label": transform_action_label(action.get("label")),
                "type": "view",
            },
        })
    return items


@router.get("/attention")
def attention(request: Request, client=Depends(get_sales_engine_client)):
    return proxy_or_mock(request, client, "/attention", mock_attention_items,
                         route="attention", transform=govern_attention_items)


@router.get("/notices")
def notices(request: Request, client=Depends(get_sales_engine_client)):
    return proxy_or_mock(request, client, "/notices", mock_notices, route="notices")


@router.get("/readiness")
def readiness(request: Request, client=Depends(get_sales_engine_client)):
    return proxy_or_mock(request, client, "/readiness", mock_readiness, route="readiness")


@router.get("/throughput")
def throughput(request: Request, client=Depends(get_sales_engine_client)):
    return proxy_or_mock(request, client, "/throughput", mock_global_throughput, route="throughput")
