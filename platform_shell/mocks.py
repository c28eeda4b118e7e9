"""
Mock payloads served when the Sales Engine backend is not configured or the
proxy call fails. Shapes match what the backend returns for the same routes.
"""

from datetime import datetime, timezone


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def mock_campaign_metrics(campaign_id: str) -> dict:
    return {
        "campaign_id": campaign_id,
        "total_leads": 1247,
        "emails_sent": 892,
        "emails_opened": 423,
        "emails_replied": 67,
        "emails_bounced": 23,
        "emails_unsubscribed": 8,
        "open_rate": 0.474,
        "reply_rate": 0.075,
        "bounce_rate": 0.026,
        "last_updated": _now(),
    }


def mock_campaign_throughput(campaign_id: str) -> dict:
    return {
        "campaign_id": campaign_id,
        "daily_limit": 500,
        "hourly_limit": 50,
        "mailbox_limit": 100,
        "current_daily_usage": 248,
        "current_hourly_usage": 32,
        "is_blocked": False,
        "block_reason": None,
    }


def mock_execution_status(campaign_id: str) -> dict:
    return {
        "campaign_id": campaign_id,
        "status": "idle",
        "last_observed_at": _now(),
    }


def mock_attention_items() -> list:
    return [
        {
            "id": "att-001",
            "campaignId": "camp-002",
            "campaignName": "Product Launch Sequence",
            "reason": "pending_approval_stale",
            "status": "PENDING_REVIEW",
            "lastUpdated": "2025-01-18T16:45:00Z",
            "primaryAction": {
                "label": "Review Campaign",
                "href": "/sales-engine/campaigns/camp-002?tab=overview",
                "type": "review",
            },
        },
        {
            "id": "att-002",
            "campaignId": "camp-003",
            "campaignName": "Re-engagement Campaign",
            "reason": "approved_not_observed",
            "status": "RUNNABLE",
            "lastUpdated": "2025-01-17T10:00:00Z",
            "primaryAction": {
                "label": "View Observability",
                "href": "/sales-engine/campaigns/camp-003?tab=monitoring",
                "type": "view",
            },
        },
        {
            "id": "att-003",
            "campaignId": "camp-004",
            "campaignName": "Holiday Promo",
            "reason": "execution_failed",
            "status": "FAILED",
            "lastUpdated": "2025-01-20T08:30:00Z",
            "primaryAction": {
                "label": "View Errors",
                "href": "/sales-engine/campaigns/camp-004?tab=monitoring",
                "type": "view",
            },
        },
    ]


def mock_notices() -> list:
    return [
        {
            "id": "notice-1",
            "type": "info",
            "message": "Analytics data may be delayed up to 15 minutes",
            "active": True,
            "createdAt": _now(),
        },
    ]


def mock_readiness() -> dict:
    return {
        "total": 3,
        "draft": 1,
        "pendingReview": 1,
        "runnable": 1,
        "archived": 0,
        "blockers": [
            {"reason": "MISSING_HUMAN_APPROVAL", "count": 2},
            {"reason": "NO_LEADS_PERSISTED", "count": 1},
        ],
    }


def mock_global_throughput() -> dict:
    return {
        "daily_limit": 500,
        "daily_used": 127,
        "daily_remaining": 373,
        "hourly_limit": 50,
        "hourly_used": 12,
        "hourly_remaining": 38,
        "active_campaigns_count": 1,
        "blocked_by_throughput_count": 0,
        "last_reset": _now(),
        "is_throttled": False,
    }
