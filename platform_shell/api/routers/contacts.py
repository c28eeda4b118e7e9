"""Campaign contact funnel routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from platform_shell.db.connection import get_default_store
from platform_shell.db.contact_stats import get_blocked_reasons, get_contact_stats
from platform_shell.error_handler import log_boundary_error

router = APIRouter(prefix="/api/campaigns", tags=["contacts"])


@router.get("/{campaign_id}/contact-stats")
def contact_stats(campaign_id: str, store=Depends(get_default_store)):
    try:
        return get_contact_stats(store, campaign_id).to_dict()
    except Exception as e:
        # StatsUnavailableError carries the driver error as its cause
        log_boundary_error(route="contact-stats", error=e.__cause__ or e,
                           campaign_id=campaign_id, severity="error")
        return JSONResponse({"error": "Failed to fetch contact stats"}, status_code=500)


@router.get("/{campaign_id}/contact-stats/blocked-reasons")
def blocked_reasons(campaign_id: str, store=Depends(get_default_store)):
    try:
        reasons = get_blocked_reasons(store, campaign_id)
    except Exception as e:
        log_boundary_error(route="blocked-reasons", error=e.__cause__ or e,
                           campaign_id=campaign_id, severity="error")
        return JSONResponse({"error": "Failed to fetch blocked reasons"}, status_code=500)
    return {**reasons.to_dict(), "percentages": reasons.percentages()}
