"""
Contact Funnel Aggregator - Counts campaign contacts per pipeline state.

Four states are reported (pending, processing, ready, blocked) plus two derived
counts (leads created, ready without lead). The predicates overlap: a sourced
contact with an unusable email counts as both pending and blocked, so the
buckets are not expected to sum to the total.

When the status vocabulary in the table drifts and every bucket comes back
empty while contacts exist, a coarser email-based classification is used.
"""

import logging
import sqlite3
from dataclasses import dataclass, asdict
from typing import Optional

from platform_shell.db.connection import ContactStore, PoolTimeoutError
from platform_shell.error_handler import StatsUnavailableError

logger = logging.getLogger("shell.contact_stats")


PRIMARY_STATS_SQL = """
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE status = 'sourced' AND scored_at IS NULL) AS pending,
        COUNT(*) FILTER (WHERE status = 'sourced' AND scored_at IS NOT NULL
                         AND readiness_checked_at IS NULL) AS processing,
        COUNT(*) FILTER (WHERE status = 'ready' OR (email_usable = 1 AND lead_id IS NULL)) AS ready,
        COUNT(*) FILTER (WHERE status = 'blocked' OR email_usable = 0) AS blocked,
        COUNT(*) FILTER (WHERE lead_id IS NOT NULL) AS leads_created,
        COUNT(*) FILTER (WHERE (status = 'ready' OR email_usable = 1) AND lead_id IS NULL) AS ready_without_lead
    FROM campaign_contacts
    WHERE campaign_id = ?
"""

FALLBACK_STATS_SQL = """
    SELECT
        COUNT(*) AS total,
        COUNT(*) FILTER (WHERE email_usable = 1 AND lead_id IS NULL) AS ready,
        COUNT(*) FILTER (WHERE email_usable = 0 OR email_usable IS NULL) AS blocked,
        COUNT(*) FILTER (WHERE lead_id IS NOT NULL) AS leads_created
    FROM campaign_contacts
    WHERE campaign_id = ?
"""

BLOCKED_GROUPS_SQL = """
    SELECT email_block_reason, status_reason, COUNT(*) AS count
    FROM campaign_contacts
    WHERE campaign_id = ?
      AND (email_usable = 0 OR status = 'blocked')
    GROUP BY email_block_reason, status_reason
    ORDER BY count DESC
"""

UNUSABLE_EMAIL_SQL = """
    SELECT COUNT(*) AS count
    FROM campaign_contacts
    WHERE campaign_id = ?
      AND (email_usable = 0 OR email_usable IS NULL)
"""


@dataclass
class ContactStats:
    total: int = 0
    pending: int = 0
    processing: int = 0
    ready: int = 0
    blocked: int = 0
    unavailable: int = 0  # legacy, always 0
    leads_created: int = 0
    ready_without_lead: int = 0

    def bucket_sum(self) -> int:
        return self.pending + self.processing + self.ready + self.blocked

    def to_dict(self) -> dict:
        d = asdict(self)
        d["leadsCreated"] = d.pop("leads_created")
        d["readyWithoutLead"] = d.pop("ready_without_lead")
        return d


BLOCK_REASON_CATEGORIES = ("no_email", "invalid_email", "low_fit_score", "excluded_title", "other")

# Checked in order; the first category with a matching keyword wins
_BLOCK_REASON_KEYWORDS = (
    ("no_email", ("no_email", "no email", "email_not_found", "not found", "unavailable")),
    ("invalid_email", ("invalid", "validation", "malformed", "bounce")),
    ("low_fit_score", ("score", "fit", "threshold", "below")),
    ("excluded_title", ("title", "role", "excluded", "exclusion")),
)


@dataclass
class BlockedReasons:
    total: int = 0
    no_email: int = 0
    invalid_email: int = 0
    low_fit_score: int = 0
    excluded_title: int = 0
    other: int = 0

    def add(self, category: str, count: int):
        setattr(self, category, getattr(self, category) + count)

    def percentages(self) -> dict:
        """Whole-percent share of each category, 0 across the board when nothing is blocked."""
        if self.total <= 0:
            return {c: 0 for c in BLOCK_REASON_CATEGORIES}
        return {c: round(getattr(self, c) / self.total * 100) for c in BLOCK_REASON_CATEGORIES}

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "reasons": {c: getattr(self, c) for c in BLOCK_REASON_CATEGORIES},
        }


def _count(row: Optional[dict], key: str) -> int:
    if not row:
        return 0
    return int(row.get(key) or 0)


def categorize_block_reason(reason: Optional[str]) -> str:
    """Map a free-text block reason onto one of BLOCK_REASON_CATEGORIES."""
    if not reason:
        return "other"
    normalized = reason.lower()
    for category, keywords in _BLOCK_REASON_KEYWORDS:
        if any(k in normalized for k in keywords):
            return category
    return "other"


def get_contact_stats(store: Optional[ContactStore], campaign_id: str) -> ContactStats:
    """Compute the contact funnel for one campaign.

    Args:
        store: Data-access handle, or None when no data store is configured.
        campaign_id: Opaque campaign identifier.

    Returns:
        ContactStats. All zeros when store is None.

    Raises:
        StatsUnavailableError: if either query fails.
    """
    if store is None:
        return ContactStats()

    try:
        row = store.fetch_one(PRIMARY_STATS_SQL, (campaign_id,))
        stats = ContactStats(
            total=_count(row, "total"),
            pending=_count(row, "pending"),
            processing=_count(row, "processing"),
            ready=_count(row, "ready"),
            blocked=_count(row, "blocked"),
            leads_created=_count(row, "leads_created"),
            ready_without_lead=_count(row, "ready_without_lead"),
        )

        if stats.bucket_sum() == 0 and stats.total > 0:
            logger.info("Status vocabulary mismatch for campaign %s, using email-based fallback",
                        campaign_id, extra={"campaign_id": campaign_id})
            fb = store.fetch_one(FALLBACK_STATS_SQL, (campaign_id,))
            stats.total = _count(fb, "total")
            stats.ready = _count(fb, "ready")
            stats.blocked = _count(fb, "blocked")
            stats.leads_created = _count(fb, "leads_created")
            stats.ready_without_lead = stats.ready
            stats.pending = 0
            stats.processing = 0
    except (sqlite3.Error, PoolTimeoutError) as e:
        raise StatsUnavailableError(f"Contact stats unavailable for campaign {campaign_id}") from e

    logger.info("Contact stats for campaign %s: %s", campaign_id, stats.to_dict(),
                extra={"campaign_id": campaign_id})
    return stats


def get_blocked_reasons(store: Optional[ContactStore], campaign_id: str) -> BlockedReasons:
    """Break blocked contacts down by why they cannot become leads.

    When no blocked contact carries a reason row, every contact with an
    unusable or unknown email is attributed to no_email.

    Raises:
        StatsUnavailableError: if either query fails.
    """
    result = BlockedReasons()
    if store is None:
        return result

    try:
        for row in store.fetch_all(BLOCKED_GROUPS_SQL, (campaign_id,)):
            count = _count(row, "count")
            result.total += count
            reason = row.get("email_block_reason") or row.get("status_reason")
            result.add(categorize_block_reason(reason), count)

        if result.total == 0:
            unusable = store.fetch_one(UNUSABLE_EMAIL_SQL, (campaign_id,))
            result.total = _count(unusable, "count")
            result.no_email = result.total
    except (sqlite3.Error, PoolTimeoutError) as e:
        raise StatsUnavailableError(f"Blocked reasons unavailable for campaign {campaign_id}") from e

    logger.info("Blocked reasons for campaign %s: %s", campaign_id, result.to_dict(),
                extra={"campaign_id": campaign_id})
    return result
