"""
Execution Status Projector - Maps backend execution state to display copy.

The execution status is owned by the Sales Engine; the shell only renders it.
project_status() is total over its inputs: an unknown status falls back to a
neutral "Awaiting events" display rather than raising.
"""

from dataclasses import dataclass, asdict
from typing import Optional


# ─── COLORS ──────────────────────────────────────────────────

SURFACE = "#F9FAFB"
TEXT_SECONDARY = "#6B7280"
TEXT_MUTED = "#9CA3AF"
BORDER_LIGHT = "#E5E7EB"

_NEUTRAL = (SURFACE, TEXT_SECONDARY, BORDER_LIGHT)
_MUTED = (SURFACE, TEXT_MUTED, BORDER_LIGHT)
_AMBER = ("#FEF3C7", "#92400E", "#FCD34D")
_BLUE = ("#DBEAFE", "#1E40AF", "#93C5FD")
_GREEN = ("#D1FAE5", "#065F46", "#6EE7B7")
_RED = ("#FEE2E2", "#991B1B", "#FECACA")


EXECUTION_STATUSES = (
    "idle", "queued", "run_requested", "running", "awaiting_approvals",
    "completed", "failed", "partial", "blocked",
)

STAGE_LABELS = {
    "orgs_sourced": "Sourcing organizations",
    "contacts_discovered": "Discovering contacts",
    "contacts_evaluated": "Evaluating contacts",
    "leads_promoted": "Promoting leads",
    "leads_awaiting_approval": "Awaiting approvals",
    "leads_approved": "Processing approvals",
    "emails_sent": "Sending emails",
    "replies": "Processing replies",
}

# Run-record statuses written by the Sales Engine -> execution status tags
_RUN_STATUS_MAP = {
    "REQUESTED": "run_requested",
    "QUEUED": "queued",
    "RUNNING": "running",
    "AWAITING_APPROVALS": "awaiting_approvals",
    "COMPLETED": "completed",
    "FAILED": "failed",
    "PARTIAL": "partial",
    "BLOCKED": "blocked",
}


@dataclass
class ExecutionStatusDisplay:
    icon: str
    copy: str
    bg: str
    text: str
    border: str

    def to_dict(self) -> dict:
        return asdict(self)


def _display(icon: str, copy: str, colors: tuple) -> ExecutionStatusDisplay:
    bg, text, border = colors
    return ExecutionStatusDisplay(icon=icon, copy=copy, bg=bg, text=text, border=border)


def format_stage_name(stage: str) -> str:
    """Human label for a pipeline stage tag. Unknown tags just lose their underscores."""
    return STAGE_LABELS.get(stage) or stage.replace("_", " ")


def project_status(status: Optional[str], current_stage: Optional[str] = None,
                   leads_awaiting_approval: Optional[int] = None,
                   blocking_reason: Optional[str] = None) -> ExecutionStatusDisplay:
    """Display record for an execution status.

    Args:
        status: Execution status tag from the observability endpoint.
        current_stage: Pipeline stage tag, only used while running.
        leads_awaiting_approval: Count appended as "(N leads)" when positive.
        blocking_reason: Optional explanation appended to the blocked copy.
    """
    if status == "idle":
        return _display("idle", "Ready for execution", _NEUTRAL)

    if status in ("queued", "run_requested"):
        return _display("queued", "Execution requested — Awaiting events", _BLUE)

    if status == "running":
        copy = "Run in progress"
        if current_stage:
            copy += f" — {format_stage_name(current_stage)}"
        return _display("running", copy, _AMBER)

    if status == "awaiting_approvals":
        copy = "Run completed — Awaiting lead approvals"
        if leads_awaiting_approval and leads_awaiting_approval > 0:
            copy += f" ({leads_awaiting_approval} leads)"
        return _display("awaiting", copy, _GREEN)

    if status == "completed":
        return _display("completed", "Run completed", _GREEN)

    if status == "failed":
        return _display("failed", "Run failed — See run history", _RED)

    if status == "partial":
        return _display("partial", "Run partially completed — See run history", _AMBER)

    if status == "blocked":
        copy = "Execution blocked"
        if blocking_reason:
            copy += f" — {blocking_reason}"
        return _display("blocked", copy, _RED)

    return _display("unknown", "Awaiting events", _MUTED)


def normalize_run_status(run_status: Optional[str]) -> str:
    """Execution status tag for a run-record status. Anything unrecognized reads as idle."""
    if not run_status:
        return "idle"
    return _RUN_STATUS_MAP.get(run_status.upper(), "idle")


def short_run_id(run_id: Optional[str]) -> Optional[str]:
    if not run_id:
        return None
    return f"{run_id[:8]}..."
