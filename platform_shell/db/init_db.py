"""
Platform Shell - Local Database Initialization

The campaign_contacts table is owned by the Sales Engine. This schema mirrors
the columns the shell reads so a local or test database can stand in for it.

Usage:
    python -m platform_shell.db.init_db path/to/contacts.db
"""

import sqlite3
import sys

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS campaign_contacts (
    id TEXT PRIMARY KEY,
    campaign_id TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'sourced',
    scored_at TEXT,
    readiness_checked_at TEXT,
    email_usable INTEGER,
    email_block_reason TEXT,
    status_reason TEXT,
    lead_id TEXT,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_campaign_contacts_campaign ON campaign_contacts(campaign_id);
CREATE INDEX IF NOT EXISTS idx_campaign_contacts_status ON campaign_contacts(campaign_id, status);
"""


def init_db(db_path: str):
    """Create the campaign_contacts table and indexes if missing."""
    conn = sqlite3.connect(db_path)
    conn.executescript(SCHEMA_SQL)
    conn.commit()
    conn.close()


def insert_contact(conn: sqlite3.Connection, data: dict):
    """Insert one campaign contact row. Used for local seeding and tests."""
    conn.execute("""
        INSERT INTO campaign_contacts
            (id, campaign_id, status, scored_at, readiness_checked_at,
             email_usable, email_block_reason, status_reason, lead_id)
        VALUES (?,?,?,?,?,?,?,?,?)
    """, (
        data["id"], data["campaign_id"], data.get("status", "sourced"),
        data.get("scored_at"), data.get("readiness_checked_at"),
        data.get("email_usable"), data.get("email_block_reason"),
        data.get("status_reason"), data.get("lead_id"),
    ))


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python -m platform_shell.db.init_db <db_path>", file=sys.stderr)
        sys.exit(1)
    init_db(sys.argv[1])
    print(f"Initialized {sys.argv[1]}")
