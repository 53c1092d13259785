"""Database schema initialization and migrations."""

import os
import sqlite3
from pathlib import Path

from billfold.domain.insurance import PREDEFINED_INSURANCE_CATEGORIES

TABLES = {
    "payment_sources": """
        CREATE TABLE IF NOT EXISTS payment_sources (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            type TEXT NOT NULL,
            is_active INTEGER NOT NULL DEFAULT 1,
            pay_off_monthly INTEGER NOT NULL DEFAULT 0,
            exclude_from_leftover INTEGER NOT NULL DEFAULT 0,
            is_savings INTEGER NOT NULL DEFAULT 0,
            is_investment INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "categories": """
        CREATE TABLE IF NOT EXISTS categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            type TEXT NOT NULL,
            color TEXT,
            sort_order INTEGER NOT NULL DEFAULT 0,
            is_predefined INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE (name, type)
        )
    """,
    "savings_goals": """
        CREATE TABLE IF NOT EXISTS savings_goals (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            target_amount INTEGER NOT NULL,
            target_date TEXT,
            linked_account_id INTEGER NOT NULL REFERENCES payment_sources(id),
            status TEXT NOT NULL DEFAULT 'saving',
            notes TEXT,
            paused_at TEXT,
            completed_at TEXT,
            previous_status TEXT,
            archived_at TEXT,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "recurring": """
        CREATE TABLE IF NOT EXISTS recurring (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            kind TEXT NOT NULL CHECK (kind IN ('bill', 'income')),
            name TEXT NOT NULL,
            amount INTEGER NOT NULL,
            billing_period TEXT NOT NULL,
            start_date TEXT,
            day_of_month INTEGER,
            recurrence_week INTEGER,
            recurrence_day INTEGER,
            payment_source_id INTEGER NOT NULL REFERENCES payment_sources(id),
            category_id INTEGER REFERENCES categories(id) ON DELETE SET NULL,
            goal_id INTEGER REFERENCES savings_goals(id) ON DELETE SET NULL,
            is_active INTEGER NOT NULL DEFAULT 1,
            notes TEXT,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "todos": """
        CREATE TABLE IF NOT EXISTS todos (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            notes TEXT,
            recurrence TEXT NOT NULL DEFAULT 'none',
            due_date TEXT,
            start_date TEXT,
            day_of_month INTEGER,
            status TEXT NOT NULL DEFAULT 'pending',
            completed_at TEXT,
            is_active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "months": """
        CREATE TABLE IF NOT EXISTS months (
            month TEXT PRIMARY KEY,
            is_read_only INTEGER NOT NULL DEFAULT 0,
            bank_balances TEXT NOT NULL DEFAULT '{}',
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "instances": """
        CREATE TABLE IF NOT EXISTS instances (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            month TEXT NOT NULL REFERENCES months(month) ON DELETE CASCADE,
            kind TEXT NOT NULL CHECK (kind IN ('bill', 'income')),
            source_id INTEGER REFERENCES recurring(id) ON DELETE SET NULL,
            name TEXT NOT NULL,
            category_id INTEGER REFERENCES categories(id) ON DELETE SET NULL,
            payment_source_id INTEGER REFERENCES payment_sources(id) ON DELETE SET NULL,
            billing_period TEXT,
            is_adhoc INTEGER NOT NULL DEFAULT 0,
            is_extra INTEGER NOT NULL DEFAULT 0,
            goal_id INTEGER REFERENCES savings_goals(id) ON DELETE SET NULL,
            payoff_source_id INTEGER REFERENCES payment_sources(id),
            expected_amount INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "occurrences": """
        CREATE TABLE IF NOT EXISTS occurrences (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            instance_id INTEGER NOT NULL REFERENCES instances(id) ON DELETE CASCADE,
            sequence INTEGER NOT NULL,
            expected_date TEXT NOT NULL,
            expected_amount INTEGER NOT NULL,
            is_closed INTEGER NOT NULL DEFAULT 0,
            closed_date TEXT,
            is_adhoc INTEGER NOT NULL DEFAULT 0
        )
    """,
    "payments": """
        CREATE TABLE IF NOT EXISTS payments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            occurrence_id INTEGER NOT NULL REFERENCES occurrences(id) ON DELETE CASCADE,
            amount INTEGER NOT NULL,
            date TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "todo_instances": """
        CREATE TABLE IF NOT EXISTS todo_instances (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            month TEXT NOT NULL REFERENCES months(month) ON DELETE CASCADE,
            todo_id INTEGER REFERENCES todos(id) ON DELETE SET NULL,
            title TEXT NOT NULL,
            due_date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending',
            completed_at TEXT
        )
    """,
    "insurance_plans": """
        CREATE TABLE IF NOT EXISTS insurance_plans (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            provider_name TEXT,
            policy_number TEXT,
            portal_url TEXT,
            notes TEXT,
            is_active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "family_members": """
        CREATE TABLE IF NOT EXISTS family_members (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            is_active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "member_plans": """
        CREATE TABLE IF NOT EXISTS member_plans (
            member_id INTEGER NOT NULL REFERENCES family_members(id) ON DELETE CASCADE,
            plan_id INTEGER NOT NULL REFERENCES insurance_plans(id),
            position INTEGER NOT NULL,
            PRIMARY KEY (member_id, plan_id)
        )
    """,
    "insurance_categories": """
        CREATE TABLE IF NOT EXISTS insurance_categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            icon TEXT,
            sort_order INTEGER NOT NULL DEFAULT 0,
            is_predefined INTEGER NOT NULL DEFAULT 0,
            is_active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "insurance_claims": """
        CREATE TABLE IF NOT EXISTS insurance_claims (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            claim_number INTEGER UNIQUE,
            family_member_id INTEGER NOT NULL REFERENCES family_members(id),
            category_id INTEGER NOT NULL REFERENCES insurance_categories(id),
            description TEXT,
            provider_name TEXT,
            service_date TEXT NOT NULL,
            total_amount INTEGER NOT NULL,
            status TEXT NOT NULL DEFAULT 'draft',
            notes TEXT,
            expected_cost INTEGER,
            expected_reimbursement INTEGER,
            payment_source_id INTEGER REFERENCES payment_sources(id),
            converted_at TEXT,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """,
    "claim_submissions": """
        CREATE TABLE IF NOT EXISTS claim_submissions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            claim_id INTEGER NOT NULL REFERENCES insurance_claims(id) ON DELETE CASCADE,
            plan_id INTEGER REFERENCES insurance_plans(id) ON DELETE SET NULL,
            plan_name TEXT NOT NULL,
            position INTEGER NOT NULL,
            status TEXT NOT NULL,
            amount_claimed INTEGER NOT NULL DEFAULT 0,
            amount_reimbursed INTEGER,
            date_submitted TEXT,
            date_resolved TEXT,
            notes TEXT
        )
    """,
}

# Columns added to a table after its CREATE statement has shipped, as
# table -> [(column, definition)]. A new column goes in TABLES and here, so
# `billfold init --migrate` adds it to existing databases.
MIGRATIONS: dict[str, list[tuple[str, str]]] = {}


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "billfold" / "billfold.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def _seed_insurance_categories(cursor: sqlite3.Cursor) -> None:
    cursor.execute("SELECT name FROM insurance_categories")
    existing = {row[0] for row in cursor.fetchall()}
    for category in PREDEFINED_INSURANCE_CATEGORIES:
        if category["name"] not in existing:
            cursor.execute(
                "INSERT INTO insurance_categories (name, icon, sort_order, is_predefined) VALUES (?, ?, ?, 1)",
                (category["name"], category["icon"], category["sort_order"]),
            )


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Safe to run repeatedly: missing tables and columns are added and the
    predefined insurance categories are seeded, existing data is untouched.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        for ddl in TABLES.values():
            cursor.execute(ddl)

        # Migrations for older databases (must run before creating indexes on new columns)
        for table, columns in MIGRATIONS.items():
            cursor.execute(f"PRAGMA table_info({table})")
            existing = {row[1] for row in cursor.fetchall()}
            for column, definition in columns:
                if column not in existing:
                    cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {definition}")

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_recurring_kind ON recurring(kind, is_active)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_recurring_goal ON recurring(goal_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_instances_month ON instances(month, kind)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_instances_goal ON instances(goal_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_occurrences_instance ON occurrences(instance_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_payments_occurrence ON payments(occurrence_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_todo_instances_month ON todo_instances(month)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_submissions_claim ON claim_submissions(claim_id)")

        _seed_insurance_categories(cursor)

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
