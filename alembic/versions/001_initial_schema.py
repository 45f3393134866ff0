"""001 – Initial schema: users, attendance, leave, payroll, settings, audit.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# Status columns are VARCHAR + CHECK so the stored text matches the API values.
STATUS_VALUES: dict[str, list[str]] = {
    "attendance_records": ["Present", "Absent", "Half Day", "Leave"],
    "leave_requests": ["Pending", "Approved", "Rejected"],
    "payroll_records": ["Pending", "Processing", "Paid"],
}


def _status_check(table: str) -> str:
    vals = ", ".join(f"'{v}'" for v in STATUS_VALUES[table])
    return f"CONSTRAINT ck_{table}_status CHECK (status IN ({vals}))"


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── Extensions ────────────────────────────────────────────────────────
    # btree_gist lets the leave exclusion constraint mix = and && operators.
    op.execute('CREATE EXTENSION IF NOT EXISTS "btree_gist"')

    # ── 1. users ──────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE users (
            id             SERIAL PRIMARY KEY,
            name           VARCHAR(150) NOT NULL,
            email          VARCHAR(255) NOT NULL UNIQUE,
            password_hash  VARCHAR(255) NOT NULL,
            role           VARCHAR(50)  NOT NULL DEFAULT 'Employee',
            department     VARCHAR(150),
            created_at     TIMESTAMPTZ DEFAULT NOW(),
            updated_at     TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT ck_users_email_lower CHECK (email = LOWER(email))
        )
    """)

    # ── 2. attendance_records ─────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE attendance_records (
            id          SERIAL PRIMARY KEY,
            user_id     INTEGER NOT NULL REFERENCES users(id),
            date        DATE NOT NULL,
            status      VARCHAR(20) NOT NULL DEFAULT 'Present',
            check_in    TIMESTAMPTZ,
            check_out   TIMESTAMPTZ,
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            updated_at  TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_attendance_user_date UNIQUE (user_id, date),
            CONSTRAINT ck_attendance_checkout_after_checkin
                CHECK (check_out IS NULL OR check_in IS NULL OR check_out >= check_in),
            {_status_check("attendance_records")}
        )
    """)
    op.execute("CREATE INDEX ix_attendance_records_user_id ON attendance_records(user_id)")
    op.execute("CREATE INDEX ix_attendance_records_date    ON attendance_records(date DESC)")

    # ── 3. leave_requests ─────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE leave_requests (
            id          SERIAL PRIMARY KEY,
            user_id     INTEGER NOT NULL REFERENCES users(id),
            reason      TEXT NOT NULL,
            from_date   DATE NOT NULL,
            to_date     DATE NOT NULL,
            status      VARCHAR(20) NOT NULL DEFAULT 'Pending',
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            updated_at  TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT ck_leave_dates_ordered CHECK (to_date >= from_date),
            {_status_check("leave_requests")}
        )
    """)
    op.execute(
        "CREATE INDEX ix_leave_requests_user_dates "
        "ON leave_requests(user_id, from_date, to_date)"
    )
    # Closed intervals: '[]' makes a shared boundary day an overlap.
    op.execute("""
        ALTER TABLE leave_requests
            ADD CONSTRAINT ex_leave_no_overlap
            EXCLUDE USING gist (
                user_id WITH =,
                daterange(from_date, to_date, '[]') WITH &&
            ) WHERE (status <> 'Rejected')
    """)

    # ── 4. payroll_records ────────────────────────────────────────────────
    op.execute(f"""
        CREATE TABLE payroll_records (
            id          SERIAL PRIMARY KEY,
            user_id     INTEGER NOT NULL REFERENCES users(id),
            month       VARCHAR(20) NOT NULL,
            amount      NUMERIC(12, 2) NOT NULL,
            status      VARCHAR(20) NOT NULL DEFAULT 'Pending',
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            updated_at  TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_payroll_user_month UNIQUE (user_id, month),
            CONSTRAINT ck_payroll_amount_non_negative CHECK (amount >= 0),
            {_status_check("payroll_records")}
        )
    """)
    op.execute("CREATE INDEX ix_payroll_records_user_id ON payroll_records(user_id)")

    # ── 5. app_settings ───────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE app_settings (
            key          VARCHAR(100) PRIMARY KEY,
            value        JSONB NOT NULL,
            description  TEXT,
            updated_at   TIMESTAMPTZ DEFAULT NOW(),
            updated_by   INTEGER REFERENCES users(id)
        )
    """)

    # ── 6. audit_trail ────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE audit_trail (
            id           SERIAL PRIMARY KEY,
            actor_id     INTEGER REFERENCES users(id),
            action       VARCHAR(50)  NOT NULL,
            entity_type  VARCHAR(50)  NOT NULL,
            entity_id    VARCHAR(100) NOT NULL,
            old_values   JSONB,
            new_values   JSONB,
            ip_address   VARCHAR(45),
            created_at   TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_audit_trail_actor_id   ON audit_trail(actor_id)")
    op.execute("CREATE INDEX ix_audit_trail_entity     ON audit_trail(entity_type, entity_id)")
    op.execute("CREATE INDEX ix_audit_trail_created_at ON audit_trail(created_at)")

    # ── Seed data ─────────────────────────────────────────────────────────
    op.execute("""
        INSERT INTO app_settings (key, value, description) VALUES
        ('attendance',
         '{"full_day_hours": 8, "half_day_min_hours": 4,
           "working_hours_start": "09:00", "working_hours_end": "18:00"}',
         'Attendance status thresholds and working hours.')
    """)


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    # Drop tables in reverse dependency order
    tables = [
        "audit_trail",
        "app_settings",
        "payroll_records",
        "leave_requests",
        "attendance_records",
        "users",
    ]
    for t in tables:
        op.execute(f"DROP TABLE IF EXISTS {t} CASCADE")
