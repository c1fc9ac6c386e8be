"""Schema creation and the ordered registry of named, run-once migrations.

Migrations are additive: adding a column that already exists is a no-op. The
only structural step is ``remove_rate_constraints_from_clients``, which rebuilds the
clients table without the pre-contract rate columns and copies every other
column across.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from sqlalchemy import func, inspect, insert, select, text
from sqlalchemy.engine import Connection, Engine

from hours.app.core.time import utc_now
from hours.app.db.base import Base
from hours.app.models.migration_record import MigrationRecord

logger = logging.getLogger(__name__)

migration_log = MigrationRecord.__table__

LEGACY_RATE_COLUMNS = ("hourly_rate", "currency")

CLIENTS_REBUILD_DDL = """
    CREATE TABLE clients_new (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR NOT NULL UNIQUE,
        address VARCHAR,
        city VARCHAR,
        state VARCHAR,
        zip_code VARCHAR,
        country VARCHAR,
        created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
"""
CLIENTS_KEPT_COLUMNS = ("id", "name", "address", "city", "state", "zip_code", "country", "created_at", "updated_at")


@dataclass(frozen=True)
class Migration:
    name: str
    apply: Callable[[Connection], None]


def column_names(conn: Connection, table_name: str) -> set[str]:
    return {column["name"] for column in inspect(conn).get_columns(table_name)}


def add_column_if_not_exists(conn: Connection, table_name: str, column_name: str, column_type: str) -> bool:
    """Add a column unless it is already there. Returns True when the column was added."""
    if column_name in column_names(conn, table_name):
        logger.debug("Column %s.%s already exists, skipping", table_name, column_name)
        return False
    conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_type}"))
    logger.info("Added column %s.%s", table_name, column_name)
    return True


def _add_contract_ref(conn: Connection) -> None:
    add_column_if_not_exists(conn, "time_entries", "contract_ref", "TEXT")


def _add_recipient_title(conn: Connection) -> None:
    add_column_if_not_exists(conn, "recipients", "title", "TEXT")


def _add_recipient_phone(conn: Connection) -> None:
    add_column_if_not_exists(conn, "recipients", "phone", "TEXT")


def _add_client_address(conn: Connection) -> None:
    for column in ("address", "city", "state", "zip_code", "country"):
        add_column_if_not_exists(conn, "clients", column, "TEXT")


def restructure_for_contracts(conn: Connection) -> None:
    """Give every client that still carries a client-level rate a LEGACY-<id> contract."""
    add_column_if_not_exists(conn, "time_entries", "contract_id", "INTEGER")

    client_columns = column_names(conn, "clients")
    if "hourly_rate" not in client_columns:
        return

    currency_expr = "currency" if "currency" in client_columns else "'USD'"
    legacy_clients = conn.execute(
        text(
            f"SELECT id, name, hourly_rate, {currency_expr} AS currency, created_at "
            "FROM clients WHERE hourly_rate IS NOT NULL AND hourly_rate > 0"
        )
    ).all()
    if not legacy_clients:
        return

    logger.info("Migrating %d clients to contract-based billing", len(legacy_clients))
    entries_have_client = "client_id" in column_names(conn, "time_entries")
    for row in legacy_clients:
        contract_number = f"LEGACY-{row.id}"
        created = str(row.created_at or utc_now().date())[:10]
        conn.execute(
            text(
                "INSERT INTO contracts "
                "(client_id, contract_number, name, hourly_rate, currency, contract_type, start_date, status, created_at, updated_at) "
                "VALUES (:client_id, :number, :name, :rate, :currency, 'hourly', :start, 'active', CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)"
            ),
            {
                "client_id": row.id,
                "number": contract_number,
                "name": f"Legacy Contract - {row.name}",
                "rate": row.hourly_rate,
                "currency": row.currency or "USD",
                "start": created,
            },
        )
        contract_id = conn.execute(
            text("SELECT id FROM contracts WHERE contract_number = :number"), {"number": contract_number}
        ).scalar_one()
        if entries_have_client:
            conn.execute(
                text("UPDATE time_entries SET contract_id = :contract_id WHERE client_id = :client_id AND contract_id IS NULL"),
                {"contract_id": contract_id, "client_id": row.id},
            )
        logger.info("Created legacy contract %s for client %s", contract_number, row.name)


def remove_rate_columns_from_clients(conn: Connection) -> None:
    """Rebuild the clients table without the legacy rate columns (SQLite cannot drop them in place)."""
    existing = column_names(conn, "clients")
    if not existing.intersection(LEGACY_RATE_COLUMNS):
        return

    logger.info("Rebuilding clients table without rate columns")
    copied = ", ".join(column for column in CLIENTS_KEPT_COLUMNS if column in existing)
    # DROP TABLE would cascade into contracts/recipients/invoices with enforcement on
    conn.execute(text("PRAGMA foreign_keys=OFF"))
    try:
        conn.execute(text(CLIENTS_REBUILD_DDL))
        conn.execute(text(f"INSERT INTO clients_new ({copied}) SELECT {copied} FROM clients"))
        conn.execute(text("DROP TABLE clients"))
        conn.execute(text("ALTER TABLE clients_new RENAME TO clients"))
        conn.commit()
    finally:
        conn.execute(text("PRAGMA foreign_keys=ON"))


MIGRATIONS: list[Migration] = [
    Migration("add_contract_ref_to_time_entries", _add_contract_ref),
    Migration("add_title_to_recipients", _add_recipient_title),
    Migration("add_phone_to_recipients", _add_recipient_phone),
    Migration("add_address_to_clients", _add_client_address),
    Migration("restructure_for_contracts", restructure_for_contracts),
    Migration("remove_rate_constraints_from_clients", remove_rate_columns_from_clients),
]


def applied_migrations(engine: Engine) -> list[str]:
    with engine.connect() as conn:
        return list(conn.execute(select(migration_log.c.name).order_by(migration_log.c.id)).scalars())


def run_migrations(engine: Engine, migrations: list[Migration] | None = None) -> list[str]:
    """Apply pending migrations in registration order and return the names applied now."""
    migration_log.create(bind=engine, checkfirst=True)
    applied = []
    for migration in migrations if migrations is not None else MIGRATIONS:
        with engine.connect() as conn:
            already_applied = conn.execute(
                select(func.count()).select_from(migration_log).where(migration_log.c.name == migration.name)
            ).scalar_one()
            if already_applied:
                continue
            try:
                migration.apply(conn)
                conn.execute(insert(migration_log).values(name=migration.name, applied_at=utc_now()))
                conn.commit()
            except Exception:
                conn.rollback()
                logger.exception("Failed to apply migration %s", migration.name)
                raise
        logger.info("Applied migration: %s", migration.name)
        applied.append(migration.name)
    return applied


def init_db(engine: Engine) -> list[str]:
    """Create missing tables, then run pending migrations."""
    Base.metadata.create_all(bind=engine)
    return run_migrations(engine)
