#!/usr/bin/env python
"""
Apply the SQL files in migrations/ to the Supabase Postgres database.

Applied files are tracked by name and checksum in the `_migrations` table,
so each file runs once. A file edited after it was applied is reported,
never re-run.

Usage:
    python run_migrations.py             # Apply pending migrations
    python run_migrations.py --status    # Show applied and pending files
    python run_migrations.py --dry-run   # List what would be applied

Set SUPABASE_DB_URL to the connection string from the Supabase dashboard
(Settings -> Database -> Connection string -> URI).
"""

import argparse
import hashlib
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import psycopg2
from psycopg2 import sql
from rich.console import Console
from rich.table import Table

from shared.config import get_settings

console = Console()

MIGRATIONS_DIR = Path(__file__).parent / "migrations"
MIGRATIONS_TABLE = "_migrations"


@dataclass(frozen=True)
class Migration:
    name: str
    path: Path
    checksum: str

    def read(self) -> str:
        return self.path.read_text()


@dataclass(frozen=True)
class AppliedMigration:
    name: str
    checksum: str
    applied_at: Optional[datetime] = None


def checksum_of(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]


def load_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """SQL files in `directory`, in file name order."""
    if not directory.exists():
        return []
    return [
        Migration(name=path.name, path=path, checksum=checksum_of(path.read_text()))
        for path in sorted(directory.glob("*.sql"))
    ]


def plan_migrations(
    migrations: list[Migration],
    applied: dict[str, AppliedMigration],
) -> tuple[list[Migration], list[Migration]]:
    """
    Split migrations into those still to run and those edited since they ran.

    Returns:
        (pending, changed)
    """
    pending = [m for m in migrations if m.name not in applied]
    changed = [
        m for m in migrations
        if m.name in applied and applied[m.name].checksum != m.checksum
    ]
    return pending, changed


def connect(db_url: str):
    if not db_url:
        console.print("[red]Error:[/red] SUPABASE_DB_URL is not set.")
        sys.exit(1)
    try:
        return psycopg2.connect(db_url)
    except psycopg2.Error as e:
        console.print(f"[red]Database connection failed:[/red] {e}")
        sys.exit(1)


def ensure_migrations_table(conn) -> None:
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL(
                "CREATE TABLE IF NOT EXISTS {} ("
                " name VARCHAR(255) PRIMARY KEY,"
                " checksum VARCHAR(64) NOT NULL,"
                " applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW())"
            ).format(sql.Identifier(MIGRATIONS_TABLE))
        )
    conn.commit()


def fetch_applied(conn) -> dict[str, AppliedMigration]:
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL("SELECT name, checksum, applied_at FROM {} ORDER BY name").format(
                sql.Identifier(MIGRATIONS_TABLE)
            )
        )
        return {row[0]: AppliedMigration(*row) for row in cur.fetchall()}


def apply_migration(conn, migration: Migration) -> None:
    """Run one file and record it, in a single transaction."""
    console.print(f"[blue]Applying:[/blue] {migration.name}")
    try:
        with conn.cursor() as cur:
            cur.execute(migration.read())
            cur.execute(
                sql.SQL("INSERT INTO {} (name, checksum) VALUES (%s, %s)").format(
                    sql.Identifier(MIGRATIONS_TABLE)
                ),
                (migration.name, migration.checksum),
            )
        conn.commit()
    except psycopg2.Error as e:
        conn.rollback()
        console.print(f"[red]Failed:[/red] {migration.name}: {e}")
        raise
    console.print(f"[green]Applied:[/green] {migration.name}")


def status_table(
    migrations: list[Migration],
    applied: dict[str, AppliedMigration],
) -> Table:
    pending, changed = plan_migrations(migrations, applied)
    pending_names = {m.name for m in pending}
    changed_names = {m.name for m in changed}

    table = Table(title="Migration Status")
    table.add_column("Migration", style="cyan")
    table.add_column("Status")
    table.add_column("Applied At")
    table.add_column("Checksum")
    for migration in migrations:
        record = applied.get(migration.name)
        if migration.name in pending_names:
            status = "[yellow]Pending[/yellow]"
        elif migration.name in changed_names:
            status = "[red]Changed[/red]"
        else:
            status = "[green]Applied[/green]"
        applied_at = record.applied_at.strftime("%Y-%m-%d %H:%M:%S") if record and record.applied_at else ""
        table.add_row(migration.name, status, applied_at, migration.checksum)
    return table


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Apply bbtap database migrations")
    parser.add_argument("--status", action="store_true", help="Show migration status and exit")
    parser.add_argument("--dry-run", action="store_true", help="List pending migrations without applying")
    args = parser.parse_args(argv)

    migrations = load_migrations()
    conn = connect(get_settings().supabase_db_url)
    try:
        ensure_migrations_table(conn)
        applied = fetch_applied(conn)

        if args.status:
            console.print(status_table(migrations, applied))
            return 0

        pending, changed = plan_migrations(migrations, applied)
        for migration in changed:
            console.print(f"[yellow]Warning:[/yellow] {migration.name} changed after it was applied")
        if not pending:
            console.print("[green]All migrations are up to date.[/green]")
            return 0

        for migration in pending:
            if args.dry_run:
                console.print(f"[cyan]Would apply:[/cyan] {migration.name}")
            else:
                apply_migration(conn, migration)
        return 0
    finally:
        conn.close()


if __name__ == "__main__":
    sys.exit(main())
