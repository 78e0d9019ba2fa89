"""CLI commands for the VeriPass API."""

import click

from veripass_api.db.seed import seed_all
from veripass_api.db.session import SessionLocal, init_db


@click.group()
def cli():
    """VeriPass API CLI."""
    pass


@cli.command("init-db")
def init_db_command():
    """Create database tables."""
    init_db()
    click.echo("✓ Tables created.")


@cli.command()
def seed():
    """Seed service providers and service records."""
    click.echo("Seeding development data...")
    db = SessionLocal()
    try:
        counts = seed_all(db)
        click.echo(f"✓ Seeded {counts['providers']} provider(s), {counts['service_records']} record(s).")
    except Exception as e:
        db.rollback()
        click.echo(f"✗ Error seeding data: {e}", err=True)
        raise SystemExit(1)
    finally:
        db.close()


if __name__ == "__main__":
    cli()
