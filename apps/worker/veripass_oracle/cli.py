"""CLI commands for the oracle worker."""

import logging
import sys

import click
from pydantic import ValidationError as SettingsError

from veripass_api.exceptions import VeripassError
from veripass_oracle.gateway import BackendGateway
from veripass_oracle.ledger import LedgerClient
from veripass_oracle.metrics import start_metrics_server
from veripass_oracle.settings import get_settings
from veripass_oracle.worker import OracleWorker

logger = logging.getLogger("veripass_oracle")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format='{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s", "module": "%(name)s"}',
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def _load():
    try:
        settings = get_settings()
    except SettingsError as e:
        click.echo(f"✗ Invalid oracle configuration:\n{e}", err=True)
        raise SystemExit(1)
    _configure_logging(settings.log_level)

    ledger = LedgerClient.from_settings(settings)
    gateway = BackendGateway(
        settings.backend_url,
        settings.oracle_api_key,
        ledger.address,
        timeout=settings.request_timeout_seconds,
    )
    return settings, ledger, gateway


@click.group()
def cli():
    """VeriPass oracle CLI."""
    pass


@cli.command()
def run():
    """Run the polling worker until SIGINT or SIGTERM."""
    settings, ledger, gateway = _load()
    start_metrics_server(settings.metrics_port)
    worker = OracleWorker(
        gateway,
        ledger,
        poll_interval=settings.poll_interval_seconds,
        min_balance_eth=settings.min_balance_eth,
        stale_processing_seconds=settings.stale_processing_seconds,
    )
    try:
        worker.run()
    except VeripassError as e:
        logger.error(f"Oracle worker could not start: {e.message}")
        click.echo(f"✗ {e.message}", err=True)
        raise SystemExit(1)
    finally:
        gateway.close()


@cli.command()
def status():
    """Show oracle registration, balance and queue depth."""
    settings, ledger, gateway = _load()
    try:
        click.echo(f"Oracle address:  {ledger.address}")
        click.echo(f"Trusted oracle:  {'yes' if ledger.is_trusted_oracle() else 'NO'}")
        click.echo(f"Balance:         {ledger.get_balance()} ETH")
        click.echo(f"Pending requests: {len(gateway.fetch_pending_requests())}")
    except VeripassError as e:
        click.echo(f"✗ {e.message}", err=True)
        raise SystemExit(1)
    finally:
        gateway.close()


if __name__ == "__main__":
    cli()
