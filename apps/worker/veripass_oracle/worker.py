"""Oracle polling loop."""

import logging
import signal
import threading
import time
from decimal import Decimal
from enum import Enum
from typing import Optional

from veripass_api.exceptions import FatalStartupError
from veripass_oracle.gateway import BackendGateway
from veripass_oracle.ledger import LedgerClient
from veripass_oracle.metrics import poll_duration_seconds, polls_total
from veripass_oracle.verifier import Verifier

logger = logging.getLogger(__name__)


class WorkerState(str, Enum):
    STOPPED = "STOPPED"
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"


class OracleWorker:
    """Polls the record store and runs each pending request through the Verifier.

    Requests are processed one after another on the calling thread. ``stop()``
    sets the cancellation event; an in-flight poll finishes before the loop exits.
    """

    def __init__(
        self,
        gateway: BackendGateway,
        ledger: LedgerClient,
        verifier: Optional[Verifier] = None,
        poll_interval: float = 30.0,
        min_balance_eth: float = 0.01,
        stale_processing_seconds: int = 0,
    ):
        self.gateway = gateway
        self.ledger = ledger
        self.verifier = verifier or Verifier(gateway, ledger)
        self.poll_interval = poll_interval
        self.min_balance = Decimal(str(min_balance_eth))
        self.stale_processing_seconds = stale_processing_seconds
        self.state = WorkerState.STOPPED
        self._stop_event = threading.Event()

    def start(self) -> None:
        """Preflight: the oracle must be trusted on the ledger, and should be funded."""
        self.state = WorkerState.STARTING
        logger.info(f"Oracle worker starting, address {self.ledger.address}")
        try:
            self._preflight()
        except Exception:
            self.state = WorkerState.STOPPED
            raise

        self._stop_event.clear()
        self.state = WorkerState.RUNNING

    def _preflight(self) -> None:
        if not self.ledger.is_trusted_oracle():
            raise FatalStartupError(
                f"Oracle {self.ledger.address} is not registered as a trusted oracle. "
                f"Ask the EventRegistry owner to call addTrustedOracle({self.ledger.address})."
            )
        logger.info("Oracle is registered")

        balance = self.ledger.get_balance()
        logger.info(f"Balance: {balance} ETH")
        if balance < self.min_balance:
            logger.warning(f"Low balance: {balance} ETH is below {self.min_balance} ETH")

    def run(self, install_signal_handlers: bool = True) -> None:
        """Start, poll immediately, then poll every interval until stopped."""
        self.start()
        if install_signal_handlers:
            self._install_signal_handlers()

        logger.info(f"Polling every {self.poll_interval}s")
        try:
            while not self._stop_event.is_set():
                self.poll_once()
                self._stop_event.wait(self.poll_interval)
        finally:
            self.state = WorkerState.STOPPED
            logger.info("Oracle worker stopped")

    def poll_once(self) -> int:
        """One tick: optionally expire stale claims, then process every pending request.

        Returns the number of requests run through the Verifier.
        """
        started = time.monotonic()
        processed = 0
        if self.stale_processing_seconds:
            self._expire_stale()

        try:
            requests = self.gateway.fetch_pending_requests()
        except Exception as e:
            polls_total.labels(outcome="fetch_error").inc()
            logger.error(f"Polling error: {e}", exc_info=True)
            return 0

        if requests:
            logger.info(f"Found {len(requests)} pending request(s)")
        for request in requests:
            self.verifier.process(request)
            processed += 1

        polls_total.labels(outcome="ok").inc()
        poll_duration_seconds.observe(time.monotonic() - started)
        return processed

    def _expire_stale(self) -> None:
        try:
            expired = self.gateway.expire_stale_requests(self.stale_processing_seconds)
        except Exception as e:
            polls_total.labels(outcome="sweep_error").inc()
            logger.error(f"Stale request sweep failed: {e}", exc_info=True)
            return
        if expired:
            logger.warning(f"Expired {len(expired)} request(s) stuck in PROCESSING")

    def stop(self) -> None:
        """Request shutdown; the current poll is allowed to finish."""
        if self.state in (WorkerState.STOPPED, WorkerState.STOPPING):
            return
        logger.info("Stopping oracle...")
        self.state = WorkerState.STOPPING
        self._stop_event.set()

    def _install_signal_handlers(self) -> None:
        def handle(signum, frame):
            logger.info(f"Received signal {signum}")
            self.stop()

        signal.signal(signal.SIGINT, handle)
        signal.signal(signal.SIGTERM, handle)
