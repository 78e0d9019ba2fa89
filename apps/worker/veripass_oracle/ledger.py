"""EventRegistry client holding the oracle's signing key and RPC connection."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

import requests
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception
from web3.logs import DISCARD

from veripass_api.exceptions import LedgerError, TransientInfrastructureError
from veripass_oracle.metrics import ledger_submissions

logger = logging.getLogger(__name__)

EVENT_REGISTRY_ABI = [
    {
        "type": "function",
        "name": "isTrustedOracle",
        "stateMutability": "view",
        "inputs": [{"name": "oracle", "type": "address"}],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "recordVerifiedEvent",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "assetId", "type": "uint256"},
            {"name": "dataHash", "type": "bytes32"},
            {"name": "signature", "type": "bytes"},
        ],
        "outputs": [{"name": "eventId", "type": "uint256"}],
    },
    {
        "type": "event",
        "name": "EventRecorded",
        "anonymous": False,
        "inputs": [
            {"name": "assetId", "type": "uint256", "indexed": True},
            {"name": "eventId", "type": "uint256", "indexed": True},
            {"name": "eventType", "type": "uint8", "indexed": False},
            {"name": "submitter", "type": "address", "indexed": True},
            {"name": "dataHash", "type": "bytes32", "indexed": False},
            {"name": "isVerified", "type": "bool", "indexed": False},
        ],
    },
]

# RPC transport failures surface from the HTTP provider as requests errors.
RPC_ERRORS = (Web3Exception, requests.RequestException, ConnectionError)


@dataclass(frozen=True)
class LedgerSubmission:
    """A mined EventRegistry transaction. ``event_id`` is 0 when no event decoded."""

    tx_hash: str
    event_id: int


class LedgerClient:
    """Single owner of the oracle key and the EventRegistry contract.

    Transactions are sent one at a time and each waits for its receipt, so
    nonces are consumed strictly in order.
    """

    def __init__(
        self,
        web3: Web3,
        account: LocalAccount,
        event_registry_address: str,
        receipt_timeout: int = 120,
    ):
        self.web3 = web3
        self.account = account
        self.receipt_timeout = receipt_timeout
        self.contract = web3.eth.contract(
            address=Web3.to_checksum_address(event_registry_address),
            abi=EVENT_REGISTRY_ABI,
        )

    @classmethod
    def from_settings(cls, settings) -> "LedgerClient":
        web3 = Web3(
            Web3.HTTPProvider(
                settings.rpc_url,
                request_kwargs={"timeout": settings.request_timeout_seconds},
            )
        )
        account = Account.from_key(settings.oracle_private_key)
        return cls(
            web3,
            account,
            settings.event_registry_address,
            receipt_timeout=settings.tx_receipt_timeout_seconds,
        )

    @property
    def address(self) -> str:
        return self.account.address

    def is_trusted_oracle(self, address: Optional[str] = None) -> bool:
        """Check the EventRegistry allow-list for ``address`` (default: this oracle)."""
        target = Web3.to_checksum_address(address or self.address)
        try:
            return bool(self.contract.functions.isTrustedOracle(target).call())
        except RPC_ERRORS as e:
            raise TransientInfrastructureError(f"isTrustedOracle call failed: {e}") from e

    def get_balance(self) -> Decimal:
        """Oracle balance in ether."""
        try:
            wei = self.web3.eth.get_balance(self.address)
        except RPC_ERRORS as e:
            raise TransientInfrastructureError(f"Balance lookup failed: {e}") from e
        return Decimal(Web3.from_wei(wei, "ether"))

    def sign_digest(self, digest: str) -> str:
        """EIP-191 personal signature over the 32 raw bytes of ``digest``."""
        digest_bytes = Web3.to_bytes(hexstr=digest)
        if len(digest_bytes) != 32:
            raise ValueError(f"Digest must be 32 bytes, got {len(digest_bytes)}")
        signed = self.account.sign_message(encode_defunct(primitive=digest_bytes))
        return Web3.to_hex(signed.signature)

    def submit_verified_event(self, asset_id: int, data_hash: str, signature: str) -> LedgerSubmission:
        """Record an oracle-verified event and wait for it to be mined."""
        logger.info(f"Submitting verified event for asset {asset_id}", extra={"asset_id": asset_id})
        function = self.contract.functions.recordVerifiedEvent(
            asset_id,
            Web3.to_bytes(hexstr=data_hash),
            Web3.to_bytes(hexstr=signature),
        )
        try:
            nonce = self.web3.eth.get_transaction_count(self.address, "pending")
            tx = function.build_transaction({"from": self.address, "nonce": nonce})
            signed = self.account.sign_transaction(tx)
            tx_hash = self.web3.eth.send_raw_transaction(signed.raw_transaction)
            logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")
            receipt = self.web3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        except ContractLogicError as e:
            ledger_submissions.labels(outcome="reverted").inc()
            raise LedgerError(f"recordVerifiedEvent reverted: {e}") from e
        except RPC_ERRORS as e:
            ledger_submissions.labels(outcome="error").inc()
            raise TransientInfrastructureError(f"Ledger submission failed: {e}") from e

        mined_hash = Web3.to_hex(receipt["transactionHash"])
        if receipt["status"] == 0:
            ledger_submissions.labels(outcome="reverted").inc()
            raise LedgerError(f"Transaction {mined_hash} reverted", {"txHash": mined_hash})

        ledger_submissions.labels(outcome="confirmed").inc()
        event_id = self.decode_event_id(receipt)
        logger.info(f"Transaction confirmed: {mined_hash} (event {event_id})")
        return LedgerSubmission(tx_hash=mined_hash, event_id=event_id)

    def decode_event_id(self, receipt: Any) -> int:
        """Event id from the first EventRecorded log in ``receipt``; 0 if there is none."""
        events = self.contract.events.EventRecorded().process_receipt(receipt, errors=DISCARD)
        for event in events:
            return int(event["args"]["eventId"])
        return 0
