"""Tests for LedgerClient with a mocked web3 and a real signing key."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3
from web3.exceptions import ContractLogicError

from veripass_api.exceptions import LedgerError, TransientInfrastructureError
from veripass_api.hashing import calculate_hash
from veripass_oracle.ledger import LedgerClient, LedgerSubmission

REGISTRY = "0x" + "12" * 20
PRIVATE_KEY = "0x" + "4c" * 32


@pytest.fixture
def web3():
    return MagicMock()


@pytest.fixture
def account():
    return Account.from_key(PRIVATE_KEY)


@pytest.fixture
def ledger(web3, account):
    return LedgerClient(web3, account, REGISTRY, receipt_timeout=30)


def test_address_is_oracle_account(ledger, account):
    assert ledger.address == account.address


def test_contract_bound_to_checksum_address(web3, ledger):
    kwargs = web3.eth.contract.call_args.kwargs
    assert kwargs["address"] == Web3.to_checksum_address(REGISTRY)


def test_sign_digest_recovers_oracle(ledger, account):
    digest = calculate_hash({"assetId": 1})
    signature = ledger.sign_digest(digest)
    message = encode_defunct(primitive=Web3.to_bytes(hexstr=digest))
    assert Account.recover_message(message, signature=signature) == account.address
    assert signature.startswith("0x") and len(signature) == 132


def test_sign_digest_rejects_wrong_length(ledger):
    with pytest.raises(ValueError):
        ledger.sign_digest("0x1234")


def test_is_trusted_oracle(ledger):
    ledger.contract.functions.isTrustedOracle.return_value.call.return_value = True
    assert ledger.is_trusted_oracle() is True
    ledger.contract.functions.isTrustedOracle.assert_called_with(ledger.address)


def test_is_trusted_oracle_rpc_failure(ledger):
    ledger.contract.functions.isTrustedOracle.return_value.call.side_effect = ConnectionError("down")
    with pytest.raises(TransientInfrastructureError):
        ledger.is_trusted_oracle()


def test_get_balance_in_ether(web3, ledger):
    web3.eth.get_balance.return_value = 5 * 10**15
    assert ledger.get_balance() == Decimal("0.005")


def _receipt(status=1):
    return {"status": status, "transactionHash": bytes.fromhex("ab" * 32), "logs": []}


def _submit_mocks(web3, account, receipt):
    signed = MagicMock()
    signed.raw_transaction = b"\x01\x02"
    account_mock = MagicMock(wraps=account)
    account_mock.address = account.address
    account_mock.sign_transaction.return_value = signed
    web3.eth.get_transaction_count.return_value = 3
    web3.eth.send_raw_transaction.return_value = bytes.fromhex("ab" * 32)
    web3.eth.wait_for_transaction_receipt.return_value = receipt
    return account_mock


def test_submit_verified_event(web3, account):
    account_mock = _submit_mocks(web3, account, _receipt())
    ledger = LedgerClient(web3, account_mock, REGISTRY, receipt_timeout=30)
    ledger.contract.events.EventRecorded.return_value.process_receipt.return_value = [
        {"args": {"assetId": 1, "eventId": 7}}
    ]
    digest = "0x" + "01" * 32

    result = ledger.submit_verified_event(1, digest, "0x" + "02" * 65)

    assert result == LedgerSubmission(tx_hash="0x" + "ab" * 32, event_id=7)
    fn_args = ledger.contract.functions.recordVerifiedEvent.call_args.args
    assert fn_args == (1, bytes.fromhex("01" * 32), bytes.fromhex("02" * 65))
    tx_params = ledger.contract.functions.recordVerifiedEvent.return_value.build_transaction.call_args.args[0]
    assert tx_params == {"from": account.address, "nonce": 3}
    web3.eth.send_raw_transaction.assert_called_once_with(b"\x01\x02")
    assert web3.eth.wait_for_transaction_receipt.call_args.kwargs["timeout"] == 30


def test_reverted_receipt_raises_ledger_error(web3, account):
    account_mock = _submit_mocks(web3, account, _receipt(status=0))
    ledger = LedgerClient(web3, account_mock, REGISTRY)
    with pytest.raises(LedgerError, match="reverted"):
        ledger.submit_verified_event(1, "0x" + "01" * 32, "0x" + "02" * 65)


def test_estimation_revert_raises_ledger_error(web3, account):
    account_mock = _submit_mocks(web3, account, _receipt())
    ledger = LedgerClient(web3, account_mock, REGISTRY)
    build = ledger.contract.functions.recordVerifiedEvent.return_value.build_transaction
    build.side_effect = ContractLogicError("execution reverted: not a trusted oracle")
    with pytest.raises(LedgerError):
        ledger.submit_verified_event(1, "0x" + "01" * 32, "0x" + "02" * 65)


def test_rpc_failure_on_send_is_transient(web3, account):
    account_mock = _submit_mocks(web3, account, _receipt())
    web3.eth.send_raw_transaction.side_effect = ConnectionError("reset")
    ledger = LedgerClient(web3, account_mock, REGISTRY)
    with pytest.raises(TransientInfrastructureError):
        ledger.submit_verified_event(1, "0x" + "01" * 32, "0x" + "02" * 65)


def test_decode_event_id_missing_event_is_zero(ledger):
    ledger.contract.events.EventRecorded.return_value.process_receipt.return_value = []
    assert ledger.decode_event_id(_receipt()) == 0
