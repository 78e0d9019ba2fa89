"""Tests for status enums and their transition tables."""

import itertools

import pytest

from veripass_api.enums import EvidenceStatus, MintStatus, VerificationStatus


@pytest.mark.parametrize(
    "source,target",
    [
        (VerificationStatus.PENDING, VerificationStatus.PROCESSING),
        (VerificationStatus.PENDING, VerificationStatus.FAILED),
        (VerificationStatus.PROCESSING, VerificationStatus.COMPLETED),
        (VerificationStatus.PROCESSING, VerificationStatus.FAILED),
    ],
)
def test_verification_forward_transitions_allowed(source, target):
    assert source.can_transition_to(target)


def test_verification_terminal_states_never_move():
    for source, target in itertools.product(
        (VerificationStatus.COMPLETED, VerificationStatus.FAILED), VerificationStatus
    ):
        assert not source.can_transition_to(target)


def test_verification_cannot_skip_claim():
    assert not VerificationStatus.PENDING.can_transition_to(VerificationStatus.COMPLETED)
    assert not VerificationStatus.PROCESSING.can_transition_to(VerificationStatus.PENDING)


def test_mint_status():
    assert MintStatus.PENDING.can_transition_to(MintStatus.MINTED)
    assert MintStatus.PENDING.can_transition_to(MintStatus.FAILED)
    assert not MintStatus.MINTED.can_transition_to(MintStatus.PENDING)
    assert MintStatus.MINTED.is_terminal
    assert not MintStatus.PENDING.is_terminal


def test_evidence_status():
    assert EvidenceStatus.PENDING.can_transition_to(EvidenceStatus.CONFIRMED)
    assert not EvidenceStatus.CONFIRMED.can_transition_to(EvidenceStatus.PENDING)


def test_status_values_are_wire_strings():
    assert VerificationStatus("PROCESSING") is VerificationStatus.PROCESSING
    assert MintStatus.MINTED == "MINTED"
