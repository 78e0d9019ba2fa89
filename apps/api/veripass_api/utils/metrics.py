"""Prometheus metrics."""

from prometheus_client import Counter

# Assets
assets_created = Counter(
    "veripass_assets_created_total",
    "Assets created or reset for a mint retry",
    ["retry"],
)

mint_status_updates = Counter(
    "veripass_mint_status_updates_total",
    "Mint status transitions",
    ["status"],
)

# Evidence
evidence_created = Counter(
    "veripass_evidence_created_total",
    "Evidence rows created",
    ["event_type"],
)

evidence_confirmed = Counter(
    "veripass_evidence_confirmed_total",
    "Evidence rows confirmed on-chain",
    ["verified"],
)

# Verification queue
verification_transitions = Counter(
    "veripass_verification_transitions_total",
    "Verification request status transitions",
    ["status"],
)

# Auth
auth_failures = Counter(
    "veripass_auth_failures_total",
    "Rejected credentials",
    ["scheme"],
)
