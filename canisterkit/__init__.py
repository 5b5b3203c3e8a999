"""Call builders and data models for the management canister and cycles wallet canister interfaces."""

__version__ = "0.1.0"

__all__ = [
    "attributes",
    "builders",
    "calls",
    "certheader",
    "forwarder",
    "install",
    "management",
    "status",
    "wallet_types",
]