"""Gambling behaviour risk assessment client."""

__all__ = [
    "cli",
    "client",
    "config",
    "constants",
    "exceptions",
    "models",
    "ops",
    "reporting",
    "submission",
    "validation",
]

__version__ = "0.1.0"
