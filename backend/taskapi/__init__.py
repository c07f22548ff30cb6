"""Signed challenge-task issuance and validation service."""

__version__ = "0.1.0"
