"""Helpers for the VulnCheck API: environments, messages, offline index search, scan models, utilities and terminal output."""

__version__ = "0.1.0"