"""Logging helpers for the settlement back office."""
