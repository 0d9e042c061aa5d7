"""Shared helpers for provider adapters."""
