"""Shared models, exceptions and helpers."""
