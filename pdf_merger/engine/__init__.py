"""Merge pipeline stages."""
