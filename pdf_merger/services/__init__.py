"""Flask-facing service functions."""
