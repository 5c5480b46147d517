"""Gunicorn entry point: `gunicorn app:app`."""

import os

from pdf_merger import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", "5000")))
