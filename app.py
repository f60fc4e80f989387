"""
WSGI entry point.

  gunicorn app:app --workers 1
  flask --app app init-db --sample
  flask --app app run --debug
"""

import os

from showroom import create_app

app = create_app()


if __name__ == "__main__":
    # Local dev only. In production, run under gunicorn.
    app.run(host="127.0.0.1", port=int(os.environ.get("PORT", 3000)), debug=True)
