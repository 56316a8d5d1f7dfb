# Overview: WSGI entry point (FLASK_APP=wsgi.py, or gunicorn wsgi:app).

import os

from parlour import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 3001)))
