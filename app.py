import os

from taskboard.app import create_app


# Expose a module-level `app` for WSGI servers (gunicorn expects `app:app`).
# Nothing connects at import time: MongoDB and the JWT secret are checked on first use.
app = create_app()


if __name__ == "__main__":
    # Local development only: run the built-in server.
    port = int(os.environ.get("PORT", 5000))
    app.run(host=os.environ.get("HOST", "127.0.0.1"), port=port, debug=os.environ.get("FLASK_DEBUG", "0") == "1")
