"""
main.py

Flask entry point for the filedrop expiring file sharing service.

Clients upload files at /, get a download link per file, and every file is
removed by the reclamation sweep once its expiry time has passed.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors, APScheduler
  - Optional: Redis (FILEDROP_METADATA_BACKEND=redis), Celery (SWEEPER_MODE=celery)

Notes:
  - Uploaded bytes live in $FILEDROP_DATA_DIR/file, records in $FILEDROP_DATA_DIR/info
  - JSON API available at /api/v1/ with Swagger docs at /api/v1/docs
"""

import os

from app_factory import create_app

app = create_app()

if __name__ == "__main__":
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", 8000))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"

    # The reloader would fork a second process with its own sweep scheduler
    app.run(host=host, port=port, debug=debug, use_reloader=False, threaded=True)
