"""WSGI entry point: ``gunicorn match_forecaster.wsgi:app`` or ``python -m match_forecaster.wsgi``."""

from .app import create_app
from .constants import DEV_SERVER_HOST, DEV_SERVER_PORT

app = create_app()

if __name__ == "__main__":  # pragma: no cover
    app.run(host=DEV_SERVER_HOST, port=DEV_SERVER_PORT, debug=app.extensions["match_forecaster"].settings.debug)
