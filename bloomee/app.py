from flask import Flask, jsonify, request
from flask_compress import Compress
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from bloomee import __version__, config
from bloomee.errors import BloomeeError
from bloomee.logger import get_logger
from bloomee.router import register_routes
from bloomee.sources import build_fetchers
from bloomee.sources.youtube_stream import YoutubeStreamResolver


def create_app(overrides: dict | None = None, fetchers: dict | None = None, stream_resolver=None):
    """
    Application factory.

    `overrides` is merged over the environment configuration. `fetchers`
    and `stream_resolver` replace the adapters built from configuration,
    which is how tests run without network access.
    """
    app = Flask(__name__, static_folder=None)
    app.config.update(config.as_dict())
    app.config.update(overrides or {})
    app.config["VERSION"] = __version__
    app.json.sort_keys = False

    CORS(app, resources={r"/api/*": {
        "origins": app.config["CORS_ORIGINS"],
        "allow_headers": ["Content-Type", "Range"],
        "expose_headers": ["Content-Length", "Content-Range", "Accept-Ranges"],
    }})

    # Gzip JSON responses; audio is left alone
    Compress(app)

    app.logger = get_logger("Bloomee")

    app.extensions["bloomee.fetchers"] = fetchers if fetchers is not None else build_fetchers(app.config)
    app.extensions["bloomee.stream_resolver"] = stream_resolver or YoutubeStreamResolver(
        timeout=app.config["HTTP_TIMEOUT"],
        chunk_size=app.config["STREAM_CHUNK_SIZE"],
    )

    @app.errorhandler(BloomeeError)
    def bloomee_error_handler(e):
        log = app.logger.warning if e.status_code < 500 else app.logger.error
        provider = f" [{e.provider}]" if e.provider else ""
        log(f"{request.method} {request.path}{provider} -> {e.status_code}: {e.message}"
            + (f" ({e.details})" if e.details else ""))
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(Exception)
    def unhandled_error(e):
        if isinstance(e, HTTPException):
            if request.path.startswith("/api/"):
                return jsonify({"error": e.description or e.name}), e.code
            return e
        app.logger.exception(f"Unhandled error on {request.method} {request.path}: {e}")
        return jsonify({"error": "Internal server error", "details": str(e)}), 500

    register_routes(app)
    app.logger.info(f"Bloomee {__version__} ready ({app.config['APP_ENV']}, {app.config['DEPLOY_PLATFORM']})")
    return app
