import os

from flask import Response, current_app, jsonify, request, send_from_directory

from bloomee.errors import ConfigurationError, NotFoundError, ValidationError
from bloomee.fetch_controller import resolve
from bloomee.logger import get_logger
from bloomee.utils import maybe_await, parse_positive_int

logger = get_logger("router")

STREAM_CONTENT_TYPE = "audio/mpeg"


def _fetchers() -> dict:
    return current_app.extensions["bloomee.fetchers"]


def _fetcher(name: str):
    fetcher = _fetchers().get(name)
    if fetcher is None:
        raise ConfigurationError(f"{name} is not available", provider=name)
    return fetcher


def _require_arg(name: str, message: str) -> str:
    value = request.args.get(name, "").strip()
    if not value:
        raise ValidationError(message)
    return value


def _paging():
    page = parse_positive_int(request.args.get("page"), 1)
    limit = parse_positive_int(
        request.args.get("limit"),
        current_app.config["DEFAULT_LIMIT"],
        maximum=current_app.config["MAX_LIMIT"],
    )
    return page, limit


def _search_payload(source: str, songs: list, start: int = 0):
    return jsonify({
        "status": "success",
        "source": source,
        "data": {"total": len(songs), "start": start, "results": songs},
    })


def register_routes(app):
    @app.route("/api/health")
    def health():
        return jsonify({
            "status": "ok",
            "version": app.config.get("VERSION"),
            "environment": app.config.get("APP_ENV"),
            "platform": app.config.get("DEPLOY_PLATFORM"),
            "providers": {name: f.configured for name, f in _fetchers().items()},
        })

    @app.route("/api/search/songs", methods=["GET"])
    async def search_songs():
        query = _require_arg("query", "Query is required")
        page, limit = _paging()
        logger.info(f"Song search '{query}' page={page} limit={limit}")

        result = await resolve(
            _fetchers(), app.config["SEARCH_PROVIDERS"], "search", query, page=page, limit=limit
        )
        return _search_payload(result.source, result.songs, start=(page - 1) * limit)

    @app.route("/api/songs/<song_id>", methods=["GET"])
    async def song_details(song_id):
        song = await _fetcher("jiosaavn").get_song(song_id)
        return jsonify({"status": "success", "source": "jiosaavn", "data": [song]})

    @app.route("/api/trending", methods=["GET"])
    async def trending():
        limit = parse_positive_int(
            request.args.get("limit"), app.config["DEFAULT_LIMIT"], maximum=app.config["MAX_LIMIT"]
        )
        result = await resolve(_fetchers(), app.config["TRENDING_PROVIDERS"], "trending", limit=limit)
        return jsonify({"status": "success", "source": result.source, "results": result.songs})

    @app.route("/api/youtube/search", methods=["GET"])
    async def youtube_search():
        query = _require_arg("query", "Query is required")
        songs = await maybe_await(_fetcher("youtube").search, query)
        return _search_payload("youtube", songs)

    @app.route("/api/youtube-music/search", methods=["GET"])
    async def youtube_music_search():
        query = _require_arg("query", "Query is required")
        songs = await maybe_await(_fetcher("youtube-music").search, query)
        return _search_payload("youtube-music", songs)

    @app.route("/api/soundcloud/search", methods=["GET"])
    async def soundcloud_search():
        query = _require_arg("query", "Query is required")
        _, limit = _paging()
        result = await resolve(
            _fetchers(), app.config["SOUNDCLOUD_PROVIDERS"], "search", query, limit=limit
        )
        return _search_payload(result.source, result.songs)

    @app.route("/api/youtube/stream", methods=["GET"])
    def youtube_stream():
        video_id = _require_arg("id", "ID is required")
        resolver = current_app.extensions["bloomee.stream_resolver"]

        # Every failure up to here is raised before a single byte is sent
        stream = resolver.open(video_id, range_header=request.headers.get("Range"))
        logger.info(f"Streaming {video_id} (status {stream.status_code})")

        response = Response(
            stream.iter_bytes(),
            status=stream.status_code,
            mimetype=STREAM_CONTENT_TYPE,
            direct_passthrough=True,
        )
        response.headers["Accept-Ranges"] = "bytes"
        response.headers["Cache-Control"] = "no-store"
        for name, value in stream.headers.items():
            response.headers[name] = value
        response.call_on_close(stream.close)
        return response

    @app.route("/api/", defaults={"path": ""})
    @app.route("/api/<path:path>")
    def api_not_found(path):
        raise NotFoundError()

    @app.route("/", defaults={"path": ""})
    @app.route("/<path:path>")
    def client_app(path):
        static_dir = os.path.abspath(app.config["STATIC_DIR"])
        if path and os.path.isfile(os.path.join(static_dir, path)):
            return send_from_directory(static_dir, path)
        if os.path.isfile(os.path.join(static_dir, "index.html")):
            return send_from_directory(static_dir, "index.html")
        if not path:
            return jsonify({
                "api": "Bloomee",
                "version": app.config.get("VERSION"),
                "status": "active",
                "endpoints": {
                    "search": "/api/search/songs?query=QUERY&page=1&limit=20",
                    "trending": "/api/trending",
                    "youtube": "/api/youtube/search?query=QUERY",
                    "youtube_music": "/api/youtube-music/search?query=QUERY",
                    "soundcloud": "/api/soundcloud/search?query=QUERY",
                    "stream": "/api/youtube/stream?id=VIDEO_ID",
                },
            })
        raise NotFoundError("Client build not found")
