#!/usr/bin/env python3
"""Board Station — Web display mode.

Serves the board renders over HTTP for a kiosk browser. The scheduler
loop (timers, bus, board views) runs on its own thread; Flask request
threads only read renders and post pause/resume messages onto the bus.

Usage:
    python3 web_app.py              # Boards from board.yaml
    python3 web_app.py --demo       # Simulated board
    python3 web_app.py --port 5000  # Custom port

Routes:
    GET  /                         plain-text view of every board
    GET  /health
    GET  /api/boards               board ids and state
    GET  /api/boards/<id>/render   render description (JSON)
    POST /api/boards/<id>/pause
    POST /api/boards/<id>/resume
    GET  /api/stream               SSE, one "render" event per display update
"""

__version__ = "1.0.0"

import argparse
import json
import logging
import threading
from typing import Dict, List

from flask import Flask, Response, jsonify
from flask_cors import CORS

from cards.text_view import format_text
from config import ConfigError
from core.board_view import BoardView, build_views
from core.event_bus import EventBus
from core.messages import USER_PRESENCE, Envelope
from core.render_feed import RenderFeed
from core.scheduler import Scheduler
from main import resolve_boards

# Import sources to trigger @register_source decorators
import sources  # noqa: F401

logger = logging.getLogger(__name__)


def create_app(views: List[BoardView], bus: EventBus, feed: RenderFeed):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    CORS(app)  # kiosk page may be served from elsewhere

    boards: Dict[str, BoardView] = {view.view_id: view for view in views}

    def board_or_404(board_id):
        view = boards.get(board_id)
        if view is None:
            return None, (jsonify({"error": f"Unknown board: {board_id}"}), 404)
        return view, None

    # ─── Routes: UI ───

    @app.route("/")
    def index():
        sections = []
        for view in views:
            sections.append(f"== {view.view_id} ==\n{format_text(view.render())}")
        return Response("\n\n".join(sections) + "\n", mimetype="text/plain")

    @app.route("/health")
    def health():
        return jsonify({
            "status": "ok",
            "boards": len(boards),
            "stream_clients": feed.client_count,
            "version": __version__,
        })

    # ─── Routes: Boards ───

    @app.route("/api/boards")
    def list_boards():
        return jsonify({
            "boards": [
                {
                    "id": view.view_id,
                    "list": view.config.list_id,
                    "state": view.updates.state.name.lower(),
                    "status": view.errors.status.value,
                    "whole_list": view.config.whole_list,
                }
                for view in views
            ]
        })

    @app.route("/api/boards/<board_id>/render")
    def render_board(board_id):
        view, error = board_or_404(board_id)
        if error:
            return error
        payload = view.render().to_dict()
        payload["board"] = board_id
        return jsonify(payload)

    # Pause/resume travel over the bus so they apply on the scheduler thread

    @app.route("/api/boards/<board_id>/pause", methods=["POST"])
    def pause_board(board_id):
        view, error = board_or_404(board_id)
        if error:
            return error
        bus.publish(Envelope(USER_PRESENCE, False, target_id=board_id))
        return jsonify({"board": board_id, "requested": "pause"}), 202

    @app.route("/api/boards/<board_id>/resume", methods=["POST"])
    def resume_board(board_id):
        view, error = board_or_404(board_id)
        if error:
            return error
        bus.publish(Envelope(USER_PRESENCE, True, target_id=board_id))
        return jsonify({"board": board_id, "requested": "resume"}), 202

    # ─── Routes: SSE stream ───

    @app.route("/api/stream")
    def stream():
        """SSE endpoint streaming every render pushed to the feed."""
        def generate():
            for board_id, payload in feed.stream():
                if board_id == "keepalive":
                    yield ": keepalive\n\n"
                    continue
                yield f"event: render\ndata: {json.dumps(payload)}\n\n"

        return Response(
            generate(),
            mimetype="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "X-Accel-Buffering": "no",
                "Connection": "keep-alive",
            },
        )

    return app


def main():
    parser = argparse.ArgumentParser(description="Board Station Web Display")
    parser.add_argument("--demo", action="store_true", help="Use simulated board data")
    parser.add_argument("--port", type=int, default=5000, help="Web server port")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    parser.add_argument("--config", default="board.yaml", help="Config file path")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.info("Board Station Web v%s starting", __version__)

    try:
        configs = resolve_boards(args.config, args.demo)
    except ConfigError as exc:
        logger.error("Invalid config: %s", exc)
        return 1
    if not configs:
        logger.error("No boards configured in %s (try --demo)", args.config)
        return 1

    scheduler = Scheduler()
    bus = EventBus(scheduler)
    feed = RenderFeed()
    views = build_views(configs, bus, scheduler, demo=args.demo)

    for view in views:
        view.add_listener(feed.listener(view.view_id))
        view.source.start()
        view.start()

    stop = threading.Event()
    loop = threading.Thread(
        target=scheduler.run_forever, args=(stop,), daemon=True, name="board-loop"
    )
    loop.start()

    app = create_app(views, bus, feed)
    logger.info("Web display at http://%s:%d", args.host, args.port)

    try:
        app.run(host=args.host, port=args.port, threaded=True, debug=False)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        stop.set()
        loop.join(timeout=2)
        for view in views:
            view.stop()
            view.source.close()
        bus.close()
        logger.info("Shutdown complete")
    return 0


if __name__ == "__main__":
    main()
