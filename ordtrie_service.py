"""
Trie Lookup Service — A REST API over the ordered trie.

Exposes ``ordtrie.Trie`` as a JSON API with endpoints for inserting keys,
exact lookup, prefix listing, deletion, and dumping every stored key.
Built with Flask.  Designed for containerized deployment.
"""

from __future__ import annotations

import io
import logging
import os
import threading
import time
from typing import Iterable

from flask import Flask, current_app, jsonify, request

from ordtrie import EmptyKeyError, KeyNotFoundError, Trie

logger = logging.getLogger("trie-service")

DEFAULT_MAX_KEY_LENGTH = 256
DEFAULT_PREFIX_LIMIT = 25

# Seed with sample data so the service is useful out-of-the-box
SEED_KEYS = [
    "go", "goad", "goaded", "goading", "goads",
    "goal", "goaled", "goalie", "goalies", "goaling",
    "goalkeeper", "goalkeepers", "goalless", "goalpost", "goalposts",
    "goals", "goaltender", "goaltenders",
]


class KeyTooLongError(ValueError):
    """Raised when a submitted key exceeds the configured maximum length."""


def _trie() -> Trie:
    return current_app.extensions["ordtrie"]


def _lock() -> threading.Lock:
    # Trie operations are not safe under concurrent mutation; the dev
    # server is threaded, so every request holds this for its operation.
    return current_app.extensions["ordtrie.lock"]


def create_app(
    seed: Iterable[str] | None = None,
    max_key_length: int = DEFAULT_MAX_KEY_LENGTH,
) -> Flask:
    """Build the service around a fresh trie filled with *seed*."""
    app = Flask(__name__)
    seed_keys = list(seed) if seed is not None else []
    app.config["TRIE_SEED_KEYS"] = seed_keys
    app.config["TRIE_MAX_KEY_LENGTH"] = max_key_length

    trie = Trie()
    for key in seed_keys:
        trie.insert(key)
    if seed_keys:
        logger.info("Seeded trie with %d keys", len(trie))

    app.extensions["ordtrie"] = trie
    app.extensions["ordtrie.lock"] = threading.Lock()
    app.extensions["ordtrie.started"] = time.time()

    _register_error_handlers(app)
    _register_routes(app)
    return app


def _uptime() -> float:
    return round(time.time() - current_app.extensions["ordtrie.started"], 2)


# ── Error mapping ─────────────────────────────────────────────────────────

def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(EmptyKeyError)
    def empty_key(exc):
        logger.warning("Rejected empty key on %s", request.path)
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(KeyNotFoundError)
    def key_not_found(exc):
        key = exc.args[0] if exc.args else ""
        logger.warning("Key not found: %r", key)
        return jsonify({"error": "key not found", "key": key}), 404

    @app.errorhandler(KeyTooLongError)
    def key_too_long(exc):
        logger.warning("Rejected key: %s", exc)
        return jsonify({"error": str(exc)}), 400


def _check_length(key: str) -> None:
    limit = current_app.config["TRIE_MAX_KEY_LENGTH"]
    if len(key) > limit:
        raise KeyTooLongError(f"Key too long (max {limit} chars)")


# ── Routes ────────────────────────────────────────────────────────────────

def _register_routes(app: Flask) -> None:
    @app.route("/")
    def index():
        """Landing page with API documentation."""
        return jsonify({
            "service": "Trie Lookup Service",
            "version": "1.0.0",
            "description": "REST API over an insertion-ordered prefix tree",
            "endpoints": {
                "GET  /":                  "This help page",
                "GET  /health":            "Health check",
                "GET  /stats":             "Trie statistics",
                "GET  /lookup?q=<key>":    "Exact match lookup",
                "GET  /prefix?q=<pfx>":    "All keys starting with prefix",
                "POST /insert":            "Insert a key  {\"key\": \"...\"}",
                "DELETE /delete?q=<key>":  "Delete a key",
                "GET  /dump?sep=<sep>":    "Every key, each followed by sep",
            },
        })

    @app.route("/health")
    def health():
        """Liveness / readiness probe."""
        with _lock():
            size = len(_trie())
        return jsonify({
            "status": "healthy",
            "uptime_seconds": _uptime(),
            "trie_size": size,
        })

    @app.route("/stats")
    def stats():
        """Trie statistics."""
        with _lock():
            trie = _trie()
            total_keys, total_nodes = len(trie), trie.node_count()
        return jsonify({
            "total_keys": total_keys,
            "total_nodes": total_nodes,
            "uptime_seconds": _uptime(),
            "seed_keys": len(current_app.config["TRIE_SEED_KEYS"]),
        })

    # ── Core API ──────────────────────────────────────────────────────────

    @app.route("/lookup")
    def lookup():
        """Exact key lookup, reporting how far the key matched."""
        q = request.args.get("q", "")
        with _lock():
            node, found = _trie().lookup(q)
            matched = node.path()
        return jsonify({"key": q, "found": found, "matched": matched})

    @app.route("/prefix")
    def prefix():
        """Return keys sharing a given prefix, in insertion order."""
        q = request.args.get("q", "")
        limit = request.args.get("limit", str(DEFAULT_PREFIX_LIMIT), type=str)
        try:
            limit = int(limit)
        except ValueError:
            limit = DEFAULT_PREFIX_LIMIT

        matches = []
        with _lock():
            for key in _trie().keys_with_prefix(q):
                if len(matches) >= limit:
                    break
                matches.append(key)

        return jsonify({
            "prefix": q,
            "count": len(matches),
            "matches": matches,
        })

    @app.route("/insert", methods=["POST"])
    def insert():
        """Insert a key into the trie."""
        body = request.get_json(silent=True)
        if not isinstance(body, dict) or not isinstance(body.get("key"), str):
            return jsonify({"error": "Missing 'key' in request body"}), 400
        key = body["key"]
        _check_length(key)

        with _lock():
            trie = _trie()
            trie.insert(key)
            size = len(trie)
        logger.info("Inserted key=%s", key)
        return jsonify({"inserted": key, "trie_size": size}), 201

    @app.route("/delete", methods=["DELETE"])
    def delete():
        """Delete a key from the trie."""
        q = request.args.get("q", "")
        with _lock():
            trie = _trie()
            trie.delete(q)
            size = len(trie)
        logger.info("Deleted key=%s", q)
        return jsonify({"deleted": q, "trie_size": size})

    @app.route("/dump")
    def dump():
        """Plain-text dump of every key, each followed by the separator."""
        sep = request.args.get("sep", "\n")
        buf = io.StringIO()
        with _lock():
            _trie().dump_keys(buf, sep)
        return buf.getvalue(), 200, {"Content-Type": "text/plain; charset=utf-8"}


app = create_app(SEED_KEYS)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    port = int(os.environ.get("PORT", 8080))
    debug = os.environ.get("FLASK_DEBUG", "0") == "1"
    logger.info("Starting Trie Lookup Service on port %d", port)
    app.run(host="0.0.0.0", port=port, debug=debug)
