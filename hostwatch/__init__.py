import socket
import logging
import time
from typing import Optional

import psutil
from dotenv import load_dotenv
from flask import Flask, jsonify, Response
from prometheus_client import (
    CollectorRegistry,
    Gauge,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
from werkzeug.exceptions import HTTPException

from .snapshot_store import SnapshotStore
from .sampler import SnapshotSampler

load_dotenv()


def create_app(
    config_object: object | str | None = None,
    store: Optional[SnapshotStore] = None,
    sampler: Optional[SnapshotSampler] = None,
) -> Flask:
    app = Flask(__name__)

    # Load default config then override with provided config object
    from .config import Config

    app.config.from_object(Config)
    if config_object:
        if isinstance(config_object, str):
            app.config.from_envvar(config_object, silent=True)
        else:
            app.config.from_mapping(config_object)

    # Configure logging
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # The store lives for the lifetime of the app and is shared by the
    # sampler thread (sole writer) and request handlers (readers).
    if store is None:
        store = SnapshotStore(max_snapshots=app.config["MAX_SNAPSHOTS"])
    if sampler is None:
        sampler = SnapshotSampler(store, interval=app.config["SAMPLE_INTERVAL"])
    app.extensions["hostwatch"] = {"store": store, "sampler": sampler}

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({"error": err.name}), err.code

    from .data_bp import data_bp

    app.register_blueprint(data_bp)

    @app.route("/health")
    def health_check():
        return jsonify(
            {"status": "healthy", "service": "hostwatch", "snapshots": len(store)}
        )

    @app.route("/metrics")
    def metrics():
        registry = CollectorRegistry()
        hostname = socket.gethostname()

        def gauge(name, doc, value):
            g = Gauge(name, doc, ["hostname"], registry=registry)
            g.labels(hostname=hostname).set(value)

        gauge("hostwatch_snapshots_stored", "Snapshots currently retained", len(store))
        gauge("hostwatch_snapshots_capacity", "Maximum retained snapshots", store.capacity)
        gauge(
            "hostwatch_latest_snapshot_timestamp_ms",
            "Timestamp of the newest retained snapshot in milliseconds",
            store.latest_timestamp() or 0,
        )
        gauge("hostwatch_sampler_cycles", "Sampling cycles run", sampler.cycles)
        gauge("hostwatch_sampler_failures", "Sampling cycles that failed", sampler.failures)
        gauge(
            "hostwatch_sampler_dropped",
            "Samples dropped because their timestamp did not advance",
            sampler.dropped,
        )

        try:
            p = psutil.Process()
            rss = getattr(p.memory_info(), "rss", 0)
            uptime = time.time() - p.create_time()
        except psutil.Error:
            rss = 0
            uptime = 0
        gauge("hostwatch_memory_rss_bytes", "Process RSS memory in bytes", rss)
        gauge("hostwatch_process_uptime_seconds", "Process uptime in seconds", uptime)

        return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)

    # Security headers
    @app.after_request
    def set_security_headers(response):
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault(
            "Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'"
        )
        return response

    # Start background sampler when enabled and not testing
    if app.config.get("SAMPLER_ENABLED") and not app.config.get("TESTING"):
        sampler.start()

    return app


__all__ = ["create_app", "SnapshotStore", "SnapshotSampler"]
