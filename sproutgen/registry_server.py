"""HTTP registry service that allocates globally unique service IDs."""

from __future__ import annotations

import signal
import sqlite3
import threading
from socketserver import ThreadingMixIn
from typing import List, Optional
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

import click
from flask import Flask, jsonify, request

from .registry_store import Service, ServiceNotFoundError, SQLiteStore


def _response(svc: Service) -> dict:
    return {"service_id": svc.service_id, "name": svc.name}


def create_app(store: SQLiteStore, token: str = "") -> Flask:
    """Build the registry web application; a non-empty ``token`` requires Bearer auth."""
    app = Flask(__name__)
    app.json.sort_keys = False

    if token:
        expected = "Bearer " + token

        @app.before_request
        def _authorize():
            if request.headers.get("Authorization") != expected:
                return jsonify(error="unauthorized"), 401
            return None

    @app.post("/v1/services:allocate")
    def allocate():
        payload = request.get_json(force=True, silent=True)
        name = payload.get("name") if isinstance(payload, dict) else None
        if not isinstance(name, str) or not name:
            return jsonify(error="invalid request"), 400
        try:
            svc = store.allocate(name)
        except sqlite3.Error as exc:
            return jsonify(error=str(exc)), 500
        return jsonify(_response(svc))

    @app.get("/v1/services/<name>")
    def get(name: str):
        try:
            svc = store.get(name)
        except (ServiceNotFoundError, sqlite3.Error):
            return jsonify(error="service not found"), 404
        return jsonify(_response(svc))

    @app.get("/v1/services")
    def list_services():
        try:
            services = store.list()
        except sqlite3.Error as exc:
            return jsonify(error=str(exc)), 500
        return jsonify(services=[_response(s) for s in services])

    @app.get("/")
    def index():
        return jsonify(
            name="sprout",
            description="基于 Gin 构建的 Go 微服务框架，提供路由、认证、校验等开箱即用的功能",
            version="1.0.0",
        )

    return app


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: object) -> None:
        pass


def _serve(app: Flask, port: int) -> None:
    addr = f":{port}"
    try:
        server = make_server(
            "", port, app, server_class=_ThreadingWSGIServer, handler_class=_QuietHandler
        )
    except OSError as exc:
        raise click.ClickException(f"Failed to start server: {exc}") from exc

    stop = threading.Event()

    def _on_signal(signum, frame):
        stop.set()

    previous = {
        sig: signal.signal(sig, _on_signal) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    worker = threading.Thread(target=server.serve_forever, daemon=True)
    worker.start()
    click.echo(f"Registry server listening on {addr}")
    try:
        while not stop.wait(0.5):
            pass
    finally:
        click.echo("Shutting down server...")
        server.shutdown()
        server.server_close()
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    click.echo("Server exited")


@click.command(
    name="registry",
    short_help="ServiceID 注册服务",
    help="集中式 ServiceID 分配服务，确保微服务 ID 全局唯一",
)
@click.option("--port", type=int, default=18080, show_default=True, help="HTTP port")
@click.option(
    "--data", "data_file", default="registry.db", show_default=True,
    help="SQLite database file",
)
@click.option("--token", default="", help="Authentication token")
def _registry(port: int, data_file: str, token: str) -> None:
    try:
        store = SQLiteStore(data_file)
    except sqlite3.Error as exc:
        raise click.ClickException(f"failed to init store: {exc}") from exc
    try:
        _serve(create_app(store, token), port)
    finally:
        store.close()


def main(argv: Optional[List[str]] = None) -> None:
    """Run the registry server from the command line."""
    _registry.main(args=argv, prog_name="sprout-registry")