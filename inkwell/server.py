"""Development server for Inkwell.

Serves the built site for local writing:
- Builds with the live reload client included in every page.
- Rejects directory listings and missing paths with a 404.
- Watches source folders, rebuilds and tells connected browsers to reload.

Each rebuild is written to a staging directory that replaces the output
directory only once the build has succeeded, so pages are never served from
a half-written site. The swap takes two renames; a request that lands
between them gets a 404. A failing rebuild keeps the previous output.

Key classes:
- DevServer: Main class for running the development server.
- _SiteHandler: HTTP request handler serving index.html for directories.
- _ChangeHandler: File system event handler for triggering rebuilds.
"""

from __future__ import annotations

import asyncio
import functools
import io
import json
import os
import shutil
import threading
import time
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import websockets
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .build import build_site
from .config import SiteConfig, load_config
from .errors import BuildError


class _SiteHandler(SimpleHTTPRequestHandler):
    """HTTP request handler for the built site."""

    def end_headers(self):
        self.send_header("Cache-Control", "no-cache, no-store, must-revalidate")
        super().end_headers()

    def list_directory(self, path):  # pragma: no cover - exercised via send_head
        # Never expose directory listings; treat as missing content.
        self.send_error(404, "File not found")
        return None

    def send_head(self):
        path_obj = Path(self.translate_path(self.path))
        if path_obj.is_dir():
            index_path = path_obj / "index.html"
            if not index_path.exists():
                self.send_error(404, "File not found")
                return None
            encoded = index_path.read_bytes()
            self.send_response(200)
            self.send_header("Content-type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(encoded)))
            self.end_headers()
            return io.BytesIO(encoded)
        if not path_obj.exists():
            self.send_error(404, "File not found")
            return None
        return super().send_head()

    def log_message(self, format, *args):  # pragma: no cover - console noise
        pass


class DevServer:
    """Development server with live reload functionality.

    Attributes:
        project_root: Root directory of the project.
        config: Site configuration with development mode switched on.
        output_dir: Directory where the built site is served from.
        http_port: Port for the HTTP server.
        ws_port: Port for WebSocket connections.
    """

    def __init__(
        self,
        project_root: Path,
        http_port: int | None = None,
        ws_port: int | None = None,
        config: SiteConfig | None = None,
    ):
        """Initialize the development server.

        Args:
            project_root: Root directory of the project.
            http_port: Optional override for the HTTP port.
            ws_port: Optional override for the live reload port.
            config: Optional configuration; loaded from the project otherwise.
        """
        self.project_root = project_root
        base = config or load_config(project_root)
        self.http_port = int(http_port or base.port)
        self.ws_port = int(ws_port or base.ws_port)
        self.config = base.with_overrides(
            dev=True, port=self.http_port, ws_port=self.ws_port
        )
        self.output_dir = project_root / self.config.output_dir
        self._staging_dir = self.output_dir.with_name(self.output_dir.name + ".staging")
        self._previous_dir = self.output_dir.with_name(self.output_dir.name + ".previous")
        self._observer: Observer | None = None
        self._ws_clients: set = set()
        self._loop = asyncio.new_event_loop()
        self._rebuilding = False
        self._last_rebuild_at = 0.0
        self._last_signature: tuple | None = None
        self._debounce_seconds = 0.05
        self._post_build_delay = 0.05

    def watched_paths(self) -> list[Path]:
        """Source locations whose changes trigger a rebuild."""
        config = self.config
        return [
            self.project_root / config.posts_dir,
            self.project_root / config.assets_dir,
            self.project_root / config.public_dir,
            (self.project_root / config.stylesheet).parent,
            self.project_root / config.templates_dir,
        ]

    def is_output_path(self, path: Path) -> bool:
        """Whether a path lies inside the output, staging or swap directories."""
        for root in (self.output_dir, self._staging_dir, self._previous_dir):
            try:
                path.relative_to(root)
                return True
            except ValueError:
                pass
        return False

    def start(self) -> None:  # pragma: no cover - integration path
        self.build()
        self._last_signature = self._compute_signature()
        threading.Thread(target=self._start_http, daemon=True).start()
        threading.Thread(target=self._start_ws, daemon=True).start()
        self._start_watcher()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
        self._loop.call_soon_threadsafe(self._loop.stop)

    def build(self) -> None:
        """Build into the staging directory and swap it into place."""
        staging = self._prepare_staging_dir()
        build_site(
            self.project_root,
            config=self.config,
            clean_output=True,
            output_dir_override=staging,
        )
        self._activate_staging(staging)

    def _start_http(self) -> None:  # pragma: no cover - integration path
        handler = functools.partial(_SiteHandler, directory=str(self.output_dir))
        httpd = ThreadingHTTPServer(("0.0.0.0", self.http_port), handler)
        print(f"Serving {self.output_dir} at http://localhost:{self.http_port}")
        httpd.serve_forever()

    def _start_ws(self) -> None:  # pragma: no cover - integration path
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_until_complete(self._run_ws_server())
        except OSError as exc:
            print(f"WebSocket server failed to start (port {self.ws_port}): {exc}")
            return

    async def _run_ws_server(self) -> None:  # pragma: no cover - integration path
        async with websockets.serve(self._ws_handler, "0.0.0.0", self.ws_port):
            await asyncio.Future()  # Run forever

    async def _ws_handler(self, websocket):
        self._ws_clients.add(websocket)
        try:
            await websocket.wait_closed()
        finally:
            self._ws_clients.discard(websocket)

    def _broadcast_reload(self):
        message = json.dumps({"type": "reload"})
        asyncio.run_coroutine_threadsafe(self._async_broadcast(message), self._loop)

    async def _async_broadcast(self, message: str):
        stale = set()
        for ws in self._ws_clients:
            try:
                await ws.send(message)
            except Exception:
                stale.add(ws)
        for ws in stale:
            self._ws_clients.discard(ws)

    def _start_watcher(self) -> None:  # pragma: no cover - integration path
        handler = _ChangeHandler(self)
        observer = Observer()
        scheduled: set[Path] = set()
        for watch_path in self.watched_paths():
            if watch_path.exists() and watch_path not in scheduled:
                observer.schedule(handler, str(watch_path), recursive=True)
                scheduled.add(watch_path)
        observer.start()
        self._observer = observer

    def rebuild(self) -> None:
        now = time.time()
        if self._rebuilding or (now - self._last_rebuild_at) < self._debounce_seconds:
            return
        signature = self._compute_signature()
        if signature is not None and signature == self._last_signature:
            return
        self._rebuilding = True
        try:
            print("Change detected; rebuilding...")
            try:
                self.build()
            except (BuildError, OSError, UnicodeDecodeError) as exc:
                print(f"Build failed: {exc}")
                return
            self._last_signature = signature
            if self._post_build_delay:
                time.sleep(self._post_build_delay)
            self._broadcast_reload()
        finally:
            self._rebuilding = False
            self._last_rebuild_at = time.time()

    def _compute_signature(self) -> tuple | None:
        entries: list[tuple] = []
        for root in self.watched_paths():
            if not root.exists():
                continue
            for path in sorted(root.rglob("*")):
                if path.is_dir() or self.is_output_path(path):
                    continue
                try:
                    stat = path.stat()
                except OSError:
                    continue
                rel = path.relative_to(self.project_root)
                entries.append((str(rel), stat.st_mtime_ns, stat.st_size))
        return tuple(sorted(set(entries))) if entries else None

    def _prepare_staging_dir(self) -> Path:
        staging = self._staging_dir
        if staging.exists():
            shutil.rmtree(staging)
        staging.mkdir(parents=True, exist_ok=True)
        return staging

    def _activate_staging(self, staging: Path) -> None:
        target = self.output_dir
        previous = self._previous_dir
        if previous.exists():
            shutil.rmtree(previous)
        if target.exists():
            os.replace(target, previous)
        os.replace(staging, target)
        if previous.exists():
            shutil.rmtree(previous)


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, server: DevServer):
        super().__init__()
        self.server = server

    def on_any_event(self, event):
        if event.is_directory:
            return
        if self.server.is_output_path(Path(event.src_path)):
            return
        self.server.rebuild()
