"""
Static file server for a sorted output directory.
"""

from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

DEFAULT_BIND = "127.0.0.1"
DEFAULT_PORT = 8000


class QuietHandler(SimpleHTTPRequestHandler):
    """Request handler that sends access logs to a log sink instead of stderr."""

    log = None

    def log_message(self, format, *args):
        if self.log is not None:
            self.log.info(f"{self.address_string()} - {format % args}")


def make_server(directory: Path, host: str = DEFAULT_BIND, port: int = DEFAULT_PORT, log=None) -> ThreadingHTTPServer:
    """Build (but do not start) a threaded HTTP server rooted at directory."""
    directory = Path(directory).resolve()
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    handler = type("Handler", (QuietHandler,), {"log": log})
    return ThreadingHTTPServer((host, port), partial(handler, directory=str(directory)))


def serve_directory(directory: Path, host: str = DEFAULT_BIND, port: int = DEFAULT_PORT, log=None) -> None:
    """Serve directory until interrupted."""
    httpd = make_server(directory, host, port, log)
    bound_host, bound_port = httpd.server_address[:2]
    if log is not None:
        log.info(f"Serving {directory} at http://{bound_host}:{bound_port}/ (Ctrl+C to stop)")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        if log is not None:
            log.info("Server stopped")
    finally:
        httpd.server_close()
