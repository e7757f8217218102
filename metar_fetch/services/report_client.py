import logging
import sys
from time import monotonic

import requests

from metar_fetch.services.ftp_adapter import FtpAdapter

LOGGER = logging.getLogger("metar")
CHUNK_SIZE = 1024


class ClientInitError(RuntimeError):
    """The shared transport client could not be created."""


def write_stdout(chunk: bytes) -> None:
    """Forward one received chunk verbatim to standard output."""
    sys.stdout.buffer.write(chunk)
    sys.stdout.buffer.flush()


class ReportClient:
    """
    One long-lived HTTP/FTP session shared by every request of a run.

    Timeout, redirect handling and error-status handling are fixed at
    construction; only the target URL changes between requests.
    """

    def __init__(
        self,
        timeout_seconds: float = 3.0,
        sink=None,
        user_agent: str | None = None,
        session=None,
        ftp_adapter=None,
        clock_fn=None,
    ):
        self.timeout_seconds = float(timeout_seconds)
        self.sink = sink or write_stdout
        self.clock_fn = clock_fn or monotonic
        try:
            self.session = session if session is not None else requests.Session()
            self.session.mount("ftp://", ftp_adapter or FtpAdapter())
            if user_agent:
                self.session.headers["User-Agent"] = user_agent
        except Exception as exc:
            raise ClientInitError(f"Failed to initialize transport client: {exc}") from exc

    @classmethod
    def from_settings(cls, settings, sink=None):
        return cls(
            timeout_seconds=settings.request_timeout_seconds,
            sink=sink,
            user_agent=settings.user_agent,
        )

    def fetch(self, url: str) -> int:
        """Stream `url` into the sink and return the number of bytes written.

        Raises requests.HTTPError for error statuses, requests.Timeout once the
        whole transfer runs past the time budget, and other
        requests.RequestException subclasses for transport failures.
        """
        deadline = self.clock_fn() + self.timeout_seconds
        written = 0
        LOGGER.debug("Fetching %s", url)
        with self.session.get(url, timeout=self.timeout_seconds, allow_redirects=True, stream=True) as response:
            response.raise_for_status()
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if self.clock_fn() > deadline:
                    raise requests.exceptions.Timeout(
                        f"Operation timed out after {self.timeout_seconds:g} seconds",
                        request=response.request,
                        response=response,
                    )
                if chunk:
                    self.sink(chunk)
                    written += len(chunk)
        LOGGER.debug("Fetched %s (%d bytes)", url, written)
        return written

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
