"""requests transport adapter for ftp:// URLs (tgftp also serves its files over FTP)."""

import ftplib
import io
import logging
from urllib.parse import unquote, urlparse

from requests.adapters import BaseAdapter
from requests.exceptions import RequestException
from requests.models import Response
from requests.structures import CaseInsensitiveDict

LOGGER = logging.getLogger("metar")
FTP_DEFAULT_PORT = 21
FTP_FILE_UNAVAILABLE = "550"


class RemoteFileNotFound(RequestException):
    """The remote server reports that no file exists at the requested path."""


class FtpTransferError(RequestException):
    """FTP session or transfer failed for a reason other than a missing file."""


def _total_timeout(timeout):
    if isinstance(timeout, tuple):
        values = [value for value in timeout if value is not None]
        return max(values) if values else None
    return timeout


class FtpAdapter(BaseAdapter):
    """Retrieve ftp:// resources with an anonymous binary RETR."""

    def __init__(self, ftp_factory=None):
        super().__init__()
        self.ftp_factory = ftp_factory or ftplib.FTP

    def _open(self, timeout):
        if timeout is None:
            return self.ftp_factory()
        return self.ftp_factory(timeout=timeout)

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        parsed = urlparse(request.url)
        path = unquote(parsed.path)
        buffer = io.BytesIO()
        LOGGER.debug("FTP RETR %s from %s", path, parsed.hostname)
        try:
            with self._open(_total_timeout(timeout)) as ftp:
                ftp.connect(parsed.hostname, parsed.port or FTP_DEFAULT_PORT)
                ftp.login(unquote(parsed.username or "anonymous"), unquote(parsed.password or ""))
                ftp.retrbinary(f"RETR {path}", buffer.write)
        except ftplib.error_perm as exc:
            if str(exc).startswith(FTP_FILE_UNAVAILABLE):
                raise RemoteFileNotFound(f"Remote file not found: {request.url}", request=request) from exc
            raise FtpTransferError(f"FTP error for {request.url}: {exc}", request=request) from exc
        except (ftplib.Error, OSError, EOFError) as exc:
            raise FtpTransferError(f"FTP transfer failed for {request.url}: {exc}", request=request) from exc

        response = Response()
        response.status_code = 200
        response.reason = "OK"
        response.url = request.url
        response.request = request
        response.connection = self
        response.headers = CaseInsensitiveDict({"Content-Length": str(buffer.tell())})
        buffer.seek(0)
        response.raw = buffer
        return response

    def close(self):
        pass
