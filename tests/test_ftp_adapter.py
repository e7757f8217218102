import ftplib

import pytest
import requests

from metar_fetch.services.ftp_adapter import FtpAdapter, FtpTransferError, RemoteFileNotFound
from metar_fetch.services.report_client import ReportClient

FTP_URL = "ftp://tgftp.nws.noaa.gov/data/forecasts/taf/stations/KBOS.TXT"


class FakeFtp:
    def __init__(self, data=b"", error=None, timeout=None):
        self.data = data
        self.error = error
        self.timeout = timeout
        self.commands = []
        self.exited = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.exited = True
        return False

    def connect(self, host, port):
        self.commands.append(("connect", host, port))

    def login(self, user, passwd):
        self.commands.append(("login", user, passwd))

    def retrbinary(self, cmd, callback):
        self.commands.append(("retrbinary", cmd))
        if self.error is not None:
            raise self.error
        callback(self.data)


def _adapter(**ftp_kwargs):
    created = []

    def factory(**kwargs):
        ftp = FakeFtp(timeout=kwargs.get("timeout"), **ftp_kwargs)
        created.append(ftp)
        return ftp

    return FtpAdapter(ftp_factory=factory), created


def _request(url=FTP_URL):
    return requests.Request("GET", url).prepare()


def test_send_retrieves_file_with_anonymous_login():
    adapter, created = _adapter(data=b"TAF KBOS 181120Z\n")

    response = adapter.send(_request(), stream=True, timeout=3.0)

    assert response.status_code == 200
    assert b"".join(response.iter_content(chunk_size=4)) == b"TAF KBOS 181120Z\n"
    ftp = created[0]
    assert ftp.timeout == 3.0
    assert ftp.commands == [
        ("connect", "tgftp.nws.noaa.gov", 21),
        ("login", "anonymous", ""),
        ("retrbinary", "RETR /data/forecasts/taf/stations/KBOS.TXT"),
    ]
    assert ftp.exited is True


def test_connect_read_timeout_tuple_uses_longest_value():
    adapter, created = _adapter(data=b"x")
    adapter.send(_request(), timeout=(1.0, 4.0))
    assert created[0].timeout == 4.0


def test_missing_file_raises_remote_file_not_found():
    adapter, _ = _adapter(error=ftplib.error_perm("550 No such file or directory."))

    with pytest.raises(RemoteFileNotFound):
        adapter.send(_request())


def test_other_permanent_reply_raises_transfer_error():
    adapter, _ = _adapter(error=ftplib.error_perm("530 Login incorrect."))

    with pytest.raises(FtpTransferError, match="530 Login incorrect"):
        adapter.send(_request())


def test_socket_failure_raises_transfer_error():
    adapter, _ = _adapter(error=TimeoutError("timed out"))

    with pytest.raises(FtpTransferError, match="timed out"):
        adapter.send(_request())


def test_report_client_fetches_ftp_urls_through_mounted_adapter():
    adapter, _ = _adapter(data=b"TAF KBOS 181120Z 1812/1918 27012KT P6SM FEW250\n")
    received = []
    with ReportClient(sink=received.append, ftp_adapter=adapter) as client:
        written = client.fetch(FTP_URL)

    assert b"".join(received) == b"TAF KBOS 181120Z 1812/1918 27012KT P6SM FEW250\n"
    assert written == len(b"".join(received))


def test_report_client_surfaces_ftp_not_found_as_request_exception():
    adapter, _ = _adapter(error=ftplib.error_perm("550 Failed to open file."))
    with ReportClient(sink=lambda _chunk: None, ftp_adapter=adapter) as client:
        with pytest.raises(requests.RequestException) as exc:
            client.fetch(FTP_URL)
    assert isinstance(exc.value, RemoteFileNotFound)
