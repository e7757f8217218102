import logging

import requests

from metar_fetch.models import ExitStatus, FetchOutcome, ReportType, StationResult
from metar_fetch.services.ftp_adapter import RemoteFileNotFound
from metar_fetch.stations import StationIdError, compose_url

LOGGER = logging.getLogger("metar")
HTTP_NOT_FOUND = 404


def classify_error(exc: requests.RequestException) -> FetchOutcome:
    """Map a transport exception to NOT_FOUND (FTP or HTTP) or TRANSPORT_ERROR."""
    if isinstance(exc, RemoteFileNotFound):
        return FetchOutcome.NOT_FOUND
    response = getattr(exc, "response", None)
    if response is not None and response.status_code == HTTP_NOT_FOUND:
        return FetchOutcome.NOT_FOUND
    return FetchOutcome.TRANSPORT_ERROR


class FetchOrchestrator:
    def __init__(self, settings, client_factory=None, sink=None):
        self.settings = settings
        if client_factory is None:
            from metar_fetch.services.report_client import ReportClient
            client_factory = ReportClient.from_settings
        self.client_factory = client_factory
        self.sink = sink
        self.results = []

    def compose(self, report_type: ReportType, station: str) -> str:
        return compose_url(report_type, station, self.settings.default_station_prefix)

    def _fetch(self, client, url: str):
        try:
            client.fetch(url)
        except requests.RequestException as exc:
            return classify_error(exc), str(exc)
        return FetchOutcome.SUCCESS, None

    def fetch_taf(self, client, station: str) -> FetchOutcome | None:
        """Best-effort TAF fetch; never emits diagnostics above DEBUG."""
        try:
            url = self.compose(ReportType.TAF, station)
        except StationIdError:
            return None
        outcome, error = self._fetch(client, url)
        LOGGER.debug("TAF for station ID \"%s\": %s%s", station, outcome.value, f" ({error})" if error else "")
        return outcome

    def fetch_station(self, client, station: str, decoded: bool = False, include_tafs: bool = False) -> StationResult:
        report_type = ReportType.DECODED if decoded else ReportType.METAR
        try:
            url = self.compose(report_type, station)
        except StationIdError as exc:
            LOGGER.warning("Station ID \"%s\": %s", station, exc)
            return StationResult(station=station, url=None, outcome=FetchOutcome.SKIPPED, error=str(exc))

        outcome, error = self._fetch(client, url)
        if outcome == FetchOutcome.NOT_FOUND:
            LOGGER.warning("Station ID \"%s\" not found", station)
        elif outcome == FetchOutcome.TRANSPORT_ERROR:
            LOGGER.warning("%s", error)
            LOGGER.warning("Unable to fetch information for station ID \"%s\"", station)

        taf_outcome = self.fetch_taf(client, station) if include_tafs else None
        return StationResult(station=station, url=url, outcome=outcome, error=error, taf_outcome=taf_outcome)

    def run(self, stations, decoded: bool = False, include_tafs: bool = False) -> int:
        """Fetch every station in order and return the process exit status.

        Per-station failures are reported as diagnostics only; the status is
        non-zero solely when the transport client cannot be created.
        """
        self.results = []
        try:
            client = self.client_factory(self.settings, self.sink)
        except Exception as exc:
            LOGGER.error("%s", exc)
            return ExitStatus.SOFTWARE

        with client:
            for station in stations:
                self.results.append(
                    self.fetch_station(client, station, decoded=decoded, include_tafs=include_tafs)
                )

        found = sum(1 for result in self.results if result.outcome == FetchOutcome.SUCCESS)
        LOGGER.info("Fetched %d of %d station(s).", found, len(self.results))
        return ExitStatus.OK
