"""Station identifier normalization and NOAA tgftp URL composition."""

from metar_fetch.models import ReportType, ValidationReason

URL_PREFIXES = {
    ReportType.METAR: "http://tgftp.nws.noaa.gov/data/observations/metar/stations/",
    ReportType.DECODED: "http://tgftp.nws.noaa.gov/data/observations/metar/decoded/",
    ReportType.TAF: "http://tgftp.nws.noaa.gov/data/forecasts/taf/stations/",
}
URL_EXTENSION = ".TXT"

STATION_ID_LEN = 4
DEFAULT_STATION_PREFIX = "K"

LONGEST_URL_PREFIX = max(URL_PREFIXES.values(), key=len)
MAX_URL_LEN = len(LONGEST_URL_PREFIX) + STATION_ID_LEN + len(URL_EXTENSION)

_REASON_MESSAGES = {
    ValidationReason.INVALID_LENGTH: "Station ID must be either three or four characters long.",
    ValidationReason.INVALID_CHARACTER: "Station ID must contain only alphanumeric characters.",
}


class StationIdError(ValueError):
    """Raised when a station identifier cannot be turned into a request URL."""

    def __init__(self, station: str, reason: ValidationReason):
        self.station = station
        self.reason = reason
        super().__init__(_REASON_MESSAGES[reason])


def _is_ascii_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def normalize_station(station: str, default_prefix: str = DEFAULT_STATION_PREFIX) -> str:
    """Return the 4-character upper-case identifier for `station`.

    Only the input length decides whether `default_prefix` is prepended, so
    a 4-character input is passed through with case normalization alone.
    """
    station = str(station)
    short_len = STATION_ID_LEN - len(default_prefix)
    if len(station) not in (STATION_ID_LEN, short_len):
        raise StationIdError(station, ValidationReason.INVALID_LENGTH)

    normalized = []
    for ch in station:
        if not _is_ascii_alnum(ch):
            raise StationIdError(station, ValidationReason.INVALID_CHARACTER)
        normalized.append(ch.upper())

    if len(station) == short_len:
        normalized.insert(0, default_prefix.upper())
    return "".join(normalized)


def compose_url(
    report_type: ReportType,
    station: str,
    default_prefix: str = DEFAULT_STATION_PREFIX,
) -> str:
    """Build the tgftp URL for one report type and station, or raise StationIdError."""
    prefix = URL_PREFIXES[ReportType(report_type)]
    url = prefix + normalize_station(station, default_prefix) + URL_EXTENSION
    assert len(url) <= MAX_URL_LEN, f"composed URL exceeds {MAX_URL_LEN} characters: {url}"
    return url
