from dataclasses import dataclass
from enum import Enum, IntEnum


class ExitStatus(IntEnum):
    """sysexits(3) codes returned by the CLI."""

    OK = 0
    USAGE = 64
    SOFTWARE = 70
    CONFIG = 78


class ReportType(str, Enum):
    METAR = "metar"
    DECODED = "decoded"
    TAF = "taf"


class FetchOutcome(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    TRANSPORT_ERROR = "transport_error"
    SKIPPED = "skipped"


class ValidationReason(str, Enum):
    INVALID_LENGTH = "invalid_length"
    INVALID_CHARACTER = "invalid_character"


@dataclass(frozen=True)
class StationResult:
    station: str
    url: str | None
    outcome: FetchOutcome
    error: str | None = None
    taf_outcome: FetchOutcome | None = None

    @property
    def taf_attempted(self) -> bool:
        return self.taf_outcome is not None
