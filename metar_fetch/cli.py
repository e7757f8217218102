"""
metar - print NOAA METAR and TAF reports for airport station identifiers.

Usage:
    metar KBOS SEA
    metar -d EGLL         # decoded METAR
    metar -t kjfk lax     # also print TAFs where available

Configuration:
    METAR_REQUEST_TIMEOUT_SECONDS, METAR_DEFAULT_STATION_PREFIX,
    METAR_LOG_LEVEL and METAR_USER_AGENT environment variables.
"""

import argparse
import logging
import sys

from metar_fetch.controller import FetchOrchestrator
from metar_fetch.models import ExitStatus
from metar_fetch.settings import DEFAULT_LOG_LEVEL, VERSION, load_settings

LOGGER = logging.getLogger("metar")


class MetarArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(ExitStatus.USAGE, f"{self.prog}: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = MetarArgumentParser(
        prog="metar",
        description="Print METAR (and optionally TAF) reports from tgftp.nws.noaa.gov.",
    )
    parser.add_argument("-d", "--decoded", action="store_true", help="Show decoded METAR output")
    parser.add_argument("-t", "--tafs", action="store_true", help="Show TAFs where available")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("stations", nargs="+", metavar="station_id",
                        help="3 or 4 character station identifier")
    return parser


def _configure_logging(level_name: str) -> None:
    """Send diagnostics to stderr, one line each, tagged with the program name."""
    level = getattr(logging, str(level_name).upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None, client_factory=None, sink=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as exc:
        _configure_logging(DEFAULT_LOG_LEVEL)
        LOGGER.error("%s", exc)
        return ExitStatus.CONFIG

    _configure_logging(settings.log_level)
    orchestrator = FetchOrchestrator(settings, client_factory=client_factory, sink=sink)
    return orchestrator.run(args.stations, decoded=args.decoded, include_tafs=args.tafs)


if __name__ == "__main__":
    sys.exit(main())
