"""
Parser for long-format ``ls -l`` output lines.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Callable, Optional

from typing_extensions import override

from privfs.entities.file_metadata import FileMetadata
from privfs.ports.files.listing_parser_port import ListingParserPort

_MONTHS = {
    name: number
    for number, name in enumerate(
        ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
         "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
        start=1,
    )
}

# GNU coreutils, busybox and toybox all print
#   <mode> <links> <owner> <group> <size | major, minor> <date> <name>
# toybox uses ISO dates, the others "Mon DD HH:MM" or "Mon DD YYYY".
_LINE_RE = re.compile(
    r"^(?P<mode>[-bcdlpsD][-rwxsStTl]{9})[.+@]?\s+"
    r"(?:\d+\s+)?"
    r"(?P<owner>\S+)\s+(?P<group>\S+)\s+"
    r"(?:(?P<major>\d+),\s*(?P<minor>\d+)|(?P<size>\d+))\s+"
    r"(?:(?P<iso>\d{4}-\d{2}-\d{2}\s+\d{1,2}:\d{2})"
    r"|(?P<month>[A-Z][a-z]{2})\s+(?P<day>\d{1,2})\s+"
    r"(?:(?P<time>\d{1,2}:\d{2})|(?P<year>\d{4})))"
    r"\s(?P<name>.+)$"
)


class LsOutputParser(ListingParserPort):
    """Turns ``ls -l`` entry lines into FileMetadata; any other line yields None."""

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the parser.

        Args:
            clock: Source of the current time, used to pick the year of
                recent entries that ls prints without one
            logger: Logger instance to use for logging
        """
        self._clock = clock or datetime.now
        self._logger = logger or logging.getLogger(__name__)

    @override
    def parse_line(self, line: str) -> Optional[FileMetadata]:
        match = _LINE_RE.match(line.rstrip("\r\n"))
        if match is None:
            return None

        mode = match.group("mode")
        name = match.group("name")
        if mode[0] == "l" and " -> " in name:
            name = name.split(" -> ", 1)[0]
        if name in (".", ".."):
            return None

        modified_at = self._parse_date(match)
        if modified_at is None:
            self._logger.debug(f"Unparseable date in listing line: '{line}'")
            return None

        is_directory = mode[0] == "d"
        size = int(match.group("size")) if match.group("size") is not None else 0
        return FileMetadata(
            name=name,
            is_directory=is_directory,
            is_file=not is_directory,
            exists=True,
            size=size,
            modified_at=modified_at,
        )

    def _parse_date(self, match: "re.Match[str]") -> Optional[datetime]:
        iso = match.group("iso")
        if iso is not None:
            try:
                return datetime.strptime(" ".join(iso.split()), "%Y-%m-%d %H:%M")
            except ValueError:
                return None

        month = _MONTHS.get(match.group("month"))
        if month is None:
            return None
        day = int(match.group("day"))

        if match.group("year") is not None:
            try:
                return datetime(int(match.group("year")), month, day)
            except ValueError:
                return None

        hour, minute = (int(part) for part in match.group("time").split(":"))
        now = self._clock()
        # no year means the last six months; walk back until the date is valid
        # and not in the future (Feb 29 needs a leap year)
        for year in range(now.year, now.year - 8, -1):
            try:
                candidate = datetime(year, month, day, hour, minute)
            except ValueError:
                continue
            if candidate <= now + timedelta(days=1):
                return candidate
        return None
