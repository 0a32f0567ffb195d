"""
User activity records and the delimited-text parser that produces them.

The parser is deliberately lenient: the header row is skipped without being
checked, short rows are padded with empty strings and no row is ever
rejected. Bad values surface later as empty strings or unparsable dates,
which the aggregator treats as maximally stale.
"""

from dataclasses import dataclass, fields
from typing import Iterator

DELIMITER = ","
UNKNOWN_DOMAIN = "unknown"


@dataclass(frozen=True)
class UserRecord:
    """One person's activity snapshot, in input column order."""

    user_id: str = ""
    user: str = ""
    email: str = ""
    first_seen: str = ""
    last_seen: str = ""
    name: str = ""
    primary_access: str = ""
    signed_up: str = ""
    user_access_level: str = ""
    userflow_user_id: str = ""
    company_first_seen: str = ""
    company_last_seen: str = ""
    company_name: str = ""
    company_signed_up: str = ""
    entity_type: str = ""
    paid_customer: str = ""
    firm_users: str = ""
    company_id: str = ""

    @property
    def domain(self) -> str:
        return extract_domain(self.email)


FIELD_NAMES = [f.name for f in fields(UserRecord)]


@dataclass(frozen=True)
class RowDiagnostic:
    """A data row whose field count did not match the schema."""

    line_number: int
    field_count: int

    @property
    def is_short(self) -> bool:
        return self.field_count < len(FIELD_NAMES)


def extract_domain(email: str) -> str:
    """Company key: everything after the first '@', else 'unknown'."""
    local, sep, domain = email.partition("@")
    return domain if sep else UNKNOWN_DOMAIN


def parse_line(line: str, delimiter: str = DELIMITER) -> UserRecord:
    """Map one delimited line positionally onto a UserRecord."""
    values = line.split(delimiter)
    padded = values[: len(FIELD_NAMES)] + [""] * (len(FIELD_NAMES) - len(values))
    return UserRecord(*padded)


class RecordParser:
    """
    Lazy, restartable parser over raw delimited text.

    Each iteration re-reads the text from the top, so the same parser can
    be consumed any number of times.

    Usage:
        parser = RecordParser(csv_text)
        records = list(parser)
        short_rows = list(parser.diagnostics())
    """

    def __init__(self, text: str, delimiter: str = DELIMITER):
        self.text = text
        self.delimiter = delimiter

    def _data_lines(self) -> Iterator[tuple[int, str]]:
        # First line is the header; line numbers are 1-based
        for number, line in enumerate(self.text.split("\n"), start=1):
            if number == 1:
                continue
            line = line.rstrip("\r")
            if line.strip() == "":
                continue
            yield number, line

    def __iter__(self) -> Iterator[UserRecord]:
        for _, line in self._data_lines():
            yield parse_line(line, self.delimiter)

    def diagnostics(self) -> Iterator[RowDiagnostic]:
        """Yield rows with more or fewer fields than the schema."""
        for number, line in self._data_lines():
            count = len(line.split(self.delimiter))
            if count != len(FIELD_NAMES):
                yield RowDiagnostic(line_number=number, field_count=count)


def parse_records(text: str, delimiter: str = DELIMITER) -> list[UserRecord]:
    """Parse raw text into a list of records."""
    return list(RecordParser(text, delimiter))
