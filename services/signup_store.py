"""Signup records and the append-only stores that hold them"""
import threading
from dataclasses import dataclass, asdict, fields
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from config.database import get_supabase
from utils.logger import log_debug

# Page size used when reading the whole table back from Supabase
READ_PAGE_SIZE = 1000


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string with millisecond precision, e.g. 2026-01-05T09:30:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class SignupRecord:
    """One waitlist entrant. Field order is the storage column order."""
    timestamp: str = ''
    first_name: str = ''
    last_name: str = ''
    email: str = ''
    portfolio_size: str = ''
    company_size: str = ''
    country: str = ''
    referral_code: str = ''
    referred_by: str = ''

    def to_row(self) -> List[str]:
        return [getattr(self, f.name) for f in fields(self)]

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: Any) -> 'SignupRecord':
        """Build a record from a positional row or a column -> value mapping.

        Missing cells and NULLs become empty strings.
        """
        names = [f.name for f in fields(cls)]
        if isinstance(row, dict):
            values = {name: row.get(name) for name in names}
        else:
            values = dict(zip(names, list(row)))
        return cls(**{
            name: '' if values.get(name) is None else str(values[name])
            for name in names
        })


COLUMNS = [f.name for f in fields(SignupRecord)]


class DuplicateRecordError(Exception):
    """Raised by a store that enforces unique emails itself"""


class SignupStore:
    """Append-only tabular store: the only operations the waitlist needs."""

    def append(self, record: SignupRecord) -> None:
        raise NotImplementedError

    def read_all(self) -> List[SignupRecord]:
        raise NotImplementedError


class InMemorySignupStore(SignupStore):
    """Process-local store, used in tests and local development"""

    def __init__(self, records: Optional[List[SignupRecord]] = None):
        self._records: List[SignupRecord] = list(records or [])
        self._lock = threading.Lock()

    def append(self, record: SignupRecord) -> None:
        with self._lock:
            self._records.append(record)

    def read_all(self) -> List[SignupRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        return len(self._records)


class SupabaseSignupStore(SignupStore):
    """Waitlist rows kept in a Supabase table with one column per record field"""

    def __init__(self, table_name: str = 'waitlist', client=None, page_size: int = READ_PAGE_SIZE):
        self.table_name = table_name
        self._client = client
        self.page_size = page_size

    @property
    def client(self):
        if self._client is None:
            self._client = get_supabase()
        return self._client

    def append(self, record: SignupRecord) -> None:
        try:
            self.client.table(self.table_name).insert(record.to_dict()).execute()
        except Exception as e:
            # Handle unique constraint violation on the email column
            error_msg = str(e).lower()
            if 'duplicate' in error_msg or 'unique' in error_msg:
                raise DuplicateRecordError(record.email) from e
            raise

    def read_all(self) -> List[SignupRecord]:
        records: List[SignupRecord] = []
        start = 0
        while True:
            result = (
                self.client.table(self.table_name)
                .select(','.join(COLUMNS))
                # email is unique, so rows sharing a timestamp keep one order across pages
                .order('timestamp')
                .order('email')
                .range(start, start + self.page_size - 1)
                .execute()
            )
            page = result.data or []
            records.extend(SignupRecord.from_row(row) for row in page)
            if len(page) < self.page_size:
                break
            start += self.page_size

        log_debug(f"Read {len(records)} rows from {self.table_name}")
        return records
