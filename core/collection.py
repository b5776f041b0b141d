"""
Controller for list screens backed by a remote collection.

Every management list (attendance, vocab, salary, users, ...) loads rows
from the API, lets the admin sort by a column, search, and delete a row
after confirming. RemoteCollectionController holds that state once so each
screen only declares its columns and data source.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Protocol

from core.api.exceptions import TransportError

logger = logging.getLogger(__name__)


class Status(Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    READY = 'ready'
    FAILED = 'failed'


class SortDirection(Enum):
    ASCENDING = 'ASC'
    DESCENDING = 'DESC'

    def flipped(self) -> 'SortDirection':
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


class SortState(NamedTuple):
    column: str
    direction: SortDirection


class CollectionSource(Protocol):
    """What the controller needs from a data source (see RemoteCollection)."""

    def fetch_all(self) -> List[Dict]: ...

    def fetch_sorted(self, column: str, direction: SortDirection) -> List[Dict]: ...

    def fetch_search(self, query: str) -> List[Dict]: ...

    def remove(self, record_id) -> None: ...


SCALAR_TYPES = (str, int, float, bool)


def record_matches(record: Dict, query: str) -> bool:
    """Case-insensitive substring match over the scalar fields of a record."""
    if not query:
        return True
    needle = query.lower()
    for value in record.values():
        if value is None or not isinstance(value, SCALAR_TYPES):
            continue
        if needle in str(value).lower():
            return True
    return False


def filter_records(records: List[Dict], query: str) -> List[Dict]:
    """Keep the records matching ``query``; order is preserved."""
    return [record for record in records if record_matches(record, query)]


class RemoteCollectionController:
    """
    Load/sort/search/delete state machine for one list screen.

    Public operations never raise TransportError: a failed request sets
    ``status`` to FAILED with a readable ``error_message`` and leaves the
    previous ``items`` visible.

    Each request gets a sequence number when it is issued. A response is
    applied only if no newer request was issued in the meantime, so the
    latest user action always wins regardless of response order.
    """

    def __init__(self, source: CollectionSource, id_field: str = 'id', name: str = ''):
        self.source = source
        self.id_field = id_field
        self.name = name or repr(source)

        self.items: List[Dict] = []
        self.status = Status.IDLE
        self.error_message: Optional[str] = None
        self.sort: Optional[SortState] = None
        self.search_query = ''
        self.pending_delete_id: Any = None

        self._issued = 0

    # -- request bookkeeping -------------------------------------------------

    def _begin(self) -> int:
        self._issued += 1
        self.status = Status.LOADING
        self.error_message = None
        return self._issued

    def _is_current(self, ticket: int) -> bool:
        if ticket != self._issued:
            logger.debug(f"{self.name}: dropping stale response #{ticket} (latest #{self._issued})")
            return False
        return True

    def _succeed(self, items: List[Dict]):
        self.items = list(items)
        self.status = Status.READY
        self.error_message = None

    def _fail(self, message: str):
        logger.warning(f"{self.name}: {message}")
        self.status = Status.FAILED
        self.error_message = message

    @staticmethod
    def _describe(error: TransportError, action: str) -> str:
        detail = str(error).strip()
        if detail:
            return f"Failed to {action}: {detail}"
        return f"Failed to {action}."

    # -- operations ----------------------------------------------------------

    def load(self):
        """Fetch the full collection and reset sort and search."""
        ticket = self._begin()
        try:
            items = self.source.fetch_all()
        except TransportError as e:
            if self._is_current(ticket):
                self._fail(self._describe(e, 'load records'))
            return
        if not self._is_current(ticket):
            return
        self._succeed(items)
        self.sort = None
        self.search_query = ''

    def sort_by(self, column: str):
        """
        Sort by ``column`` on the server.

        Clicking the active column flips the direction; a new column
        starts ascending. The sort state changes before the request, so a
        failed request can be retried by clicking the same column again.
        The active search term is kept but not sent along.
        """
        if self.sort is not None and self.sort.column == column:
            self.sort = SortState(column, self.sort.direction.flipped())
        else:
            self.sort = SortState(column, SortDirection.ASCENDING)

        ticket = self._begin()
        try:
            items = self.source.fetch_sorted(column, self.sort.direction)
        except TransportError as e:
            if self._is_current(ticket):
                self._fail(self._describe(e, f'sort by {column}'))
            return
        if self._is_current(ticket):
            self._succeed(items)

    def search(self, query: str):
        """
        Search on the server, then filter the response again locally.

        The local pass keeps results correct even when the server ignores
        the search term.
        """
        query = query or ''
        self.search_query = query
        ticket = self._begin()
        try:
            items = self.source.fetch_search(query)
        except TransportError as e:
            if self._is_current(ticket):
                self._fail(self._describe(e, 'search records'))
            return
        if self._is_current(ticket):
            self._succeed(filter_records(items, query))

    def find(self, record_id) -> Optional[Dict]:
        """Return the loaded record with this id, comparing ids as text."""
        if record_id is None:
            return None
        wanted = str(record_id)
        for record in self.items:
            if str(record.get(self.id_field)) == wanted:
                return record
        return None

    def request_delete(self, record_id):
        """Open the delete confirmation for a visible row; unknown ids are ignored."""
        record = self.find(record_id)
        if record is None:
            logger.debug(f"{self.name}: ignoring delete request for unknown id {record_id!r}")
            return
        self.pending_delete_id = record.get(self.id_field)

    def cancel_delete(self):
        self.pending_delete_id = None

    def confirm_delete(self):
        """
        Delete the row awaiting confirmation, then reload from the server.

        Does nothing when no delete is pending. The confirmation closes
        whether or not the delete succeeds.
        """
        record_id = self.pending_delete_id
        if record_id is None:
            return

        ticket = self._begin()
        try:
            self.source.remove(record_id)
        except TransportError as e:
            self.pending_delete_id = None
            if self._is_current(ticket):
                self._fail(self._describe(e, f'delete record {record_id}'))
            return

        self.pending_delete_id = None
        if self._is_current(ticket):
            self.load()

    # -- view state ------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self.status is Status.LOADING

    @property
    def has_failed(self) -> bool:
        return self.status is Status.FAILED

    def snapshot(self) -> Dict:
        """Serializable view state, kept in the session between requests."""
        return {
            'sort': [self.sort.column, self.sort.direction.value] if self.sort else None,
            'search_query': self.search_query,
            'pending_delete_id': self.pending_delete_id,
        }

    def restore(self, state: Optional[Dict]):
        """Re-apply a snapshot taken on a previous request. Items are not kept."""
        state = state or {}
        sort = state.get('sort')
        if sort:
            try:
                self.sort = SortState(sort[0], SortDirection(sort[1]))
            except (ValueError, IndexError, TypeError):
                self.sort = None
        self.search_query = state.get('search_query') or ''
        self.pending_delete_id = state.get('pending_delete_id')
