"""
List screens built on RemoteCollectionController.

A CollectionScreen declares what one management list shows (columns,
sortable keys, row actions, URL names) and where its rows come from. The
views in each app hand requests to ``collection_list``,
``collection_delete_confirm`` and ``collection_delete_cancel``.

Query parameters understood by a list URL:

    (none)          load the full collection
    ?sort=<column>  sort by column (same column again flips direction)
    ?q=<text>       search
    ?delete=<id>    open the delete confirmation for a visible row
"""

import logging
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence

from django.urls import reverse

from core.api import RemoteCollection, client_for_request
from core.collection import RemoteCollectionController, Status, SortDirection, SortState
from core.utils import htmx_render

logger = logging.getLogger(__name__)

LIST_TEMPLATE = 'core/collection/list.html'
LIST_PARTIAL_TEMPLATE = 'core/collection/partials/list_content.html'


class Column(NamedTuple):
    key: str
    label: str
    sortable: bool = True


class RowAction(NamedTuple):
    label: str
    url_name: str
    style: str = 'link'
    pk_kwarg: str = 'pk'


def cell_value(value):
    """Lists from the API (e.g. schedule days) are shown comma-joined."""
    if isinstance(value, (list, tuple)):
        return ', '.join(str(item) for item in value)
    return value


class CollectionScreen:
    """Declarative description of one list page."""

    def __init__(
        self,
        name: str,
        title: str,
        columns: Sequence[Column],
        source: Callable[..., RemoteCollection],
        url_prefix: str,
        searchable: bool = True,
        deletable: bool = True,
        create_label: str = '',
        actions: Sequence[RowAction] = (),
        id_field: str = 'id',
        empty_message: str = 'No entries found',
        date_columns: Sequence[str] = ('created_at',),
    ):
        """
        Args:
            name: unique key, used for the session state
            title: page heading
            columns: table columns in display order
            source: ``source(client, **scope)`` returning the data source
            url_prefix: ``app:prefix``; ``<prefix>_list``,
                ``<prefix>_delete_confirm`` and ``<prefix>_delete_cancel``
                must exist, ``<prefix>_create`` is linked when
                ``create_label`` is set
            actions: links rendered on each row, reversed with ``pk`` plus
                the screen scope (e.g. ``list_id``)
        """
        self.name = name
        self.title = title
        self.columns = list(columns)
        self.source = source
        self.url_prefix = url_prefix
        self.searchable = searchable
        self.deletable = deletable
        self.create_label = create_label
        self.actions = list(actions)
        self.id_field = id_field
        self.empty_message = empty_message
        self.date_columns = set(date_columns)

    def __repr__(self):
        return f'<CollectionScreen {self.name}>'

    @property
    def sortable_columns(self) -> List[str]:
        return [column.key for column in self.columns if column.sortable]

    def state_key(self, **scope) -> str:
        suffix = ':'.join(f'{k}={v}' for k, v in sorted(scope.items()))
        return f'collection:{self.name}' + (f':{suffix}' if suffix else '')

    def url(self, suffix: str, **kwargs) -> str:
        return reverse(f'{self.url_prefix}_{suffix}', kwargs=kwargs or None)

    def build_controller(self, request, **scope) -> RemoteCollectionController:
        source = self.source(client_for_request(request), **scope)
        return RemoteCollectionController(source, id_field=self.id_field, name=self.name)

    def rows(self, controller: RemoteCollectionController, **scope) -> List[Dict]:
        rows = []
        for record in controller.items:
            pk = record.get(self.id_field)
            rows.append({
                'pk': pk,
                'record': record,
                'cells': [
                    {
                        'key': column.key,
                        'value': cell_value(record.get(column.key)),
                        'is_date': column.key in self.date_columns,
                    }
                    for column in self.columns
                ],
                'actions': [
                    {
                        'label': action.label,
                        'url': reverse(action.url_name, kwargs={**scope, action.pk_kwarg: pk}),
                        'style': action.style,
                    }
                    for action in self.actions
                ],
            })
        return rows

    def get_context(self, controller: RemoteCollectionController, **scope) -> Dict:
        pending = controller.find(controller.pending_delete_id)
        return {
            'screen': self,
            'controller': controller,
            'columns': self.columns,
            'rows': self.rows(controller, **scope),
            'sort': controller.sort,
            'search_query': controller.search_query,
            'pending_delete': pending,
            'list_url': self.url('list', **scope),
            'create_url': self.url('create', **scope) if self.create_label else '',
            'delete_confirm_url': self.url('delete_confirm', **scope),
            'delete_cancel_url': self.url('delete_cancel', **scope),
            'scope': scope,
        }


def save_state(request, screen: CollectionScreen, controller: RemoteCollectionController, **scope):
    state = controller.snapshot()
    state['items'] = controller.items
    state['status'] = controller.status.value
    state['error_message'] = controller.error_message
    request.session[screen.state_key(**scope)] = state


def restore_state(request, screen: CollectionScreen, controller: RemoteCollectionController, **scope) -> bool:
    """
    Re-apply the state left by the previous request on this screen.

    Returns False when the screen has no saved state yet.
    """
    state = request.session.get(screen.state_key(**scope))
    if not state:
        return False
    controller.restore(state)
    controller.items = list(state.get('items') or [])
    try:
        controller.status = Status(state.get('status') or Status.IDLE.value)
    except ValueError:
        controller.status = Status.IDLE
    controller.error_message = state.get('error_message') if controller.status is Status.FAILED else None
    return True


def render_collection(request, screen: CollectionScreen, controller, notice: str = '', **scope):
    save_state(request, screen, controller, **scope)
    context = screen.get_context(controller, **scope)
    context['notice'] = notice
    return htmx_render(request, LIST_TEMPLATE, LIST_PARTIAL_TEMPLATE, context)


def collection_list(request, screen: CollectionScreen, **scope):
    """Handle a GET on a list screen."""
    controller = screen.build_controller(request, **scope)
    params = request.GET

    if 'sort' in params:
        column = params.get('sort', '')
        restore_state(request, screen, controller, **scope)
        controller.cancel_delete()
        if column in screen.sortable_columns:
            controller.sort_by(column)
        else:
            logger.info(f"{screen.name}: ignoring unsortable column {column!r}")
            controller.load()
    elif 'q' in params and screen.searchable:
        restore_state(request, screen, controller, **scope)
        controller.cancel_delete()
        controller.search(params.get('q', ''))
    elif 'delete' in params and screen.deletable:
        if not restore_state(request, screen, controller, **scope) or not controller.items:
            controller.load()
        controller.request_delete(params.get('delete'))
    else:
        controller.load()

    return render_collection(request, screen, controller, **scope)


def collection_delete_confirm(request, screen: CollectionScreen, **scope):
    """POST: delete the row awaiting confirmation and reload."""
    controller = screen.build_controller(request, **scope)
    restore_state(request, screen, controller, **scope)

    pending_id = controller.pending_delete_id
    controller.confirm_delete()
    # Failures are shown by the list itself through controller.error_message.
    notice = ''
    if pending_id is not None and not controller.has_failed:
        notice = f"Record {pending_id} deleted."

    return render_collection(request, screen, controller, notice=notice, **scope)


def collection_delete_cancel(request, screen: CollectionScreen, **scope):
    """POST: close the delete confirmation without touching the API."""
    controller = screen.build_controller(request, **scope)
    if not restore_state(request, screen, controller, **scope):
        controller.load()
    controller.cancel_delete()
    return render_collection(request, screen, controller, **scope)


def sort_indicator(sort: Optional[SortState], column: str) -> str:
    if sort is None or sort.column != column:
        return '↕'
    return '↑' if sort.direction is SortDirection.ASCENDING else '↓'
