"""
REST bindings for the entity families exposed by the classroom API.

Each RemoteCollection follows one URL convention::

    GET    /<entity>/all
    GET    /<entity>/sort?column=<key>&order=<ASC|DESC>
    GET    /<entity>/search?<search_param>=<q>
    GET    /<entity>/<id>
    POST   /<entity>
    PUT    /<entity>/<id>
    DELETE /<entity>/<id>

The search parameter name differs between entities (``query`` for most,
``q`` for students and teachers), so it is configured per binding.
"""

from typing import Dict, List, Optional

from .client import ApiClient
from .exceptions import TransportError


class RemoteCollection:
    """Data source for one entity family, as consumed by the list controller."""

    def __init__(
        self,
        client: ApiClient,
        entity: str,
        search_param: str = 'query',
        list_path: Optional[str] = None,
        all_path: Optional[str] = None,
    ):
        """
        Args:
            client: ApiClient bound to the current session
            entity: path segment of the entity, e.g. ``attendanceList``
            search_param: query-string name of the search term
            list_path: prefix for sort/search (defaults to ``entity``);
                scoped collections such as the words of one vocab list
                use ``vocab/list/<id>``
            all_path: path of the full collection (defaults to
                ``<list_path>/all``)
        """
        self.client = client
        self.entity = entity
        self.search_param = search_param
        self.list_path = list_path or entity
        self.all_path = all_path or f'{self.list_path}/all'

    def __repr__(self):
        return f'<RemoteCollection {self.all_path}>'

    @staticmethod
    def _as_list(body) -> List[Dict]:
        if body is None:
            return []
        if not isinstance(body, list):
            raise TransportError("Expected a list of records from the API")
        return body

    def fetch_all(self) -> List[Dict]:
        return self._as_list(self.client.get(self.all_path))

    def fetch_sorted(self, column: str, direction) -> List[Dict]:
        order = getattr(direction, 'value', direction)
        return self._as_list(self.client.get(
            f'{self.list_path}/sort',
            params={'column': column, 'order': order},
        ))

    def fetch_search(self, query: str) -> List[Dict]:
        return self._as_list(self.client.get(
            f'{self.list_path}/search',
            params={self.search_param: query},
        ))

    def remove(self, record_id) -> None:
        self.client.delete(f'{self.entity}/{record_id}')

    def get(self, record_id) -> Dict:
        return self.client.get(f'{self.entity}/{record_id}')

    def create(self, data: Dict, path: Optional[str] = None):
        return self.client.post(path or self.entity, data)

    def update(self, record_id, data: Dict):
        return self.client.put(f'{self.entity}/{record_id}', data)


# Entity families of the classroom API and the search parameter each expects.
ENTITIES = {
    'user': 'query',
    'student': 'q',
    'teacher': 'q',
    'attendanceList': 'query',
    'attendanceRecord': 'query',
    'vocabList': 'query',
    'vocab': 'query',
    'registrationList': 'query',
    'salaryList': 'query',
    'salaryRecord': 'query',
}


def get_collection(client: ApiClient, entity: str, **kwargs) -> RemoteCollection:
    """
    Factory function returning the binding for a known entity family.

    Raises:
        ValueError: unknown entity name
    """
    if entity not in ENTITIES:
        raise ValueError(f"Unsupported entity: {entity}")
    kwargs.setdefault('search_param', ENTITIES[entity])
    return RemoteCollection(client, entity, **kwargs)
