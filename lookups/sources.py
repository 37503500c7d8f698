# lookups/sources.py
"""
Where lookup data comes from.

``OrmLookupSource`` reads the local tables; ``RestLookupSource`` reads the
hosted backend's REST interface. Both raise ``LookupFetchError`` on failure
and leave fallback behaviour to ``LookupService``.
"""
import logging
from typing import List, Optional

import requests
from django.db import DatabaseError

from core.exceptions import ConfigError, LookupFetchError

from .conf import get_setting
from .types import LookupCategoryData, LookupValueData

logger = logging.getLogger(__name__)


class LookupSource:
    """Interface every lookup source implements."""

    def fetch_categories(self) -> List[LookupCategoryData]:
        raise NotImplementedError

    def fetch_category(self, code: str) -> Optional[LookupCategoryData]:
        raise NotImplementedError

    def fetch_values(self, category_id: str) -> List[LookupValueData]:
        raise NotImplementedError


class OrmLookupSource(LookupSource):

    def fetch_categories(self):
        from .models import LookupCategory

        try:
            return [
                LookupCategoryData.from_model(category)
                for category in LookupCategory.objects.filter(is_active=True).order_by('name')
            ]
        except DatabaseError as e:
            raise LookupFetchError(f"Failed to fetch categories: {e}")

    def fetch_category(self, code):
        from .models import LookupCategory

        try:
            category = LookupCategory.objects.filter(code=code, is_active=True).first()
        except DatabaseError as e:
            raise LookupFetchError(f"Failed to fetch category {code}: {e}", details={'code': code})
        return LookupCategoryData.from_model(category) if category else None

    def fetch_values(self, category_id):
        from .models import LookupValue

        try:
            return [
                LookupValueData.from_model(value)
                for value in LookupValue.objects.filter(
                    category_id=category_id, is_active=True
                ).order_by('sort_order', 'name')
            ]
        except DatabaseError as e:
            raise LookupFetchError(f"Failed to fetch values for category {category_id}: {e}",
                                   details={'category_id': category_id})


class RestLookupSource(LookupSource):
    """
    Reads ``lookup_categories`` / ``lookup_values`` from a PostgREST-style
    endpoint (``<base_url>/rest/v1/<table>``).
    """

    def __init__(self, base_url: str, api_key: str = '', timeout: float = 10, session: requests.Session = None):
        if not base_url:
            raise ConfigError("LOOKUPS['REST_URL'] must be set for the REST lookup source")
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, table: str, params: dict) -> list:
        url = f"{self.base_url}/rest/v1/{table}"
        headers = {
            'apikey': self.api_key,
            'Authorization': f'Bearer {self.api_key}',
            'Accept': 'application/json',
        }

        logger.debug(f"Lookup GET {table} {params}")
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout:
            raise LookupFetchError(f"Lookup service timeout fetching {table}", details={'table': table})
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 'Unknown'
            raise LookupFetchError(f"Lookup service returned {status_code} for {table}",
                                   details={'table': table, 'status_code': status_code})
        except (requests.exceptions.RequestException, ValueError) as e:
            raise LookupFetchError(f"Lookup service error fetching {table}: {e}", details={'table': table})

    def fetch_categories(self):
        rows = self._get('lookup_categories', {'select': '*', 'is_active': 'eq.true', 'order': 'name'})
        return [LookupCategoryData.from_row(row) for row in rows]

    def fetch_category(self, code):
        rows = self._get('lookup_categories', {
            'select': '*', 'code': f'eq.{code}', 'is_active': 'eq.true', 'limit': 1,
        })
        return LookupCategoryData.from_row(rows[0]) if rows else None

    def fetch_values(self, category_id):
        rows = self._get('lookup_values', {
            'select': '*',
            'category_id': f'eq.{category_id}',
            'is_active': 'eq.true',
            'order': 'sort_order.asc',
        })
        return [LookupValueData.from_row(row) for row in rows]


def get_lookup_source() -> LookupSource:
    source = get_setting('SOURCE')
    if source == 'orm':
        return OrmLookupSource()
    if source == 'rest':
        return RestLookupSource(
            base_url=get_setting('REST_URL'),
            api_key=get_setting('REST_API_KEY'),
            timeout=get_setting('REST_TIMEOUT'),
        )
    raise ConfigError(f"Unknown lookup source: {source!r}", details={'source': source})
