"""
Fitbit API source.
Pages through the activity log list endpoint starting from a given date.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from ..base import Activity, ActivitySource
from ..client import FitbitClient
from ..config import ACTIVITIES_LIST_URL, PAGE_SIZE
from ..filters import select_api_gps_activities


class ApiSource(ActivitySource):
    """Source reading the activity log list from the Fitbit Web API."""

    def __init__(
        self,
        client: FitbitClient,
        after_date: str,
        page_size: int = PAGE_SIZE,
        logger: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.after_date = after_date
        self.page_size = page_size
        self.logger = logger or logging.getLogger(__name__)

    @property
    def source_name(self) -> str:
        return "api"

    def first_page_url(self) -> str:
        params = {
            "afterDate": self.after_date,
            "sort": "asc",
            "offset": 0,
            "limit": self.page_size,
        }
        return f"{ACTIVITIES_LIST_URL}?{urlencode(params)}"

    def fetch_records(self) -> List[Dict[str, Any]]:
        """
        Follow pagination.next until it is exhausted.

        Raises:
            RequestError: If any page returns a non-success status.
        """
        all_activities: List[Dict[str, Any]] = []
        next_url: Optional[str] = self.first_page_url()

        while next_url:
            payload = self.client.get_json(next_url)
            activities = payload.get("activities") or []
            all_activities.extend(activities)
            next_url = (payload.get("pagination") or {}).get("next") or None

            self.logger.debug(f"Fetched a page of activities: count={len(activities)}")

        return all_activities

    def select_gps_activities(self, records: List[Dict[str, Any]]) -> List[Activity]:
        return select_api_gps_activities(records)
