from __future__ import annotations

from typing import Optional

from ..client import PayjpClient
from ..models import Event
from ..params import EventListParams
from ..parser import Page, parse_list, parse_resource
from ._common import _list_params, _validate_id


class EventsAPI:
    """
    Event history. ``Event.data_object()`` parses the payload into the
    resource its ``type`` names (``charge.succeeded`` -> ``Charge``).
    """

    def __init__(self, client: PayjpClient):
        self.client = client

    def retrieve(self, event_id: str) -> Optional[Event]:
        _validate_id("event_id", event_id)
        status, body = self.client.get(f"/events/{event_id}")
        return parse_resource(body, Event, self.client, status=status)

    def list(self, params: Optional[EventListParams] = None) -> Page[Event]:
        params = _list_params(params, EventListParams)
        status, body = self.client.get("/events", params=params.to_pairs())
        return parse_list(body, Event, self.client, status=status)
