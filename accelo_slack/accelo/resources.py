"""
Generic Accelo resource operations.

One ResourceClient per resource path provides get/list/count/update/create.
Sub-resources (threads, interactions, profile values and fields) reuse the
same client through ``sub()`` and ``nested()`` rather than duplicating the
operations per endpoint.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from .client.accelo_client import AcceloClient
from .models import (
    AcceloRecord,
    Activity,
    Affiliation,
    Company,
    Contact,
    CountResult,
    Issue,
    Request,
    RequestType,
    Staff,
    Task,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _fields_params(fields: str | None) -> dict[str, Any] | None:
    return {"_fields": fields} if fields else None


class ResourceClient(Generic[ModelT]):
    """
    CRUD-style operations for one Accelo resource path.

    Every call is a fresh round trip. Which fields may be written is decided
    by Accelo; payloads are passed through without local validation.
    """

    def __init__(self, client: AcceloClient, path: str, model: type[ModelT] = AcceloRecord):
        self.client = client
        self.path = path.strip("/")
        self.model = model

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={self.path!r}, model={self.model.__name__})"

    def _parse(self, data: Any) -> ModelT | None:
        if not isinstance(data, dict) or not data:
            return None
        return self.model.model_validate(data)

    def sub(self, sub_path: str, model: type[BaseModel] = AcceloRecord) -> "ResourceClient":
        """Client for a collection below this one, e.g. ``activities/threads``."""
        return ResourceClient(self.client, f"{self.path}/{sub_path.strip('/')}", model)

    def nested(
        self, parent_id: str | int, sub_path: str, model: type[BaseModel] = AcceloRecord
    ) -> "ResourceClient":
        """Client for a collection owned by one object, e.g. ``activities/7/interacts``."""
        return ResourceClient(
            self.client, f"{self.path}/{parent_id}/{sub_path.strip('/')}", model
        )

    async def get(self, object_id: str | int, fields: str | None = None) -> ModelT | None:
        """Fetch one object, or None when Accelo returns nothing for it."""
        data = await self.client.get_response(
            "GET", f"{self.path}/{object_id}", params=_fields_params(fields)
        )
        return self._parse(data)

    async def list(
        self,
        fields: str | None = None,
        filters: dict[str, Any] | None = None,
        search: str | None = None,
    ) -> list[ModelT]:
        """Fetch the whole collection, draining every page."""
        items = await self.client.fetch_all(
            self.path, fields=fields, filters=filters, search=search
        )
        return [self.model.model_validate(item) for item in items]

    async def count(
        self, filters: dict[str, Any] | None = None, search: str | None = None
    ) -> CountResult:
        payload: dict[str, Any] = {}
        if filters:
            payload["_filters"] = filters
        if search:
            payload["_search"] = search
        data = await self.client.get_response(
            "POST", f"{self.path}/count", params={"_method": "get"}, payload=payload
        )
        return CountResult.model_validate(data or {})

    async def update(
        self, object_id: str | int, payload: dict[str, Any], fields: str | None = None
    ) -> ModelT | None:
        params = {"_method": "put"}
        if fields:
            params["_fields"] = fields
        data = await self.client.get_response(
            "POST", f"{self.path}/{object_id}", params=params, payload=payload
        )
        return self._parse(data)

    async def create(self, payload: dict[str, Any], fields: str | None = None) -> ModelT | None:
        data = await self.client.get_response(
            "POST", self.path, params=_fields_params(fields), payload=payload
        )
        return self._parse(data)


class AcceloAPI:
    """
    Namespaced access to the Accelo resources the relay works with.

    Example:
        api = AcceloAPI(client)
        request = await api.requests.get("42", "title,standing")
        threads = await api.activity_threads.list("subject")
    """

    def __init__(self, client: AcceloClient):
        self.client = client

        self.requests: ResourceClient[Request] = ResourceClient(client, "requests", Request)
        self.issues: ResourceClient[Issue] = ResourceClient(client, "issues", Issue)
        self.tasks: ResourceClient[Task] = ResourceClient(client, "tasks", Task)
        self.activities: ResourceClient[Activity] = ResourceClient(
            client, "activities", Activity
        )
        self.affiliations: ResourceClient[Affiliation] = ResourceClient(
            client, "affiliations", Affiliation
        )
        self.companies: ResourceClient[Company] = ResourceClient(client, "companies", Company)
        self.contacts: ResourceClient[Contact] = ResourceClient(client, "contacts", Contact)
        self.staff: ResourceClient[Staff] = ResourceClient(client, "staff", Staff)

        self.activity_threads = self.activities.sub("threads")
        self.request_threads = self.requests.sub("threads")
        self.request_types = self.requests.sub("types", RequestType)

    def activity_interacts(self, activity_id: str | int) -> ResourceClient:
        """Interactions (to/cc/from) of one activity."""
        return self.activities.nested(activity_id, "interacts")

    def profile_values(self, object_type: str, object_id: str | int) -> ResourceClient:
        """Profile field values of one object, e.g. ``profile_values("issues", 42)``."""
        return ResourceClient(self.client, object_type).nested(object_id, "profiles/values")

    def profile_fields(self, object_type: str) -> ResourceClient:
        """Profile fields available for an object type."""
        return ResourceClient(self.client, object_type).sub("profiles/fields")

    async def create_profile_value(
        self,
        object_type: str,
        object_id: str | int,
        profile_field_id: str | int,
        payload: dict[str, Any],
        fields: str | None = None,
    ) -> AcceloRecord | None:
        """Set a profile value for one field of one object."""
        field_client = ResourceClient(self.client, object_type).nested(
            object_id, f"profiles/fields/{profile_field_id}"
        )
        return await field_client.create(payload, fields)

    async def deactivate_contact(self, contact_id: str | int) -> dict[str, Any]:
        """Deactivate a contact; returns the raw response envelope."""
        return await self.client.request_json("DELETE", f"contacts/{contact_id}")
