"""Typed async client for the Koomy REST API.

One resource namespace per REST collection (``api.news``, ``api.tickets``...).
Every call resolves to parsed JSON/models or raises ``ApiError`` carrying the
server's ``{"error": ...}`` message. Successful mutations invalidate their
resource tag in the shared ``QueryCache``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from koomy.api.query_cache import QueryCache
from koomy.config.settings import get_settings
from koomy.exceptions import GENERIC_API_ERROR, ApiError
from koomy.models.domain import (
    FAQ,
    Community,
    Event,
    FinalizedUpload,
    LoginResponse,
    MarkReadResult,
    MemberWithUser,
    Membership,
    Message,
    NewsArticle,
    Plan,
    SupportTicket,
    UploadSlot,
    User,
    WhiteLabelConfig,
)
from koomy.types import UploadKind
from koomy.utils.timing import timed

if TYPE_CHECKING:
    from types import TracebackType

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")

Payload = BaseModel | dict[str, Any]


def _body(data: Payload) -> dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_none=True)
    return data


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return GENERIC_API_ERROR
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return GENERIC_API_ERROR


def _validate(adapter: TypeAdapter[T], data: Any, method: str, endpoint: str) -> T:
    """Parse a 2xx body; a shape the models reject is an ``ApiError`` like bad JSON."""
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        logger.warning(
            "api_invalid_payload",
            method=method,
            endpoint=endpoint,
            error_count=exc.error_count(),
            fields=[".".join(str(part) for part in err["loc"]) for err in exc.errors()],
        )
        raise ApiError(GENERIC_API_ERROR) from exc


class ApiClient:
    """Thin facade over ``httpx.AsyncClient`` scoped to the ``/api`` prefix."""

    def __init__(
        self,
        base_url: str,
        *,
        api_prefix: str = "/api",
        client: httpx.AsyncClient | None = None,
        cache: QueryCache | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._api_root = base_url.rstrip("/") + api_prefix
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None
        # Calls using half the timeout budget are logged as slow.
        self._slow_seconds = timeout / 2
        self.cache = cache or QueryCache()

        self.auth = AuthApi(self)
        self.communities = CommunitiesApi(self)
        self.plans = PlansApi(self)
        self.users = UsersApi(self)
        self.memberships = MembershipsApi(self)
        self.news = NewsApi(self)
        self.events = EventsApi(self)
        self.tickets = TicketsApi(self)
        self.faqs = FaqsApi(self)
        self.messages = MessagesApi(self)
        self.uploads = UploadsApi(self)
        self.white_label = WhiteLabelApi(self)

    @classmethod
    def from_settings(cls, **kwargs: Any) -> ApiClient:
        """Factory: build a client pointed at the configured API."""
        settings = get_settings()
        return cls(
            settings.api_base_url,
            api_prefix=settings.api_prefix,
            timeout=settings.request_timeout,
            **kwargs,
        )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def url(self, endpoint: str) -> str:
        return f"{self._api_root}{endpoint}"

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Send a JSON request to ``/api{endpoint}`` and return the parsed body."""
        try:
            with timed(
                "api_request", slow_seconds=self._slow_seconds, method=method, endpoint=endpoint
            ):
                response = await self._client.request(
                    method,
                    self.url(endpoint),
                    json=json,
                    params=params,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as exc:
            logger.warning("api_transport_error", method=method, endpoint=endpoint, error=str(exc))
            raise ApiError(GENERIC_API_ERROR) from exc

        if not response.is_success:
            message = _error_message(response)
            logger.warning(
                "api_request_failed",
                method=method,
                endpoint=endpoint,
                status_code=response.status_code,
                error=message,
            )
            raise ApiError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("api_invalid_json", method=method, endpoint=endpoint)
            raise ApiError(GENERIC_API_ERROR, status_code=response.status_code) from exc

    async def put_bytes(self, url: str, data: bytes, content_type: str) -> None:
        """PUT raw bytes to an absolute URL (presigned object-storage slot)."""
        try:
            with timed("object_put", size=len(data)):
                response = await self._client.put(
                    url, content=data, headers={"Content-Type": content_type}
                )
        except httpx.HTTPError as exc:
            raise ApiError(GENERIC_API_ERROR) from exc
        if not response.is_success:
            raise ApiError(GENERIC_API_ERROR, status_code=response.status_code)

    def invalidate(self, tag: str) -> None:
        self.cache.invalidate(tag)


class _Resource:
    tag: str = ""

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def _one(self, model: type[M], method: str, endpoint: str, **kwargs: Any) -> M:
        data = await self._api.request(method, endpoint, **kwargs)
        return _validate(TypeAdapter(model), data, method, endpoint)

    async def _many(self, model: type[M], endpoint: str, **kwargs: Any) -> list[M]:
        data = await self._api.request("GET", endpoint, **kwargs)
        adapter = TypeAdapter(list[model])  # type: ignore[valid-type]
        return _validate(adapter, data, "GET", endpoint)

    async def _mutate(self, model: type[M], method: str, endpoint: str, data: Payload) -> M:
        result = await self._one(model, method, endpoint, json=_body(data))
        self._api.invalidate(self.tag)
        return result


class AuthApi(_Resource):
    async def login(self, email: str, password: str) -> LoginResponse:
        return await self._one(
            LoginResponse, "POST", "/auth/login", json={"email": email, "password": password}
        )

    async def admin_login(self, email: str, password: str) -> LoginResponse:
        """Backoffice login; only admin memberships come back."""
        return await self._one(
            LoginResponse, "POST", "/admin/login", json={"email": email, "password": password}
        )


class CommunitiesApi(_Resource):
    tag = "communities"

    async def get_all(self) -> list[Community]:
        return await self._many(Community, "/communities")

    async def get_by_id(self, community_id: str) -> Community:
        return await self._one(Community, "GET", f"/communities/{community_id}")

    async def create(self, data: Payload) -> Community:
        return await self._mutate(Community, "POST", "/communities", data)


class PlansApi(_Resource):
    tag = "plans"

    async def get_all(self) -> list[Plan]:
        return await self._many(Plan, "/plans")


class UsersApi(_Resource):
    tag = "users"

    async def get_by_id(self, user_id: str) -> User:
        return await self._one(User, "GET", f"/users/{user_id}")

    async def create(self, data: Payload) -> User:
        return await self._mutate(User, "POST", "/users", data)


class MembershipsApi(_Resource):
    tag = "members"

    async def get_user_memberships(self, user_id: str) -> list[Membership]:
        return await self._many(Membership, f"/users/{user_id}/memberships")

    async def get_community_members(self, community_id: str) -> list[MemberWithUser]:
        return await self._many(MemberWithUser, f"/communities/{community_id}/members")

    async def create(self, data: Payload) -> Membership:
        return await self._mutate(Membership, "POST", "/memberships", data)

    async def update(self, membership_id: str, data: Payload) -> Membership:
        return await self._mutate(Membership, "PATCH", f"/memberships/{membership_id}", data)


class NewsApi(_Resource):
    tag = "news"

    async def get_community_news(self, community_id: str) -> list[NewsArticle]:
        return await self._many(NewsArticle, f"/communities/{community_id}/news")

    async def get_by_id(self, news_id: str) -> NewsArticle:
        return await self._one(NewsArticle, "GET", f"/news/{news_id}")

    async def create(self, data: Payload) -> NewsArticle:
        return await self._mutate(NewsArticle, "POST", "/news", data)

    async def update(self, news_id: str, data: Payload) -> NewsArticle:
        return await self._mutate(NewsArticle, "PATCH", f"/news/{news_id}", data)


class EventsApi(_Resource):
    tag = "events"

    async def get_community_events(self, community_id: str) -> list[Event]:
        return await self._many(Event, f"/communities/{community_id}/events")

    async def get_by_id(self, event_id: str) -> Event:
        return await self._one(Event, "GET", f"/events/{event_id}")

    async def create(self, data: Payload) -> Event:
        return await self._mutate(Event, "POST", "/events", data)

    async def update(self, event_id: str, data: Payload) -> Event:
        return await self._mutate(Event, "PATCH", f"/events/{event_id}", data)


class TicketsApi(_Resource):
    tag = "tickets"

    async def get_all(self) -> list[SupportTicket]:
        return await self._many(SupportTicket, "/tickets")

    async def get_user_tickets(self, user_id: str) -> list[SupportTicket]:
        return await self._many(SupportTicket, f"/users/{user_id}/tickets")

    async def get_community_tickets(self, community_id: str) -> list[SupportTicket]:
        return await self._many(SupportTicket, f"/communities/{community_id}/tickets")

    async def create(self, data: Payload) -> SupportTicket:
        return await self._mutate(SupportTicket, "POST", "/tickets", data)

    async def update(self, ticket_id: str, data: Payload) -> SupportTicket:
        return await self._mutate(SupportTicket, "PATCH", f"/tickets/{ticket_id}", data)


class FaqsApi(_Resource):
    tag = "faqs"

    async def get_all(self) -> list[FAQ]:
        return await self._many(FAQ, "/faqs")

    async def get_by_role(self, role: str) -> list[FAQ]:
        return await self._many(FAQ, "/faqs", params={"role": role})


class MessagesApi(_Resource):
    tag = "messages"

    async def get_community_messages(
        self, community_id: str, conversation_id: str
    ) -> list[Message]:
        return await self._many(Message, f"/communities/{community_id}/messages/{conversation_id}")

    async def create(self, data: Payload) -> Message:
        return await self._mutate(Message, "POST", "/messages", data)

    async def mark_read(self, message_id: str) -> MarkReadResult:
        result = await self._one(MarkReadResult, "PATCH", f"/messages/{message_id}/read")
        self._api.invalidate(self.tag)
        return result


class UploadsApi(_Resource):
    async def request_slot(self, kind: UploadKind, folder: str | None = None) -> UploadSlot:
        body = {"folder": folder} if folder is not None else None
        return await self._one(UploadSlot, "POST", f"/uploads/{kind}", json=body)

    async def finalize(self, kind: UploadKind, upload_url: str) -> FinalizedUpload:
        return await self._one(
            FinalizedUpload, "POST", f"/uploads/{kind}/finalize", json={"uploadURL": upload_url}
        )


class WhiteLabelApi(_Resource):
    async def get_config(self) -> WhiteLabelConfig:
        """Branding for the host serving the request (resolved server-side)."""
        return await self._one(WhiteLabelConfig, "GET", "/white-label/config")
