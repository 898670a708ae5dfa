"""Cached read queries and invalidating mutations, one per view use-case.

Reads are keyed by ``(tag, *ids)``; a read whose id is empty is disabled and
returns None without a request. Mutations go through the resource client,
which invalidates the tag so the next read refetches.
"""

from __future__ import annotations

from typing import Any

from koomy.api.client import ApiClient, Payload
from koomy.models.domain import (
    FAQ,
    Community,
    Event,
    LoginResponse,
    MemberWithUser,
    Membership,
    NewsArticle,
    Plan,
    SupportTicket,
)


class Queries:
    def __init__(self, api: ApiClient) -> None:
        self._api = api
        self._cache = api.cache

    async def _fetch(self, key: tuple[Any, ...], fetcher: Any, enabled: bool = True) -> Any:
        return await self._cache.fetch(key, fetcher, enabled=enabled)

    # Communities
    async def communities(self, enabled: bool = True) -> list[Community] | None:
        return await self._fetch(("communities",), self._api.communities.get_all, enabled)

    async def community(self, community_id: str) -> Community | None:
        return await self._fetch(
            ("communities", community_id),
            lambda: self._api.communities.get_by_id(community_id),
            bool(community_id),
        )

    # Plans
    async def plans(self) -> list[Plan] | None:
        return await self._fetch(("plans",), self._api.plans.get_all)

    # Members
    async def community_members(self, community_id: str) -> list[MemberWithUser] | None:
        return await self._fetch(
            ("members", community_id),
            lambda: self._api.memberships.get_community_members(community_id),
            bool(community_id),
        )

    # News
    async def community_news(self, community_id: str) -> list[NewsArticle] | None:
        return await self._fetch(
            ("news", community_id),
            lambda: self._api.news.get_community_news(community_id),
            bool(community_id),
        )

    # Events
    async def community_events(self, community_id: str) -> list[Event] | None:
        return await self._fetch(
            ("events", community_id),
            lambda: self._api.events.get_community_events(community_id),
            bool(community_id),
        )

    # Tickets
    async def all_tickets(self) -> list[SupportTicket] | None:
        return await self._fetch(("tickets",), self._api.tickets.get_all)

    async def user_tickets(self, user_id: str) -> list[SupportTicket] | None:
        return await self._fetch(
            ("tickets", "user", user_id),
            lambda: self._api.tickets.get_user_tickets(user_id),
            bool(user_id),
        )

    # FAQs
    async def faqs(self, role: str | None = None) -> list[FAQ] | None:
        if role:
            return await self._fetch(("faqs", role), lambda: self._api.faqs.get_by_role(role))
        return await self._fetch(("faqs", None), self._api.faqs.get_all)

    # Mutations
    async def login(self, email: str, password: str) -> LoginResponse:
        return await self._api.auth.login(email, password)

    async def create_member(self, data: Payload) -> Membership:
        return await self._api.memberships.create(data)

    async def update_membership(self, membership_id: str, data: Payload) -> Membership:
        return await self._api.memberships.update(membership_id, data)

    async def create_news(self, data: Payload) -> NewsArticle:
        return await self._api.news.create(data)

    async def create_event(self, data: Payload) -> Event:
        return await self._api.events.create(data)

    async def create_ticket(self, data: Payload) -> SupportTicket:
        return await self._api.tickets.create(data)
