"""In-memory session for the logged-in user and their active community.

The store is the single writer of session state. Views read snapshots and
mutate only through ``set_user``, ``select_community`` and ``logout``; the
community list arrives independently and is joined to the selected
membership by ``resolve_current_community`` after every change, so the
order in which selection and list arrive does not matter.

Nothing is persisted: a new store always starts anonymous.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from koomy.exceptions import ApiError
from koomy.models.domain import Community, Membership, User

if TYPE_CHECKING:
    from koomy.api.client import ApiClient

logger = structlog.get_logger(__name__)

COMMUNITIES_KEY = ("communities",)


class SessionState(StrEnum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED_UNSELECTED = "authenticated_unselected"
    AUTHENTICATED_SELECTED = "authenticated_selected"


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    user: User | None
    current_membership: Membership | None
    current_community: Community | None
    all_communities: tuple[Community, ...] = ()

    @property
    def state(self) -> SessionState:
        if self.user is None:
            return SessionState.ANONYMOUS
        if self.current_membership is None:
            return SessionState.AUTHENTICATED_UNSELECTED
        return SessionState.AUTHENTICATED_SELECTED

    @property
    def community_id(self) -> str | None:
        """Id every community-scoped API call should use."""
        if self.current_membership is None:
            return None
        return self.current_membership.community_id

    @property
    def is_admin(self) -> bool:
        return self.current_membership is not None and self.current_membership.is_admin


def resolve_current_community(
    membership: Membership | None, communities: Sequence[Community]
) -> Community | None:
    """Join the selected membership to its community record, if loaded."""
    if membership is None:
        return None
    for community in communities:
        if community.id == membership.community_id:
            return community
    return None


Listener = Callable[[SessionSnapshot], None]


class SessionStore:
    def __init__(self) -> None:
        self._user: User | None = None
        self._current_membership: Membership | None = None
        self._current_community: Community | None = None
        self._communities: tuple[Community, ...] = ()
        self._listeners: list[Listener] = []

    # --- reads ---

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def current_membership(self) -> Membership | None:
        return self._current_membership

    @property
    def current_community(self) -> Community | None:
        return self._current_community

    @property
    def all_communities(self) -> tuple[Community, ...]:
        return self._communities

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            user=self._user,
            current_membership=self._current_membership,
            current_community=self._current_community,
            all_communities=self._communities,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every state change. Returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- mutations ---

    def set_user(self, user: User | None) -> None:
        """Replace the user wholesale.

        The previous selection is kept; switching accounts without ``logout``
        leaves it in place.
        """
        self._user = user
        logger.info("session_user_set", user_id=user.id if user else None)
        self._notify()

    def select_community(self, community_id: str) -> None:
        """Select the user's membership in ``community_id``.

        Silently does nothing when there is no user or no such membership.
        """
        if self._user is None:
            logger.debug("session_select_ignored", reason="anonymous", community_id=community_id)
            return
        membership = self._user.membership_for(community_id)
        if membership is None:
            logger.debug(
                "session_select_ignored", reason="no_membership", community_id=community_id
            )
            return
        self._current_membership = membership
        self._reconcile()
        logger.info(
            "session_community_selected",
            community_id=community_id,
            community_loaded=self._current_community is not None,
        )
        self._notify()

    def set_communities(self, communities: Sequence[Community]) -> None:
        """Install a freshly loaded community list and re-join the selection."""
        self._communities = tuple(communities)
        self._reconcile()
        self._notify()

    def logout(self) -> None:
        self._user = None
        self._current_membership = None
        self._current_community = None
        self._communities = ()
        logger.info("session_logged_out")
        self._notify()

    # --- async helpers ---

    async def login(
        self,
        api: ApiClient,
        email: str,
        password: str,
        *,
        admin: bool = False,
        auto_select: bool = True,
    ) -> User:
        """Authenticate and install the user with their memberships attached.

        With ``auto_select`` a user holding exactly one membership lands
        straight in that community. Raises ``ApiError`` on bad credentials;
        the session is left untouched.
        """
        if admin:
            response = await api.auth.admin_login(email, password)
        else:
            response = await api.auth.login(email, password)
        user = response.user.model_copy(update={"memberships": response.memberships})
        self.set_user(user)
        if not response.memberships:
            logger.warning("session_no_memberships", user_id=user.id)
        elif auto_select and len(response.memberships) == 1:
            self.select_community(response.memberships[0].community_id)
        return user

    async def load_communities(self, api: ApiClient) -> tuple[Community, ...]:
        """Fetch the community list; skipped entirely for anonymous sessions.

        A response that lands after the user changed (logout, account switch)
        is dropped.
        """
        user = self._user
        if user is None:
            return self._communities
        try:
            communities = await api.cache.fetch(COMMUNITIES_KEY, api.communities.get_all)
        except ApiError as exc:
            logger.warning("session_communities_failed", error=exc.message)
            return self._communities
        if self._user is not user:
            logger.debug("session_communities_discarded", reason="user_changed")
            return self._communities
        self.set_communities(communities)
        return self._communities

    # --- internals ---

    def _reconcile(self) -> None:
        self._current_community = resolve_current_community(
            self._current_membership, self._communities
        )

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
