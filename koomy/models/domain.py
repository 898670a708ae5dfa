"""Resource models exchanged with the Koomy REST API.

The API speaks camelCase JSON; models accept either the camelCase key or the
snake_case attribute name and drop unknown keys.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from koomy.types import (
    AdminRole,
    ContributionStatus,
    MembershipRole,
    MemberStatus,
    NewsStatus,
    Scope,
    SubscriptionStatus,
    TicketPriority,
    TicketStatus,
    WhiteLabelTier,
)


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Community(ApiModel):
    id: str
    name: str
    logo: str | None = None
    description: str | None = None
    community_type: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    member_count: int = 0
    plan_id: str | None = None
    subscription_status: SubscriptionStatus | None = None
    created_at: datetime | None = None


class Membership(ApiModel):
    id: str
    community_id: str
    user_id: str | None = None
    member_id: str | None = None  # e.g. UNSA-2024-8892
    role: MembershipRole = MembershipRole.MEMBER
    admin_role: AdminRole | None = None
    status: MemberStatus = MemberStatus.ACTIVE
    contribution_status: ContributionStatus = ContributionStatus.PENDING
    section: str | None = None
    display_name: str | None = None
    join_date: datetime | None = None
    next_due_date: datetime | None = None
    community: Community | None = None  # embedded by some endpoints

    @property
    def is_admin(self) -> bool:
        return self.role in (MembershipRole.ADMIN, MembershipRole.SUPER_ADMIN)

    @property
    def is_super_admin(self) -> bool:
        return (
            self.role == MembershipRole.SUPER_ADMIN or self.admin_role == AdminRole.SUPER_ADMIN
        )

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE


class User(ApiModel):
    """Read-only projection of a user; the password never reaches the client."""

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    avatar: str | None = None
    memberships: list[Membership] = []

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def membership_for(self, community_id: str) -> Membership | None:
        """Return the first membership in ``community_id``, if any."""
        for membership in self.memberships:
            if membership.community_id == community_id:
                return membership
        return None


class MemberWithUser(Membership):
    user: User | None = None


class LoginResponse(ApiModel):
    user: User
    memberships: list[Membership] = []


class Plan(ApiModel):
    id: str
    code: str | None = None
    name: str
    description: str | None = None
    max_members: int | None = None  # None = unlimited
    price_monthly: int | None = None  # cents, None = on quote
    price_yearly: int | None = None  # cents, None = on quote
    features: list[str] = []
    is_popular: bool = False
    is_public: bool = True
    is_custom: bool = False
    is_white_label: bool = False
    sort_order: int = 0


class NewsArticle(ApiModel):
    id: str
    community_id: str
    title: str
    summary: str = ""
    content: str = ""
    category: str = ""
    image: str | None = None
    scope: Scope = Scope.NATIONAL
    section: str | None = None
    author: str = ""
    status: NewsStatus = NewsStatus.DRAFT
    published_at: datetime | None = None


class Event(ApiModel):
    id: str
    community_id: str
    title: str
    description: str = ""
    date: datetime
    end_date: datetime | None = None
    location: str = ""
    type: str = ""
    scope: Scope = Scope.NATIONAL
    section: str | None = None
    participants: int = 0


class SupportTicket(ApiModel):
    id: str
    user_id: str
    community_id: str
    subject: str
    message: str
    status: TicketStatus = TicketStatus.OPEN
    priority: TicketPriority = TicketPriority.MEDIUM
    created_at: datetime | None = None
    last_update: datetime | None = None


class FAQ(ApiModel):
    id: str
    question: str
    answer: str
    category: str = ""
    target_role: str = "all"  # member | admin | all


class Message(ApiModel):
    id: str
    community_id: str
    conversation_id: str
    sender_id: str
    content: str
    read: bool = False
    timestamp: datetime | None = None


class BrandConfig(ApiModel):
    app_name: str | None = None
    brand_color: str | None = None
    logo_url: str | None = None
    app_icon_url: str | None = None
    email_from_name: str | None = None
    email_from_address: str | None = None
    reply_to: str | None = None
    show_powered_by: bool | None = None


class WhiteLabelConfig(ApiModel):
    white_label: bool = False
    community_id: str | None = None
    community_name: str | None = None
    community_logo: str | None = None
    brand_config: BrandConfig | None = None
    white_label_tier: WhiteLabelTier | None = None
    white_label_included_members: int | None = None
    white_label_max_members_soft_limit: int | None = None
    hostname: str | None = None


class UploadSlot(ApiModel):
    # The API spells this key "uploadURL", which to_camel cannot produce.
    upload_url: str = Field(alias="uploadURL")


class FinalizedUpload(ApiModel):
    object_path: str


class MarkReadResult(ApiModel):
    success: bool = False
