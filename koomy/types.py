"""Enums and type aliases for Koomy."""

from enum import StrEnum


class MembershipRole(StrEnum):
    MEMBER = "member"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class AdminRole(StrEnum):
    SUPER_ADMIN = "super_admin"
    SUPPORT_ADMIN = "support_admin"
    FINANCE_ADMIN = "finance_admin"
    CONTENT_ADMIN = "content_admin"


class MemberStatus(StrEnum):
    ACTIVE = "active"
    EXPIRED = "expired"
    SUSPENDED = "suspended"


class ContributionStatus(StrEnum):
    UP_TO_DATE = "up_to_date"
    EXPIRED = "expired"
    PENDING = "pending"
    LATE = "late"


class SubscriptionStatus(StrEnum):
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class TicketStatus(StrEnum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class TicketPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NewsStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Scope(StrEnum):
    NATIONAL = "national"
    LOCAL = "local"


class WhiteLabelTier(StrEnum):
    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"


class UploadKind(StrEnum):
    IMAGE = "image"
    LOGO = "logo"


class EventFilter(StrEnum):
    UPCOMING = "upcoming"
    PAST = "past"
