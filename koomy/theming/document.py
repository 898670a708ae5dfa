"""Minimal document head model: ``<link>`` elements and root CSS variables.

Only the pieces the tenant and white-label layers touch are modelled. Links
are never created here; callers update whatever the page already declares.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class LinkElement:
    rel: str
    href: str

    def set_href(self, href: str) -> None:
        self.href = href


@dataclass
class Document:
    """A page's ``<head>`` links plus the root element's inline style."""

    links: list[LinkElement] = field(default_factory=list)
    root_style: dict[str, str] = field(default_factory=dict)

    @classmethod
    def with_links(cls, **hrefs: str) -> Document:
        """Build a document from ``rel=href`` pairs (underscores become dashes)."""
        return cls(links=[LinkElement(rel.replace("_", "-"), href) for rel, href in hrefs.items()])

    def query_link(self, rel: str) -> LinkElement | None:
        """Return the first ``<link>`` with the given rel, like ``querySelector``."""
        for link in self.links:
            if link.rel == rel:
                return link
        return None

    def set_link_href(self, rel: str, href: str) -> bool:
        """Point an existing link at ``href``. Returns False if no such link."""
        link = self.query_link(rel)
        if link is None:
            logger.debug("document_link_missing", rel=rel)
            return False
        link.set_href(href)
        return True

    def set_style_property(self, name: str, value: str) -> None:
        self.root_style[name] = value

    def get_style_property(self, name: str) -> str | None:
        return self.root_style.get(name)

    def remove_style_property(self, name: str) -> None:
        self.root_style.pop(name, None)
