"""Structlog setup for the Koomy client.

Every log line carries the tenant context bound with ``bind_tenant_context``
(the host the page is served from and the selected community), so events
from different white-label deployments can be told apart.
"""

import logging
import sys

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars

TENANT_CONTEXT_KEYS = ("tenant_hostname", "tenant_community_id")


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if json_output or not sys.stderr.isatty():
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    level = getattr(logging, log_level.upper(), logging.INFO)
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    # httpx logs every request at INFO; ApiClient logs its own events.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def bind_tenant_context(
    *, hostname: str | None = None, community_id: str | None = None
) -> None:
    """Attach tenant fields to all subsequent log lines. None leaves a field as is."""
    fields: dict[str, str] = {}
    if hostname is not None:
        fields["tenant_hostname"] = hostname
    if community_id is not None:
        fields["tenant_community_id"] = community_id
    if fields:
        bind_contextvars(**fields)


def clear_tenant_context(*, community_only: bool = False) -> None:
    if community_only:
        unbind_contextvars("tenant_community_id")
    else:
        unbind_contextvars(*TENANT_CONTEXT_KEYS)
