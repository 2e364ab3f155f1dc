"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import Iterable

from fastapi import FastAPI

from api.v1 import admin_ajax_router, api_router
from core import configure_logging, settings
from services import RateLimitMiddleware, build_rate_limiter
from services.notices import (
    ActionHooks,
    NoticeDismissal,
    NoticeRegistry,
    parse_notice_declaration,
)


def create_app(notices: Iterable[NoticeDismissal] | None = None) -> FastAPI:
    """Build the application and register the given (or configured) notices."""
    configure_logging(settings.log_level)

    application = FastAPI(title="Notice Dismissal API")
    hooks = ActionHooks()
    registry = NoticeRegistry(hooks)
    if notices is None:
        notices = [parse_notice_declaration(item) for item in settings.notices]
    for notice in notices:
        registry.register(notice)

    application.state.action_hooks = hooks
    application.state.notices = registry
    application.state.rate_limiter = build_rate_limiter(settings)

    application.add_middleware(
        RateLimitMiddleware,
        limited_prefixes=[settings.admin_ajax_path],
    )
    application.include_router(admin_ajax_router)
    application.include_router(api_router)
    return application
