"""Notice status and client script endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from api.deps import get_dismissal_storage, get_nonce_manager, get_notice_registry
from core import NonceManager
from services.notices import (
    NoticeDismissal,
    NoticeRegistry,
    NoticeStatusResponse,
    ScriptRegistry,
    SqlDismissalStorage,
    sanitize_key,
)

router = APIRouter(prefix="/notices", tags=["notices"])


def _require_notice(registry: NoticeRegistry, prefix: str, notice_id: str) -> NoticeDismissal:
    notice = registry.get(sanitize_key(prefix), sanitize_key(notice_id))
    if notice is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notice not found",
        )
    return notice


@router.get("/{prefix}/{notice_id}", response_model=NoticeStatusResponse)
async def get_notice_status(
    prefix: str,
    notice_id: str,
    registry: NoticeRegistry = Depends(get_notice_registry),
    storage: SqlDismissalStorage = Depends(get_dismissal_storage),
) -> NoticeStatusResponse:
    notice = _require_notice(registry, prefix, notice_id)
    return NoticeStatusResponse(
        id=notice.id,
        prefix=notice.prefix,
        scope=notice.scope,
        storage_key=notice.storage_key,
        dismissed=await notice.is_dismissed(storage),
    )


@router.get("/{prefix}/{notice_id}/script", response_class=Response)
async def get_notice_script(
    prefix: str,
    notice_id: str,
    request: Request,
    registry: NoticeRegistry = Depends(get_notice_registry),
    storage: SqlDismissalStorage = Depends(get_dismissal_storage),
    nonces: NonceManager = Depends(get_nonce_manager),
) -> Response:
    notice = _require_notice(registry, prefix, notice_id)
    if await notice.is_dismissed(storage):
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    scripts = ScriptRegistry()
    handle = notice.register_client_script(
        scripts,
        nonce=nonces.create(notice.nonce_action),
        endpoint_url=str(request.url_for("admin_ajax")),
    )
    return Response(
        content=scripts.inline_script(handle),
        media_type="application/javascript",
    )
