"""Shared admin-ajax action endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import PlainTextResponse

from api.deps import get_action_hooks, get_dismissal_storage, get_nonce_manager
from core import NonceManager, settings
from services.notices import ActionHooks, NonceVerificationError, SqlDismissalStorage

router = APIRouter(tags=["admin-ajax"])


@router.post(
    settings.admin_ajax_path,
    name="admin_ajax",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def admin_ajax(
    request: Request,
    storage: SqlDismissalStorage = Depends(get_dismissal_storage),
    nonces: NonceManager = Depends(get_nonce_manager),
    hooks: ActionHooks = Depends(get_action_hooks),
) -> Response:
    form = await request.form()
    action = form.get("action")
    if not isinstance(action, str) or not hooks.has_action(action):
        return PlainTextResponse("0", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        await hooks.do_action(action, form, storage, nonces.verify)
    except NonceVerificationError:
        return PlainTextResponse("-1", status_code=status.HTTP_403_FORBIDDEN)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
