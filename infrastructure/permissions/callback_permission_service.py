"""
Callback Permission Service

Permission gate backed by a callback supplied by the host (a UI prompt,
a policy check, a test stub). The callback may be a plain function or a
coroutine function taking a CreatePermissionRequest and returning bool.
"""

import inspect
import logging

from domain.services.permission_service import (
    CreatePermissionRequest,
    IPermissionService,
    PermissionCallback,
)

logger = logging.getLogger(__name__)


class CallbackPermissionService(IPermissionService):
    """Ask a callback, with per-session auto-approval and a global skip switch"""

    def __init__(self, callback: PermissionCallback, skip_requests: bool = False):
        self._callback = callback
        self._skip_requests = skip_requests
        self._auto_approved_sessions: set[str] = set()

    @property
    def skip_requests(self) -> bool:
        return self._skip_requests

    def set_skip_requests(self, skip: bool) -> None:
        """Approve everything without asking (non-interactive runs)"""
        self._skip_requests = skip

    def auto_approve_session(self, session_id: str) -> None:
        """Approve all further requests of a session without asking"""
        self._auto_approved_sessions.add(session_id)

    async def request(self, request: CreatePermissionRequest) -> bool:
        if self._skip_requests:
            logger.info(f"[{request.session_id}] Permission auto-granted (skip): {request.tool_name}")
            return True

        if request.session_id in self._auto_approved_sessions:
            logger.info(f"[{request.session_id}] Permission auto-granted (session): {request.tool_name}")
            return True

        decision = self._callback(request)
        if inspect.isawaitable(decision):
            decision = await decision

        granted = bool(decision)
        logger.info(
            f"[{request.session_id}] Permission {'granted' if granted else 'denied'}: "
            f"{request.tool_name} {request.action} in {request.path}"
        )
        return granted
