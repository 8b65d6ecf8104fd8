"""
Dependency Injection Container

Centralizes dependency creation and wiring for the Claude Code tool.
Follows Dependency Inversion Principle - the tool depends on the client
and permission interfaces, the container picks the implementations.

Usage:
    container = Container(permission_callback=ask_user)
    tool = container.claude_code_tool()
"""

import logging
from typing import Optional

from domain.services.claude_code_service import ClaudeCodeClientFactory, IClaudeCodeClient
from domain.services.permission_service import CreatePermissionRequest, PermissionCallback
from domain.value_objects.backend_mode import BackendMode
from shared.config.settings import Settings

logger = logging.getLogger(__name__)


def _deny_all(request: CreatePermissionRequest) -> bool:
    logger.warning(
        f"[{request.session_id}] No permission callback configured, denying {request.tool_name}"
    )
    return False


class Container:
    """
    Dependency Injection Container.

    Each service is created lazily and cached (singleton pattern), except
    Claude Code clients: the factory builds a fresh one per tool call.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        permission_callback: Optional[PermissionCallback] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.permission_callback = permission_callback or _deny_all
        self._cache = {}

    # === Infrastructure Layer ===

    def permission_service(self):
        """Get or create CallbackPermissionService"""
        if "permission_service" not in self._cache:
            from infrastructure.permissions.callback_permission_service import CallbackPermissionService
            self._cache["permission_service"] = CallbackPermissionService(self.permission_callback)
        return self._cache["permission_service"]

    def create_claude_client(self) -> IClaudeCodeClient:
        """Create a Claude Code client for the configured backend"""
        config = self.settings.claude_code
        if config.backend is BackendMode.SDK:
            from infrastructure.claude_code.sdk_client import ClaudeAgentSDKClient
            return ClaudeAgentSDKClient()

        from infrastructure.claude_code.cli_client import ClaudeCodeCLIClient
        return ClaudeCodeCLIClient(
            claude_path=config.claude_path,
            timeout_seconds=config.timeout_seconds,
        )

    def client_factory(self) -> ClaudeCodeClientFactory:
        """Factory handed to the tool"""
        return self.create_claude_client

    # === Service Layer ===

    def claude_code_tool(self):
        """Get or create ClaudeCodeTool"""
        if "claude_code_tool" not in self._cache:
            from application.services.claude_code_tool import ClaudeCodeTool
            config = self.settings.claude_code
            logger.info(
                f"Claude Code tool: backend={config.backend.description}, "
                f"working_dir={config.working_dir}"
            )
            self._cache["claude_code_tool"] = ClaudeCodeTool(
                permissions=self.permission_service(),
                working_dir=config.working_dir,
                client_factory=self.client_factory(),
            )
        return self._cache["claude_code_tool"]
