"""Domain services"""

from domain.services.agent_tool import IAgentTool, ToolCall, ToolInfo, ToolResponse
from domain.services.claude_code_service import (
    ClaudeCodeClientError,
    ClaudeCodeClientFactory,
    ClaudeCodeResult,
    IClaudeCodeClient,
    ModelUsageDetail,
    OutputFormat,
    SessionConfig,
)
from domain.services.permission_service import (
    CreatePermissionRequest,
    IPermissionService,
    PermissionCallback,
    PermissionDeniedError,
)

__all__ = [
    "IAgentTool",
    "ToolCall",
    "ToolInfo",
    "ToolResponse",
    "ClaudeCodeClientError",
    "ClaudeCodeClientFactory",
    "ClaudeCodeResult",
    "IClaudeCodeClient",
    "ModelUsageDetail",
    "OutputFormat",
    "SessionConfig",
    "CreatePermissionRequest",
    "IPermissionService",
    "PermissionCallback",
    "PermissionDeniedError",
]
