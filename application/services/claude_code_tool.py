"""
Claude Code Tool

Exposes the Claude Code CLI to the host agent framework as the
`claude_code` tool: validate the model's parameters, ask the permission
gate, launch a session through a swappable client and hand the result
back as JSON.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from domain.entities.claude_code_call import ClaudeCodeParams, ClaudeCodeResponse
from domain.services.agent_tool import IAgentTool, ToolCall, ToolInfo, ToolResponse
from domain.services.claude_code_service import (
    ClaudeCodeClientFactory,
    OutputFormat,
    SessionConfig,
)
from domain.services.permission_service import (
    CreatePermissionRequest,
    IPermissionService,
    PermissionDeniedError,
)
from domain.value_objects.claude_model import ClaudeModel, InvalidModelError
from shared.constants import (
    CLAUDE_CODE_PERMISSION_ACTION,
    CLAUDE_CODE_TOOL_NAME,
    CLAUDE_DEFAULT_MAX_TURNS,
    ERROR_QUERY_REQUIRED,
    ERROR_SESSION_REQUIRED,
)
from shared.context import get_session_id
from shared.logging.correlation import (
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)


class SessionRequiredError(Exception):
    """Raised when a tool call arrives without a host session"""

    def __init__(self, message: str = ERROR_SESSION_REQUIRED):
        super().__init__(message)


def load_description() -> str:
    """Read the tool description shipped next to this module"""
    return Path(__file__).with_name("claude_code.md").read_text(encoding="utf-8")


def resolve_working_dir(base_dir: str, override: Optional[str]) -> str:
    """
    Resolve the directory a session runs in.

    The override is always taken relative to base_dir, the way a path join
    treats it, and must not climb out of it.

    Raises:
        ValueError: if the override escapes base_dir
    """
    base = Path(os.path.normpath(base_dir))
    if not override:
        return str(base)

    if '\x00' in override:
        raise ValueError("invalid working_dir: null bytes detected")

    candidate = Path(os.path.normpath(base / override.lstrip("/\\")))
    if candidate != base and base not in candidate.parents:
        raise ValueError(f"invalid working_dir: {override} is outside {base}")
    return str(candidate)


class ClaudeCodeTool(IAgentTool):
    """
    The claude_code tool.

    Input errors come back as error responses so the model can correct
    itself. A missing session or a refused permission is raised, because
    the host has to handle those, not the model.
    """

    def __init__(
        self,
        permissions: IPermissionService,
        working_dir: str,
        client_factory: ClaudeCodeClientFactory,
        description: Optional[str] = None,
    ):
        self.permissions = permissions
        self.working_dir = working_dir
        self.client_factory = client_factory
        self._description = description

    @property
    def name(self) -> str:
        return CLAUDE_CODE_TOOL_NAME

    def info(self) -> ToolInfo:
        if self._description is None:
            self._description = load_description()
        return ToolInfo(
            name=CLAUDE_CODE_TOOL_NAME,
            description=self._description,
            parameters=ClaudeCodeParams.model_json_schema(),
            required=["query"],
        )

    async def run(self, call: ToolCall) -> ToolResponse:
        previous_cid = get_correlation_id()
        set_correlation_id(call.id or generate_correlation_id("call-"))
        try:
            return await self._run(call)
        finally:
            set_correlation_id(previous_cid)

    async def _run(self, call: ToolCall) -> ToolResponse:
        try:
            params = ClaudeCodeParams.model_validate_json(call.input or "{}")
        except ValidationError as e:
            logger.warning(f"[{call.id}] Invalid claude_code parameters: {e}")
            return ToolResponse.text_error(f"invalid parameters: {e}")

        if not params.query.strip():
            return ToolResponse.text_error(ERROR_QUERY_REQUIRED)

        try:
            model = ClaudeModel.from_choice(params.model)
        except InvalidModelError as e:
            return ToolResponse.text_error(str(e))

        try:
            exec_working_dir = resolve_working_dir(self.working_dir, params.working_dir)
        except ValueError as e:
            return ToolResponse.text_error(str(e))

        max_turns = params.max_turns if params.max_turns > 0 else CLAUDE_DEFAULT_MAX_TURNS

        session_id = get_session_id()
        if not session_id:
            raise SessionRequiredError()

        permission_request = CreatePermissionRequest(
            session_id=session_id,
            tool_call_id=call.id,
            tool_name=CLAUDE_CODE_TOOL_NAME,
            action=CLAUDE_CODE_PERMISSION_ACTION,
            description=f"Claude Code: {params.query}",
            path=exec_working_dir,
            params=params,
        )
        if not await self.permissions.request(permission_request):
            logger.info(f"[{session_id}] Permission denied for Claude Code in {exec_working_dir}")
            raise PermissionDeniedError()

        config = SessionConfig(
            query=params.query,
            working_dir=exec_working_dir,
            model=model,
            max_turns=max_turns,
            custom_instructions=params.custom_instructions,
            verbose=params.verbose,
            output_format=OutputFormat.JSON,
        )
        if params.session_id:
            config.session_id = params.session_id
            config.fork_session = params.fork_session
        if params.allowed_tools:
            config.allowed_tools = list(params.allowed_tools)
        if params.disallowed_tools:
            config.disallowed_tools = list(params.disallowed_tools)

        try:
            client = self.client_factory()
        except Exception as e:
            logger.error(f"[{session_id}] Failed to create Claude Code client: {e}")
            return ToolResponse.text_error(f"failed to create Claude Code client: {e}")

        logger.info(
            f"[{session_id}] Launching Claude Code: model={model.value}, "
            f"max_turns={max_turns}, cwd={exec_working_dir}, "
            f"resume={config.session_id or '-'}"
        )
        try:
            result = await client.launch_and_wait(config)
        except Exception as e:
            logger.error(f"[{session_id}] Claude Code session failed: {e}")
            return ToolResponse.text_error(f"Claude Code session failed: {e}")

        response = ClaudeCodeResponse.from_result(result)
        logger.info(
            f"[{session_id}] Claude Code finished: session={response.session_id}, "
            f"turns={response.num_turns}, cost=${response.cost_usd:.4f}, "
            f"is_error={response.is_error}"
        )
        return ToolResponse.text(response.to_json())
