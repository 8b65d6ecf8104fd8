"""
Claude Agent SDK Client

Runs a Claude Code session through the official Agent SDK instead of a
hand-built CLI command line. The SDK still drives the claude CLI
underneath; this client collects the message stream into one
ClaudeCodeResult.
"""

import logging
from typing import Any, Optional

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ClaudeSDKError,
    ResultMessage,
    TextBlock,
    query,
)

from domain.services.claude_code_service import (
    ClaudeCodeClientError,
    ClaudeCodeResult,
    IClaudeCodeClient,
    ModelUsageDetail,
    SessionConfig,
)

logger = logging.getLogger(__name__)


def _usage_int(usage: Optional[dict], key: str) -> int:
    if not usage:
        return 0
    try:
        return int(usage.get(key) or 0)
    except (TypeError, ValueError):
        return 0


class ClaudeAgentSDKClient(IClaudeCodeClient):
    """
    Claude Code backend over claude-agent-sdk.

    Permissions are decided by the tool's gate before launch, so the SDK
    session runs with the CLI's own permission handling untouched.
    """

    def build_options(self, config: SessionConfig) -> ClaudeAgentOptions:
        """Translate a SessionConfig into ClaudeAgentOptions"""
        kwargs: dict[str, Any] = {
            "cwd": config.working_dir,
            "model": config.model.value,
            "max_turns": config.max_turns,
            "allowed_tools": list(config.allowed_tools),
            "disallowed_tools": list(config.disallowed_tools),
        }

        if config.custom_instructions:
            kwargs["system_prompt"] = {
                "type": "preset",
                "preset": "claude_code",
                "append": config.custom_instructions,
            }

        if config.session_id:
            kwargs["resume"] = config.session_id
            kwargs["fork_session"] = config.fork_session

        if config.verbose:
            kwargs["stderr"] = lambda line: logger.debug(f"CLI: {line.rstrip()}")

        return ClaudeAgentOptions(**kwargs)

    async def launch_and_wait(self, config: SessionConfig) -> ClaudeCodeResult:
        options = self.build_options(config)
        model_usage: dict[str, ModelUsageDetail] = {}
        text_buffer: list[str] = []
        final: Optional[ResultMessage] = None

        logger.info(f"Starting SDK session in {config.working_dir}")
        logger.debug(f"Prompt: {config.query[:200]}")

        try:
            async for message in query(prompt=config.query, options=options):
                if isinstance(message, AssistantMessage):
                    model_name = getattr(message, "model", None)
                    if model_name and model_name not in model_usage:
                        model_usage[model_name] = ModelUsageDetail()
                    for block in message.content:
                        if isinstance(block, TextBlock):
                            text_buffer.append(block.text)

                elif isinstance(message, ResultMessage):
                    final = message
        except ClaudeSDKError as e:
            raise ClaudeCodeClientError(str(e)) from e

        if final is None:
            raise ClaudeCodeClientError("Claude Code finished without a result message")

        logger.info(
            f"SDK session completed: "
            f"turns={final.num_turns}, "
            f"cost=${final.total_cost_usd or 0:.4f}"
        )

        # Usage is reported in aggregate; attribute it when only one model ran
        if len(model_usage) == 1:
            detail = next(iter(model_usage.values()))
            detail.input_tokens = _usage_int(final.usage, "input_tokens")
            detail.output_tokens = _usage_int(final.usage, "output_tokens")
            detail.cache_read_input_tokens = _usage_int(final.usage, "cache_read_input_tokens")
            detail.cache_creation_input_tokens = _usage_int(final.usage, "cache_creation_input_tokens")
            detail.cost_usd = final.total_cost_usd or 0.0

        error = None
        if final.is_error:
            error = final.subtype if final.subtype and final.subtype != "success" else "Claude Code reported an error"

        return ClaudeCodeResult(
            result=final.result if final.result is not None else "\n".join(text_buffer),
            session_id=final.session_id or "",
            cost_usd=final.total_cost_usd or 0.0,
            duration_ms=final.duration_ms or 0,
            num_turns=final.num_turns or 0,
            is_error=bool(final.is_error),
            error=error,
            model_usage=model_usage,
        )
