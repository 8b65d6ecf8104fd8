#!/usr/bin/env python3
"""
Claude Code Tool - example usage

Drives the claude_code tool the way a host agent framework would:
- a permission callback that announces and allows every request
- a session id bound to the call context
- raw JSON tool input, JSON result back

Example 1 generates code and saves the full answer to a markdown file,
example 2 runs a read-only analysis with tool allow/deny lists.
"""

import asyncio
import json
import logging
import os
import sys

from domain.services.agent_tool import ToolCall
from domain.services.permission_service import CreatePermissionRequest, PermissionDeniedError
from application.services.claude_code_tool import SessionRequiredError
from shared.config.settings import settings
from shared.container import Container
from shared.context import session_scope
from shared.logging.config import setup_logging

logger = logging.getLogger(__name__)


def demo_permission_callback(request: CreatePermissionRequest) -> bool:
    """Allow everything, but say what is being allowed"""
    print(f"Permission requested for: {request.description}")
    return True


def print_response(content: str, preview_chars: int) -> dict:
    response = json.loads(content)
    print(f"✅ Session ID: {response['session_id']}")
    print(f"💰 Cost: ${response['cost_usd']:.4f}")
    print(f"⏱️  Duration: {response['duration_ms']}ms")
    print(f"🔄 Turns: {response['num_turns']}")
    print(f"📝 Result preview: {response['result'][:preview_chars]}...")
    return response


async def run_example(tool, session_id: str, call_id: str, params: dict):
    call = ToolCall(id=call_id, name=tool.name, input=json.dumps(params))
    with session_scope(session_id):
        return await tool.run(call)


async def main() -> int:
    setup_logging(settings.log_level, settings.log_dir)

    print("🚀 Claude Code Integration Example")
    print("==================================")

    container = Container(settings=settings, permission_callback=demo_permission_callback)
    tool = container.claude_code_tool()
    working_dir = settings.claude_code.working_dir

    # Example 1: Simple code generation
    print("\n📋 Example 1: Simple Python HTTP Server")
    print("---------------------------------------")
    try:
        result1 = await run_example(tool, "example-session-1", "example-call-1", {
            "query": "Create a simple Python HTTP server with a /hello endpoint that returns a JSON response",
            "model": "sonnet",
            "max_turns": 5,
        })
        if result1.is_error:
            logger.error(f"Example 1 failed: {result1.content}")
        else:
            response = print_response(result1.content, 200)
            result_file = os.path.join(working_dir, "claude_code_example_1.md")
            try:
                with open(result_file, "w", encoding="utf-8") as f:
                    f.write(response["result"])
                print(f"💾 Full result saved to: {result_file}")
            except OSError as e:
                logger.error(f"Failed to save result: {e}")
    except (SessionRequiredError, PermissionDeniedError) as e:
        logger.error(f"Example 1 failed: {e}")

    # Example 2: Code analysis with restrictions
    print("\n📋 Example 2: Code Analysis (Read-only)")
    print("---------------------------------------")
    try:
        result2 = await run_example(tool, "example-session-2", "example-call-2", {
            "query": "Analyze the project structure and identify the main components",
            "model": "sonnet",
            "allowed_tools": ["Bash", "Glob", "Grep", "Read", "LS"],
            "disallowed_tools": ["Edit", "Write", "MultiEdit"],
            "max_turns": 3,
        })
        if result2.is_error:
            logger.error(f"Example 2 failed: {result2.content}")
        else:
            print_response(result2.content, 300)
    except (SessionRequiredError, PermissionDeniedError) as e:
        logger.error(f"Example 2 failed: {e}")

    print("\n🎉 Examples completed!")
    print("======================")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
