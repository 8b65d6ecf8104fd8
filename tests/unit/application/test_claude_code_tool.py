"""Tests for ClaudeCodeTool"""

import json
import re
import pytest

from application.services.claude_code_tool import (
    ClaudeCodeTool,
    SessionRequiredError,
    resolve_working_dir,
)
from domain.services.agent_tool import ToolCall
from domain.services.claude_code_service import (
    ClaudeCodeClientError,
    ClaudeCodeResult,
    OutputFormat,
)
from domain.services.permission_service import PermissionDeniedError
from domain.value_objects.claude_model import ClaudeModel
from shared.context import session_scope
from shared.logging.correlation import get_correlation_id


def make_call(params=None, raw: str = None) -> ToolCall:
    return ToolCall(
        id="test-call-id",
        name="claude_code",
        input=raw if raw is not None else json.dumps(params or {}),
    )


async def run_in_session(tool, call, session_id="test-session"):
    with session_scope(session_id):
        return await tool.run(call)


class TestInfo:
    """Tests for tool metadata"""

    def test_info(self, claude_tool):
        info = claude_tool.info()
        assert info.name == "claude_code"
        assert info.description
        assert "query" in info.parameters["properties"]
        assert info.required == ["query"]

    def test_description_loaded_from_markdown(self, claude_tool):
        assert "Claude Code" in claude_tool.info().description


class TestValidParams:
    """Tests for successful runs"""

    @pytest.mark.asyncio
    async def test_returns_structured_response(self, claude_tool, recording_client):
        result = await run_in_session(claude_tool, make_call({
            "query": "Create a simple Python function that adds two numbers",
            "model": "sonnet",
        }))

        assert result.is_error is False
        response = json.loads(result.content)
        assert response["session_id"] == "stub-session"
        assert response["model_used"] == "claude-sonnet"
        assert response["result"] == "stub result"
        assert response["cost_usd"] == 0.25
        assert response["duration_ms"] == 900
        assert response["num_turns"] == 3
        assert response["is_error"] is False
        assert "error" not in response
        assert len(recording_client.calls) == 1

    @pytest.mark.asyncio
    async def test_session_config_defaults(self, claude_tool, recording_client):
        await run_in_session(claude_tool, make_call({"query": "Test"}))

        config = recording_client.calls[0]
        assert config.query == "Test"
        assert config.model == ClaudeModel.SONNET
        assert config.max_turns == 10
        assert config.working_dir == "/tmp"
        assert config.output_format == OutputFormat.JSON
        assert config.session_id is None
        assert config.fork_session is False
        assert config.allowed_tools == []
        assert config.disallowed_tools == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("choice,expected", [
        ("opus", ClaudeModel.OPUS),
        ("sonnet", ClaudeModel.SONNET),
        ("haiku", ClaudeModel.HAIKU),
        ("HAIKU", ClaudeModel.HAIKU),
    ])
    async def test_accepts_models(self, claude_tool, recording_client, choice, expected):
        result = await run_in_session(claude_tool, make_call({"query": "Test", "model": choice}))

        assert result.is_error is False
        assert recording_client.calls[0].model == expected

    @pytest.mark.asyncio
    async def test_passes_all_options(self, claude_tool, recording_client):
        await run_in_session(claude_tool, make_call({
            "query": "Analyze",
            "model": "opus",
            "max_turns": 3,
            "working_dir": "project",
            "allowed_tools": ["Read", "Glob"],
            "disallowed_tools": ["Write"],
            "custom_instructions": "Be brief",
            "session_id": "prev-session",
            "fork_session": True,
            "verbose": True,
        }))

        config = recording_client.calls[0]
        assert config.model == ClaudeModel.OPUS
        assert config.max_turns == 3
        assert config.working_dir == "/tmp/project"
        assert config.allowed_tools == ["Read", "Glob"]
        assert config.disallowed_tools == ["Write"]
        assert config.custom_instructions == "Be brief"
        assert config.session_id == "prev-session"
        assert config.fork_session is True
        assert config.verbose is True

    @pytest.mark.asyncio
    async def test_fork_ignored_without_session(self, claude_tool, recording_client):
        await run_in_session(claude_tool, make_call({"query": "Test", "fork_session": True}))

        config = recording_client.calls[0]
        assert config.session_id is None
        assert config.fork_session is False

    @pytest.mark.asyncio
    async def test_error_result_is_reported_in_response(self, allow_permissions, make_client):
        client = make_client(result=ClaudeCodeResult(
            session_id="s-1", is_error=True, error="error_max_turns", num_turns=10,
        ))
        tool = ClaudeCodeTool(allow_permissions, "/tmp", lambda: client)

        result = await run_in_session(tool, make_call({"query": "Test"}))

        response = json.loads(result.content)
        assert response["is_error"] is True
        assert response["error"] == "error_max_turns"
        assert response["model_used"] == "unknown"

    @pytest.mark.asyncio
    async def test_correlation_id_is_call_id_during_run(self, allow_permissions, make_client, stub_result):
        seen = []

        class CapturingClient(make_client):
            async def launch_and_wait(self, config):
                seen.append(get_correlation_id())
                return await super().launch_and_wait(config)

        client = CapturingClient(result=stub_result)
        tool = ClaudeCodeTool(allow_permissions, "/tmp", lambda: client)

        await run_in_session(tool, make_call({"query": "Test"}))

        assert seen == ["test-call-id"]
        assert get_correlation_id() is None

    @pytest.mark.asyncio
    async def test_correlation_id_generated_without_call_id(self, allow_permissions, make_client, stub_result):
        seen = []

        class CapturingClient(make_client):
            async def launch_and_wait(self, config):
                seen.append(get_correlation_id())
                return await super().launch_and_wait(config)

        client = CapturingClient(result=stub_result)
        tool = ClaudeCodeTool(allow_permissions, "/tmp", lambda: client)

        await run_in_session(tool, ToolCall(id="", name="claude_code", input='{"query": "Test"}'))

        assert len(seen) == 1
        assert re.fullmatch(r"call-[0-9a-f]{8}", seen[0])
        assert get_correlation_id() is None

    @pytest.mark.asyncio
    async def test_null_max_turns_uses_default(self, claude_tool, recording_client):
        result = await run_in_session(claude_tool, make_call({"query": "x", "max_turns": None}))

        assert result.is_error is False
        assert recording_client.calls[0].max_turns == 10

    @pytest.mark.asyncio
    async def test_null_flags_read_as_false(self, claude_tool, recording_client):
        result = await run_in_session(claude_tool, make_call({
            "query": "x",
            "session_id": "prev",
            "fork_session": None,
            "verbose": None,
            "model": None,
            "working_dir": None,
        }))

        assert result.is_error is False
        config = recording_client.calls[0]
        assert config.fork_session is False
        assert config.verbose is False
        assert config.model == ClaudeModel.SONNET
        assert config.working_dir == "/tmp"


class TestInputErrors:
    """Input errors come back as text, never as exceptions"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    async def test_empty_query(self, claude_tool, recording_client, query):
        result = await run_in_session(claude_tool, make_call({"query": query}))

        assert result.is_error is True
        assert "query is required" in result.content
        assert recording_client.calls == []

    @pytest.mark.asyncio
    async def test_null_query(self, claude_tool, recording_client):
        result = await run_in_session(claude_tool, make_call({"query": None}))

        assert result.is_error is True
        assert "query is required" in result.content
        assert recording_client.calls == []

    @pytest.mark.asyncio
    async def test_missing_query(self, claude_tool):
        result = await run_in_session(claude_tool, make_call({"model": "opus"}))

        assert "query is required" in result.content

    @pytest.mark.asyncio
    async def test_invalid_model(self, claude_tool, recording_client, allow_permissions):
        result = await run_in_session(claude_tool, make_call({"query": "Test query", "model": "invalid-model"}))

        assert result.is_error is True
        assert "invalid model" in result.content
        assert "invalid-model" in result.content
        assert recording_client.calls == []
        assert allow_permissions.requests == []

    @pytest.mark.asyncio
    async def test_invalid_json(self, claude_tool, recording_client):
        result = await run_in_session(claude_tool, make_call(raw="invalid json"))

        assert result.is_error is True
        assert "invalid parameters" in result.content
        assert recording_client.calls == []

    @pytest.mark.asyncio
    async def test_wrong_field_type(self, claude_tool):
        result = await run_in_session(claude_tool, make_call({"query": "Test", "max_turns": "many"}))

        assert "invalid parameters" in result.content

    @pytest.mark.asyncio
    async def test_working_dir_escape(self, claude_tool, recording_client):
        result = await run_in_session(claude_tool, make_call({"query": "Test", "working_dir": "../etc"}))

        assert result.is_error is True
        assert "invalid working_dir" in result.content
        assert recording_client.calls == []


class TestGates:
    """Session and permission failures are raised"""

    @pytest.mark.asyncio
    async def test_no_session_id(self, claude_tool, recording_client, allow_permissions):
        with pytest.raises(SessionRequiredError, match="session ID is required"):
            await claude_tool.run(make_call({"query": "Test query"}))

        assert allow_permissions.requests == []
        assert recording_client.calls == []

    @pytest.mark.asyncio
    async def test_permission_denied(self, deny_permissions, recording_client):
        tool = ClaudeCodeTool(deny_permissions, "/tmp", lambda: recording_client)

        with pytest.raises(PermissionDeniedError):
            await run_in_session(tool, make_call({"query": "Test query"}))

        assert recording_client.calls == []

    @pytest.mark.asyncio
    async def test_permission_request_contents(self, claude_tool, allow_permissions):
        await run_in_session(
            claude_tool,
            make_call({"query": "Refactor", "working_dir": "/src"}),
            session_id="sess-42",
        )

        request = allow_permissions.requests[0]
        assert request.session_id == "sess-42"
        assert request.tool_call_id == "test-call-id"
        assert request.tool_name == "claude_code"
        assert request.action == "execute"
        assert request.description == "Claude Code: Refactor"
        assert request.path == "/tmp/src"
        assert request.params.query == "Refactor"


class TestClientErrors:
    """Client failures come back as text including the cause"""

    @pytest.mark.asyncio
    async def test_factory_failure(self, allow_permissions):
        def broken_factory():
            raise RuntimeError("claude not installed")

        tool = ClaudeCodeTool(allow_permissions, "/tmp", broken_factory)
        result = await run_in_session(tool, make_call({"query": "Test"}))

        assert result.is_error is True
        assert result.content == "failed to create Claude Code client: claude not installed"

    @pytest.mark.asyncio
    async def test_launch_failure(self, allow_permissions, make_client):
        client = make_client(error=ClaudeCodeClientError("Process exited with code 1"))
        tool = ClaudeCodeTool(allow_permissions, "/tmp", lambda: client)

        result = await run_in_session(tool, make_call({"query": "Test"}))

        assert result.is_error is True
        assert result.content == "Claude Code session failed: Process exited with code 1"
        assert len(client.calls) == 1


class TestResolveWorkingDir:
    """Tests for resolve_working_dir"""

    def test_no_override(self):
        assert resolve_working_dir("/tmp", None) == "/tmp"
        assert resolve_working_dir("/tmp/", "") == "/tmp"

    def test_relative_override(self):
        assert resolve_working_dir("/tmp", "a/b") == "/tmp/a/b"

    def test_absolute_override_is_joined(self):
        assert resolve_working_dir("/tmp", "/project") == "/tmp/project"

    def test_inner_dotdot_allowed(self):
        assert resolve_working_dir("/tmp", "a/../b") == "/tmp/b"

    def test_dot_is_base(self):
        assert resolve_working_dir("/tmp", ".") == "/tmp"

    def test_escape_rejected(self):
        with pytest.raises(ValueError, match="invalid working_dir"):
            resolve_working_dir("/tmp", "a/../../etc")

    def test_null_bytes_rejected(self):
        with pytest.raises(ValueError, match="null bytes"):
            resolve_working_dir("/tmp", "a\x00b")
