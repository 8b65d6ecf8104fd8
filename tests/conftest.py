"""
Pytest configuration and shared fixtures for the test suite.
"""

import os
import pytest
from typing import Optional

# Keep tests independent from the developer's environment
os.environ.setdefault("CLAUDE_BACKEND", "cli")
os.environ.setdefault("LOG_LEVEL", "INFO")

from domain.services.claude_code_service import (
    ClaudeCodeResult,
    IClaudeCodeClient,
    ModelUsageDetail,
    SessionConfig,
)
from domain.services.permission_service import CreatePermissionRequest, IPermissionService
from application.services.claude_code_tool import ClaudeCodeTool
from shared.logging.correlation import set_correlation_id
from shared.context import set_session_id


# ============================================================================
# Test doubles
# ============================================================================

class RecordingClaudeCodeClient(IClaudeCodeClient):
    """Client stub that records every SessionConfig it receives"""

    def __init__(self, result: Optional[ClaudeCodeResult] = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: list[SessionConfig] = []

    async def launch_and_wait(self, config: SessionConfig) -> ClaudeCodeResult:
        self.calls.append(config)
        if self.error is not None:
            raise self.error
        return self.result


class StubPermissionService(IPermissionService):
    """Permission gate with a fixed answer that records requests"""

    def __init__(self, should_allow: bool = True):
        self.should_allow = should_allow
        self.requests: list[CreatePermissionRequest] = []

    async def request(self, request: CreatePermissionRequest) -> bool:
        self.requests.append(request)
        return self.should_allow


# ============================================================================
# Isolation
# ============================================================================

@pytest.fixture(autouse=True)
def reset_call_context():
    """Every test starts without a bound session or correlation id."""
    set_session_id(None)
    set_correlation_id(None)
    yield
    set_session_id(None)
    set_correlation_id(None)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def stub_result() -> ClaudeCodeResult:
    """Create a successful Claude Code result."""
    return ClaudeCodeResult(
        result="stub result",
        session_id="stub-session",
        cost_usd=0.25,
        duration_ms=900,
        num_turns=3,
        model_usage={"claude-3.5-sonnet": ModelUsageDetail()},
    )


@pytest.fixture
def recording_client(stub_result) -> RecordingClaudeCodeClient:
    """Create a client stub returning stub_result."""
    return RecordingClaudeCodeClient(result=stub_result)


@pytest.fixture
def allow_permissions() -> StubPermissionService:
    return StubPermissionService(should_allow=True)


@pytest.fixture
def deny_permissions() -> StubPermissionService:
    return StubPermissionService(should_allow=False)


@pytest.fixture
def claude_tool(allow_permissions, recording_client) -> ClaudeCodeTool:
    """Create a tool rooted at /tmp that always gets permission."""
    return ClaudeCodeTool(
        permissions=allow_permissions,
        working_dir="/tmp",
        client_factory=lambda: recording_client,
    )


@pytest.fixture
def make_client():
    """Factory for client stubs with a custom result or error."""
    return RecordingClaudeCodeClient


@pytest.fixture
def make_permissions():
    """Factory for permission stubs."""
    return StubPermissionService
