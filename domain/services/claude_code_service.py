"""
Claude Code Client Interface

Defines the contract for launching a Claude Code session and waiting for
its result. Backends (CLI subprocess, Agent SDK) implement it in the
infrastructure layer; the tool only depends on this interface, so tests
can swap in a recording fake.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from domain.value_objects.claude_model import ClaudeModel


class OutputFormat(str, Enum):
    """Claude Code --output-format values"""
    TEXT = "text"
    JSON = "json"
    STREAM_JSON = "stream-json"


class ClaudeCodeClientError(Exception):
    """Raised when the external Claude Code process cannot produce a result"""


@dataclass
class SessionConfig:
    """Everything needed to launch one Claude Code session"""
    query: str
    working_dir: str
    model: ClaudeModel = ClaudeModel.SONNET
    max_turns: int = 10
    custom_instructions: Optional[str] = None
    verbose: bool = False
    session_id: Optional[str] = None
    fork_session: bool = False
    allowed_tools: list[str] = field(default_factory=list)
    disallowed_tools: list[str] = field(default_factory=list)
    output_format: OutputFormat = OutputFormat.JSON


@dataclass
class ModelUsageDetail:
    """Per-model token usage reported by Claude Code"""
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_input_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cost_usd: float = 0.0


@dataclass
class ClaudeCodeResult:
    """Final result of a Claude Code session"""
    result: str = ""
    session_id: str = ""
    cost_usd: float = 0.0
    duration_ms: int = 0
    num_turns: int = 0
    is_error: bool = False
    error: Optional[str] = None
    model_usage: dict[str, ModelUsageDetail] = field(default_factory=dict)


class IClaudeCodeClient(ABC):
    """Interface for a Claude Code backend"""

    @abstractmethod
    async def launch_and_wait(self, config: SessionConfig) -> ClaudeCodeResult:
        """Run a session to completion.

        Raises:
            ClaudeCodeClientError: if the process fails to produce a result
        """
        pass


ClaudeCodeClientFactory = Callable[[], IClaudeCodeClient]
