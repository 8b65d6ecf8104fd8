"""
Agent Tool Interface

The seam between the host agent framework and a single tool: the framework
hands over a ToolCall with the model's raw JSON input and expects a
ToolResponse back. Input problems are reported as error responses; only
gate failures (session, permission) are raised.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolCall:
    """A tool invocation requested by the model"""
    id: str
    name: str
    input: str = "{}"


@dataclass
class ToolResponse:
    """Textual tool output handed back to the model"""
    content: str
    is_error: bool = False

    @classmethod
    def text(cls, content: str) -> "ToolResponse":
        return cls(content=content)

    @classmethod
    def text_error(cls, content: str) -> "ToolResponse":
        return cls(content=content, is_error=True)


@dataclass
class ToolInfo:
    """Tool metadata published to the model"""
    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)


class IAgentTool(ABC):
    """Interface for a tool the host framework can call"""

    @abstractmethod
    def info(self) -> ToolInfo:
        pass

    @abstractmethod
    async def run(self, call: ToolCall) -> ToolResponse:
        pass
