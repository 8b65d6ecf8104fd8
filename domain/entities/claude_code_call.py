"""
Claude Code Call Entities

Request and response records of a single claude_code tool call:
- ClaudeCodeParams is the input schema the model fills in
- ClaudeCodeResponse is the JSON document handed back to the model
"""

import json
from dataclasses import asdict, dataclass
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from domain.services.claude_code_service import ClaudeCodeResult
from domain.value_objects.claude_model import resolve_model_label


class ClaudeCodeParams(BaseModel):
    """Parameters of the claude_code tool"""
    query: str = Field(
        "", description="The task or question for Claude Code to perform"
    )
    model: Optional[str] = Field(
        None, description="Claude model to use (opus, sonnet, haiku). Defaults to sonnet"
    )
    working_dir: Optional[str] = Field(
        None, description="Working directory for Claude Code operations (defaults to current directory)"
    )
    max_turns: int = Field(
        0, description="Maximum number of turns for the session. Defaults to 10"
    )
    allowed_tools: list[str] = Field(
        default_factory=list,
        description="List of tools Claude Code is allowed to use. Defaults to all built-in tools",
    )
    disallowed_tools: list[str] = Field(
        default_factory=list, description="List of tools Claude Code is not allowed to use"
    )
    custom_instructions: Optional[str] = Field(
        None, description="Custom instructions to prepend to the system prompt"
    )
    session_id: Optional[str] = Field(
        None, description="Resume an existing session by providing its ID"
    )
    fork_session: bool = Field(
        False, description="If true with session_id, forks instead of resuming"
    )
    verbose: bool = Field(False, description="Enable verbose output")

    @field_validator('query', 'max_turns', 'fork_session', 'verbose', mode='before')
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        """JSON null reads as the field's zero value"""
        return cls.model_fields[info.field_name].default if v is None else v

    @field_validator('allowed_tools', 'disallowed_tools', mode='before')
    @classmethod
    def null_to_empty(cls, v: Any) -> Any:
        """JSON null means no restriction"""
        return [] if v is None else v


@dataclass
class ClaudeCodeResponse:
    """Structured result of a claude_code tool call"""
    result: str
    session_id: str
    cost_usd: float
    duration_ms: int
    num_turns: int
    is_error: bool
    model_used: str
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: ClaudeCodeResult) -> "ClaudeCodeResponse":
        return cls(
            result=result.result,
            session_id=result.session_id,
            cost_usd=result.cost_usd,
            duration_ms=result.duration_ms,
            num_turns=result.num_turns,
            is_error=result.is_error,
            model_used=resolve_model_label(result.model_usage),
            error=result.error or None,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        if not data["error"]:
            data.pop("error")
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
