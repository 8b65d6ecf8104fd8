from dataclasses import dataclass, field
from typing import Optional
import os
from dotenv import load_dotenv

from domain.value_objects.backend_mode import BackendMode
from shared.constants import CLAUDE_DEFAULT_TIMEOUT_SECONDS

load_dotenv()


@dataclass
class ClaudeCodeConfig:
    """Claude Code execution configuration

    The working directory is the base every tool call runs under; a call
    may only narrow it to a sub-directory.
    """
    claude_path: str = "claude"
    working_dir: str = field(default_factory=os.getcwd)
    backend: BackendMode = BackendMode.CLI
    timeout_seconds: int = CLAUDE_DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "ClaudeCodeConfig":
        backend_str = os.getenv("CLAUDE_BACKEND", BackendMode.CLI.value).strip().lower()
        try:
            backend = BackendMode(backend_str)
        except ValueError:
            raise ValueError(
                f"CLAUDE_BACKEND must be one of: {', '.join(m.value for m in BackendMode)}"
            )

        return cls(
            claude_path=os.getenv("CLAUDE_PATH", "claude"),
            working_dir=os.getenv("CLAUDE_WORKING_DIR") or os.getcwd(),
            backend=backend,
            timeout_seconds=int(os.getenv("CLAUDE_TIMEOUT", str(CLAUDE_DEFAULT_TIMEOUT_SECONDS))),
        )


@dataclass
class Settings:
    """Application settings"""
    claude_code: ClaudeCodeConfig
    debug: bool = False
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            claude_code=ClaudeCodeConfig.from_env(),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR") or None,
        )


# Global settings instance
settings = Settings.from_env()
