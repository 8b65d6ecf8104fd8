"""
Application Constants

Central location for the Claude Code tool's magic numbers and literals.
"""

# === Tool ===
CLAUDE_CODE_TOOL_NAME = "claude_code"
CLAUDE_CODE_PERMISSION_ACTION = "execute"

# === Claude Code ===
CLAUDE_DEFAULT_MAX_TURNS = 10
CLAUDE_DEFAULT_TIMEOUT_SECONDS = 600
CLAUDE_STDERR_TAIL_CHARS = 2000

# === Model labels reported back to the caller ===
MODEL_LABEL_SONNET = "claude-sonnet"
MODEL_LABEL_HAIKU = "claude-haiku"
MODEL_LABEL_OPUS = "claude-opus"
MODEL_LABEL_UNKNOWN = "unknown"

# === Error Messages ===
ERROR_QUERY_REQUIRED = "query is required and cannot be empty"
ERROR_SESSION_REQUIRED = "session ID is required for Claude Code operations"
ERROR_PERMISSION_DENIED = "permission denied"
