from .cli_client import ClaudeCodeCLIClient
from .sdk_client import ClaudeAgentSDKClient

__all__ = [
    "ClaudeCodeCLIClient",
    "ClaudeAgentSDKClient",
]
