"""Domain value objects"""

from domain.value_objects.backend_mode import BackendMode
from domain.value_objects.claude_model import (
    ClaudeModel,
    InvalidModelError,
    resolve_model_label,
)

__all__ = [
    "BackendMode",
    "ClaudeModel",
    "InvalidModelError",
    "resolve_model_label",
]
