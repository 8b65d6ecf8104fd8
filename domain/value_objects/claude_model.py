"""Claude model value object.

Models a caller may pick for a Claude Code run, and the mapping from the
usage map reported by the CLI back to a human readable model label.
"""

from enum import Enum
from typing import Any, Mapping, Optional

from shared.constants import (
    MODEL_LABEL_HAIKU,
    MODEL_LABEL_OPUS,
    MODEL_LABEL_SONNET,
    MODEL_LABEL_UNKNOWN,
)


class InvalidModelError(ValueError):
    """Raised when a model choice is not opus, sonnet or haiku"""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid model: {value}. Must be opus, sonnet, or haiku")


class ClaudeModel(str, Enum):
    """Model aliases accepted by the claude CLI --model flag."""

    OPUS = "opus"
    SONNET = "sonnet"
    HAIKU = "haiku"

    @classmethod
    def default(cls) -> "ClaudeModel":
        return cls.SONNET

    @classmethod
    def from_choice(cls, value: Optional[str]) -> "ClaudeModel":
        """Parse a caller supplied model name.

        Empty means the default model. Matching is case-insensitive.

        Raises:
            InvalidModelError: for anything but opus, sonnet or haiku
        """
        if value is None or value == "":
            return cls.default()
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidModelError(value)


# Exact usage keys, checked in order; first hit wins
_EXACT_MODEL_KEYS: tuple[tuple[str, str], ...] = (
    ("claude-3.5-sonnet", MODEL_LABEL_SONNET),
    ("claude-3-sonnet", MODEL_LABEL_SONNET),
    ("claude-3.5-haiku", MODEL_LABEL_HAIKU),
    ("claude-3-haiku", MODEL_LABEL_HAIKU),
    ("claude-3-opus", MODEL_LABEL_OPUS),
)

_FAMILY_LABELS: tuple[tuple[str, str], ...] = (
    ("sonnet", MODEL_LABEL_SONNET),
    ("haiku", MODEL_LABEL_HAIKU),
    ("opus", MODEL_LABEL_OPUS),
)


def resolve_model_label(model_usage: Optional[Mapping[str, Any]]) -> str:
    """
    Map a per-model usage map to a model label.

    Known short keys are matched exactly first. Full model ids such as
    "claude-sonnet-4-5-20250929" fall through to a family substring match
    over the sorted keys.

    Returns:
        One of claude-sonnet, claude-haiku, claude-opus or unknown
    """
    if not model_usage:
        return MODEL_LABEL_UNKNOWN

    for key, label in _EXACT_MODEL_KEYS:
        if key in model_usage:
            return label

    keys = sorted(str(k).lower() for k in model_usage)
    for family, label in _FAMILY_LABELS:
        if any(family in key for key in keys):
            return label

    return MODEL_LABEL_UNKNOWN
