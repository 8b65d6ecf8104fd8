"""
Permission Service Interface

The permission gate every side-effecting tool asks before it acts.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from shared.constants import ERROR_PERMISSION_DENIED


class PermissionDeniedError(Exception):
    """Raised by a tool when the permission gate refuses the action"""

    def __init__(self, message: str = ERROR_PERMISSION_DENIED):
        super().__init__(message)


@dataclass
class CreatePermissionRequest:
    """A request to perform an action on behalf of a session"""
    session_id: str
    tool_call_id: str
    tool_name: str
    action: str
    description: str
    path: Optional[str] = None
    params: Any = None


class IPermissionService(ABC):
    """Interface for the permission gate"""

    @abstractmethod
    async def request(self, request: CreatePermissionRequest) -> bool:
        """Return True if the action may proceed"""
        pass


# Host-supplied decision function: plain or coroutine function
PermissionCallback = Callable[[CreatePermissionRequest], Union[bool, Awaitable[bool]]]
