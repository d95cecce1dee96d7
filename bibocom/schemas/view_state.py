"""
Ephemeral view state held by the controllers.

Editing and the message context menu are one tagged union, ``ViewMode``,
so a message cannot be edited while another one has its menu open.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Literal, Union


class ConversationStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SENDING = "sending"


@dataclass(frozen=True)
class MenuPosition:
    x: float = 0
    y: float = 0


@dataclass(frozen=True)
class IdleMode:
    kind: Literal["idle"] = "idle"


@dataclass(frozen=True)
class EditingMode:
    message_id: int
    content: str
    kind: Literal["editing"] = "editing"


@dataclass(frozen=True)
class MenuOpenMode:
    message_id: int
    position: MenuPosition = field(default_factory=MenuPosition)
    kind: Literal["menu_open"] = "menu_open"


ViewMode = Union[IdleMode, EditingMode, MenuOpenMode]

IDLE = IdleMode()


@dataclass(frozen=True)
class Toast:
    message: str
    kind: Literal["success", "error"] = "success"


@dataclass(frozen=True)
class NavigationRequest:
    route: str
    state: dict[str, Any] = field(default_factory=dict)
