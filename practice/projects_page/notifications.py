# File: /practice/projects_page/notifications.py | Version: 1.0 | Title: User Notification Channel, Friendly Errors & Best-Effort Calls
from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, List, Literal, MutableSet, Optional, Protocol, Tuple

from practice.projects_page.transport import ApiError

log = logging.getLogger(__name__)

Variant = Literal["default", "destructive"]


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: Variant = "default"


class Notifier(Protocol):
    def notify(self, title: str, description: str, variant: Variant = "default") -> None: ...


class LogNotifier:
    """Notifier that only writes to the log."""

    def notify(self, title: str, description: str, variant: Variant = "default") -> None:
        level = logging.WARNING if variant == "destructive" else logging.INFO
        log.log(level, "%s: %s", title, description)


class CollectingNotifier:
    """Keeps every notification in order."""

    def __init__(self) -> None:
        self.items: List[Notification] = []

    def notify(self, title: str, description: str, variant: Variant = "default") -> None:
        self.items.append(Notification(title, description, variant))

    @property
    def errors(self) -> List[Notification]:
        return [n for n in self.items if n.variant == "destructive"]

    @property
    def titles(self) -> List[str]:
        return [n.title for n in self.items]


# -------------------- Friendly errors --------------------

_MAPPINGS: List[Tuple[re.Pattern[str], str, str]] = [
    (
        re.compile(r"unique.*constraint|duplicate key|violates unique"),
        "Duplicate Entry",
        "This value already exists in the system. Please use a different value.",
    ),
    (
        re.compile(r"unauthorized|not authenticated|could not validate credentials|session expired"),
        "Please Log In",
        "Your session has expired or you need to log in to do this.",
    ),
    (
        re.compile(r"forbidden|not allowed|access denied|permission denied|not enough permissions"),
        "Access Restricted",
        "You don't have permission to do this.",
    ),
    (
        re.compile(r"not found|does not exist|no such"),
        "Item Not Found",
        "We couldn't find what you're looking for. It may have been moved or deleted.",
    ),
    (
        re.compile(r"network error|connection refused|connecterror"),
        "Connection Problem",
        "We're having trouble connecting to the server. Please try again.",
    ),
    (
        re.compile(r"timeout|timed out"),
        "Request Timed Out",
        "The server is taking too long to respond. Please try again in a moment.",
    ),
    (
        re.compile(r"internal server error|server error"),
        "Server Error",
        "Something went wrong on our end. Please try again in a moment.",
    ),
    (
        re.compile(r"validation error|invalid input|invalid data|field required"),
        "Invalid Input",
        "Some of the information you entered isn't valid.",
    ),
]

_STATUS_TITLES = {
    401: "Please Log In",
    403: "Access Restricted",
    404: "Item Not Found",
}


def _message_of(error: Any) -> str:
    if isinstance(error, str):
        return error
    if isinstance(error, ApiError):
        return error.message
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "An unexpected error occurred"


def friendly_error(
    error: Any,
    fallback_title: str = "Error",
    fallback_description: Optional[str] = None,
) -> Tuple[str, str]:
    """Map an exception or message to a (title, description) pair for users."""
    message = _message_of(error)
    lowered = message.lower()
    for pattern, title, description in _MAPPINGS:
        if pattern.search(lowered):
            return title, description
    if isinstance(error, ApiError) and error.status_code in _STATUS_TITLES:
        return _STATUS_TITLES[error.status_code], message
    if isinstance(error, ApiError) and error.status_code >= 500:
        return "Server Error", "Something went wrong on our end. Please try again in a moment."
    return fallback_title, fallback_description or message


def notify_error(notifier: Notifier, error: Any, fallback_title: str = "Error") -> None:
    title, description = friendly_error(error, fallback_title)
    notifier.notify(title, description, "destructive")


# -------------------- Best-effort calls --------------------


def best_effort(
    awaitable: Awaitable[Any],
    what: str,
    tasks: Optional[MutableSet["asyncio.Task[Any]"]] = None,
) -> "asyncio.Task[Any]":
    """
    Run `awaitable` detached from the caller. A failure is logged and never
    reaches the caller; `tasks` (if given) holds the task until it finishes.
    """

    async def _guarded() -> Any:
        try:
            return await awaitable
        except Exception as exc:
            log.warning("%s failed: %s", what, exc)
            return None

    task = asyncio.get_running_loop().create_task(_guarded())
    if tasks is not None:
        tasks.add(task)
        task.add_done_callback(tasks.discard)
    return task
