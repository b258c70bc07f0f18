#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data models for a single view invocation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union


class InvocationState(Enum):
    """
    Lifecycle of one ``ViewClient.invoke`` call.
    """
    IDLE = "idle"
    VALIDATING = "validating"
    CONNECTING = "connecting"
    SENDING = "sending"
    AWAITING_RESPONSE = "awaiting_response"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class InvocationRequest:
    """
    Function name plus payload, created fresh for each call.
    """

    function_name: str
    payload: Optional[bytes] = None

    def __post_init__(self) -> None:
        if not self.function_name:
            raise ValueError("function_name must be a non-empty string")


@dataclass
class InvocationAttempt:
    """
    State of one ``invoke`` call. Owned by that call and dropped with it.
    """

    function_name: str
    state: InvocationState = InvocationState.IDLE
    history: List[InvocationState] = field(default_factory=lambda: [InvocationState.IDLE])

    def advance(self, new_state: InvocationState) -> InvocationState:
        previous = self.state
        self.state = new_state
        self.history.append(new_state)
        return previous


@dataclass(frozen=True)
class ByteSequenceResult:
    """Raw bytes returned by the view."""

    data: bytes


@dataclass(frozen=True)
class ValueResult:
    """Any other (structured) value returned by the view."""

    value: Any


InvocationResult = Union[ByteSequenceResult, ValueResult]
