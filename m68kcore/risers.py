"""Units that raise interrupt and trace exceptions from the CPU's state."""

from __future__ import annotations

from typing import Callable

from m68kcore.exception_manager import ExceptionManager, ExceptionType


class InterruptRiser:
    """Raises interrupts from the interrupt priority level on the bus.

    A level above the interrupt mask raises an interrupt. Level 7 cannot be
    masked and raises one on each transition to 7.
    """

    def __init__(self, exman: ExceptionManager, ipl: int = 0) -> None:
        self._exman = exman
        self._prev_ipl = ipl
        self._raised_ipl = 0

    def cycle(self, ipl: int, ipm: int) -> None:
        """Sample the bus level ``ipl`` against the interrupt mask ``ipm``."""
        if self._exman.is_raised(ExceptionType.INTERRUPT) and self._raised_ipl != ipl:
            # the level changed before the pending interrupt was processed
            self._exman.accept_interrupt()

        if not self._exman.is_raised(ExceptionType.INTERRUPT):
            non_maskable_edge = ipl == 0b111 and self._prev_ipl != ipl
            if non_maskable_edge or ipl > ipm:
                self._exman.rise_interrupt(ipl)
                self._raised_ipl = ipl

        self._prev_ipl = ipl


class TraceRiser:
    """Raises a trace exception when an instruction completes with tracing on."""

    def __init__(self, exman: ExceptionManager, instruction_unit_is_idle: Callable[[], bool]) -> None:
        if instruction_unit_is_idle is None:
            raise ValueError("instruction_unit_is_idle")
        self._exman = exman
        self._instruction_unit_is_idle = instruction_unit_is_idle
        self._executing = False
        self._tracing_is_enabled = False

    def reset(self) -> None:
        self._executing = False
        self._tracing_is_enabled = False

    def cycle(self, trace_enabled: bool) -> None:
        """Call at the start of a cycle with the current TR flag."""
        # the flag is saved before an instruction starts and used when it ends
        if self._instruction_unit_is_idle():
            self._tracing_is_enabled = bool(trace_enabled)

    def post_cycle(self) -> None:
        """Call at the end of a cycle."""
        idle = self._instruction_unit_is_idle()
        if self._executing and idle:
            self._rise_trace_if_required()
        self._executing = not idle

    def _rise_trace_if_required(self) -> None:
        if not self._tracing_is_enabled:
            return
        if self._exman.is_raised(ExceptionType.ILLEGAL_INSTRUCTION) or self._exman.is_raised(
            ExceptionType.PRIVILEGE_VIOLATIONS
        ):
            return
        self._exman.rise_trace()