"""Poll cycle orchestration."""

from .poll_cycle import CycleResult, PollCycle

__all__ = ['CycleResult', 'PollCycle']
