"""Runner module - ordered booking lifecycle."""

from .lifecycle import (
    BookingLifecycleRunner,
    LifecycleReport,
    LifecycleState,
    StepResult,
    StepSkipped,
    StepStatus,
)

__all__ = [
    "BookingLifecycleRunner",
    "LifecycleReport",
    "LifecycleState",
    "StepResult",
    "StepSkipped",
    "StepStatus",
]
