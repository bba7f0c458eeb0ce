"""Fan-out orchestration across registered models."""

from prompt_fanout.orchestration.fanout import (
    AttemptFailure,
    AttemptOutcome,
    AttemptSuccess,
    FanoutMode,
)


__all__ = ["AttemptFailure", "AttemptOutcome", "AttemptSuccess", "FanoutMode"]
