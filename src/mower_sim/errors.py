from __future__ import annotations

from typing import Optional, Sequence


class MowerSimError(Exception):
    """Base class for every error raised by the simulation engine."""


class ConfigurationError(MowerSimError, ValueError):
    """Malformed scenario input. Raised before the run starts."""


class InvariantViolation(MowerSimError, RuntimeError):
    """An internal consistency rule was broken; indicates an engine defect."""


class AgentFault(MowerSimError):
    """An Advance was rejected by the lawn.

    The orchestrator recovers by deactivating every mower in ``mower_names``;
    the run itself continues.
    """

    def __init__(self, mower_names: Sequence[str], reason: str, content: Optional[object] = None):
        self.mower_names = tuple(mower_names)
        self.reason = reason
        self.content = content
        super().__init__(f"{', '.join(self.mower_names)}: {reason}")
