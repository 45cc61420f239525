"""Simulation layer: cancellation tokens and the motion engine.

The execution queue lives in :mod:`gridbot.simulation.scheduler`; it is not
re-exported here because it depends on the interpreter layer, which itself
imports from this package.
"""

from gridbot.simulation.cancellation import CancellationToken
from gridbot.simulation.motion import FrameObserver, MotionEngine

__all__ = [
    "CancellationToken",
    "FrameObserver",
    "MotionEngine",
]
