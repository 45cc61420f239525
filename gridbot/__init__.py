"""Block-programmed grid robot: compiler, interpreter, scheduler, and motion engine.

Subpackages:

- ``gridbot.compiler``    – block tree model and instruction generator
- ``gridbot.interpreter`` – instruction grammar and conditional dispatcher
- ``gridbot.simulation``  – motion engine, execution queue, headless runner
- ``gridbot.domain``      – grid world, levels, pose, reachability
- ``gridbot.io``          – JSON/Parquet persistence and output paths
- ``gridbot.viz``         – matplotlib trace rendering
"""

__version__ = "0.1.0"
