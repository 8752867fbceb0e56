"""drivegraph: drivetrain computation graphs.

Subpackages:
    core       types, config, logging, persistence
    mechanics  closed-form drive, motion and VT-curve formulas
    nodes      node kind schemas and field descriptors
    graph      propagation, dispatch and recompute over a snapshot
"""

__version__ = "0.3.0"
