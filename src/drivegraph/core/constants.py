"""Core constants for drivegraph.

This module defines system-wide invariants such as:
- Rounding precision for displayed and compared outputs
- Input clamping bounds
- Persistence format versions
"""

from __future__ import annotations

import math

# Rounding
# Drive outputs (torque, speed, power) are rounded before storage so that
# serialized comparisons are stable across recomputes.
ROUND_DIGITS = 2
DURATION_DIGITS = 3
PROFILE_DIGITS = 5

# Input clamping
MIN_VALUE = 0.0
MIN_RATE = 0.1  # velocity / acceleration / deceleration fields

# Physical constants
TWO_PI = 2.0 * math.pi
RPM_TO_RAD_S = TWO_PI / 60.0

# Default ratios (used when a ratio parameter is missing or zero)
DEFAULT_RATIO = 1.0

# Handle ids
DEFAULT_INPUT_HANDLE = "top"
DEFAULT_OUTPUT_HANDLE = "bottom"
CHART_INPUT_HANDLE = "target"

# Persistence
GRAPH_FORMAT_VERSION = "1.0"
