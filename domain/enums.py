from enum import Enum


class Mode(str, Enum):
    """Recognition modes. Exactly one is active at a time."""
    SINGLE_SHOT = "SINGLE_SHOT"
    CONTINUOUS  = "CONTINUOUS"


class Framing(str, Enum):
    """How samples are grouped into an Observation."""
    BATCH   = "BATCH"
    ROLLING = "ROLLING"


class HapticLevel(str, Enum):
    """Feedback strength picked from a prediction's confidence."""
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR   = "ERROR"


class CalibrationStep(str, Enum):
    """Progress of a two-pose calibration capture."""
    IDLE     = "IDLE"
    STRAIGHT = "STRAIGHT"
    BENT     = "BENT"
    DONE     = "DONE"
