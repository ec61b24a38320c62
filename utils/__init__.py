"""
Constantes compartidas del núcleo de reconocimiento
"""

from .constants import *

__all__ = [
    'NUM_CHANNELS',
    'DEFAULT_BASELINES',
    'DEFAULT_MAXBENDS',
    'DEGENERATE_RANGE',
    'RAW_THRESHOLD',
    'SUPPORTED_LETTERS',
    'ASL_PATTERNS',
    'HAPTIC_SUCCESS_CONFIDENCE',
    'HAPTIC_WARNING_CONFIDENCE',
]
