"""
Políticas de agrupación de muestras
"""

from .base import FramingPolicy
from .batch import BatchFraming
from .rolling import RollingFraming

__all__ = [
    'FramingPolicy',
    'BatchFraming',
    'RollingFraming',
]
