from core.normalizer import looks_raw, normalize
from core.frame_accumulator import FrameAccumulator
from core.classification_gateway import ClassificationGateway
from core.letter_stabilizer import LetterStabilizer
from core.word_session import WordSession
from core.throttle import Throttle
from core.feedback import FeedbackSink, LoggingFeedback
from core.calibration import CalibrationCapture
from core.simulator import SyntheticGlove
from core.mode_controller import ModeController
from core.demo_driver import DemoDriver

__all__ = [
    "looks_raw",
    "normalize",
    "FrameAccumulator",
    "ClassificationGateway",
    "LetterStabilizer",
    "WordSession",
    "Throttle",
    "FeedbackSink",
    "LoggingFeedback",
    "CalibrationCapture",
    "SyntheticGlove",
    "ModeController",
    "DemoDriver",
]
