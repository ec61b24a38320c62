from __future__ import annotations
import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv


@dataclass
class AppConfig:
    """
    Settings shared by the recognizer, the gateway and the demo driver.
    Components take an AppConfig; tests build one with small sizes.
    """
    # ---- classifier service --------------------------------------------
    api_url: str = "http://localhost:8000"
    api_key: str = ""
    request_timeout: float = 5.0
    health_timeout: float = 3.0
    device_id: str = "mobile-simulator"

    # ---- sampling / framing ---------------------------------------------
    sample_rate_hz: float = 50.0
    window_size: int = 50           # 50 samples at 50 Hz = 1 s window
    single_shot_batch: int = 200
    driven_batch: int = 150

    # ---- stabilizer -----------------------------------------------------
    min_confidence: float = 0.60
    stability_threshold: int = 4    # ~800 ms of agreeing windows

    # ---- word session (seconds) ----------------------------------------
    idle_threshold: float = 2.0
    idle_check_delay: float = 2.5
    rearm_delay: float = 0.5

    # ---- demo driver (seconds) ------------------------------------------
    demo_letter_timeout: float = 10.0
    demo_letter_pause: float = 0.3
    demo_settle_delay: float = 0.3

    # ---- presentation ---------------------------------------------------
    history_limit: int = 20
    display_interval: float = 0.1   # ~10 updates/s

    # ---- calibration ----------------------------------------------------
    calibration_samples: int = 100
    reset_calibration_on_disconnect: bool = True

    # ---- simulator ------------------------------------------------------
    simulator_noise: float = 0.015

    @classmethod
    def from_env(cls, **overrides) -> "AppConfig":
        """Defaults, then .env / environment, then explicit overrides."""
        load_dotenv()
        config = cls()
        env = {
            "api_url":   os.getenv("SIGNGLOVE_API_URL"),
            "api_key":   os.getenv("SIGNGLOVE_API_KEY"),
            "device_id": os.getenv("SIGNGLOVE_DEVICE_ID"),
        }
        config = replace(config, **{k: v for k, v in env.items() if v})
        return replace(config, **overrides)


# Default singleton — import and use directly, or override in tests.
default_config = AppConfig()
