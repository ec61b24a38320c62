"""
main.py — Application entry point.

Clean pipeline, no globals, no mixed concerns:

    SyntheticGlove → ModeController → ClassificationGateway
                  → LetterStabilizer → WordSession → console feedback

The demo command spells a word through the scripted DemoDriver against the
configured classifier service.
"""
from __future__ import annotations
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from app.config import AppConfig
from app.console import ConsoleFeedback
from core.classification_gateway import ClassificationGateway
from core.demo_driver import DemoDriver
from core.mode_controller import ModeController
from core.simulator import SyntheticGlove
from domain.enums import Mode
from domain.errors import ClassificationError, UnsupportedLettersError


def _banner(config: AppConfig) -> None:
    print("=" * 55)
    print("  SIGN GLOVE — letter & word recognition")
    print("=" * 55)
    print(f"  API     : {config.api_url}")
    print(f"  Device  : {config.device_id}")
    print(f"  Conf ≥  : {config.min_confidence:.0%}")
    print(f"  Rate    : {config.sample_rate_hz:g} Hz")
    print("=" * 55 + "\n")


async def run_demo(word: str, config: AppConfig) -> str:
    gateway = ClassificationGateway(
        config.api_url,
        api_key=config.api_key,
        timeout=config.request_timeout,
        health_timeout=config.health_timeout,
    )
    if not gateway.is_configured:
        print("[WARN] API key not configured (SIGNGLOVE_API_KEY)")

    controller = ModeController(gateway, config, feedback=ConsoleFeedback(), mode=Mode.CONTINUOUS)
    glove = SyntheticGlove(
        controller.on_sample,
        rate_hz=config.sample_rate_hz,
        noise=config.simulator_noise,
    )
    driver = DemoDriver(controller, glove, config)

    glove_task = glove.start()
    try:
        return await driver.run(word)
    finally:
        glove.stop()
        glove_task.cancel()
        await asyncio.gather(glove_task, return_exceptions=True)
        controller.close()
        await controller.drain()
        gateway.close()


async def run_health(config: AppConfig) -> int:
    gateway = ClassificationGateway(config.api_url, api_key=config.api_key,
                                    health_timeout=config.health_timeout)
    try:
        health = await gateway.check_health()
    except ClassificationError as exc:
        print(f"[ERROR] {exc.message}")
        return 1
    finally:
        gateway.close()
    print(f"[HEALTH] {health.status} — model {health.model_name} "
          f"(loaded={health.model_loaded}, up {health.uptime_seconds:.0f}s)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="signglove", description=__doc__.splitlines()[1])
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--api-url", help="classifier service root")
    parser.add_argument("--min-confidence", type=float, help="acceptance threshold (0-1)")
    sub = parser.add_subparsers(dest="command", required=True)

    demo = sub.add_parser("demo", help="spell a word with the synthetic glove")
    demo.add_argument("word")

    sub.add_parser("health", help="check the classifier service")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    overrides = {}
    if args.api_url:
        overrides["api_url"] = args.api_url
    if args.min_confidence is not None:
        overrides["min_confidence"] = args.min_confidence
    config = AppConfig.from_env(**overrides)

    if args.command == "health":
        return asyncio.run(run_health(config))

    _banner(config)
    try:
        word = asyncio.run(run_demo(args.word, config))
    except UnsupportedLettersError as exc:
        print(f"[ERROR] {exc}")
        return 2
    print(f"\n✓ Detected word: {word or '(empty)'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
