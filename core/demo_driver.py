"""
DemoDriver — spells a word through the recognizer with the synthetic glove.

For every target letter the driver arms a one-shot completion callback on the
controller, starts a driver-paced capture, holds the letter on the simulator
and waits until the controller reports the observation finished. A letter
that never completes is abandoned after a safety timeout.
"""
from __future__ import annotations
import asyncio
import logging
from typing import List, Tuple

from app.config import AppConfig, default_config
from core.mode_controller import ModeController
from core.simulator import SyntheticGlove
from domain.errors import UnsupportedLettersError

logger = logging.getLogger(__name__)


class DemoDriver:
    """
    Parameters
    ----------
    controller : ModeController
        The recognizer being driven.
    glove : SyntheticGlove
        Sample source; its run() task must already be feeding the controller.
    config : AppConfig
        Per-letter timeout and pauses.
    """

    def __init__(
        self,
        controller: ModeController,
        glove: SyntheticGlove,
        config: AppConfig = default_config,
    ) -> None:
        self._controller = controller
        self._glove = glove
        self._config = config
        self.timeouts = 0
        self.current_index = -1
        self._running = False

    # ------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self._running

    def plan(self, word: str) -> Tuple[List[str], List[str]]:
        """Split `word` into (letters to simulate, letters the model lacks)."""
        letters = [c for c in word.upper() if not c.isspace()]
        available = self._glove.letters
        valid   = [c for c in letters if c in available]
        skipped = [c for c in letters if c not in available]
        return valid, skipped

    async def run(self, word: str) -> str:
        """
        Spell `word` and return the word the recognizer actually built.

        Raises
        ------
        UnsupportedLettersError
            If no letter of `word` can be simulated.
        """
        valid, skipped = self.plan(word)
        if skipped:
            logger.warning("[Demo] Letters not available in model: %s (will simulate: %s)",
                           ", ".join(skipped), "".join(valid))
        if not valid:
            raise UnsupportedLettersError(skipped, self._glove.letters)

        logger.info("[Demo] Clearing old word before starting new demo")
        self._controller.clear_word()
        self._running = True
        try:
            for index, letter in enumerate(valid):
                self.current_index = index
                logger.info("[Demo] Starting letter %d/%d: %s", index + 1, len(valid), letter)
                await self._spell(letter)
                await asyncio.sleep(self._config.demo_letter_pause)
        finally:
            self._running = False
            self.current_index = -1
            self._controller.clear_completion()
            self._glove.stop()
            self._controller.stop()

        # let a last in-flight update land before reading the word
        await asyncio.sleep(self._config.demo_settle_delay)
        final_word = self._controller.word
        logger.info("[Demo] Demo complete. Word: %r", final_word)
        self._controller.finalize_word()
        return final_word

    async def _spell(self, letter: str) -> None:
        loop = asyncio.get_running_loop()
        done: asyncio.Future = loop.create_future()

        def _on_complete() -> None:
            if not done.done():
                done.set_result(None)

        self._controller.arm_completion(_on_complete)
        self._controller.begin_driven_capture()
        self._glove.select(letter)

        try:
            await asyncio.wait_for(done, timeout=self._config.demo_letter_timeout)
            logger.debug("[Demo] Letter %s prediction complete", letter)
        except asyncio.TimeoutError:
            self.timeouts += 1
            logger.warning("[Demo] Timeout waiting for %s, moving to next", letter)
            self._controller.clear_completion()
