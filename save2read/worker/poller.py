import logging
import threading
from typing import Any, Callable, Iterable, Optional

from ..core.models import TelegramUpdate
from ..core.update_processor import BOT_COMMANDS, UpdateProcessor
from ..transport.telegram import TelegramTransport

logger = logging.getLogger(__name__)


class TelegramUpdatePoller:
    def __init__(
        self,
        transport: TelegramTransport,
        processor: UpdateProcessor,
        long_poll_seconds: int = 30,
        backoff_initial_seconds: float = 1.0,
        backoff_max_seconds: float = 30.0,
        commands: Iterable[tuple[str, str]] = BOT_COMMANDS,
        sleep: Optional[Callable[[float], Any]] = None,
    ):
        self.transport = transport
        self.processor = processor
        self.long_poll_seconds = long_poll_seconds
        self.backoff_initial_seconds = backoff_initial_seconds
        self.backoff_max_seconds = backoff_max_seconds
        self.commands = list(commands)
        self._stop = threading.Event()
        self.sleep = sleep or self._stop.wait
        self.next_offset = 0
        self._failures = 0

    def run_forever(self):
        logger.info("TelegramUpdatePoller started")
        self._register_commands()

        while not self._stop.is_set():
            self._run_once()

        logger.info("TelegramUpdatePoller stopped at offset %d", self.next_offset)

    def stop(self):
        self._stop.set()

    def _register_commands(self) -> None:
        if not self.commands:
            return
        try:
            self.transport.set_my_commands(self.commands)
        except Exception:
            logger.exception("Failed registering bot commands")

    def _run_once(self) -> None:
        try:
            updates = self.transport.get_updates(
                offset=self.next_offset,
                timeout=self.long_poll_seconds,
            )
        except Exception:
            logger.exception("Failed fetching updates at offset %d", self.next_offset)
            self._backoff()
            return

        self._failures = 0
        if not updates:
            logger.debug("No new updates")
            return

        logger.info("Received %d update(s)", len(updates))
        for raw in updates:
            self._handle(raw)

    def _handle(self, raw: dict[str, Any]) -> None:
        update_id = _update_id(raw)
        if update_id is None:
            logger.warning("Skipping update without update_id: %r", raw)
            return

        # advance first: a failing update is consumed, not redelivered
        if update_id + 1 > self.next_offset:
            self.next_offset = update_id + 1

        try:
            update = TelegramUpdate.model_validate(raw)
            self.processor.process(update)
        except Exception:
            logger.exception("Failed processing update %s", update_id)

    def _backoff(self) -> None:
        if self.backoff_initial_seconds <= 0:
            return
        delay = min(
            self.backoff_max_seconds,
            self.backoff_initial_seconds * (2 ** self._failures),
        )
        self._failures = min(self._failures + 1, 16)
        logger.info("Retrying getUpdates in %.1fs", delay)
        self.sleep(delay)


def _update_id(raw: dict[str, Any]) -> Optional[int]:
    value = raw.get("update_id")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value
