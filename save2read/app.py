import logging
import threading

from dotenv import load_dotenv

from shared.auth import InMemoryTokenStorage
from shared.logging_utils import configure_logging

from .core.update_processor import UpdateProcessor
from .extractors.title_extractor import RequestsTitleExtractor
from .infra.db import get_connection
from .infra.repo_sql import PostgresArticleRepository
from .runtime_config import runtime_config
from .transport.telegram import TelegramTransport
from .transport.web import create_app
from .worker.poller import TelegramUpdatePoller

load_dotenv()
log_level = configure_logging()
logger = logging.getLogger(__name__)

token_storage = InMemoryTokenStorage(ttl=runtime_config.auth_token_ttl())
app = create_app(
    token_storage=token_storage,
    session_secret=runtime_config.session_secret(),
)

POLLER_JOIN_TIMEOUT_SECONDS = 10

_poller: TelegramUpdatePoller | None = None
_poller_thread: threading.Thread | None = None
_poller_repo: PostgresArticleRepository | None = None


def build_poller() -> TelegramUpdatePoller:
    global _poller_repo
    transport = TelegramTransport(runtime_config.bot_token())
    _poller_repo = PostgresArticleRepository(get_connection(), connect=get_connection)
    processor = UpdateProcessor(
        token_storage=token_storage,
        repository=_poller_repo,
        extractor=RequestsTitleExtractor(),
        transport=transport,
        base_url=runtime_config.base_url(),
    )
    return TelegramUpdatePoller(
        transport=transport,
        processor=processor,
        long_poll_seconds=runtime_config.poll_timeout_seconds(),
    )


@app.on_event("startup")
def start_update_poller() -> None:
    global _poller, _poller_thread
    if not runtime_config.poller_enabled():
        logger.warning("Update poller disabled; bot messages will not be processed")
        return

    _poller = build_poller()
    _poller_thread = threading.Thread(
        target=_poller.run_forever,
        name="telegram-update-poller",
        daemon=True,
    )
    _poller_thread.start()
    logger.info("Login links will point at %s", runtime_config.base_url())


@app.on_event("shutdown")
def stop_update_poller() -> None:
    if _poller is None:
        return
    _poller.stop()
    if _poller_thread is not None:
        _poller_thread.join(timeout=POLLER_JOIN_TIMEOUT_SECONDS)
        if _poller_thread.is_alive():
            # still inside a long poll or a write; the daemon thread dies with the process
            logger.warning("Update poller did not stop within %ss", POLLER_JOIN_TIMEOUT_SECONDS)
            return
    if _poller_repo is not None:
        _poller_repo.close()


def main() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=runtime_config.server_port(), log_level=log_level)


if __name__ == "__main__":
    main()
