"""Process startup and shutdown, driven from the FastAPI lifespan."""

import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from memshelf.config import settings
from memshelf.database import engine

logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def _run_migrations() -> None:
    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("script_location", str(ALEMBIC_INI.parent / "alembic"))
    alembic_cfg.attributes["configure_logger"] = False
    command.upgrade(alembic_cfg, "head")


class AppLifecycle:
    def __init__(self) -> None:
        self.started = False

    async def startup(self) -> None:
        if settings.run_migrations_on_startup:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, _run_migrations)
            logger.info("Migrations applied")
        self.started = True
        logger.info(
            "%s started",
            settings.service_name,
            extra={"environment": settings.environment},
        )

    async def shutdown(self) -> None:
        if not self.started:
            return
        await engine.dispose()
        self.started = False
        logger.info("%s stopped", settings.service_name)
