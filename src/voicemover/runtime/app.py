"""Runtime lifecycle wiring for voicemover."""

from __future__ import annotations

from typing import Optional, Protocol
import asyncio
import logging
import signal

from voicemover.config.settings import AppSettings


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class RuntimeService(Protocol):
    """Small lifecycle contract used by the runtime host."""

    async def start(self) -> None:
        ...

    async def stop(self) -> None:
        ...


class RuntimeApp:
    """Starts services in list order and stops whichever of them came up.

    If a service fails to start, the ones already running are stopped in
    reverse order before the error propagates.
    """

    def __init__(
        self,
        settings: AppSettings,
        services: Optional[list[RuntimeService]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or logging.getLogger("voicemover.runtime")
        self._services = services or []
        self._running: list[RuntimeService] = []

    @property
    def started(self) -> bool:
        return bool(self._running)

    async def start(self) -> None:
        if self._running:
            return

        try:
            for service in self._services:
                await service.start()
                self._running.append(service)
        except BaseException:
            self.logger.error("Startup failed after %s service(s); rolling back.", len(self._running))
            await self.stop()
            raise

    async def stop(self) -> None:
        while self._running:
            service = self._running.pop()
            try:
                await service.stop()
            except Exception:
                self.logger.exception("Service shutdown failed: %s", type(service).__name__)

    async def run(self, shutdown_event: Optional[asyncio.Event] = None) -> None:
        stop_event = shutdown_event or asyncio.Event()
        loop = asyncio.get_running_loop()
        bound = _bind_shutdown_signals(loop, stop_event)

        self.logger.info("Starting voicemover (prefix=%r).", self.settings.discord.command_prefix)
        try:
            await self.start()
            self.logger.info("Runtime started with %s service(s).", len(self._running))
            await stop_event.wait()
        finally:
            self.logger.info("Runtime shutdown requested.")
            await self.stop()
            _unbind_shutdown_signals(loop, bound)


def _bind_shutdown_signals(loop: asyncio.AbstractEventLoop, stop_event: asyncio.Event) -> list[signal.Signals]:
    bound = []
    for sig in _SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # Windows loops and non-main threads.
            return bound
        bound.append(sig)
    return bound


def _unbind_shutdown_signals(loop: asyncio.AbstractEventLoop, bound: list[signal.Signals]) -> None:
    for sig in bound:
        loop.remove_signal_handler(sig)


def configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=LOG_FORMAT,
    )


async def run_runtime(settings: AppSettings, shutdown_event: Optional[asyncio.Event] = None) -> None:
    from voicemover.runtime.factory import create_services

    configure_logging(settings.runtime.log_level)
    logger = logging.getLogger("voicemover.runtime")

    services = create_services(settings, logger=logger)
    app = RuntimeApp(settings=settings, services=services, logger=logger)

    await app.run(shutdown_event=shutdown_event)
