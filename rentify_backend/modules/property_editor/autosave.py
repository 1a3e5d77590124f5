"""
Periodic auto-save for a listing draft.

A background task wakes every ``interval`` seconds, serializes the draft
and calls the save callback only when the serialization differs from the
last successful save. Manual saves always go through.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel

from ...config import settings
from ...core.logging import get_logger
from ...core.utils import utc_now
from .schemas import SaveStatus, SaveStatusValue

logger = get_logger(__name__)


def serialize_draft(data: Any) -> str:
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return json.dumps(data, sort_keys=True, default=str)


class AutoSaver:
    """Drives periodic saves of whatever ``get_data`` returns."""

    def __init__(
        self,
        get_data: Callable[[], Any],
        on_save: Callable[[Any], Awaitable[None]],
        interval: float | None = None,
        enabled: bool = True,
        idle_reset: float | None = None,
    ):
        self._get_data = get_data
        self._on_save = on_save
        self.interval = (
            settings.autosave_interval_seconds if interval is None else interval
        )
        self.enabled = enabled
        self.idle_reset = (
            settings.autosave_idle_reset_seconds if idle_reset is None else idle_reset
        )
        self.status = SaveStatus()
        self._last_saved = serialize_draft(get_data())
        self._task: asyncio.Task | None = None
        self._idle_handle: asyncio.TimerHandle | None = None
        self._lock = asyncio.Lock()

    @property
    def has_changes(self) -> bool:
        return serialize_draft(self._get_data()) != self._last_saved

    async def perform_save(self, manual: bool = False) -> bool:
        """Save the current draft.

        Returns:
            True when the callback ran and succeeded.
        """
        async with self._lock:
            data = self._get_data()
            serialized = serialize_draft(data)
            if not manual and serialized == self._last_saved:
                return False

            self.status = SaveStatus(status=SaveStatusValue.SAVING)
            try:
                await self._on_save(data)
            except Exception as e:
                logger.warning(f"Draft save failed: {e}")
                self.status = SaveStatus(
                    status=SaveStatusValue.ERROR, error=str(e) or "Failed to save"
                )
                return False

            self._last_saved = serialized
            self.status = SaveStatus(status=SaveStatusValue.SAVED, last_saved=utc_now())
            self._schedule_idle_reset()
            return True

    async def save(self) -> bool:
        return await self.perform_save(manual=True)

    async def tick(self) -> bool:
        """One timer firing: save only if something changed."""
        if not self.enabled:
            return False
        return await self.perform_save(manual=False)

    def _schedule_idle_reset(self) -> None:
        if self._idle_handle is not None:
            self._idle_handle.cancel()
        loop = asyncio.get_running_loop()
        self._idle_handle = loop.call_later(self.idle_reset, self._reset_to_idle)

    def _reset_to_idle(self) -> None:
        self._idle_handle = None
        if self.status.status == SaveStatusValue.SAVED:
            self.status = self.status.model_copy(
                update={"status": SaveStatusValue.IDLE}
            )

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.tick()

    def start(self) -> None:
        if not self.enabled or (self._task and not self._task.done()):
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._idle_handle is not None:
            self._idle_handle.cancel()
            self._idle_handle = None
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def __aenter__(self) -> "AutoSaver":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
