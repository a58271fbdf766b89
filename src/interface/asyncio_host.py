# ABOUTME: Host driver that lets an asyncio event loop complete presentation requests after a delay.
# ABOUTME: wait_until_idle runs phases on a session and returns once the queue drains or a phase raises.

import asyncio
from typing import Any

from loguru import logger

from src.orchestration.gate import Gate
from src.orchestration.phase import Phase
from src.orchestration.session import GameSession


class AsyncioPresentation:
    """
    Presentation driver that settles gates from the event loop.

    Every request completes `delay` seconds after it is made, standing in
    for an animation or text crawl. Option prompts are answered from
    `choices` in order, then with 0.
    """

    def __init__(
        self,
        delay: float = 0.0,
        choices: list[int] | None = None,
        loop: asyncio.AbstractEventLoop | None = None
    ):
        self.delay = delay
        self.choices = list(choices or [])
        self._loop = loop
        self._failure: asyncio.Future[None] | None = None
        self.texts: list[str] = []
        self.effects: list[str] = []

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def watch(self, failure: asyncio.Future[None] | None) -> None:
        """Route exceptions raised by resumed phases into the given future"""
        self._failure = failure

    def show_text(self, text: str, gate: Gate) -> None:
        self.texts.append(text)
        self._schedule(gate, None)

    def play_effect(self, effect: str, gate: Gate) -> None:
        self.effects.append(effect)
        self._schedule(gate, None)

    def select_option(self, prompt: str, options: list[str], gate: Gate) -> None:
        choice = self.choices.pop(0) if self.choices else 0
        self._schedule(gate, choice)

    def _schedule(self, gate: Gate, value: Any) -> None:
        self.loop.call_later(self.delay, self._settle, gate, value)

    def _settle(self, gate: Gate, value: Any) -> None:
        try:
            gate.resolve(value)
        except Exception as e:
            logger.bind(gate_id=gate.gate_id).error(f"Phase failed after gate resolved: {e!r}")
            if self._failure is not None and not self._failure.done():
                self._failure.set_exception(e)
                return
            raise


async def wait_until_idle(session: GameSession, *phases: Phase) -> None:
    """
    Queue phases on the session and wait for the queue to drain.

    Raises:
        Exception: Whatever a phase body raised while the loop resumed it
    """
    loop = asyncio.get_running_loop()
    done: asyncio.Future[None] = loop.create_future()

    def on_idle() -> None:
        if not done.done():
            done.set_result(None)

    ui = session.ui
    if isinstance(ui, AsyncioPresentation):
        ui.watch(done)
    session.queue.add_idle_listener(on_idle)
    try:
        session.run(*phases)
        if session.queue.is_idle:
            on_idle()
        await done
    finally:
        session.queue.remove_idle_listener(on_idle)
        if isinstance(ui, AsyncioPresentation):
            ui.watch(None)
