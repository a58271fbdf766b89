# ABOUTME: MessagePhase shows one line of dialogue and ends once the player acknowledges it.
# ABOUTME: Used to queue result text behind the phase that produced it.

from src.models.game_state import PhaseKind
from src.orchestration.phase import Phase
from src.orchestration.session import GameSession


class MessagePhase(Phase):
    kind = PhaseKind.MESSAGE

    def __init__(self, text: str):
        super().__init__()
        self.text = text

    async def start(self, session: GameSession) -> None:
        await session.show_text(self.text)
