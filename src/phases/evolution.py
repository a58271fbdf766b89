# ABOUTME: EvolutionPhase applies a party member's pending evolution.
# ABOUTME: Skipped through validation when the member has nothing to evolve into.

from loguru import logger

from src.models.game_state import PhaseKind
from src.orchestration.phase import Phase
from src.orchestration.session import GameSession


class EvolutionPhase(Phase):
    kind = PhaseKind.EVOLUTION

    def __init__(self, party_index: int):
        super().__init__()
        self.party_index = party_index

    def validate(self, session: GameSession) -> bool:
        party = session.state.party
        if not 0 <= self.party_index < len(party):
            return False
        return party[self.party_index].pending_evolution is not None

    async def start(self, session: GameSession) -> None:
        member = session.state.party[self.party_index]
        target = member.pending_evolution
        assert target is not None

        await session.show_text(f"What? {member.name} is evolving!")
        await session.play_effect(f"evolve:{member.species}:{target}")
        previous = member.species
        member.species = target
        member.pending_evolution = None
        logger.bind(party_index=self.party_index, species=target).info(
            f"Party member evolved from {previous}"
        )
        await session.show_text(f"Congratulations! {member.name} evolved into {target.title()}!")
