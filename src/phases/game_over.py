# ABOUTME: End-of-run phases: GameOverPhase (retry, clear reporting, stats, unlocks) and its follow-ups.
# ABOUTME: Follow-up phases grant unlocks and vouchers and show the classic end card; PostGameOverPhase is terminal.

from loguru import logger

from src.interface.exceptions import SessionLoadError
from src.models.encounter import Unlockable
from src.models.game_state import PhaseKind
from src.orchestration.phase import Phase
from src.orchestration.session import GameSession
from src.phases.battle import queue_resume_phases

CLASSIC_VICTORY_ACHIEVEMENT = "classic_victory"
VOUCHER_PLUS = "voucher_plus"
VOUCHER_PREMIUM = "voucher_premium"

RETRY_OPTION = 0

ENDING_DIALOGUE = "So this is where the road ends. I knew you would make it here first."
END_CARD_TEXT = "Congratulations! You have cleared the game!"


class GameOverPhase(Phase):
    """
    Ends the run, or offers to retry the current wave.

    A defeat with retries enabled asks first; retrying clears the queue,
    reloads the saved wave and queues the resume sequence. Every other path
    reports the clear, updates stats, clears the queue and queues the unlock
    and reward phases ahead of PostGameOverPhase. A classic victory also
    shows the ending dialogue and queues the end card after the rewards.
    """

    kind = PhaseKind.GAME_OVER

    def __init__(self, victory: bool = False):
        super().__init__()
        self.victory = victory
        self.first_ribbons: list[str] = []
        self.retried = False

    async def start(self, session: GameSession) -> None:
        state = session.state
        if state.game_mode.is_classic and state.wave_index > session.settings.classic_final_wave:
            self.victory = True

        if self.victory and state.game_mode.is_endless:
            await session.show_text("You reached the end of the endless road... for now.")
            await self._handle_game_over(session)
        elif self.victory or not session.settings.enable_retries:
            await self._handle_game_over(session)
        else:
            await session.show_text("Would you like to retry the battle?")
            choice = await session.select_option("Retry?", ["Yes", "No"])
            if choice == RETRY_OPTION and await self._retry(session):
                return
            await self._handle_game_over(session)

    async def _retry(self, session: GameSession) -> bool:
        slot = session.state.session_slot
        if slot is None:
            logger.warning("Retry requested without a save slot, ending run")
            return False

        await session.play_effect("fade_out")
        session.phases.clear()
        try:
            state = session.store.load_session(slot)
        except SessionLoadError as e:
            logger.bind(slot=slot).warning(f"Could not reload session for retry: {e}")
            return False

        session.replace_state(state)
        queue_resume_phases(session)
        self.retried = True
        logger.bind(slot=slot, wave_index=state.wave_index).info("Retrying wave")
        await session.play_effect("fade_in")
        return True

    async def _handle_game_over(self, session: GameSession) -> None:
        state = session.state
        clear_key = f"clear:{state.seed}"

        def offline_new_clear() -> bool:
            return self.victory and clear_key not in state.achievements

        if session.settings.online and state.session_slot is not None:
            slot = state.session_slot
            new_clear = bool(await session.call_api(
                lambda gate: session.api.new_clear(slot, self.victory, gate),
                offline_new_clear,
                "new_clear",
            ))
        else:
            new_clear = offline_new_clear()
        if self.victory:
            state.achievements.add(clear_key)

        first_clear = False
        if self.victory and new_clear:
            if state.game_mode.is_classic:
                first_clear = CLASSIC_VICTORY_ACHIEVEMENT not in state.achievements
                state.achievements.add(CLASSIC_VICTORY_ACHIEVEMENT)
                state.stats.sessions_won += 1
                for member in state.party:
                    if state.increment_ribbon(member.species) == 1:
                        self.first_ribbons.append(member.species)
            elif state.game_mode.is_daily:
                state.stats.daily_sessions_won += 1

        await session.play_effect("fade_out")
        session.phases.clear()

        if self.victory and state.game_mode.is_classic:
            await session.play_effect("fade_in")
            await session.show_text(ENDING_DIALOGUE)
            await session.play_effect("fade_out")
            session.phases.unshift(EndCardPhase())

        if self.victory and new_clear:
            self._queue_unlocks(session)
            for species in self.first_ribbons:
                session.phases.unshift(GameOverRewardPhase(VOUCHER_PLUS, species=species))
            if not first_clear:
                session.phases.unshift(GameOverRewardPhase(VOUCHER_PREMIUM))

        state.game_over = True
        state.victory = self.victory
        session.store.save_run_history(state, self.victory)
        logger.bind(
            wave_index=state.wave_index,
            victory=self.victory,
            new_clear=new_clear,
        ).info("Run ended")
        session.phases.push(PostGameOverPhase())

    def _queue_unlocks(self, session: GameSession) -> None:
        state = session.state
        if not state.game_mode.is_classic:
            return
        if Unlockable.ENDLESS_MODE not in state.unlocks:
            session.phases.unshift(UnlockPhase(Unlockable.ENDLESS_MODE))
        if (
            any(member.fused for member in state.party)
            and Unlockable.SPLICED_ENDLESS_MODE not in state.unlocks
        ):
            session.phases.unshift(UnlockPhase(Unlockable.SPLICED_ENDLESS_MODE))
        if Unlockable.MINI_BLACK_HOLE not in state.unlocks:
            session.phases.unshift(UnlockPhase(Unlockable.MINI_BLACK_HOLE))
        if (
            Unlockable.EVIOLITE not in state.unlocks
            and any(member.pending_evolution for member in state.party)
        ):
            session.phases.unshift(UnlockPhase(Unlockable.EVIOLITE))


class UnlockPhase(Phase):
    kind = PhaseKind.UNLOCK

    def __init__(self, unlockable: Unlockable):
        super().__init__()
        self.unlockable = unlockable

    async def start(self, session: GameSession) -> None:
        session.state.unlocks.add(self.unlockable)
        logger.bind(unlockable=self.unlockable.value).info("Unlocked")
        name = self.unlockable.value.replace("_", " ").title()
        await session.show_text(f"{name} has been unlocked!")


class EndCardPhase(Phase):
    """Shows the end card after a classic victory; unlocks and rewards run before it"""

    kind = PhaseKind.END_CARD

    async def start(self, session: GameSession) -> None:
        await session.play_effect("end_card")
        await session.show_text(END_CARD_TEXT)


class GameOverRewardPhase(Phase):
    """Grants a voucher earned by the finished run"""

    kind = PhaseKind.GAME_OVER_REWARD

    def __init__(self, voucher: str, species: str | None = None):
        super().__init__()
        self.voucher = voucher
        self.species = species

    async def start(self, session: GameSession) -> None:
        session.state.vouchers.append(self.voucher)
        if self.species is not None:
            await session.show_text(
                f"{self.species.title()} earned a ribbon! You received a {self.voucher}."
            )
        else:
            await session.show_text(f"You received a {self.voucher}!")


class PostGameOverPhase(Phase):
    """Terminal phase: the run is over and nothing follows it"""

    kind = PhaseKind.POST_GAME_OVER

    async def start(self, session: GameSession) -> None:
        session.save()
        await session.show_text("Thanks for playing!")
