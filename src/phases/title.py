# ABOUTME: Title menu and starter selection: continue, load, new game and daily runs.
# ABOUTME: TitlePhase's end hook queues starter selection and the first wave, or the resume sequence for a loaded save.

from datetime import date
from uuid import uuid4

from loguru import logger

from src.interface.exceptions import SessionLoadError
from src.models.encounter import Unlockable
from src.models.game_state import STARTING_LEVEL, GameMode, PhaseKind
from src.models.party import PartyMember
from src.orchestration.phase import Phase
from src.orchestration.session import GameSession
from src.phases.battle import EncounterPhase, queue_resume_phases
from src.utils.rng import SeededRandom, daily_run_seed

STARTER_POOL = [
    "bulbasaur", "charmander", "squirtle",
    "chikorita", "cyndaquil", "totodile",
    "treecko", "torchic", "mudkip",
]

DAILY_STARTER_POOL = STARTER_POOL + [
    "pichu", "eevee", "ralts", "riolu", "gible", "larvitar", "dratini", "bagon",
]

DAILY_PARTY_SIZE = 3
CANCELLED = -1


def build_daily_party(seed: str, level: int = STARTING_LEVEL) -> list[PartyMember]:
    """
    Deterministic daily starter party.

    Every player with the same seed draws the same distinct species, in the
    same order, from a stream owned by the seed alone.
    """
    rng = SeededRandom(seed)
    pool = list(DAILY_STARTER_POOL)
    party = []
    for _ in range(DAILY_PARTY_SIZE):
        species = pool.pop(rng.next_int(len(pool)))
        party.append(PartyMember.create(species, level))
    return party


def slot_options(session: GameSession) -> list[str]:
    return [f"Slot {slot + 1}" for slot in range(session.settings.save_slot_count)]


class TitlePhase(Phase):
    """
    Main menu.

    Ends once a run has been picked. Cancelling out of a submenu restarts
    the title through a fresh TitlePhase, in which case the end hook queues
    nothing.
    """

    kind = PhaseKind.TITLE

    def __init__(self) -> None:
        super().__init__()
        self.loaded = False
        self.aborted = False
        self.game_mode = GameMode.CLASSIC

    async def start(self, session: GameSession) -> None:
        await session.play_effect("fade_in")

        while True:
            handlers = []
            options = []
            if session.store.last_session_slot() is not None:
                handlers.append(self._continue)
                options.append("Continue")
            handlers.append(self._new_game)
            options.append("New Game")
            handlers.append(self._load_game)
            options.append("Load Game")
            handlers.append(self._daily_run)
            options.append("Daily Run")

            choice = await session.select_option("Title", options)
            if not 0 <= choice < len(handlers):
                continue
            if await handlers[choice](session):
                return

    async def _continue(self, session: GameSession) -> bool:
        slot = session.store.last_session_slot()
        assert slot is not None
        return await self._load_slot(session, slot)

    async def _load_game(self, session: GameSession) -> bool:
        slot = await session.select_option("Load which slot?", slot_options(session))
        if slot == CANCELLED:
            return False
        return await self._load_slot(session, slot)

    async def _load_slot(self, session: GameSession, slot: int) -> bool:
        try:
            state = session.store.load_session(slot)
        except SessionLoadError as e:
            logger.bind(slot=slot).warning(f"Failed to load session: {e}")
            await session.show_text("Failed to load session data.")
            return False
        state.session_slot = slot
        session.replace_state(state)
        self.loaded = True
        logger.bind(slot=slot, wave_index=state.wave_index).info("Session loaded")
        await session.show_text("Session loaded successfully.")
        return True

    async def _new_game(self, session: GameSession) -> bool:
        unlocks = session.state.unlocks
        if Unlockable.ENDLESS_MODE not in unlocks:
            self.game_mode = GameMode.CLASSIC
            return True

        modes = [GameMode.CLASSIC, GameMode.CHALLENGE, GameMode.ENDLESS]
        if Unlockable.SPLICED_ENDLESS_MODE in unlocks:
            modes.append(GameMode.SPLICED_ENDLESS)
        await session.show_text("Select a game mode.")
        choice = await session.select_option(
            "Game mode", [mode.value.replace("_", " ").title() for mode in modes] + ["Cancel"]
        )
        if not 0 <= choice < len(modes):
            self._restart_title(session)
            return True
        self.game_mode = modes[choice]
        return True

    async def _daily_run(self, session: GameSession) -> bool:
        slot = await session.select_option("Save the daily run to which slot?", slot_options(session))
        session.phases.clear()
        if slot == CANCELLED:
            self._restart_title(session)
            return True

        today = date.today()
        if session.settings.online:
            seed = await session.call_api(
                session.api.fetch_daily_seed,
                lambda: daily_run_seed(today),
                "fetch_daily_seed",
            ) or daily_run_seed(today)
        else:
            seed = daily_run_seed(today)

        state = session.state.start_new_run(seed, GameMode.DAILY, session_slot=slot)
        state.party = build_daily_party(seed)
        state.stats.daily_sessions_played += 1
        session.replace_state(state)
        self.game_mode = GameMode.DAILY
        logger.bind(slot=slot, seed=seed).info("Daily run started")
        return True

    def _restart_title(self, session: GameSession) -> None:
        session.phases.clear()
        session.phases.push(TitlePhase())
        self.aborted = True

    def on_end(self, session: GameSession) -> None:
        if self.aborted:
            return
        if self.loaded:
            queue_resume_phases(session)
            return
        if self.game_mode is not GameMode.DAILY:
            session.phases.push(SelectStarterPhase(self.game_mode))
        session.phases.push(EncounterPhase())


class SelectStarterPhase(Phase):
    """Pick a starter and a save slot, then start a fresh run"""

    kind = PhaseKind.SELECT_STARTER

    def __init__(self, game_mode: GameMode = GameMode.CLASSIC):
        super().__init__()
        self.game_mode = game_mode

    async def start(self, session: GameSession) -> None:
        choice = await session.select_option(
            "Choose your starter", [species.title() for species in STARTER_POOL]
        )
        species = STARTER_POOL[choice] if 0 <= choice < len(STARTER_POOL) else STARTER_POOL[0]

        slot = await session.select_option("Save to which slot?", slot_options(session))
        if slot == CANCELLED:
            session.phases.clear()
            session.phases.push(TitlePhase())
            return

        seed = session.settings.seed or uuid4().hex
        state = session.state.start_new_run(seed, self.game_mode, session_slot=slot)
        state.party = [PartyMember.create(species, STARTING_LEVEL)]
        if self.game_mode.is_classic or self.game_mode is GameMode.CHALLENGE:
            state.stats.classic_sessions_played += 1
        else:
            state.stats.endless_sessions_played += 1
        session.replace_state(state)

        logger.bind(slot=slot, species=species, game_mode=self.game_mode.value).info(
            "New run started"
        )
        await session.play_effect(f"summon:{species}")
        session.save()
