# ABOUTME: Pydantic model for a player party member.
# ABOUTME: Tracks level, hit points, battle eligibility and pending evolution for encounter logic.

from pydantic import BaseModel, Field


class PartyMember(BaseModel):
    """A creature in the player's party"""

    name: str = Field(min_length=1)
    species: str = Field(min_length=1)
    level: int = Field(ge=1, le=10000)
    hp: int = Field(ge=0)
    max_hp: int = Field(ge=1)
    banned: bool = Field(
        default=False,
        description="Excluded from battle by a challenge rule"
    )
    fused: bool = False
    pending_evolution: str | None = Field(
        default=None,
        description="Species this member evolves into at the next evolution phase"
    )

    @property
    def is_fainted(self) -> bool:
        return self.hp == 0

    @property
    def is_allowed_in_battle(self) -> bool:
        return not self.banned and not self.is_fainted

    def knock_out(self) -> None:
        """Drop the member to zero hit points"""
        self.hp = 0

    @classmethod
    def create(cls, species: str, level: int, name: str | None = None) -> "PartyMember":
        """Build a fully healed member at the given level"""
        max_hp = 10 + level * 2
        return cls(
            name=name or species.title(),
            species=species,
            level=level,
            hp=max_hp,
            max_hp=max_hp,
        )
