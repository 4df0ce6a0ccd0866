"""Team evaluation data model."""

from dataclasses import dataclass

from models.champion import Champion


@dataclass(frozen=True)
class ActiveSynergy:
    name: str
    description: str
    member_count: int  # members carrying the tag when it activated
    bonus_type: str
    bonus_value: float
    calculated_bonus: float


@dataclass(frozen=True)
class ScoreBreakdown:
    base: float
    percentage_synergy_bonus: float
    flat_synergy_bonus: float
    synergy_depth_bonus: float
    subtotal_after_synergies: float
    class_diversity_bonus: float

    @property
    def total(self) -> float:
        return self.subtotal_after_synergies + self.class_diversity_bonus


@dataclass(frozen=True)
class TeamEvaluation:
    members: tuple[Champion, ...]
    total_score: float
    comparison_score: float  # ranking only, never shown as the team's score
    active_synergies: tuple[ActiveSynergy, ...]
    base_score_sum: float
    unique_class_count: int
    class_diversity_bonus_applied: bool
    breakdown: ScoreBreakdown

    def __str__(self):
        names = ", ".join(m.name for m in self.members)
        return f"[{names}] score {self.total_score:.0f}"

    def member_ids(self) -> list[str]:
        return [m.id for m in self.members]

    def synergy_names(self) -> set[str]:
        return {s.name for s in self.active_synergies}


@dataclass(frozen=True)
class SavedTeam:
    name: str
    evaluation: TeamEvaluation
    id: str | None = None

    def __str__(self):
        return f"{self.name} ({self.evaluation.total_score:.0f})"

    def definition_ids(self) -> set[str]:
        return {m.definition_id for m in self.evaluation.members}
