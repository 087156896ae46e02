"""
Immune memory ledger.

Tracks pathogen signatures recorded after victories and turns them into
damage bonuses and production cost reductions against pathogens of the same
species. Persistence of the ledger belongs to the caller.
"""
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from ...core.data import AttackType, UnitKind, UNIT_KIND_NAMES

if TYPE_CHECKING:
    from ..entities.unit import Unit
    from ..managers.log_manager import LogManager


BASE_DAMAGE_BONUS = 0.20
DAMAGE_BONUS_STEP = 0.05
MAX_DAMAGE_BONUS = 0.50

BASE_COST_REDUCTION = 0.10
COST_REDUCTION_STEP = 0.025
MAX_COST_REDUCTION = 0.30

DISCOVERY_RESEARCH_POINTS = 5


def damage_bonus_for(encounter_count: int) -> float:
    """Damage bonus earned after a number of encounters (0.0 before the first)."""
    if encounter_count <= 0:
        return 0.0
    return min(MAX_DAMAGE_BONUS, BASE_DAMAGE_BONUS + DAMAGE_BONUS_STEP * (encounter_count - 1))


def cost_reduction_for(encounter_count: int) -> float:
    """Cost reduction earned after a number of encounters (0.0 before the first)."""
    if encounter_count <= 0:
        return 0.0
    return min(MAX_COST_REDUCTION, BASE_COST_REDUCTION + COST_REDUCTION_STEP * (encounter_count - 1))


@dataclass
class PathogenSignature:
    """A recorded pathogen species and the bonuses it grants."""
    signature_id: str
    identity: str
    pathogen_id: str
    pathogen_name: str
    pathogen_kind: UnitKind
    attack_type: AttackType
    resistance_factors: dict[AttackType, float]
    discovered_at: datetime = field(default_factory=datetime.now)
    encounter_count: int = 1
    damage_bonus: float = BASE_DAMAGE_BONUS
    cost_reduction: float = BASE_COST_REDUCTION

    @classmethod
    def from_pathogen(cls, pathogen: "Unit") -> "PathogenSignature":
        """Capture a defeated pathogen's identity and defenses."""
        return cls(
            signature_id=f"sig_{uuid.uuid4().hex[:12]}",
            identity=pathogen.species,
            pathogen_id=pathogen.unit_id,
            pathogen_name=pathogen.name,
            pathogen_kind=pathogen.kind,
            attack_type=pathogen.attack_type,
            resistance_factors=dict(pathogen.defense.resistance_factors),
        )

    def recompute_bonuses(self) -> None:
        """Derive both bonuses from the encounter count alone."""
        self.damage_bonus = damage_bonus_for(self.encounter_count)
        self.cost_reduction = cost_reduction_for(self.encounter_count)

    def register_encounter(self) -> None:
        """Count another defeat of this species and raise the bonuses."""
        self.encounter_count += 1
        self.recompute_bonuses()

    def to_dict(self) -> dict:
        return {
            "id": self.signature_id,
            "identity": self.identity,
            "pathogenId": self.pathogen_id,
            "pathogenName": self.pathogen_name,
            "pathogenType": UNIT_KIND_NAMES[self.pathogen_kind],
            "attackType": self.attack_type.value,
            "resistanceFactors": {t.value: v for t, v in self.resistance_factors.items()},
            "discoveryDate": self.discovered_at.isoformat(),
            "encounterCount": self.encounter_count,
            "damageBonus": self.damage_bonus,
            "costReduction": self.cost_reduction,
        }


class ImmuneMemory:
    """Ledger of pathogen signatures keyed by species identity."""

    def __init__(self, log_manager: Optional["LogManager"] = None):
        self._signatures: dict[str, PathogenSignature] = {}
        self._research_points = 0
        self.log_manager = log_manager

    @property
    def signatures(self) -> tuple[PathogenSignature, ...]:
        return tuple(self._signatures.values())

    @property
    def signature_count(self) -> int:
        return len(self._signatures)

    @property
    def research_points(self) -> int:
        return self._research_points

    def record_defeat(self, pathogen: "Unit") -> bool:
        """Create or update the signature for a defeated pathogen.

        Research points are awarded only the first time a species is seen.

        Returns:
            True if this was a new discovery

        Raises:
            ValueError: If the unit is not a pathogen
        """
        if not pathogen.is_pathogen:
            raise ValueError(f"{pathogen.name} is not a pathogen")

        signature = self._signatures.get(pathogen.species)
        if signature is not None:
            signature.register_encounter()
            self._log(
                f"{signature.pathogen_name} encountered again ({signature.encounter_count}x): "
                f"damage +{signature.damage_bonus:.0%}, cost -{signature.cost_reduction:.1%}"
            )
            return False

        signature = PathogenSignature.from_pathogen(pathogen)
        self._signatures[signature.identity] = signature
        self._research_points += DISCOVERY_RESEARCH_POINTS
        self._log(f"New signature recorded: {signature.pathogen_name} ({signature.identity})")
        return True

    def find_signature(self, identity: str) -> Optional[PathogenSignature]:
        return self._signatures.get(identity)

    def find_signatures_by_type(self, kind: UnitKind) -> list[PathogenSignature]:
        return [sig for sig in self._signatures.values() if sig.pathogen_kind == kind]

    def damage_bonus(self, identity: str) -> float:
        """Damage bonus against a species, 0.0 if unknown."""
        signature = self._signatures.get(identity)
        return signature.damage_bonus if signature else 0.0

    def cost_reduction(self, identity: str) -> float:
        """Production cost reduction against a species, 0.0 if unknown."""
        signature = self._signatures.get(identity)
        return signature.cost_reduction if signature else 0.0

    def apply_cost_reduction(self, cost: int, identity: str) -> int:
        """Reduce a production cost by the species' reduction, rounding up."""
        reduction = self.cost_reduction(identity)
        reduced = cost * (1 - reduction)
        return max(0, math.ceil(round(reduced, 6)))

    def add_research_points(self, points: int) -> None:
        if points > 0:
            self._research_points += points

    def spend_research_points(self, points: int) -> bool:
        """Spend points if enough are available.

        Returns:
            True if successful, False if insufficient points
        """
        if points < 0 or self._research_points < points:
            return False
        self._research_points -= points
        return True

    def clear_all_signatures(self) -> None:
        self._signatures.clear()
        self._log("All signatures cleared")

    def _log(self, text: str) -> None:
        if self.log_manager:
            self.log_manager.memory(text)
