# modules/bonos/weights.py

from dataclasses import dataclass
from typing import Dict, Optional

from .constants import OBJECTIVE_WEIGHT_DISTRIBUTION, SENIORITY_WEIGHTS, TIER_MINIMO


@dataclass(frozen=True)
class TierWeights:
    """Reparto empresa/área de un tier (suma 100)."""
    company: int
    area: int


class WeightProfile:
    """Tabla tier -> pesos. Un tier desconocido usa los pesos del tier más bajo."""

    def __init__(
        self,
        weights: Optional[Dict[int, Dict[str, int]]] = None,
        distribution: Optional[Dict[int, Dict[str, int]]] = None
    ):
        self.weights = weights or SENIORITY_WEIGHTS
        self._distribution = distribution or OBJECTIVE_WEIGHT_DISTRIBUTION

        for tier, w in self.weights.items():
            if w["company"] + w["area"] != 100:
                raise ValueError(f"Los pesos del tier {tier} deben sumar 100: {w}")

    def lookup(self, tier: int) -> TierWeights:
        w = self.weights.get(tier) or self.weights[TIER_MINIMO]
        return TierWeights(company=w["company"], area=w["area"])

    def distribution(self, tier: int) -> Dict[str, int]:
        return dict(self._distribution.get(tier) or self._distribution[TIER_MINIMO])
