# modules/bonos/corporate.py
"""
Score del componente empresa: facturación (gate + cap) y NPS trimestral binario.
"""

from typing import Iterable, List, Optional
import logging

from .completion import CompletionRules, DEFAULT_RULES, es_valor_valido
from .constants import (
    CAP_DEFAULT,
    COMPLETION_MAXIMA,
    GATE_DEFAULT,
    PESO_FACTURACION,
    PESO_NPS,
    QUARTERS,
    TIPO_FACTURACION,
    TIPO_NPS,
)
from .schemas import (
    BillingResult,
    CorporateObjective,
    CorporateResult,
    NpsQuarterResult,
    NpsResult,
)

logger = logging.getLogger("Bonos.Corporate")


def _orden_quarter(result: NpsQuarterResult) -> int:
    return QUARTERS.index(result.quarter) if result.quarter in QUARTERS else len(QUARTERS)


class CorporateScoreCalculator:
    """Convierte los objetivos corporativos del año en un único score de empresa."""

    def __init__(
        self,
        rules: CompletionRules = DEFAULT_RULES,
        billing_weight: int = PESO_FACTURACION,
        nps_weight: int = PESO_NPS
    ):
        self.rules = rules
        self.billing_weight = billing_weight
        self.nps_weight = nps_weight

    def score_billing(self, objective: Optional[CorporateObjective]) -> BillingResult:
        if objective is None:
            return BillingResult(
                configured=False,
                target=None,
                actual=None,
                gate_percentage=GATE_DEFAULT,
                cap_percentage=CAP_DEFAULT,
                gate_met=False,
                raw_completion=0.0,
                completion=0.0,
            )

        actual, target = objective.actual_value, objective.target_value
        gate_met = self.rules.is_gate_met(actual, target, objective.gate_percentage)
        raw = self.rules.compute_completion(actual, target, objective.cap_percentage)
        if raw is None or not es_valor_valido(raw):
            raw = 0.0

        # Escalón: sin gate no hay crédito, aunque falte muy poco
        completion = min(raw, COMPLETION_MAXIMA) if gate_met else 0.0

        return BillingResult(
            configured=True,
            title=objective.title,
            target=target,
            actual=actual,
            gate_percentage=objective.gate_percentage,
            cap_percentage=objective.cap_percentage,
            gate_met=gate_met,
            raw_completion=raw,
            completion=completion,
        )

    @staticmethod
    def score_nps_quarter(objective: CorporateObjective) -> NpsQuarterResult:
        actual, target = objective.actual_value, objective.target_value
        evaluable = es_valor_valido(actual) and es_valor_valido(target)
        met = evaluable and actual >= target
        return NpsQuarterResult(
            quarter=objective.quarter,
            score=100.0 if met else 0.0,
            met=met,
            evaluable=evaluable,
            actual=actual,
            target=target,
        )

    def score_nps(self, objectives: Iterable[CorporateObjective]) -> NpsResult:
        # Un NPS por trimestre: se usa la primera fila y se descartan las que no tienen trimestre
        por_quarter = {}
        for objective in objectives:
            if not objective.quarter:
                logger.warning(f"Objetivo NPS '{objective.title}' sin trimestre; no entra al promedio.")
            elif objective.quarter in por_quarter:
                logger.warning(f"NPS duplicado para {objective.quarter}; se usa el primero.")
            else:
                por_quarter[objective.quarter] = objective

        quarters: List[NpsQuarterResult] = sorted(
            (self.score_nps_quarter(o) for o in por_quarter.values()),
            key=_orden_quarter,
        )
        # Trimestres sin objetivo configurado no entran al promedio
        average = sum(q.score for q in quarters) / len(quarters) if quarters else 0.0
        return NpsResult(
            quarters=tuple(quarters),
            average_completion=average,
            configured_quarters=len(quarters),
        )

    def calculate(self, objectives: Iterable[CorporateObjective]) -> CorporateResult:
        objectives = list(objectives)
        billing_objectives = [o for o in objectives if o.objective_type == TIPO_FACTURACION]
        nps_objectives = [o for o in objectives if o.objective_type == TIPO_NPS]

        if len(billing_objectives) > 1:
            logger.warning(f"Hay {len(billing_objectives)} objetivos de facturación para el año; se usa el primero.")

        billing = self.score_billing(billing_objectives[0] if billing_objectives else None)
        nps = self.score_nps(nps_objectives)

        total = (
            billing.completion * self.billing_weight + nps.average_completion * self.nps_weight
        ) / 100

        return CorporateResult(billing=billing, nps=nps, total_completion=total)
