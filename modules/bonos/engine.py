# modules/bonos/engine.py
"""
Motor de cálculo del bono anual.

Función pura y determinística: mismos snapshots y misma fecha `as_of`
producen exactamente el mismo BonusResult. No lee el reloj del sistema
ni la base de datos; eso es responsabilidad de la capa de servicio.

    base  = (score_empresa * peso_empresa + score_personal * peso_area) / 100
    final = base * factor_prorrateo
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple
import logging

from .constants import DEPARTAMENTO_DEFAULT
from .corporate import CorporateScoreCalculator
from .personal import PersonalScoreCalculator
from .proration import ProrationCalculator
from .schemas import (
    BonusBreakdown,
    BonusMember,
    BonusResult,
    BonusWeights,
    CorporateObjective,
    EmployeeSnapshot,
    PersonalObjective,
    SeniorityHistoryEntry,
)
from .seniority import SeniorityResolver
from .weights import WeightProfile

logger = logging.getLogger("Bonos.Engine")


@dataclass(frozen=True)
class BonusSnapshot:
    """Todos los insumos (ya leídos) del cálculo de un empleado para un año."""
    employee: EmployeeSnapshot
    year: int
    seniority_history: Tuple[SeniorityHistoryEntry, ...] = ()
    corporate_objectives: Tuple[CorporateObjective, ...] = ()
    personal_objectives: Tuple[PersonalObjective, ...] = ()


class BonusAggregator:
    """Orquesta los calculadores y arma el resultado itemizado."""

    def __init__(
        self,
        seniority_resolver: Optional[SeniorityResolver] = None,
        weight_profile: Optional[WeightProfile] = None,
        corporate_calculator: Optional[CorporateScoreCalculator] = None,
        personal_calculator: Optional[PersonalScoreCalculator] = None,
        proration_calculator: Optional[ProrationCalculator] = None
    ):
        self.seniority_resolver = seniority_resolver or SeniorityResolver()
        self.weight_profile = weight_profile or WeightProfile()
        self.corporate_calculator = corporate_calculator or CorporateScoreCalculator()
        self.personal_calculator = personal_calculator or PersonalScoreCalculator()
        self.proration_calculator = proration_calculator or ProrationCalculator()

    def calculate(self, snapshot: BonusSnapshot, as_of: date) -> BonusResult:
        employee = snapshot.employee
        year = snapshot.year

        seniority = self.seniority_resolver.resolve(employee, year, snapshot.seniority_history, as_of)
        tier_weights = self.weight_profile.lookup(seniority.tier)
        distribution = self.weight_profile.distribution(seniority.tier)

        corporate = self.corporate_calculator.calculate(snapshot.corporate_objectives)
        personal = self.personal_calculator.calculate(snapshot.personal_objectives)
        pro_rata = self.proration_calculator.calculate(employee.hire_date, year)

        company_component = corporate.total_completion * tier_weights.company / 100
        personal_component = personal.average_completion * tier_weights.area / 100
        base = (
            corporate.total_completion * tier_weights.company
            + personal.average_completion * tier_weights.area
        ) / 100
        final = base * pro_rata.factor

        logger.debug(
            f"Bono {employee.id} ({year}): tier={seniority.tier} empresa={corporate.total_completion:.2f} "
            f"personal={personal.average_completion:.2f} base={base:.2f} final={final:.2f}"
        )

        return BonusResult(
            member=BonusMember(
                id=employee.id,
                name=employee.name,
                department=employee.department or DEPARTAMENTO_DEFAULT,
                seniority_level=employee.seniority_level,
                effective_seniority_level=seniority.level,
                seniority_tier=seniority.tier,
                seniority_label=seniority.label,
                hire_date=employee.hire_date,
            ),
            year=year,
            as_of=as_of,
            is_current_year=seniority.is_current_year,
            weights=BonusWeights(
                company=tier_weights.company,
                area=tier_weights.area,
                billing=self.corporate_calculator.billing_weight,
                nps=self.corporate_calculator.nps_weight,
                area1=distribution["area1"],
                area2=distribution["area2"],
            ),
            pro_rata=pro_rata,
            corporate=corporate,
            personal=personal,
            bonus=BonusBreakdown(
                company_component=company_component,
                personal_component=personal_component,
                base=base,
                gate_met=corporate.billing.gate_met,
                final=final,
            ),
        )
