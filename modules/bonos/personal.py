# modules/bonos/personal.py
"""
Score del componente área a partir del árbol de objetivos personales.

El árbol llega como una lista plana (arena): los objetivos principales tienen
parent_objective_id NULL y los sub-objetivos se agrupan por su padre.

Política de sub-objetivos:
- evaluated_subset (default): el principal promedia solo los sub-objetivos
  ya evaluados; si ninguno está evaluado queda en NULL.
- all_required: el principal cuenta solo cuando todos sus sub-objetivos
  están evaluados.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional
from uuid import UUID
import logging

from .completion import es_valor_valido
from .constants import (
    COMPLETION_MAXIMA,
    PERIODICIDAD_ANUAL,
    POLITICA_SUBCONJUNTO_EVALUADO,
    POLITICA_TODOS_REQUERIDOS,
    POLITICAS_SUBOBJETIVOS,
)
from .schemas import (
    PersonalObjective,
    PersonalObjectiveResult,
    PersonalResult,
    SubObjectiveResult,
)

logger = logging.getLogger("Bonos.Personal")


def _achievement(objective: PersonalObjective) -> Optional[float]:
    value = objective.achievement_percentage
    return value if es_valor_valido(value) else None


def _orden_sub(objective: PersonalObjective):
    number = objective.sub_objective_number
    return (number is None, number or 0)


class PersonalScoreCalculator:

    def __init__(self, policy: str = POLITICA_SUBCONJUNTO_EVALUADO):
        if policy not in POLITICAS_SUBOBJETIVOS:
            raise ValueError(f"Política de sub-objetivos inválida: {policy}")
        self.policy = policy

    def _promedio_subs(self, achievements: List[Optional[float]]) -> Optional[float]:
        evaluated = [a for a in achievements if a is not None]
        if not evaluated:
            return None
        if self.policy == POLITICA_TODOS_REQUERIDOS and len(evaluated) < len(achievements):
            return None
        return sum(evaluated) / len(evaluated)

    def score_objective(
        self,
        objective: PersonalObjective,
        children: List[PersonalObjective]
    ) -> PersonalObjectiveResult:
        # Sin periodicidad cuenta como anual; un periódico sin hijos también se evalúa como anual
        if not objective.periodicity or objective.periodicity == PERIODICIDAD_ANUAL or not children:
            return PersonalObjectiveResult(
                id=objective.id,
                title=objective.title,
                periodicity=objective.periodicity,
                achievement=_achievement(objective),
            )

        children = sorted(children, key=_orden_sub)
        subs = tuple(
            SubObjectiveResult(
                id=child.id,
                title=child.title,
                number=child.sub_objective_number,
                achievement=_achievement(child),
            )
            for child in children
        )
        achievements = [s.achievement for s in subs]

        return PersonalObjectiveResult(
            id=objective.id,
            title=objective.title,
            periodicity=objective.periodicity,
            achievement=self._promedio_subs(achievements),
            sub_objectives=subs,
            evaluated_sub_count=sum(1 for a in achievements if a is not None),
            total_sub_count=len(subs),
        )

    def calculate(self, objectives: Iterable[PersonalObjective]) -> PersonalResult:
        mains: List[PersonalObjective] = []
        children: Dict[UUID, List[PersonalObjective]] = defaultdict(list)

        for objective in objectives:
            if objective.parent_objective_id is None:
                mains.append(objective)
            else:
                children[objective.parent_objective_id].append(objective)

        main_ids = {m.id for m in mains}
        huerfanos = [pid for pid in children if pid not in main_ids]
        if huerfanos:
            logger.debug(f"Sub-objetivos sin objetivo principal ignorados: {huerfanos}")

        results = tuple(self.score_objective(m, children.get(m.id, [])) for m in mains)

        # Los no evaluados no suman ni al numerador ni al denominador
        evaluated = [r.achievement for r in results if r.achievement is not None]
        average = (
            sum(min(a, COMPLETION_MAXIMA) for a in evaluated) / len(evaluated)
            if evaluated else 0.0
        )

        return PersonalResult(
            objectives=results,
            average_completion=average,
            evaluated_count=len(evaluated),
            total_count=len(results),
            is_provisional=len(evaluated) < len(results),
            policy=self.policy,
        )
