# modules/bonos/seniority.py
"""
Resolución de la seniority vigente durante el año evaluado.

Un bono pagado después de una promoción o egreso debe reflejar la
seniority que la persona tenía durante el período, no la de hoy.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional

from .constants import (
    LABEL_SIN_SENIORITY,
    SENIORITY_CATEGORY_LABELS,
    TIER_MAXIMO,
    TIER_MINIMO,
)
from .schemas import EmployeeSnapshot, SeniorityHistoryEntry


def get_seniority_category(level: Optional[str]) -> Optional[int]:
    """Categoría principal (1-5) de un nivel detallado como '3.2'."""
    if not level:
        return None
    try:
        category = int(str(level).strip().split(".")[0])
    except ValueError:
        return None
    if TIER_MINIMO <= category <= TIER_MAXIMO:
        return category
    return None


def get_seniority_label(level: Optional[str]) -> str:
    """Etiqueta completa, ej. 'Lev. 3.2 - Sr.'."""
    if not level:
        return LABEL_SIN_SENIORITY
    category = get_seniority_category(level)
    if not category:
        return level
    return f"Lev. {level} - {SENIORITY_CATEGORY_LABELS[category]}"


@dataclass(frozen=True)
class ResolvedSeniority:
    level: Optional[str]
    tier: int
    label: str
    is_current_year: bool


class SeniorityResolver:
    """Determina el nivel y tier efectivos de un empleado para un año."""

    def __init__(self, classifier: Callable[[Optional[str]], Optional[int]] = get_seniority_category):
        self.classifier = classifier

    @staticmethod
    def latest_as_of(
        history: Iterable[SeniorityHistoryEntry],
        cutoff: date
    ) -> Optional[SeniorityHistoryEntry]:
        """Entrada más reciente con effective_date <= cutoff."""
        latest = None
        for entry in history:
            if entry.effective_date > cutoff:
                continue
            if latest is None or entry.effective_date >= latest.effective_date:
                latest = entry
        return latest

    def resolve(
        self,
        employee: EmployeeSnapshot,
        year: int,
        history: Iterable[SeniorityHistoryEntry],
        as_of: date
    ) -> ResolvedSeniority:
        is_current_year = year == as_of.year
        level = employee.seniority_level

        if not is_current_year:
            entry = self.latest_as_of(history, date(year, 12, 31))
            if entry is not None and entry.new_level:
                level = entry.new_level

        tier = self.classifier(level) or TIER_MINIMO
        return ResolvedSeniority(
            level=level,
            tier=tier,
            label=get_seniority_label(level),
            is_current_year=is_current_year,
        )
