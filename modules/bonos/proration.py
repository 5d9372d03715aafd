# modules/bonos/proration.py

from calendar import isleap
from datetime import date
from typing import Optional

from .constants import MODOS_PRORRATEO, PRORRATEO_DIAS, PRORRATEO_MESES
from .schemas import ProRataResult


class ProrationCalculator:
    """
    Fracción del año evaluado efectivamente trabajada.

    Solo aplica a ingresos posteriores al 1 de enero y hasta el 31 de
    diciembre del año evaluado. En modo "months" cualquier día del mes de
    ingreso cuenta el mes completo.
    """

    def __init__(self, mode: str = PRORRATEO_MESES):
        if mode not in MODOS_PRORRATEO:
            raise ValueError(f"Modo de prorrateo inválido: {mode}")
        self.mode = mode

    def calculate(self, hire_date: Optional[date], year: int) -> ProRataResult:
        year_start = date(year, 1, 1)
        year_end = date(year, 12, 31)

        if hire_date is None or not (year_start < hire_date <= year_end):
            return ProRataResult(applies=False, factor=1.0, months=12, percentage=100.0)

        if self.mode == PRORRATEO_DIAS:
            days_in_year = 366 if isleap(year) else 365
            days_worked = (year_end - hire_date).days + 1
            factor = days_worked / days_in_year
            months = round(factor * 12, 1)
        else:
            months = 12 - (hire_date.month - 1)
            factor = months / 12

        return ProRataResult(applies=True, factor=factor, months=months, percentage=factor * 100)
