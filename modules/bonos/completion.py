# modules/bonos/completion.py
"""
Reglas de cumplimiento de objetivos corporativos.

Se agrupan en `CompletionRules` para poder cambiar la curva de escalado
(por ejemplo, un cumplimiento no lineal) sin tocar los calculadores.
"""

from dataclasses import dataclass
from typing import Callable, Optional
import math

from .constants import CAP_DEFAULT, GATE_DEFAULT


def es_valor_valido(value: Optional[float]) -> bool:
    """True si el valor existe y no es NaN/infinito."""
    return value is not None and math.isfinite(value)


def _evaluable(actual: Optional[float], target: Optional[float]) -> bool:
    return es_valor_valido(actual) and es_valor_valido(target) and target > 0 and actual > 0


def calculate_completion_percentage(
    actual: Optional[float],
    target: Optional[float],
    cap: float = CAP_DEFAULT
) -> Optional[float]:
    """
    % de cumplimiento de actual vs target, con tope en `cap`.

    Returns:
        None si el objetivo no es evaluable (valores nulos, NaN o target <= 0)
    """
    if not _evaluable(actual, target):
        return None
    return min(actual / target * 100, cap)


def is_gate_met(
    actual: Optional[float],
    target: Optional[float],
    gate_percentage: float = GATE_DEFAULT
) -> bool:
    """Indica si actual alcanza el gate (% mínimo del target)."""
    if not _evaluable(actual, target):
        return False
    # Forma multiplicativa: 90/100 con gate 90 no debe caer por redondeo
    return actual * 100 >= gate_percentage * target


@dataclass(frozen=True)
class CompletionRules:
    """Capacidad inyectable con la matemática de cumplimiento y gate."""
    compute_completion: Callable[[Optional[float], Optional[float], float], Optional[float]] = calculate_completion_percentage
    is_gate_met: Callable[[Optional[float], Optional[float], float], bool] = is_gate_met


DEFAULT_RULES = CompletionRules()
