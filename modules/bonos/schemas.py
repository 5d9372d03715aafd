# Archivo: modules/bonos/schemas.py

from typing import Optional, Tuple
from datetime import date, datetime
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .constants import GATE_DEFAULT, CAP_DEFAULT

# --- Base Configuration ---
class BonosBaseSchema(BaseModel):
    """Snapshots inmutables: el motor nunca modifica lo que recibe ni lo que devuelve."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, frozen=True)


def _as_date(value):
    # Supabase puede devolver timestamps donde esperamos fechas
    if isinstance(value, datetime):
        return value.date()
    return value

# -----------------------------------------
# 1. SNAPSHOTS DE ENTRADA (solo lectura)
# -----------------------------------------

class EmployeeSnapshot(BonosBaseSchema):
    """Empleado tal como lo ve el motor."""
    id: UUID
    name: str
    hire_date: Optional[date] = None
    seniority_level: Optional[str] = Field(None, description="Nivel detallado, ej. '3.2'")
    department: Optional[str] = None
    manager_id: Optional[UUID] = None

    @field_validator("hire_date", mode="before")
    @classmethod
    def normalizar_fecha(cls, v):
        return _as_date(v)


class SeniorityHistoryEntry(BonosBaseSchema):
    """Entrada del historial (append-only) de cambios de seniority."""
    employee_id: UUID
    new_level: Optional[str] = None
    effective_date: date

    @field_validator("effective_date", mode="before")
    @classmethod
    def normalizar_fecha(cls, v):
        return _as_date(v)


class CorporateObjective(BonosBaseSchema):
    """Objetivo corporativo del año: facturación (anual) o NPS (trimestral)."""
    year: int
    objective_type: str
    quarter: Optional[str] = None
    title: Optional[str] = None
    target_value: Optional[float] = None
    actual_value: Optional[float] = None
    gate_percentage: float = GATE_DEFAULT
    cap_percentage: float = CAP_DEFAULT

    @field_validator("objective_type", "quarter", mode="before")
    @classmethod
    def normalizar_texto(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    # Un 0 o NULL guardado en BD significa "usar el default"
    @field_validator("gate_percentage", mode="before")
    @classmethod
    def gate_default(cls, v):
        return v or GATE_DEFAULT

    @field_validator("cap_percentage", mode="before")
    @classmethod
    def cap_default(cls, v):
        return v or CAP_DEFAULT


class PersonalObjective(BonosBaseSchema):
    """Nodo del árbol de objetivos personales (principal o sub-objetivo)."""
    id: UUID
    employee_id: Optional[UUID] = None
    year: Optional[int] = None
    title: str = ""
    periodicity: Optional[str] = None
    parent_objective_id: Optional[UUID] = None
    sub_objective_number: Optional[int] = None
    achievement_percentage: Optional[float] = None

    @field_validator("title", mode="before")
    @classmethod
    def titulo_vacio(cls, v):
        return v or ""

# -----------------------------------------
# 2. RESULTADO DEL CÁLCULO (auditable)
# -----------------------------------------

class BonusMember(BonosBaseSchema):
    id: UUID
    name: str
    department: str
    seniority_level: Optional[str]
    effective_seniority_level: Optional[str]
    seniority_tier: int
    seniority_label: str
    hire_date: Optional[date]


class BonusWeights(BonosBaseSchema):
    company: int
    area: int
    billing: int
    nps: int
    area1: int
    area2: int


class ProRataResult(BonosBaseSchema):
    applies: bool
    factor: float
    months: float
    percentage: float


class BillingResult(BonosBaseSchema):
    configured: bool
    title: Optional[str] = None
    target: Optional[float]
    actual: Optional[float]
    gate_percentage: float
    cap_percentage: float
    gate_met: bool
    raw_completion: float = Field(..., description="% vs target, limitado por cap_percentage")
    completion: float = Field(..., description="Valor que alimenta el score (0 si no pasa el gate, máx 100)")


class NpsQuarterResult(BonosBaseSchema):
    quarter: Optional[str]
    score: float
    met: bool
    evaluable: bool
    actual: Optional[float]
    target: Optional[float]


class NpsResult(BonosBaseSchema):
    quarters: Tuple[NpsQuarterResult, ...] = ()
    average_completion: float
    configured_quarters: int


class CorporateResult(BonosBaseSchema):
    billing: BillingResult
    nps: NpsResult
    total_completion: float


class SubObjectiveResult(BonosBaseSchema):
    id: UUID
    title: str
    number: Optional[int]
    achievement: Optional[float]


class PersonalObjectiveResult(BonosBaseSchema):
    id: UUID
    title: str
    periodicity: Optional[str]
    achievement: Optional[float]
    sub_objectives: Optional[Tuple[SubObjectiveResult, ...]] = None
    evaluated_sub_count: int = 0
    total_sub_count: int = 0


class PersonalResult(BonosBaseSchema):
    objectives: Tuple[PersonalObjectiveResult, ...] = ()
    average_completion: float
    evaluated_count: int
    total_count: int
    is_provisional: bool
    policy: str


class BonusBreakdown(BonosBaseSchema):
    company_component: float
    personal_component: float
    base: float
    gate_met: bool
    final: float


class BonusResult(BonosBaseSchema):
    """Resultado completo y auditable del bono de un empleado para un año."""
    member: BonusMember
    year: int
    as_of: date
    is_current_year: bool
    weights: BonusWeights
    pro_rata: ProRataResult
    corporate: CorporateResult
    personal: PersonalResult
    bonus: BonusBreakdown

# -----------------------------------------
# 3. CORRIDA MASIVA (tablero de bonos)
# -----------------------------------------

class CorporateSummary(BonosBaseSchema):
    """Resumen corporativo compartido por todas las filas del año."""
    year: int
    billing_target: Optional[float]
    billing_actual: Optional[float]
    billing_gate_met: bool
    billing_raw_completion: float
    billing_completion: float
    nps_average: float
    nps_quarters: Tuple[NpsQuarterResult, ...] = ()
    total_completion: float


class BonusBatchRow(BonosBaseSchema):
    id: UUID
    name: str
    department: str
    seniority_level: Optional[str]
    seniority_label: str
    company_weight: int
    area_weight: int
    corporate_completion: float
    gate_met: bool
    personal_completion: float
    evaluated_count: int
    total_count: int
    is_provisional: bool
    pro_rata: ProRataResult
    base: float
    final: float
    objectives: Tuple[PersonalObjectiveResult, ...] = ()


class BatchError(BonosBaseSchema):
    employee_id: UUID
    detail: str


class BatchStats(BonosBaseSchema):
    """
    Indicadores del padrón. Una fila es calculable cuando no tiene objetivos
    personales o tiene todos evaluados.
    """
    calculable: int = 0
    average_final_calculable: float = 0.0
    without_personal: int = 0
    pending_evaluation: int = 0


class BonusBatchResult(BonosBaseSchema):
    year: int
    as_of: date
    corporate_summary: CorporateSummary
    stats: BatchStats = BatchStats()
    rows: Tuple[BonusBatchRow, ...] = ()
    skipped: Tuple[UUID, ...] = ()
    errors: Tuple[BatchError, ...] = ()


class AvailableYears(BonosBaseSchema):
    years: Tuple[int, ...] = ()
    default_year: int
