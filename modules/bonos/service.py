# modules/bonos/service.py
"""
Service Layer para el módulo Bonos.
Lee los insumos con BonosDBService, arma los snapshots y delega el cálculo
al motor puro (BonusAggregator).
"""
from datetime import date, datetime
from typing import Iterable, Optional, Tuple
from uuid import UUID
from zoneinfo import ZoneInfo
import asyncio
import logging

from core.config import settings
from .db_service import BonosDBService
from .engine import BonusAggregator, BonusSnapshot
from .personal import PersonalScoreCalculator
from .proration import ProrationCalculator
from .schemas import (
    AvailableYears,
    BatchError,
    BatchStats,
    BonusBatchResult,
    BonusBatchRow,
    BonusResult,
    CorporateObjective,
    CorporateResult,
    CorporateSummary,
    EmployeeSnapshot,
    PersonalObjective,
    SeniorityHistoryEntry,
)

logger = logging.getLogger("BonosModule")


def build_aggregator() -> BonusAggregator:
    """Motor configurado según settings (política de sub-objetivos y prorrateo)."""
    return BonusAggregator(
        personal_calculator=PersonalScoreCalculator(policy=settings.BONUS_SUBOBJECTIVE_POLICY),
        proration_calculator=ProrationCalculator(mode=settings.BONUS_PRORATION_MODE),
    )


def employee_from_row(row: dict) -> EmployeeSnapshot:
    name = f"{row.get('first_name') or ''} {row.get('last_name') or ''}".strip()
    return EmployeeSnapshot(
        id=row['id'],
        name=name,
        hire_date=row.get('hire_date'),
        seniority_level=row.get('seniority_level'),
        department=row.get('department_name'),
        manager_id=row.get('manager_id'),
    )


class BonosService:
    """Maneja la lectura de insumos y la orquestación del cálculo de bonos."""

    def __init__(
        self,
        db: Optional[BonosDBService] = None,
        aggregator: Optional[BonusAggregator] = None,
        batch_concurrency: Optional[int] = None
    ):
        self.db = db or BonosDBService()
        self.aggregator = aggregator or build_aggregator()
        self.batch_concurrency = max(1, batch_concurrency or settings.BONUS_BATCH_CONCURRENCY)

    # ========================================
    # FECHAS Y AÑOS
    # ========================================

    @staticmethod
    def today() -> date:
        """Único punto donde se lee el reloj; el motor recibe la fecha como parámetro."""
        return datetime.now(ZoneInfo(settings.TIMEZONE)).date()

    async def get_available_years(self, conn, as_of: Optional[date] = None) -> AvailableYears:
        """
        Años con objetivos corporativos y el año sugerido.

        Default: año anterior si está cargado; si no, el más reciente; si no hay
        ninguno, el año anterior igualmente.
        """
        as_of = as_of or self.today()
        previous_year = as_of.year - 1
        years = tuple(await self.db.fetch_corporate_years(conn))

        if previous_year in years or not years:
            default_year = previous_year
        else:
            default_year = years[0]

        return AvailableYears(years=years, default_year=default_year)

    # ========================================
    # INSUMOS
    # ========================================

    async def load_corporate_objectives(self, conn, year: int) -> Tuple[CorporateObjective, ...]:
        rows = await self.db.fetch_corporate_objectives(conn, year)
        if not rows:
            logger.info(f"No hay objetivos corporativos configurados para {year}; el componente empresa será 0.")
        return tuple(CorporateObjective.model_validate(r) for r in rows)

    async def _build_snapshot(
        self,
        conn,
        employee: EmployeeSnapshot,
        year: int,
        as_of: date,
        corporate_objectives: Optional[Iterable[CorporateObjective]]
    ) -> BonusSnapshot:
        history: Tuple[SeniorityHistoryEntry, ...] = ()
        if year != as_of.year:
            entry = await self.db.fetch_seniority_as_of(conn, employee.id, date(year, 12, 31))
            if entry:
                history = (SeniorityHistoryEntry.model_validate(entry),)

        if corporate_objectives is None:
            corporate = await self.load_corporate_objectives(conn, year)
        else:
            corporate = tuple(corporate_objectives)

        personal_rows = await self.db.fetch_personal_objectives(conn, employee.id, year)

        return BonusSnapshot(
            employee=employee,
            year=year,
            seniority_history=history,
            corporate_objectives=corporate,
            personal_objectives=tuple(PersonalObjective.model_validate(r) for r in personal_rows),
        )

    # ========================================
    # CÁLCULO INDIVIDUAL
    # ========================================

    async def calculate_employee_bonus(
        self,
        conn,
        employee_id: UUID,
        year: int,
        prefetched_corporate_objectives: Optional[Iterable[CorporateObjective]] = None,
        as_of: Optional[date] = None
    ) -> Optional[BonusResult]:
        """
        Calcula el bono de un empleado para un año.

        Args:
            prefetched_corporate_objectives: objetivos corporativos ya leídos
                (corridas masivas); si es None se consultan.
            as_of: fecha de referencia para decidir si el año es el actual.

        Returns:
            BonusResult, o None si el empleado no existe
        """
        row = await self.db.fetch_employee(conn, employee_id)
        if not row:
            logger.warning(f"Empleado {employee_id} no encontrado para cálculo de bono {year}")
            return None

        return await self._calculate_for_row(conn, row, year, prefetched_corporate_objectives, as_of)

    async def calculate_team_member_bonus(
        self,
        conn,
        leader_id: UUID,
        member_id: UUID,
        year: int,
        as_of: Optional[date] = None
    ) -> Optional[BonusResult]:
        """Vista de líder: solo calcula si el miembro es reporte directo."""
        row = await self.db.fetch_direct_report(conn, leader_id, member_id)
        if not row:
            return None
        return await self._calculate_for_row(conn, row, year, None, as_of)

    async def _calculate_for_row(
        self,
        conn,
        row: dict,
        year: int,
        corporate_objectives: Optional[Iterable[CorporateObjective]],
        as_of: Optional[date]
    ) -> BonusResult:
        as_of = as_of or self.today()
        employee = employee_from_row(row)
        snapshot = await self._build_snapshot(conn, employee, year, as_of, corporate_objectives)
        return self.aggregator.calculate(snapshot, as_of)

    # ========================================
    # CORRIDA MASIVA
    # ========================================

    async def calculate_year_bonuses(
        self,
        pool,
        year: int,
        as_of: Optional[date] = None
    ) -> BonusBatchResult:
        """
        Calcula el bono de todos los empleados activos.

        Los objetivos corporativos se leen una sola vez. Cada empleado usa su
        propia conexión del pool, con concurrencia acotada. Un empleado
        inexistente o con error no detiene la corrida.
        """
        as_of = as_of or self.today()

        async with pool.acquire() as conn:
            employee_ids = await self.db.fetch_active_employee_ids(conn)
            corporate_objectives = await self.load_corporate_objectives(conn, year)

        semaphore = asyncio.Semaphore(self.batch_concurrency)

        async def _calcular(employee_id: UUID):
            async with semaphore:
                try:
                    async with pool.acquire() as conn:
                        result = await self.calculate_employee_bonus(
                            conn, employee_id, year, corporate_objectives, as_of
                        )
                    return employee_id, result, None
                except Exception as e:
                    logger.error(f"Error calculando bono de {employee_id} ({year}): {e}", exc_info=True)
                    return employee_id, None, str(e)

        outcomes = await asyncio.gather(*(_calcular(eid) for eid in employee_ids))

        rows, skipped, errors = [], [], []
        for employee_id, result, error in outcomes:
            if error is not None:
                errors.append(BatchError(employee_id=employee_id, detail=error))
            elif result is None:
                skipped.append(employee_id)
            else:
                rows.append(self.build_batch_row(result))

        logger.info(
            f"Corrida de bonos {year}: {len(rows)} calculados, {len(skipped)} omitidos, {len(errors)} con error"
        )

        corporate = self.aggregator.corporate_calculator.calculate(corporate_objectives)
        return BonusBatchResult(
            year=year,
            as_of=as_of,
            corporate_summary=self.build_corporate_summary(year, corporate),
            rows=tuple(rows),
            stats=self.build_batch_stats(rows),
            skipped=tuple(skipped),
            errors=tuple(errors),
        )

    @staticmethod
    def build_corporate_summary(year: int, corporate: CorporateResult) -> CorporateSummary:
        billing = corporate.billing
        return CorporateSummary(
            year=year,
            billing_target=billing.target,
            billing_actual=billing.actual,
            billing_gate_met=billing.gate_met,
            billing_raw_completion=billing.raw_completion,
            billing_completion=billing.completion,
            nps_average=corporate.nps.average_completion,
            nps_quarters=corporate.nps.quarters,
            total_completion=corporate.total_completion,
        )

    @staticmethod
    def build_batch_row(result: BonusResult) -> BonusBatchRow:
        return BonusBatchRow(
            id=result.member.id,
            name=result.member.name,
            department=result.member.department,
            seniority_level=result.member.effective_seniority_level,
            seniority_label=result.member.seniority_label,
            company_weight=result.weights.company,
            area_weight=result.weights.area,
            corporate_completion=result.corporate.total_completion,
            gate_met=result.corporate.billing.gate_met,
            personal_completion=result.personal.average_completion,
            evaluated_count=result.personal.evaluated_count,
            total_count=result.personal.total_count,
            is_provisional=result.personal.is_provisional,
            pro_rata=result.pro_rata,
            base=result.bonus.base,
            final=result.bonus.final,
            objectives=result.personal.objectives,
        )

    @staticmethod
    def build_batch_stats(rows: Iterable[BonusBatchRow]) -> BatchStats:
        """Promedio de bono final solo sobre filas calculables (sin evaluaciones pendientes)."""
        rows = list(rows)
        calculable = [r for r in rows if r.total_count == 0 or r.evaluated_count == r.total_count]
        average = sum(r.final for r in calculable) / len(calculable) if calculable else 0.0
        return BatchStats(
            calculable=len(calculable),
            average_final_calculable=average,
            without_personal=sum(1 for r in rows if r.total_count == 0),
            pending_evaluation=sum(1 for r in rows if 0 < r.total_count and r.evaluated_count < r.total_count),
        )


def get_bonos_service() -> BonosService:
    """Dependencia para inyectar la capa de servicio."""
    return BonosService()
