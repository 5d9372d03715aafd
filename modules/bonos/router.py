from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from core.database import get_db_connection, get_db_pool
from core.security import get_current_user_context
from core.permissions import require_module_access
from .schemas import AvailableYears, BonusBatchResult, BonusResult
from .service import BonosService, get_bonos_service

router = APIRouter(
    prefix="/bonos",
    tags=["Bonos"]
)

MODULO = "objetivos"


def _default_year(service: BonosService, as_of: Optional[date]) -> int:
    # Los bonos se liquidan sobre el año cerrado
    return (as_of or service.today()).year - 1


@router.get("/anios", response_model=AvailableYears)
async def get_available_years(
    conn = Depends(get_db_connection),
    service: BonosService = Depends(get_bonos_service),
    _ = require_module_access(MODULO)
):
    """Años con objetivos corporativos y año sugerido para el tablero."""
    return await service.get_available_years(conn)


@router.get("", response_model=BonusBatchResult)
async def get_year_bonuses(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    as_of: Optional[date] = None,
    pool = Depends(get_db_pool),
    service: BonosService = Depends(get_bonos_service),
    _ = require_module_access(MODULO)
):
    """Tablero de bonos: todos los empleados activos del año."""
    if year is None:
        async with pool.acquire() as conn:
            year = (await service.get_available_years(conn, as_of)).default_year

    return await service.calculate_year_bonuses(pool, year, as_of=as_of)


@router.get("/empleados/{employee_id}", response_model=BonusResult)
async def get_employee_bonus(
    employee_id: UUID,
    year: Optional[int] = Query(None, ge=2000, le=2100),
    as_of: Optional[date] = None,
    conn = Depends(get_db_connection),
    service: BonosService = Depends(get_bonos_service),
    _ = require_module_access(MODULO)
):
    """Detalle auditable del bono de un empleado (vista admin)."""
    year = year or _default_year(service, as_of)
    result = await service.calculate_employee_bonus(conn, employee_id, year, as_of=as_of)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empleado no encontrado")
    return result


@router.get("/equipo/{member_id}", response_model=BonusResult)
async def get_team_member_bonus(
    member_id: UUID,
    year: Optional[int] = Query(None, ge=2000, le=2100),
    conn = Depends(get_db_connection),
    context = Depends(get_current_user_context),
    service: BonosService = Depends(get_bonos_service)
):
    """Vista de líder: bono de un reporte directo."""
    leader_id = context.get("employee_id")
    if not leader_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No autorizado")

    year = year or _default_year(service, None)
    result = await service.calculate_team_member_bonus(conn, leader_id, member_id, year)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Empleado no encontrado o no es tu reporte directo"
        )
    return result
