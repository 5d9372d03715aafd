# modules/bonos/db_service.py
"""
Capa de Acceso a Datos para el Modulo Bonos.
Todas las queries SQL puras reciben conn como primer parametro.
Solo lectura: las tablas pertenecen a los modulos de empleados y objetivos.
"""
from datetime import date
from typing import List, Optional
from uuid import UUID
import logging

logger = logging.getLogger("Bonos.DBService")

_EMPLOYEE_SELECT = """
    SELECT e.id,
           e.first_name,
           e.last_name,
           e.seniority_level,
           e.hire_date,
           e.manager_id,
           d.name AS department_name
    FROM employees e
    LEFT JOIN departments d ON d.id = e.department_id
"""


class BonosDBService:
    """Capa de Acceso a Datos para el Modulo Bonos."""

    # ========================================
    # EMPLEADOS
    # ========================================

    async def fetch_employee(self, conn, employee_id: UUID) -> Optional[dict]:
        """Obtiene un empleado con el nombre de su departamento."""
        row = await conn.fetchrow(f"{_EMPLOYEE_SELECT} WHERE e.id = $1", employee_id)
        return dict(row) if row else None

    async def fetch_direct_report(self, conn, leader_id: UUID, member_id: UUID) -> Optional[dict]:
        """Obtiene un empleado solo si reporta directamente al lider."""
        row = await conn.fetchrow(
            f"{_EMPLOYEE_SELECT} WHERE e.id = $1 AND e.manager_id = $2",
            member_id, leader_id
        )
        return dict(row) if row else None

    async def fetch_active_employee_ids(self, conn) -> List[UUID]:
        """IDs de empleados activos ordenados por apellido."""
        rows = await conn.fetch(
            "SELECT id FROM employees WHERE status = 'active' ORDER BY last_name"
        )
        return [r['id'] for r in rows]

    # ========================================
    # SENIORITY
    # ========================================

    async def fetch_seniority_as_of(self, conn, employee_id: UUID, cutoff: date) -> Optional[dict]:
        """Ultimo cambio de seniority con effective_date <= cutoff."""
        row = await conn.fetchrow(
            """SELECT employee_id, new_level, effective_date
               FROM seniority_history
               WHERE employee_id = $1 AND effective_date <= $2
               ORDER BY effective_date DESC
               LIMIT 1""",
            employee_id, cutoff
        )
        return dict(row) if row else None

    # ========================================
    # OBJETIVOS
    # ========================================

    async def fetch_corporate_objectives(self, conn, year: int) -> List[dict]:
        """Objetivos corporativos (facturacion + NPS) del año."""
        rows = await conn.fetch(
            """SELECT year, objective_type, quarter, title, target_value, actual_value,
                      gate_percentage, cap_percentage
               FROM corporate_objectives
               WHERE year = $1
               ORDER BY objective_type, quarter""",
            year
        )
        return [dict(r) for r in rows]

    async def fetch_corporate_years(self, conn) -> List[int]:
        """Años con objetivos corporativos cargados, del mas reciente al mas antiguo."""
        rows = await conn.fetch(
            "SELECT DISTINCT year FROM corporate_objectives ORDER BY year DESC"
        )
        return [r['year'] for r in rows]

    async def fetch_personal_objectives(self, conn, employee_id: UUID, year: int) -> List[dict]:
        """
        Arbol de objetivos personales en una sola consulta (lista plana).

        Trae los principales del empleado/año y los sub-objetivos que cuelgan
        de ellos, sin una consulta extra por cada principal.
        """
        rows = await conn.fetch(
            """WITH principales AS (
                   SELECT id FROM objectives
                   WHERE employee_id = $1 AND year = $2 AND parent_objective_id IS NULL
               )
               SELECT id, employee_id, year, title, periodicity, parent_objective_id,
                      sub_objective_number, achievement_percentage
               FROM objectives
               WHERE id IN (SELECT id FROM principales)
                  OR parent_objective_id IN (SELECT id FROM principales)
               ORDER BY parent_objective_id NULLS FIRST, sub_objective_number, created_at, id""",
            employee_id, year
        )
        return [dict(r) for r in rows]
