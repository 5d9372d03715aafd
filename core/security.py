from fastapi import Request, Depends
from core.database import get_db_connection
import logging

logger = logging.getLogger("Security")

# La sesión (cookie firmada) la escribe el servicio de autenticación de la plataforma.
# Aquí solo se lee y se enriquece con rol, permisos y empleado vinculado.
async def get_current_user_context(
    request: Request,
    conn = Depends(get_db_connection)
):
    """
    Dependency to get the current logged-in user context.
    Returns a dict with user_name, email, role, module_roles and employee_id.
    """
    # 1. Recuperar sesión (cookie)
    user_email = request.session.get("user_email")
    user_name = request.session.get("user_name", "Usuario")

    # 2. Si no hay email en sesión (no logueado), retornamos contexto mínimo
    if not user_email:
        return {
            "user_name": None,
            "email": None,
            "is_admin": False,
            "role": None,
            "module_roles": {},
            "user_db_id": None,
            "employee_id": None
        }

    # 3. Consultar DB para obtener ID interno y ROL
    row = await conn.fetchrow(
        "SELECT id, name, role FROM users WHERE email = $1",
        user_email
    )

    user_db_id = None
    role = "USER"
    if row:
        user_db_id = row['id']
        role = row['role'] or "USER"
        user_name = row['name'] or user_name
    else:
        logger.warning(f"Usuario con sesión sin registro en users: {user_email}")

    # 4. Módulos y roles asignados
    module_roles = {}
    if user_db_id:
        permisos = await conn.fetch(
            "SELECT module_slug, module_role FROM user_module_permissions WHERE user_id = $1",
            user_db_id
        )
        module_roles = {p['module_slug']: p['module_role'] for p in permisos}

    # 5. Empleado vinculado (vista de líder)
    employee_id = await conn.fetchval(
        "SELECT id FROM employees WHERE lower(email) = lower($1)",
        user_email
    )

    return {
        "user_name": user_name,
        "email": user_email,
        "is_admin": (role == 'ADMIN'),
        "role": role,
        "module_roles": module_roles,
        "user_db_id": user_db_id,
        "employee_id": employee_id
    }
