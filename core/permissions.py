"""
Módulo de Permisos y Control de Acceso
Sistema de validación de permisos basado en módulos y roles
"""
from fastapi import Depends, HTTPException, status
from typing import Callable
from core.security import get_current_user_context

# Jerarquía de roles (de menor a mayor privilegio)
ROLE_HIERARCHY = {
    "viewer": 1,    # Solo lectura
    "editor": 2,    # Lectura + edición
    "admin": 3      # Control total del módulo
}


def require_module_access(module_slug: str, min_role: str = "viewer") -> Callable:
    """
    Dependency factory para validar acceso a un módulo.

    Args:
        module_slug: Slug del módulo (ej: "objetivos")
        min_role: Rol mínimo requerido ("viewer", "editor", "admin")

    Raises:
        HTTPException 401: Si no hay sesión
        HTTPException 403: Si el usuario no tiene acceso o rol insuficiente

    Ejemplo de uso:
        @router.get("/bonos")
        async def listar_bonos(_ = require_module_access("objetivos")):
            ...
    """
    async def _validate(context = Depends(get_current_user_context)):
        if not context.get("email"):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Sesión no iniciada."
            )

        # Los ADMIN siempre tienen acceso total
        if context.get("role") == "ADMIN":
            return True

        module_roles = context.get("module_roles", {})

        if module_slug not in module_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"No tienes acceso al módulo '{module_slug}'. Contacta al administrador."
            )

        user_role = module_roles[module_slug]
        if ROLE_HIERARCHY.get(user_role, 0) < ROLE_HIERARCHY.get(min_role, 0):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requieres permisos de '{min_role}' o superior en este módulo. Tu rol actual: '{user_role}'"
            )

        return True

    return Depends(_validate)
