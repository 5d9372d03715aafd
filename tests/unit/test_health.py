def test_health_check(client):
    """Verifica que la app levante y responda sin tocar la BD."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_bonos_routes_registered(client):
    """Verifica que el router de bonos esté montado."""
    paths = {route.path for route in client.app.routes}
    assert "/bonos" in paths
    assert "/bonos/empleados/{employee_id}" in paths
    assert "/bonos/equipo/{member_id}" in paths
