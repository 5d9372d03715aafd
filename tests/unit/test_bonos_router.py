import pytest
from datetime import date
from uuid import uuid4


def employee_row(employee_id, manager_id=None):
    return {
        'id': employee_id,
        'first_name': 'Martín',
        'last_name': 'Sosa',
        'seniority_level': '3.2',
        'hire_date': date(2020, 4, 1),
        'manager_id': manager_id,
        'department_name': 'Tecnología',
    }


BILLING_ROW = {
    'year': 2024, 'objective_type': 'billing', 'quarter': None, 'title': 'Facturación',
    'target_value': 100, 'actual_value': 89, 'gate_percentage': 90, 'cap_percentage': 150,
}


class TestBonosRouterAccess:
    """Control de acceso de los endpoints de bonos."""

    def test_requiere_sesion(self, client_anon):
        response = client_anon.get(f"/bonos/empleados/{uuid4()}?year=2024")
        assert response.status_code == 401

    def test_requiere_modulo_objetivos(self, client_user):
        response = client_user.get(f"/bonos/empleados/{uuid4()}?year=2024")
        assert response.status_code == 403

    def test_equipo_requiere_empleado_vinculado(self, client_admin):
        response = client_admin.get(f"/bonos/equipo/{uuid4()}?year=2024")
        assert response.status_code == 401


class TestEmployeeBonusEndpoint:

    def test_empleado_no_encontrado(self, client_admin, mock_db_conn):
        mock_db_conn.set_fetchrow_result(None)

        response = client_admin.get(f"/bonos/empleados/{uuid4()}?year=2024&as_of=2025-02-01")

        assert response.status_code == 404
        assert response.json()["detail"] == "Empleado no encontrado"

    def test_detalle_auditable(self, client_admin, mock_db_conn):
        employee_id = uuid4()
        mock_db_conn.set_fetchrow_result(employee_row(employee_id))  # empleado
        mock_db_conn.set_fetchrow_result(None)                       # sin historial de seniority
        mock_db_conn.set_fetch_result([BILLING_ROW])                 # objetivos corporativos
        mock_db_conn.set_fetch_result([                              # objetivos personales
            {'id': uuid4(), 'employee_id': employee_id, 'year': 2024, 'title': 'Migración',
             'periodicity': 'annual', 'parent_objective_id': None,
             'sub_objective_number': None, 'achievement_percentage': 100},
        ])

        response = client_admin.get(f"/bonos/empleados/{employee_id}?year=2024&as_of=2025-02-01")

        assert response.status_code == 200
        data = response.json()
        assert data["member"]["name"] == "Martín Sosa"
        assert data["member"]["seniority_label"] == "Lev. 3.2 - Sr."
        # 89 de 100 con gate 90: cero crédito de facturación, pero el crudo queda visible
        assert data["corporate"]["billing"]["gate_met"] is False
        assert data["corporate"]["billing"]["raw_completion"] == pytest.approx(89.0)
        assert data["corporate"]["billing"]["completion"] == 0
        assert data["personal"]["average_completion"] == 100
        assert data["bonus"]["final"] == pytest.approx(40.0)
        assert mock_db_conn.called_with_pattern("FROM seniority_history")
        # Orden estable de objetivos: dos lecturas de los mismos datos dan el mismo reporte
        query_personales = mock_db_conn.calls('fetch')[-1][1]
        assert "sub_objective_number, created_at, id" in query_personales


class TestTeamBonusEndpoint:

    def test_no_es_reporte_directo(self, client_leader, mock_db_conn, leader_id):
        mock_db_conn.set_fetchrow_result(None)
        member_id = uuid4()

        response = client_leader.get(f"/bonos/equipo/{member_id}?year=2024")

        assert response.status_code == 404
        query, params = mock_db_conn.calls('fetchrow')[0][1:]
        assert "e.manager_id = $2" in query
        assert params == (member_id, leader_id)

    def test_reporte_directo(self, client_leader, mock_db_conn, leader_id):
        member_id = uuid4()
        mock_db_conn.set_fetchrow_result(employee_row(member_id, manager_id=leader_id))

        response = client_leader.get(f"/bonos/equipo/{member_id}?year=2024")

        assert response.status_code == 200
        assert response.json()["member"]["id"] == str(member_id)


class TestBatchEndpoints:

    def test_anios_disponibles(self, client_admin, mock_db_conn):
        mock_db_conn.set_fetch_result([{'year': 2024}, {'year': 2023}])

        response = client_admin.get("/bonos/anios")

        assert response.status_code == 200
        assert response.json()["years"] == [2024, 2023]

    def test_corrida_del_anio(self, client_admin, mock_db_conn, mock_pool):
        employee_id = uuid4()
        mock_db_conn.set_fetch_result([{'id': employee_id}])          # empleados activos
        mock_db_conn.set_fetch_result([BILLING_ROW])                  # objetivos corporativos
        mock_db_conn.set_fetchrow_result(employee_row(employee_id))  # empleado
        mock_db_conn.set_fetch_result([])                             # objetivos personales

        response = client_admin.get("/bonos?year=2024&as_of=2024-12-31")

        assert response.status_code == 200
        data = response.json()
        assert data["year"] == 2024
        assert len(data["rows"]) == 1
        assert data["rows"][0]["final"] == 0
        assert data["corporate_summary"]["billing_gate_met"] is False
        assert mock_pool.acquire_count == 2
