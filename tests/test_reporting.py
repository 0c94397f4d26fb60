from datetime import date, timedelta

import pytest


async def _create_session(client, headers, client_id, session_date, value):
    response = await client.post(
        "/api/v1/sessions",
        json={
            "client_id": client_id,
            "type": "familia",
            "date": session_date.isoformat(),
            "time": "10:00",
            "value": value,
        },
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.anyio
async def test_dashboard_summary(client, auth_headers):
    response = await client.post(
        "/api/v1/clients",
        json={"name": "Marina Costa", "email": "marina@example.com", "phone": "(31) 99999-0000"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    client_id = response.json()["id"]

    today = date.today()
    paid = await _create_session(client, auth_headers, client_id, today, 200)
    later = await _create_session(client, auth_headers, client_id, today + timedelta(days=40), 80)
    cancelled = await _create_session(client, auth_headers, client_id, today, 50)

    response = await client.patch(
        f"/api/v1/sessions/{paid}/payment-status",
        json={"payment_status": "pago"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    response = await client.patch(
        f"/api/v1/sessions/{cancelled}/status",
        json={"status": "cancelado"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    response = await client.patch(
        f"/api/v1/sessions/{cancelled}/payment-status",
        json={"payment_status": "sinal"},
        headers=auth_headers,
    )
    assert response.status_code == 200

    response = await client.get("/api/v1/reporting/dashboard", headers=auth_headers)
    assert response.status_code == 200
    summary = response.json()

    assert summary["studio_name"] == "Estudio Fotografico"
    assert summary["workspace_subtitle"] == "Gestao de clientes e sessoes"
    assert summary["contact_email"] == "contato@estudio.local"
    assert summary["contact_phone"] == "(11) 0000-0000"
    assert summary["upcoming_title"] == "Proximas sessoes"
    assert summary["reference_date"] == today.isoformat()
    assert summary["stats"] == {
        "total_clients": 1,
        "sessions_this_month": 2,
        "revenue_this_month": 200.0,
        "pending_payments": 80.0,
    }
    assert summary["revenue_this_month_display"] == "R$\xa0200,00"
    assert summary["pending_payments_display"] == "R$\xa080,00"

    upcoming = summary["upcoming_sessions"]
    assert [item["id"] for item in upcoming] == [paid, later]
    assert upcoming[0]["type_label"] == "Família"
    assert upcoming[0]["payment_status_label"] == "Pago Completo"
    assert upcoming[0]["when"] == f"{today.strftime('%d/%m/%Y')} às 10:00"

    response = await client.get("/api/v1/reporting/upcoming", params={"limit": 1}, headers=auth_headers)
    assert [item["id"] for item in response.json()] == [paid]

    response = await client.get("/api/v1/reporting/sessions-summary", headers=auth_headers)
    assert response.json() == {"total": 3, "completed": 0, "active": 2, "cancelled": 1}


@pytest.mark.anyio
async def test_dashboard_for_empty_studio(client, auth_headers):
    response = await client.get("/api/v1/reporting/dashboard", headers=auth_headers)
    assert response.status_code == 200
    summary = response.json()

    assert summary["stats"]["total_clients"] == 0
    assert summary["revenue_this_month_display"] == "R$\xa00,00"
    assert summary["upcoming_sessions"] == []


@pytest.mark.anyio
async def test_upcoming_limit_is_validated(client, auth_headers):
    response = await client.get("/api/v1/reporting/upcoming", params={"limit": 0}, headers=auth_headers)
    assert response.status_code == 422
