"""
Tests for booking and managing appointments.
"""

from datetime import date, timedelta

import pytest

from barberin.database import engine

NEXT_WEEK = (date.today() + timedelta(days=7)).isoformat()


@pytest.fixture
def barber_id(client, barbershop_token, auth_header):
    response = client.post("/api/barbers", json={"first_name": "Andrés"}, headers=auth_header(barbershop_token))
    return response.json()["data"]["barber"]["barber_id"]


@pytest.fixture
def service_id(client, barbershop_token, auth_header):
    response = client.post(
        "/api/services", json={"service_name": "Corte", "price": 25000}, headers=auth_header(barbershop_token)
    )
    return response.json()["data"]["service"]["service_id"]


@pytest.fixture
def booking(barbershop_id, barber_id, service_id):
    return {
        "barbershop_id": barbershop_id,
        "barber_id": barber_id,
        "service_id": service_id,
        "appointment_date": NEXT_WEEK,
        "appointment_time": "10:30",
        "notes": "Fade bajo",
    }


@pytest.fixture
def appointment_id(client, user_token, auth_header, booking):
    response = client.post("/api/appointments", json=booking, headers=auth_header(user_token))
    return response.json()["data"]["appointment"]["appointment_id"]


class TestCreate:
    def test_user_books_appointment(self, client, user_token, user_login, auth_header, booking):
        response = client.post("/api/appointments", json=booking, headers=auth_header(user_token))

        assert response.status_code == 201
        appointment = response.json()["data"]["appointment"]
        assert appointment["status"] == "pending"
        assert appointment["user_id"] == user_login["user"]["user_id"]
        assert appointment["appointment_date"] == NEXT_WEEK
        assert appointment["appointment_time"] == "10:30:00"

    def test_barbershop_cannot_book(self, client, barbershop_token, auth_header, booking):
        response = client.post("/api/appointments", json=booking, headers=auth_header(barbershop_token))

        assert response.status_code == 403

    def test_missing_fields(self, client, user_token, auth_header):
        response = client.post("/api/appointments", json={}, headers=auth_header(user_token))

        assert response.status_code == 400
        assert response.json()["errors"] == [
            "Barbershop is required",
            "Appointment date is required",
            "Appointment time is required",
        ]

    def test_past_date(self, client, user_token, auth_header, booking):
        yesterday = (date.today() - timedelta(days=1)).isoformat()

        response = client.post(
            "/api/appointments", json=dict(booking, appointment_date=yesterday), headers=auth_header(user_token)
        )

        assert response.status_code == 400
        assert response.json()["errors"] == ["Appointment date cannot be in the past"]

    def test_unknown_barbershop(self, client, user_token, auth_header, booking):
        response = client.post(
            "/api/appointments", json=dict(booking, barbershop_id=999), headers=auth_header(user_token)
        )

        assert response.status_code == 404

    def test_barber_from_other_barbershop(self, client, user_token, other_barbershop_token, auth_header, booking):
        foreign_barber = client.post(
            "/api/barbers", json={"first_name": "Pedro"}, headers=auth_header(other_barbershop_token)
        ).json()["data"]["barber"]["barber_id"]

        response = client.post(
            "/api/appointments", json=dict(booking, barber_id=foreign_barber), headers=auth_header(user_token)
        )

        assert response.status_code == 400
        assert response.json()["errors"] == ["Barber does not belong to this barbershop"]

    def test_double_booking_same_barber(self, client, user_token, auth_header, booking, appointment_id):
        response = client.post("/api/appointments", json=booking, headers=auth_header(user_token))

        assert response.status_code == 409

    def test_slot_frees_up_after_cancel(self, client, user_token, auth_header, booking, appointment_id):
        headers = auth_header(user_token)
        client.patch(f"/api/appointments/{appointment_id}/cancel", headers=headers)

        response = client.post("/api/appointments", json=booking, headers=headers)

        assert response.status_code == 201


class TestListing:
    def test_user_sees_own_appointments(self, client, user_token, auth_header, appointment_id):
        response = client.get("/api/appointments/my", headers=auth_header(user_token))

        appointments = response.json()["data"]["appointments"]
        assert [a["appointment_id"] for a in appointments] == [appointment_id]

    def test_barbershop_sees_its_agenda(self, client, barbershop_token, barbershop_id, auth_header, appointment_id):
        response = client.get(f"/api/appointments/barbershop/{barbershop_id}", headers=auth_header(barbershop_token))

        assert response.status_code == 200
        assert len(response.json()["data"]["appointments"]) == 1

    def test_filter_by_status(self, client, barbershop_token, barbershop_id, auth_header, appointment_id):
        response = client.get(
            f"/api/appointments/barbershop/{barbershop_id}",
            params={"status": "confirmed"},
            headers=auth_header(barbershop_token),
        )

        assert response.json()["data"]["appointments"] == []

    def test_other_barbershop_agenda_is_forbidden(self, client, barbershop_id, other_barbershop_token, auth_header):
        response = client.get(
            f"/api/appointments/barbershop/{barbershop_id}", headers=auth_header(other_barbershop_token)
        )

        assert response.status_code == 403

    def test_user_token_is_forbidden(self, client, barbershop_id, user_token, auth_header):
        response = client.get(f"/api/appointments/barbershop/{barbershop_id}", headers=auth_header(user_token))

        assert response.status_code == 403

    def test_no_token(self, client, barbershop_id):
        response = client.get(f"/api/appointments/barbershop/{barbershop_id}")

        assert response.status_code == 401


class TestStatus:
    def test_barbershop_confirms(self, client, barbershop_token, barbershop_id, auth_header, appointment_id):
        headers = auth_header(barbershop_token)

        response = client.patch(
            f"/api/appointments/{appointment_id}/status", json={"status": "confirmed"}, headers=headers
        )
        assert response.status_code == 200

        agenda = client.get(
            f"/api/appointments/barbershop/{barbershop_id}", params={"status": "confirmed"}, headers=headers
        ).json()["data"]["appointments"]
        assert [a["appointment_id"] for a in agenda] == [appointment_id]

    def test_unknown_status(self, client, barbershop_token, auth_header, appointment_id):
        response = client.patch(
            f"/api/appointments/{appointment_id}/status",
            json={"status": "teleported"},
            headers=auth_header(barbershop_token),
        )

        assert response.status_code == 400

    def test_other_barbershop(self, client, other_barbershop_token, auth_header, appointment_id):
        response = client.patch(
            f"/api/appointments/{appointment_id}/status",
            json={"status": "confirmed"},
            headers=auth_header(other_barbershop_token),
        )

        assert response.status_code == 403

    def test_cancelled_slot_cannot_be_reopened(
        self, client, user_token, barbershop_token, barbershop_id, auth_header, booking, appointment_id
    ):
        client.patch(f"/api/appointments/{appointment_id}/cancel", headers=auth_header(user_token))
        rebooked = client.post("/api/appointments", json=booking, headers=auth_header(user_token))
        assert rebooked.status_code == 201

        headers = auth_header(barbershop_token)
        response = client.patch(
            f"/api/appointments/{appointment_id}/status", json={"status": "confirmed"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["errors"] == ["Cannot change status of a cancelled appointment"]

        agenda = client.get(f"/api/appointments/barbershop/{barbershop_id}", headers=headers).json()["data"]
        active = [a for a in agenda["appointments"] if a["status"] != "cancelled"]
        assert len(active) == 1

    def test_completed_is_final(self, client, barbershop_token, auth_header, appointment_id):
        headers = auth_header(barbershop_token)
        client.patch(f"/api/appointments/{appointment_id}/status", json={"status": "completed"}, headers=headers)

        response = client.patch(
            f"/api/appointments/{appointment_id}/status", json={"status": "pending"}, headers=headers
        )

        assert response.status_code == 400

    def test_missing_appointment(self, client, barbershop_token, auth_header):
        response = client.patch(
            "/api/appointments/999/status", json={"status": "confirmed"}, headers=auth_header(barbershop_token)
        )

        assert response.status_code == 404


class TestCatalogRemoval:
    """Barbers and services with appointments are deactivated, not deleted."""

    def test_delete_booked_barber(
        self, client, barbershop_token, user_token, auth_header, booking, barber_id, appointment_id
    ):
        headers = auth_header(barbershop_token)

        response = client.delete(f"/api/barbers/{barber_id}", headers=headers)

        assert response.status_code == 200
        barber = client.get(f"/api/barbers/{barber_id}").json()["data"]["barber"]
        assert barber["is_active"] is False

        agenda = client.get("/api/appointments/my", headers=auth_header(user_token)).json()["data"]
        assert agenda["appointments"][0]["barber_id"] == barber_id

        retry = client.post(
            "/api/appointments", json=dict(booking, appointment_time="15:00"), headers=auth_header(user_token)
        )
        assert retry.status_code == 400
        assert retry.json()["errors"] == ["Barber does not belong to this barbershop"]

    def test_delete_booked_service(self, client, barbershop_token, auth_header, service_id, appointment_id):
        response = client.delete(f"/api/services/{service_id}", headers=auth_header(barbershop_token))

        assert response.status_code == 200
        service = client.get(f"/api/services/{service_id}").json()["data"]["service"]
        assert service["is_active"] is False

    def test_foreign_keys_are_enforced(self, client):
        with engine.connect() as connection:
            assert connection.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1


class TestCancel:
    def test_completed_cannot_be_cancelled(self, client, user_token, barbershop_token, auth_header, appointment_id):
        client.patch(
            f"/api/appointments/{appointment_id}/status",
            json={"status": "completed"},
            headers=auth_header(barbershop_token),
        )

        response = client.patch(f"/api/appointments/{appointment_id}/cancel", headers=auth_header(user_token))

        assert response.status_code == 400
        assert response.json()["errors"] == ["Completed appointments cannot be cancelled"]

    def test_only_owner_cancels(self, client, user_payload, auth_header, appointment_id):
        other = dict(user_payload, email="otro@x.com")
        client.post("/api/users/register", json=other)
        token = client.post(
            "/api/users/login", json={"email": other["email"], "password": other["password"]}
        ).json()["data"]["token"]

        response = client.patch(f"/api/appointments/{appointment_id}/cancel", headers=auth_header(token))

        assert response.status_code == 403
