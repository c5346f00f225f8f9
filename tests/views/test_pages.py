import pytest

from squad.models.attendance import Attendance
from squad.models.event import Event
from squad.services import auth_service
from squad.web import grid


@pytest.fixture
def login_as(client, settings):
    def _login_as(user):
        client.cookies.set(settings.token_cookie_name, auth_service.issue_token(user, settings))

    return _login_as


class TestLoginPage:

    def test_login_page_renders(self, client):
        response = client.get("/login")
        assert response.status_code == 200
        assert 'name="password"' in response.text

    def test_login_sets_cookie_and_redirects(self, client, player, password, settings):
        response = client.post(
            "/login", data={"email": player.email, "password": password}, follow_redirects=False
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert settings.token_cookie_name in response.cookies

        dashboard = client.get("/")
        assert dashboard.status_code == 200
        assert player.name in dashboard.text

    def test_bad_credentials_rerender_with_error(self, client, player):
        response = client.post("/login", data={"email": player.email, "password": "nope-nope"})
        assert response.status_code == 401
        assert "Invalid credentials" in response.text

    def test_logout_clears_cookie(self, client, player, login_as, settings):
        login_as(player)
        response = client.get("/logout", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{settings.token_cookie_name}=")
        assert "Max-Age=0" in set_cookie


class TestDashboard:

    def test_anonymous_is_sent_to_login(self, client):
        response = client.get("/", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_grid_shows_active_users_and_events(self, client, training_event, player, other_player, make_user, login_as):
        make_user(name="Hidden Henry", is_active=False)
        login_as(player)

        response = client.get("/")

        assert response.status_code == 200
        assert "Training" in response.text
        assert other_player.name in response.text
        assert "Hidden Henry" not in response.text
        assert f"/events/{training_event['id']}/attendance" in response.text

    def test_empty_state(self, client, player, login_as):
        login_as(player)
        assert "No events scheduled yet." in client.get("/").text


class TestAttendanceForm:

    def test_form_prefills_defaults(self, client, training_event, player, login_as):
        login_as(player)
        response = client.get(f"/events/{training_event['id']}/attendance")
        assert response.status_code == 200
        assert "Withdraw my response" not in response.text

    def test_unknown_event(self, client, player, login_as):
        login_as(player)
        assert client.get("/events/missing/attendance").status_code == 404

    def test_submit_creates_attendance(self, client, training_event, player, login_as, db_session):
        login_as(player)

        response = client.post(
            f"/events/{training_event['id']}/attendance",
            data={"status": "confirmed", "additional_players": "2", "comment": " See you ", "equipment": ["ball", "pump"]},
            follow_redirects=False,
        )

        assert response.status_code == 303
        db_session.expire_all()
        attendance = db_session.query(Attendance).one()
        assert attendance.user_id == player.id
        assert attendance.additional_players == 2
        assert attendance.comment == "See you"
        assert sorted(item.type for item in attendance.equipment) == ["ball", "pump"]

        form = client.get(f"/events/{training_event['id']}/attendance")
        assert "Withdraw my response" in form.text

    def test_extra_players_are_capped(self, client, training_event, player, login_as, db_session):
        login_as(player)
        client.post(
            f"/events/{training_event['id']}/attendance",
            data={"status": "confirmed", "additional_players": "9"},
        )
        db_session.expire_all()
        assert db_session.query(Attendance).one().additional_players == grid.MAX_ADDITIONAL_PLAYERS

    def test_declining_drops_extras_and_equipment(self, client, training_event, player, login_as, db_session):
        login_as(player)
        client.post(
            f"/events/{training_event['id']}/attendance",
            data={"status": "declined", "additional_players": "2", "equipment": ["ball"]},
        )
        db_session.expire_all()
        attendance = db_session.query(Attendance).one()
        assert attendance.status == "declined"
        assert attendance.additional_players == 0
        assert attendance.equipment == []

    def test_invalid_submission_rerenders_form(self, client, training_event, player, login_as):
        login_as(player)
        response = client.post(
            f"/events/{training_event['id']}/attendance",
            data={"status": "confirmed", "equipment": ["trampoline"]},
        )
        assert response.status_code == 400
        assert "equipment" in response.text

    def test_withdraw(self, client, training_event, player, login_as, db_session):
        login_as(player)
        client.post(f"/events/{training_event['id']}/attendance", data={"status": "confirmed"})

        response = client.post(f"/events/{training_event['id']}/attendance/delete", follow_redirects=False)

        assert response.status_code == 303
        db_session.expire_all()
        assert db_session.query(Attendance).count() == 0


class TestAdminPages:

    def test_non_admin_is_forbidden(self, client, player, login_as):
        login_as(player)
        assert client.get("/admin").status_code == 403

    def test_admin_creates_and_deletes_event(self, client, admin, login_as, db_session):
        login_as(admin)

        response = client.post(
            "/admin/events",
            data={"title": "Match", "date": "2024-06-08", "time_from": "10:00", "time_to": "12:00", "location": "Stadium"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        db_session.expire_all()
        event = db_session.query(Event).one()
        assert event.created_by == admin.id

        assert "Match" in client.get("/admin").text

        client.post(f"/admin/events/{event.id}/delete")
        db_session.expire_all()
        assert db_session.query(Event).count() == 0

    def test_invalid_event_form(self, client, admin, login_as):
        login_as(admin)
        response = client.post(
            "/admin/events",
            data={"title": "Match", "date": "someday", "time_from": "10:00", "time_to": "12:00", "location": "Stadium"},
        )
        assert response.status_code == 400

    def test_admin_toggles_user(self, client, admin, player, login_as, db_session):
        login_as(admin)

        response = client.post(f"/admin/users/{player.id}/status", data={"is_active": "false"}, follow_redirects=False)

        assert response.status_code == 303
        db_session.expire_all()
        assert db_session.get(type(player), player.id).is_active is False

    def test_admin_cannot_deactivate_admin(self, client, admin, login_as):
        login_as(admin)
        response = client.post(f"/admin/users/{admin.id}/status", data={"is_active": "false"})
        assert response.status_code == 400
        assert "Admin accounts cannot be deactivated" in response.text

    def test_equipment_roster(self, client, admin, player, training_event, login_as, auth_headers):
        client.post(
            f"/api/attendance/{training_event['id']}",
            json={"status": "confirmed", "equipment": ["pump"]},
            headers=auth_headers(player),
        )
        login_as(admin)

        response = client.get(f"/admin?event_id={training_event['id']}")

        assert response.status_code == 200
        assert player.name in response.text
        assert "Nobody yet" in response.text


class TestGrid:

    EVENTS = [
        {
            "id": "e1",
            "attendances": [
                {"user_id": "u1", "status": "confirmed", "additional_players": 2, "equipment": [{"id": "x", "type": "ball"}], "comment": "hi"},
                {"user_id": "u3", "status": "confirmed", "additional_players": 0, "equipment": []},
                {"user_id": "u2", "status": "declined", "additional_players": 1, "equipment": []},
            ],
        },
        {"id": "e2", "attendances": []},
    ]
    USERS = [
        {"id": "u1", "name": "One", "is_active": True},
        {"id": "u2", "name": "Two", "is_active": True},
        {"id": "u3", "name": "Three", "is_active": False},
    ]

    def test_rows_cover_active_users_only(self):
        rows = grid.build_grid(self.EVENTS, self.USERS, viewer_id="u2")
        assert [row.user["id"] for row in rows] == ["u1", "u2"]
        assert all(len(row.cells) == 2 for row in rows)

    def test_only_viewer_cells_are_editable(self):
        rows = grid.build_grid(self.EVENTS, self.USERS, viewer_id="u2")
        assert [cell.editable for cell in rows[0].cells] == [False, False]
        assert [cell.editable for cell in rows[1].cells] == [True, True]

    def test_cell_values(self):
        one, two = grid.build_grid(self.EVENTS, self.USERS, viewer_id=None)
        assert one.cells[0].status == "confirmed"
        assert one.cells[0].additional_players == 2
        assert one.cells[0].equipment_types == ["ball"]
        assert one.cells[0].comment == "hi"
        assert two.cells[0].status == "declined"
        assert two.cells[0].additional_players == 0
        assert one.cells[1].status is None
        assert one.cells[1].equipment_types == []

    def test_form_defaults(self):
        assert grid.attendance_form_defaults(self.EVENTS[1], "u1")["exists"] is False
        defaults = grid.attendance_form_defaults(self.EVENTS[0], "u1")
        assert defaults == {
            "exists": True,
            "status": "confirmed",
            "additional_players": 2,
            "comment": "hi",
            "equipment": ["ball"],
        }
