import json

import pytest

from attendtrack.core.enums import AppRole
from attendtrack.qr.payload import build_payload


@pytest.fixture
def course(courses):
    return courses.add(semester="Fall", year=2024)


def test_landing_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"AttendTrack" in resp.data


def test_protected_pages_redirect_to_sign_in(client):
    for path in ("/student", "/scan", "/professor", "/professor/analytics"):
        resp = client.get(path)
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/auth")


def test_sign_up_then_sign_in(client, accounts):
    resp = client.post(
        "/auth/signup",
        data={"email": "new@uni.edu", "password": "secret1", "full_name": "New Prof", "role": "professor"},
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/professor")
    assert accounts.get_by_email("new@uni.edu") is not None

    client.get("/logout")
    resp = client.post("/auth", data={"email": "new@uni.edu", "password": "secret1"})
    assert resp.headers["Location"].endswith("/professor")


def test_sign_in_with_bad_password(client, accounts):
    client.post("/auth/signup", data={"email": "s@uni.edu", "password": "secret1"})
    client.get("/logout")

    resp = client.post("/auth", data={"email": "s@uni.edu", "password": "nope"}, follow_redirects=True)
    assert resp.status_code == 200
    assert b"Invalid email or password" in resp.data


def test_students_get_403_on_professor_pages(client, login):
    login("student-1", AppRole.STUDENT)
    assert client.get("/professor").status_code == 403
    assert client.get("/professor/create-course").status_code == 403


def test_professor_creates_course(client, login, courses):
    login("prof-1", AppRole.PROFESSOR)
    resp = client.post(
        "/professor/create-course",
        data={"name": "Calculus", "code": "MATH201", "semester": "", "year": ""},
    )
    assert resp.status_code == 302

    created = courses.list_for_professor("prof-1")
    assert [c.code for c in created] == ["MATH201"]

    page = client.get("/professor")
    assert b"MATH201" in page.data
    assert b"N/A" in page.data


def test_empty_professor_dashboard(client, login):
    login("prof-1", AppRole.PROFESSOR)
    resp = client.get("/professor")
    assert b"No courses yet. Create your first course to get started!" in resp.data


def test_create_course_requires_name(client, login, courses):
    login("prof-1", AppRole.PROFESSOR)
    resp = client.post("/professor/create-course", data={"name": "", "code": "X1"})
    assert resp.status_code == 200
    assert b"Course name is required" in resp.data
    assert courses.courses == {}


def test_qr_png_download(client, login, course, courses):
    login("prof-1", AppRole.PROFESSOR)

    page = client.get(f"/professor/courses/{course.course_id}/qr")
    assert page.status_code == 200
    assert courses.get_by_id(course.course_id).qr_code_url.endswith(f"/professor/courses/{course.course_id}/qr.png")

    resp = client.get(f"/professor/courses/{course.course_id}/qr.png?download=1")
    assert resp.mimetype == "image/png"
    assert "CS101-qr-code.png" in resp.headers["Content-Disposition"]
    assert resp.data.startswith(b"\x89PNG")


def test_qr_of_another_professors_course_is_forbidden(client, login, courses):
    other = courses.add(professor_id="prof-2")
    login("prof-1", AppRole.PROFESSOR)
    assert client.get(f"/professor/courses/{other.course_id}/qr").status_code == 403
    assert client.get("/professor/courses/missing/qr").status_code == 404


def test_qr_data_json(client, login, course):
    login("prof-1", AppRole.PROFESSOR)
    data = client.get(f"/professor/courses/{course.course_id}/qr-data").get_json()
    assert json.loads(data["qr_data"])["course_code"] == "CS101"


def test_api_checkin_flow(client, login, course, attendance):
    login("student-1", AppRole.STUDENT)
    payload = {
        "qr_data": build_payload(course).to_json(),
        "location": {"lat": 40.7128, "lng": -74.006, "accuracy": 15},
    }

    resp = client.post("/api/checkin", json=payload)
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["title"] == "Check-in successful!"
    assert body["message"] == "You've been marked present for Introduction to Computer Science (CS101)."
    assert body["location_captured"] is True

    again = client.post("/api/checkin", json=payload)
    assert again.status_code == 409
    assert again.get_json()["title"] == "Already checked in"
    assert len(attendance.records) == 1


def test_api_checkin_errors(client, login):
    login("student-1", AppRole.STUDENT)

    resp = client.post("/api/checkin", json={"qr_data": '{"course_name": "X"}'})
    assert resp.status_code == 400
    assert resp.get_json()["title"] == "Invalid QR Code"

    resp = client.post("/api/checkin", json={"qr_data": "missing-course"})
    assert resp.status_code == 404
    assert resp.get_json()["title"] == "Course not found"


def test_api_checkin_requires_login(client):
    resp = client.post("/api/checkin", json={"qr_data": "x"})
    assert resp.status_code == 401


def test_api_checkin_image_requires_file(client, login):
    login("student-1", AppRole.STUDENT)
    resp = client.post("/api/checkin/image", data={})
    assert resp.status_code == 400


def test_student_dashboard_lists_history(client, login, course, accounts):
    login("student-1", AppRole.STUDENT)
    client.post("/api/checkin", json={"qr_data": course.course_id})

    resp = client.get("/student")
    assert resp.status_code == 200
    assert b"CS101" in resp.data


def test_attendance_report_and_csv(client, login, course):
    login("student-1", AppRole.STUDENT)
    client.post("/api/checkin", json={"qr_data": course.course_id})

    login("prof-1", AppRole.PROFESSOR)
    assert client.get(f"/professor/courses/{course.course_id}/attendance").status_code == 200

    resp = client.get(f"/professor/courses/{course.course_id}/attendance.csv")
    assert resp.mimetype == "text/csv"
    assert "CS101-attendance.csv" in resp.headers["Content-Disposition"]


def test_analytics_send_warnings(client, login, course):
    login("prof-1", AppRole.PROFESSOR)
    page = client.get("/professor/analytics")
    assert page.status_code == 200
    assert b"Total Students" in page.data

    data = client.get("/api/professor/analytics?keep=1").get_json()
    resp = client.post("/professor/analytics/send-warnings", json={})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["sent"] == data["low_attendance_count"]


def test_analytics_without_courses(client, login):
    login("prof-1", AppRole.PROFESSOR)
    resp = client.post("/professor/analytics/send-warnings", json={})
    assert resp.status_code == 400
    assert resp.get_json()["title"] == "No students to email"


def test_api_checkin_rejects_wrongly_typed_fields(client, login, course, attendance):
    login("student-1", AppRole.STUDENT)

    resp = client.post("/api/checkin", json={"qr_data": 12345})
    assert resp.status_code == 400
    assert resp.get_json()["title"] == "Invalid QR Code"

    resp = client.post("/api/checkin", json={"qr_data": course.course_id, "location": "here"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Location must be numeric"

    resp = client.post("/api/checkin", json=["not", "an", "object"])
    assert resp.status_code == 400
    assert attendance.records == {}


def test_attendance_correction_with_non_string_time(client, login, course):
    login("student-1", AppRole.STUDENT)
    record_id = client.post("/api/checkin", json={"qr_data": course.course_id}).get_json()["record_id"]

    login("prof-1", AppRole.PROFESSOR)
    resp = client.patch(f"/api/attendance/{record_id}", json={"checked_in_at": 5})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    resp = client.patch(f"/api/attendance/{record_id}", json={"checked_in_at": "2024-10-15T08:55:00"})
    assert resp.status_code == 200


def test_export_filename_is_quoted(client, login, courses):
    course = courses.add(code="CS 101; x")
    login("prof-1", AppRole.PROFESSOR)

    resp = client.get(f"/professor/courses/{course.course_id}/attendance.csv")
    assert resp.status_code == 200
    assert 'filename="CS 101; x-attendance.csv"' in resp.headers["Content-Disposition"]
