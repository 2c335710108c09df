# This project was developed with assistance from AI tools.
"""Functional tests: HR creates a checklist, the employee works through it."""

import pytest

from src.core.config import settings

from .personas import ALEX_USER_ID, employee_alex, hr_admin

pytestmark = pytest.mark.functional

_UPLOADS = {
    "pdf": ("document.pdf", b"%PDF-1.4 test", "application/pdf"),
    "image": ("scan.png", b"\x89PNG test", "image/png"),
}


def _create_for_alex(make_client, role="employee", department=None):
    resp = make_client(hr_admin()).post(
        "/api/checklists",
        json={
            "employee_id": 1001,
            "role": role,
            "department": department,
            "employee_user_id": ALEX_USER_ID,
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def _item(checklist, template_key):
    return next(i for i in checklist["items"] if i["template_key"] == template_key)


class TestChecklistCreation:
    def test_hr_creates_default_checklist(self, make_client):
        body = _create_for_alex(make_client)

        assert body["employee_id"] == 1001
        assert body["status"] == "not_started"
        assert body["progress"] == 0
        assert len(body["items"]) == 25
        assert [i["position"] for i in body["items"]] == list(range(1, 26))
        assert body["public_url"].startswith(settings.PUBLIC_BASE_URL)

    def test_role_and_department_overlays_are_merged(self, make_client):
        body = _create_for_alex(make_client, "team_lead", "information_technology")
        keys = [i["template_key"] for i in body["items"]]

        assert len(keys) == 29
        assert "team_lead.leadership_training" in keys
        assert "information_technology.security_training" in keys
        positions = [i["position"] for i in body["items"]]
        assert positions == sorted(positions)

    def test_second_create_conflicts(self, make_client):
        _create_for_alex(make_client)
        resp = make_client(hr_admin()).post(
            "/api/checklists", json={"employee_id": 1001, "role": "hr_admin"}
        )
        assert resp.status_code == 409
        assert resp.json()["title"] == "Conflict"

        fetched = make_client(hr_admin()).get("/api/checklists/employees/1001").json()
        assert len(fetched["items"]) == 25

    def test_employee_cannot_create(self, make_client):
        resp = make_client(employee_alex()).post(
            "/api/checklists", json={"employee_id": 1001, "role": "employee"}
        )
        assert resp.status_code == 403

    def test_invalid_employee_id_is_rejected(self, make_client):
        resp = make_client(hr_admin()).post("/api/checklists", json={"employee_id": 0, "role": "employee"})
        assert resp.status_code == 422

    def test_missing_checklist_is_404(self, make_client):
        assert make_client(hr_admin()).get("/api/checklists/employees/4242").status_code == 404


class TestItemCompletion:
    def test_employee_sees_own_checklist_without_link(self, make_client):
        _create_for_alex(make_client)
        resp = make_client(employee_alex()).get("/api/checklists/employees/1001")
        assert resp.status_code == 200
        assert resp.json()["public_url"] is None

    def test_plain_item_completes(self, make_client):
        checklist = _create_for_alex(make_client)
        item = _item(checklist, "welcome_introduction")

        resp = make_client(employee_alex()).patch(
            f"/api/checklist-items/{item['id']}", json={"is_completed": True}
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["item"]["is_completed"] is True
        assert body["item"]["completed_by"] == ALEX_USER_ID
        assert body["progress"] == {"total_items": 25, "completed_items": 1, "percentage": 4}
        assert body["all_completed"] is False

    def test_completed_item_cannot_be_unchecked(self, make_client):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "welcome_introduction")["id"]
        client = make_client(employee_alex())
        client.patch(f"/api/checklist-items/{item_id}", json={"is_completed": True})

        resp = client.patch(f"/api/checklist-items/{item_id}", json={"is_completed": False})
        assert resp.status_code == 409

    def test_document_item_requires_upload(self, make_client):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "employment_documents")["id"]

        resp = make_client(employee_alex()).patch(
            f"/api/checklist-items/{item_id}", json={"is_completed": True}
        )
        assert resp.status_code == 422
        assert resp.json()["detail"] == "Document upload is required to complete this item."

    def test_file_upload_completes_document_item(self, make_client, mock_storage):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "employment_documents")["id"]

        resp = make_client(employee_alex()).post(
            f"/api/checklist-items/{item_id}/document",
            files={"file": _UPLOADS["pdf"]},
        )
        assert resp.status_code == 200, resp.text
        item = resp.json()["item"]
        assert item["is_completed"] is True
        assert item["document_url"] == f"1001/{item_id}/document.pdf"
        mock_storage.upload_file.assert_awaited_once()

    def test_wrong_file_type_is_rejected(self, make_client, mock_storage):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "employment_documents")["id"]

        resp = make_client(employee_alex()).post(
            f"/api/checklist-items/{item_id}/document",
            files={"file": _UPLOADS["image"]},
        )
        assert resp.status_code == 422
        mock_storage.upload_file.assert_not_awaited()

    def test_oversized_file_is_413(self, make_client, mock_storage, monkeypatch):
        monkeypatch.setattr(settings, "UPLOAD_MAX_SIZE_MB", 0)
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "employment_documents")["id"]

        resp = make_client(employee_alex()).post(
            f"/api/checklist-items/{item_id}/document",
            files={"file": _UPLOADS["pdf"]},
        )
        assert resp.status_code == 413

    def test_oversized_file_reports_limit_without_full_read(self, make_client, mock_storage, monkeypatch):
        monkeypatch.setattr(settings, "UPLOAD_MAX_SIZE_MB", 1)
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "employment_documents")["id"]

        big = ("big.pdf", b"x" * (3 * 1024 * 1024), "application/pdf")
        resp = make_client(employee_alex()).post(f"/api/checklist-items/{item_id}/document", files={"file": big})
        assert resp.status_code == 413
        # Only one byte past the limit is buffered
        assert str(1024 * 1024 + 1) in resp.json()["detail"]
        mock_storage.upload_file.assert_not_awaited()

    def test_upload_without_file_or_url_is_422(self, make_client):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "employment_documents")["id"]
        resp = make_client(employee_alex()).post(f"/api/checklist-items/{item_id}/document")
        assert resp.status_code == 422

    def test_assessment_gate_then_complete(self, make_client):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "personality_assessment")["id"]
        client = make_client(employee_alex())

        blocked = client.patch(f"/api/checklist-items/{item_id}", json={"is_completed": True})
        assert blocked.status_code == 422
        assert blocked.json()["detail"] == "Psychometric test must be completed first."

        recorded = client.post(
            f"/api/checklist-items/{item_id}/assessment-result",
            json={"attempt_id": 5, "score": 81.5},
        )
        assert recorded.status_code == 200
        assert recorded.json()["item"]["is_completed"] is False
        assert recorded.json()["item"]["psychometric_test_completed"] is True

        done = client.patch(f"/api/checklist-items/{item_id}", json={"is_completed": True})
        assert done.status_code == 200
        assert done.json()["item"]["is_completed"] is True

    def test_assessment_score_out_of_range_is_422(self, make_client):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "personality_assessment")["id"]
        resp = make_client(employee_alex()).post(
            f"/api/checklist-items/{item_id}/assessment-result",
            json={"attempt_id": 5, "score": 140},
        )
        assert resp.status_code == 422

    def test_unknown_item_is_404(self, make_client):
        _create_for_alex(make_client)
        resp = make_client(employee_alex()).patch("/api/checklist-items/9999", json={"is_completed": True})
        assert resp.status_code == 404


class TestDocuments:
    def test_hr_verifies_uploaded_document(self, make_client, mock_storage):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "identification_documents")["id"]
        make_client(employee_alex()).post(
            f"/api/checklist-items/{item_id}/document", files={"file": _UPLOADS["image"]}
        )

        resp = make_client(hr_admin()).post(
            f"/api/checklist-items/{item_id}/verify", json={"notes": "Passport checked"}
        )
        assert resp.status_code == 200
        item = resp.json()["item"]
        assert item["is_document_verified"] is True
        assert item["verification_notes"] == "Passport checked"

    def test_employee_cannot_verify(self, make_client):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "identification_documents")["id"]
        resp = make_client(employee_alex()).post(f"/api/checklist-items/{item_id}/verify", json={})
        assert resp.status_code == 403

    def test_download_link_is_presigned(self, make_client, mock_storage):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "employment_documents")["id"]
        make_client(employee_alex()).post(
            f"/api/checklist-items/{item_id}/document", files={"file": _UPLOADS["pdf"]}
        )

        resp = make_client(hr_admin()).get(f"/api/checklist-items/{item_id}/document")
        assert resp.status_code == 200
        assert resp.json() == {"url": "https://minio.local/signed", "expires_in": 900}

    def test_external_document_link_is_returned_as_is(self, make_client):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "employment_documents")["id"]
        make_client(employee_alex()).post(
            f"/api/checklist-items/{item_id}/document",
            data={"document_url": "https://files.example.com/contract.pdf"},
        )

        resp = make_client(employee_alex()).get(f"/api/checklist-items/{item_id}/document")
        assert resp.json() == {"url": "https://files.example.com/contract.pdf", "expires_in": 0}

    def test_no_document_link_is_404(self, make_client):
        checklist = _create_for_alex(make_client)
        item_id = _item(checklist, "employment_documents")["id"]
        assert make_client(employee_alex()).get(f"/api/checklist-items/{item_id}/document").status_code == 404


class TestFullOnboarding:
    def test_completing_every_item_activates_once(self, make_client, mock_storage, activations):
        checklist = _create_for_alex(make_client)
        client = make_client(employee_alex())

        last = None
        for item in checklist["items"]:
            item_id = item["id"]
            if item["requires_psychometric_test"]:
                client.post(
                    f"/api/checklist-items/{item_id}/assessment-result",
                    json={"attempt_id": item_id, "score": 75},
                )
            if item["requires_document"]:
                last = client.post(
                    f"/api/checklist-items/{item_id}/document",
                    files={"file": _UPLOADS[item["document_kind"]]},
                )
            else:
                last = client.patch(f"/api/checklist-items/{item_id}", json={"is_completed": True})
            assert last.status_code == 200, last.text

        body = last.json()
        assert body["all_completed"] is True
        assert body["message"] == "All onboarding tasks completed! Your account has been activated."
        assert body["progress"]["percentage"] == 100
        assert len(activations) == 1
        assert activations[0].employee_id == 1001

        fetched = client.get("/api/checklists/employees/1001").json()
        assert fetched["status"] == "completed"
        assert fetched["activated_at"] is not None

        # Re-completing an item after activation neither fails nor re-activates
        again = client.patch(f"/api/checklist-items/{checklist['items'][0]['id']}", json={"is_completed": True})
        assert again.status_code == 200
        assert len(activations) == 1

    def test_progress_endpoint(self, make_client):
        checklist = _create_for_alex(make_client)
        client = make_client(employee_alex())
        for key in ("welcome_introduction", "personal_profile"):
            client.patch(f"/api/checklist-items/{_item(checklist, key)['id']}", json={"is_completed": True})

        resp = client.get(f"/api/checklists/{checklist['id']}/progress")
        assert resp.json() == {"total_items": 25, "completed_items": 2, "percentage": 8}

    def test_hr_recompute_progress(self, make_client):
        checklist = _create_for_alex(make_client)
        resp = make_client(hr_admin()).post(f"/api/checklists/{checklist['id']}/progress/recompute")
        assert resp.status_code == 200
        assert resp.json()["percentage"] == 0
