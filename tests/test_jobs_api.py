import json

from fastapi.testclient import TestClient

from nota.main import app
from nota.services.jobs import create_job, merge_job_payload


def test_get_job_404(db):
    client = TestClient(app)
    r = client.get("/jobs/99999999")
    assert r.status_code == 404


def test_merge_job_payload_keeps_existing_keys(db):
    job = create_job(db, "task_fetch", {"task_id": 1, "refresh": False})
    merge_job_payload(db, job.id, {"added": 3, "refresh": True})

    client = TestClient(app)
    body = client.get(f"/jobs/{job.id}").json()
    assert body["ok"] is True
    assert body["status"] == "queued"
    assert body["error"] is None
    assert json.loads(body["payload_json"]) == {"task_id": 1, "refresh": True, "added": 3}
