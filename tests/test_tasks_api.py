import json

import pytest
from fastapi.testclient import TestClient

from nota.main import app
from nota.models import TaskItem
from nota.models.enums import TaskItemStatus, TaskStatus


@pytest.fixture()
def client(db):
    return TestClient(app)


def _create(client, project, template, media_source, **extra):
    body = {
        "project_id": project.id,
        "task_template_id": template.id,
        "media_source_id": media_source.id,
        "name": "street",
        "media_source_config": {"options": {"path": "images/"}, "conditions": []},
        "created_by": 7,
        **extra,
    }
    r = client.post("/tasks", json=body)
    assert r.status_code == 200
    return r.json()


def test_create_task_runs_first_fetch(client, db, project, template, media_source, media, scan):
    for n in ("a.jpg", "b.jpg", "c.jpg"):
        media(f"images/{n}")
    scan()

    body = _create(client, project, template, media_source)
    assert body["ok"] is True

    # ENV=test makes celery eager: the fetch job already ran
    job = client.get(f"/jobs/{body['job_id']}").json()
    assert job["status"] == "done"
    assert json.loads(job["payload_json"])["added"] == 3

    task = client.get(f"/tasks/{body['task_id']}").json()
    assert task["task"]["status"] == TaskStatus.READY
    assert task["media_source_config"]["options"]["path"] == "images/"

    listed = client.get("/tasks").json()["tasks"]
    assert [(t["id"], t["total"], t["done"]) for t in listed] == [(body["task_id"], 3, 0)]


def test_create_task_rejects_unknown_references(client, project, template, media_source):
    r = client.post(
        "/tasks",
        json={"project_id": project.id, "task_template_id": 999, "media_source_id": media_source.id, "name": "x"},
    )
    assert r.status_code == 400


def test_refresh_and_job_history(client, db, project, template, media_source, media, scan):
    media("images/a.jpg")
    scan()
    body = _create(client, project, template, media_source)
    task_id = body["task_id"]

    media("images/b.jpg")
    scan()
    r = client.post(f"/tasks/{task_id}/refresh")
    assert r.status_code == 200
    refresh_job = client.get(f"/jobs/{r.json()['job_id']}").json()
    assert json.loads(refresh_job["payload_json"])["added"] == 1

    jobs = client.get(f"/tasks/{task_id}/jobs", params={"job_type": "task_fetch"}).json()["jobs"]
    assert [j["id"] for j in jobs] == [r.json()["job_id"], body["job_id"]]


def test_failed_refresh_marks_job_failed_but_not_task(client, db, project, template, media_source, media, scan, monkeypatch):
    media("images/a.jpg")
    scan()
    task_id = _create(client, project, template, media_source)["task_id"]

    from nota.services import media_sources

    def boom(*args, **kwargs):
        raise RuntimeError("source unreachable")

    monkeypatch.setattr(media_sources, "search_media_item_ids", boom)

    r = client.post(f"/tasks/{task_id}/refresh")
    job = client.get(f"/jobs/{r.json()['job_id']}").json()

    assert job["status"] == "failed"
    assert "source unreachable" in job["error"]
    assert client.get(f"/tasks/{task_id}").json()["task"]["status"] == TaskStatus.READY


def test_export_endpoint(client, db, project, template, media_source, media, scan, media_root):
    media("images/a.jpg")
    media("images/b.jpg")
    scan()
    task_id = _create(client, project, template, media_source)["task_id"]

    r = client.post(f"/tasks/{task_id}/export", json={"name": "nothing-yet"})
    job = client.get(f"/jobs/{r.json()['job_id']}").json()
    assert job["status"] == "done"
    assert json.loads(job["payload_json"])["count"] == 0
    assert json.loads(job["payload_json"])["file"] is None

    for item in db.query(TaskItem).filter(TaskItem.task_id == task_id):
        item.status = int(TaskItemStatus.DONE)
    db.commit()

    r = client.post(f"/tasks/{task_id}/export", json={"name": "batch-1", "includeOngoing": True})
    payload = json.loads(client.get(f"/jobs/{r.json()['job_id']}").json()["payload_json"])
    assert payload["count"] == 2
    assert payload["file"]["name"] == "batch-1.tar.gz"
    assert (media_root / payload["file"]["path"]).is_file()

    exports = client.get(f"/tasks/{task_id}/jobs", params={"job_type": "task_export"}).json()["jobs"]
    assert len(exports) == 2


def test_deleted_task_is_gone_and_skipped(client, db, project, template, media_source):
    task_id = _create(client, project, template, media_source)["task_id"]

    r = client.delete(f"/tasks/{task_id}", params={"user_id": 4})
    assert r.status_code == 200
    assert r.json()["status"] == TaskStatus.DELETED

    assert client.get(f"/tasks/{task_id}").status_code == 404
    assert client.post(f"/tasks/{task_id}/refresh").status_code == 404
    assert client.get("/tasks").json()["tasks"] == []

    from nota.services.jobs import create_job
    from nota.worker.tasks import fetch_task_items

    job = create_job(db, "task_fetch", {}, project.id, task_id)
    result = fetch_task_items(job.id, task_id, True)
    assert result["skipped"] is True
