import pytest

from tests.factories import OTHER_USER_ID

PYTHON_TEXT = "Python is a programming language. Python code reads like plain English."


@pytest.fixture
def space_id(client):
    return client.post("/api/v1/spaces", json={"name": "Programming"}).json()["id"]


def test_create_document_is_accepted_then_ready(client, drain, space_id):
    response = client.post(
        f"/api/v1/spaces/{space_id}/documents",
        json={"title": "Python Notes", "content": PYTHON_TEXT, "document_type": "extension"},
    )
    assert response.status_code == 202
    document_id = response.json()["id"]

    drain()

    document = client.get(f"/api/v1/documents/{document_id}").json()
    assert document["processing_status"] == "ready"
    assert document["processing_error"] is None
    assert document["chunk_count"] == 1
    assert document["document_type"] == "extension"


def test_duplicate_content_conflicts(client, space_id):
    body = {"title": "Python Notes", "content": PYTHON_TEXT}
    assert client.post(f"/api/v1/spaces/{space_id}/documents", json=body).status_code == 202

    response = client.post(f"/api/v1/spaces/{space_id}/documents", json=body)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "conflict"


def test_create_without_content_or_file_is_rejected(client, space_id):
    response = client.post(f"/api/v1/spaces/{space_id}/documents", json={"title": "Empty"})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


def test_upload_then_create_from_file(client, drain, space_id):
    upload = client.post(
        f"/api/v1/spaces/{space_id}/documents/upload",
        files={"file": ("garden.md", b"# Garden\n\nTomatoes like sun in the garden.", "text/markdown")},
    )
    assert upload.status_code == 201
    stored = upload.json()
    assert stored["key"].startswith(f"spaces/{space_id}/documents/")
    assert stored["mime_type"] == "text/markdown"

    response = client.post(
        f"/api/v1/spaces/{space_id}/documents",
        json={
            "title": "Garden",
            "file": {key: stored[key] for key in ("key", "url", "size", "mime_type")},
        },
    )
    drain()

    document = client.get(f"/api/v1/documents/{response.json()['id']}").json()
    assert document["processing_status"] == "ready"
    assert document["file_mime_type"] == "text/markdown"


def test_upload_rejects_unsupported_type(client, space_id):
    response = client.post(
        f"/api/v1/spaces/{space_id}/documents/upload",
        files={"file": ("photo.png", b"\x89PNG", "image/png")},
    )

    assert response.status_code == 422


def test_list_documents(client, space_id):
    client.post(f"/api/v1/spaces/{space_id}/documents", json={"title": "A", "content": "first text"})
    client.post(f"/api/v1/spaces/{space_id}/documents", json={"title": "B", "content": "second text"})

    response = client.get(f"/api/v1/spaces/{space_id}/documents")

    assert response.status_code == 200
    assert response.json()["total"] == 2


def test_reprocess_runs_pipeline_again(client, drain, space_id):
    document_id = client.post(
        f"/api/v1/spaces/{space_id}/documents", json={"title": "Python Notes", "content": PYTHON_TEXT}
    ).json()["id"]
    drain()

    response = client.post(f"/api/v1/documents/{document_id}/reprocess")
    drain()

    assert response.status_code == 202
    assert client.get(f"/api/v1/documents/{document_id}").json()["processing_status"] == "ready"


def test_other_user_cannot_read_document(client, space_id):
    document_id = client.post(
        f"/api/v1/spaces/{space_id}/documents", json={"title": "Python Notes", "content": PYTHON_TEXT}
    ).json()["id"]

    response = client.get(f"/api/v1/documents/{document_id}", headers={"X-User-Id": OTHER_USER_ID})

    assert response.status_code == 403


def test_sync_returns_triggered_ids(client, drain, space_id):
    drain()

    response = client.post(f"/api/v1/spaces/{space_id}/documents/sync")

    assert response.status_code == 200
    assert response.json() == {"triggered": []}
