import pytest

from spacerag.core.rag_query import NOT_FOUND_ANSWER

from tests.factories import OTHER_USER_ID

PYTHON_TEXT = "Python is a programming language. Python code reads like plain English."


@pytest.fixture
def space_id(client, drain):
    space_id = client.post("/api/v1/spaces", json={"name": "Programming"}).json()["id"]
    response = client.post(
        f"/api/v1/spaces/{space_id}/documents", json={"title": "Python Notes", "content": PYTHON_TEXT}
    )
    assert response.status_code == 202
    drain()
    return space_id


def ask(client, space_id, question, **extra):
    return client.post(f"/api/v1/spaces/{space_id}/ask", json={"question": question, **extra})


def test_ask_returns_answer_with_citations(client, space_id):
    response = ask(client, space_id, "What is Python?")

    assert response.status_code == 200
    data = response.json()
    assert data["answer"] == "Python is a programming language [1]."
    assert data["citations"][0]["index"] == 1
    assert data["citations"][0]["document_title"] == "Python Notes"
    assert data["metadata"]["chunks_retrieved"] == 1


def test_ask_without_relevant_sources_is_precondition_failed(client, space_id):
    response = ask(client, space_id, "Tell me about the galaxy")

    assert response.status_code == 412
    error = response.json()["error"]
    assert error["code"] == "precondition_failed"
    assert error["message"] == NOT_FOUND_ANSWER


def test_model_failure_is_retryable_internal_error(client, space_id, api_chat_model):
    api_chat_model.error_message = "secret provider detail"

    response = ask(client, space_id, "What is Python?")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "internal_error"
    assert error["details"] == {"retryable": True}
    assert "secret" not in error["message"]


def test_follow_up_and_message_history(client, space_id):
    first = ask(client, space_id, "What is Python?").json()
    conversation_id = first["conversation_id"]

    second = ask(client, space_id, "Is Python popular?", conversation_id=conversation_id)
    messages = client.get(f"/api/v1/conversations/{conversation_id}/messages").json()

    assert second.status_code == 200
    assert second.json()["conversation_id"] == conversation_id
    assert messages["total"] == 4
    assert [m["role"] for m in messages["items"]] == ["question", "answer", "question", "answer"]


def test_get_message_with_citations(client, space_id):
    answer = ask(client, space_id, "What is Python?").json()

    response = client.get(f"/api/v1/messages/{answer['message_id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "answer"
    assert data["citations"][0]["chunk_content"] == PYTHON_TEXT


def test_message_of_other_user_is_forbidden(client, space_id):
    answer = ask(client, space_id, "What is Python?").json()

    response = client.get(f"/api/v1/messages/{answer['message_id']}", headers={"X-User-Id": OTHER_USER_ID})

    assert response.status_code == 403


def test_conversation_in_other_space_is_not_found(client, space_id):
    answer = ask(client, space_id, "What is Python?").json()
    other_space = client.post("/api/v1/spaces", json={"name": "Other"}).json()["id"]

    response = ask(client, other_space, "What is Python?", conversation_id=answer["conversation_id"])

    assert response.status_code == 404


def test_ask_in_unknown_space_is_not_found(client):
    response = ask(client, "00000000-0000-0000-0000-000000000000", "What is Python?")

    assert response.status_code == 404


def test_empty_question_is_rejected(client, space_id):
    assert ask(client, space_id, "").status_code == 422
