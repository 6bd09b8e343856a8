from starlette.testclient import TestClient

from cors_relay.mock.fake_chat_server import create_fake_app


def test_status():
    client = TestClient(create_fake_app())
    assert client.get("/status").json() == {"status": "Fake upstream is running"}


def test_completion_echoes_last_user_message():
    client = TestClient(create_fake_app())
    resp = client.post(
        "/v1/chat/completions",
        json={
            "model": "gpt-4o-mini",
            "messages": [
                {"role": "system", "content": "be brief"},
                {"role": "user", "content": "ping"},
            ],
        },
        headers={"Authorization": "Bearer test"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["object"] == "chat.completion"
    assert data["model"] == "gpt-4o-mini"
    assert data["choices"][0]["message"]["content"] == "echo: ping"


def test_completion_requires_bearer():
    client = TestClient(create_fake_app())
    resp = client.post("/v1/chat/completions", json={"messages": []})
    assert resp.status_code == 401
    assert "error" in resp.json()
