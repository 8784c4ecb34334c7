from __future__ import annotations

import json

import pytest

from app import create_app
from utils.app_state import get_state
from utils.errors import RETRY_MESSAGE

VERSE = {
    "bookId": "JHN",
    "chapter": 3,
    "verseNumber": 16,
    "text": "For God so loved the world",
    "lang": "en",
}


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "healthy"


def test_books_by_testament(client) -> None:
    old = client.get("/api/bible/books?testament=Old").get_json()
    assert len(old) == 39
    assert old[0]["id"] == "GEN"
    everything = client.get("/api/bible/books?lang=ta").get_json()
    assert len(everything) == 66
    assert everything[-1]["name"] == "வெளிப்படுத்தின விசேஷம்"
    assert client.get("/api/bible/books?testament=Middle").status_code == 400


def test_navigate_and_page_through(client) -> None:
    response = client.post("/api/bible/navigate", json={"bookId": "JHN", "chapter": 21})
    body = response.get_json()
    assert response.status_code == 200
    assert body["applied"] is True
    assert body["state"]["verses"][0]["text"] == "John 21:1"

    body = client.post("/api/bible/next").get_json()
    assert body["moved"] is True
    assert body["state"]["book"]["id"] == "ACT"
    assert body["state"]["chapter"] == 1

    body = client.post("/api/bible/prev").get_json()
    assert (body["state"]["book"]["id"], body["state"]["chapter"]) == ("JHN", 21)


def test_navigate_validation(client) -> None:
    assert client.post("/api/bible/navigate", json={"bookId": "XYZ"}).status_code == 404
    assert client.post("/api/bible/navigate", json={"chapter": 0}).status_code == 400
    assert client.post("/api/bible/navigate", json={"bookId": "JUD", "chapter": 2}).status_code == 400
    assert client.post("/api/bible/navigate", data="nope", content_type="text/plain").status_code == 400


def test_error_then_try_again(client, provider) -> None:
    provider.script = ["[]"]
    body = client.post("/api/bible/load").get_json()
    assert body["applied"] is False
    assert body["state"]["error"] == RETRY_MESSAGE

    body = client.post("/api/bible/load").get_json()
    assert body["applied"] is True
    assert body["state"]["error"] is None


def test_commentary_reports_saved_flags(client) -> None:
    client.post("/api/bible/navigate", json={"bookId": "JHN", "chapter": 3})
    client.put("/api/saved/highlight", json={**VERSE, "verseNumber": 2, "color": "blue"})

    body = client.post("/api/bible/commentary", json={"verseNumber": 2}).get_json()
    assert body["reference"] == "John 3:2"
    assert body["commentary"] == "A short reflection on grace."
    assert body["key"] == "JHN-3-2"
    assert body["highlightColor"] == "blue"
    assert body["isBookmarked"] is False

    assert client.post("/api/bible/commentary", json={"verseNumber": 40}).status_code == 404


def test_saved_flow(client, app) -> None:
    body = client.post("/api/saved/bookmark", json=VERSE).get_json()
    assert body["key"] == "JHN-3-16"
    assert body["saved"]["isBookmarked"] is True
    assert body["saved"]["bookName"] == "John"

    body = client.put("/api/saved/highlight", json={**VERSE, "color": "yellow"}).get_json()
    assert body["saved"]["highlightColor"] == "yellow"
    assert [item["key"] for item in client.get("/api/saved?filter=highlights").get_json()] == ["JHN-3-16"]

    body = client.delete("/api/saved/highlight", json=VERSE).get_json()
    assert "highlightColor" not in body["saved"]

    body = client.post("/api/saved/bookmark", json=VERSE).get_json()
    assert body["saved"] is None
    assert client.get("/api/saved/").get_json() == []


def test_saved_validation_and_delete(client) -> None:
    assert client.put("/api/saved/highlight", json={**VERSE, "color": "orange"}).status_code == 400
    assert client.post("/api/saved/bookmark", json={**VERSE, "bookId": "XYZ"}).status_code == 404
    assert client.get("/api/saved?filter=notes").status_code == 400

    client.post("/api/saved/bookmark", json=VERSE)
    assert client.delete("/api/saved/JHN-3-16").status_code == 200
    assert client.delete("/api/saved/JHN-3-16").status_code == 404


def test_prayers_crud(client) -> None:
    response = client.post("/api/prayers/", json={"title": "Church Growth", "content": "Youth outreach"})
    assert response.status_code == 201
    prayer = response.get_json()
    assert prayer["isAnswered"] is False

    assert client.post("/api/prayers/", json={"title": " "}).status_code == 400
    toggled = client.post(f"/api/prayers/{prayer['id']}/toggle").get_json()
    assert toggled["isAnswered"] is True
    assert [p["id"] for p in client.get("/api/prayers/").get_json()] == [prayer["id"]]

    assert client.delete(f"/api/prayers/{prayer['id']}").status_code == 200
    assert client.delete(f"/api/prayers/{prayer['id']}").status_code == 404
    assert client.post("/api/prayers/missing/toggle").status_code == 404


def test_settings_round_trip(client) -> None:
    assert client.get("/api/settings/").get_json() == {"language": "en", "fontSize": 18, "darkMode": False}
    body = client.patch("/api/settings/", json={"darkMode": True, "fontSize": 20, "language": "ta"}).get_json()
    assert body == {"language": "ta", "fontSize": 20, "darkMode": True}
    assert client.get("/api/bible/state").get_json()["language"] == "ta"
    assert client.patch("/api/settings/", json={"fontSize": 100}).status_code == 400


def test_clear_cache(client) -> None:
    client.post("/api/bible/load")
    assert client.post("/api/settings/clear-cache").get_json() == {"removed": 1}


def test_devotional_and_audio(client, provider) -> None:
    devotional = client.get("/api/home/devotional?lang=en").get_json()
    assert devotional["verseRef"] == "John 3:16"

    response = client.get("/api/home/devotional/audio?lang=en")
    assert response.status_code == 200
    assert response.mimetype == "audio/wav"
    assert response.data[:4] == b"RIFF"
    assert provider.speech_prompts[-1][0] == "Read clearly: " + devotional["verseText"]


def test_devotional_fallback(client, provider) -> None:
    provider.script = [ValueError("model unavailable")]
    devotional = client.get("/api/home/devotional").get_json()
    assert devotional["verseRef"] == "Psalm 23:1"
    assert client.get("/api/home/devotional?lang=fr").status_code == 400


def test_speech_failure_is_reported(client, provider) -> None:
    provider.audio = None
    response = client.post("/api/bible/speech", json={"text": "Jesus wept.", "lang": "en"})
    assert response.status_code == 502
    assert json.loads(response.data)["error"].startswith("Unable to play audio")


@pytest.fixture
def tiny_client(provider, sleeps):
    app = create_app(
        {
            "TESTING": True,
            "DATABASE_URL": "sqlite://",
            "STORE_QUOTA_BYTES": 3,
            "PREFETCH_DELAY": 3600.0,
        },
        provider=provider,
        sleep=sleeps,
    )
    yield app.test_client()
    with app.app_context():
        get_state().close()


def test_full_store_reports_json_errors(tiny_client) -> None:
    response = tiny_client.patch("/api/settings/", json={"darkMode": True})
    assert response.status_code == 507
    assert response.get_json() == {"error": "Storage is full"}

    response = tiny_client.post("/api/prayers/", json={"title": "Exams"})
    assert response.status_code == 507
