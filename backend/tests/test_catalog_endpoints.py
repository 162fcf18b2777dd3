"""
Catalog API endpoint tests
"""

from fastapi.testclient import TestClient

API = "/api/v1/catalog"


def as_user(user):
    return {"X-User-Id": str(user.id)}


def test_read_endpoints(client: TestClient, level, chapter, words):
    languages = client.get(f"{API}/languages").json()["data"]
    assert [x["key"] for x in languages] == ["Korean_Language"]

    levels = client.get(f"{API}/languages/{level.language_id}/levels").json()["data"]
    assert [x["title"] for x in levels] == ["Level 1"]

    chapters = client.get(f"{API}/levels/{level.id}/chapters").json()["data"]
    assert [x["id"] for x in chapters] == [chapter.id]

    chapter_words = client.get(f"{API}/chapters/{chapter.id}/words").json()["data"]
    assert [x["korean"] for x in chapter_words] == ["하나", "둘", "셋"]


def test_catalog_tree(client: TestClient, level, chapter, words):
    tree = client.get(f"{API}/tree").json()["data"]

    assert len(tree) == 1
    assert tree[0]["levels"][0]["chapters"][0]["title"] == "Chapter 1"
    assert [w["order"] for w in tree[0]["levels"][0]["chapters"][0]["words"]] == [1, 2, 3]


def test_admin_creates_content(client: TestClient, admin):
    response = client.post(f"{API}/languages", json={"key": "ja", "value": "Japanese"}, headers=as_user(admin))
    assert response.status_code == 200
    language = response.json()["data"]

    response = client.post(
        f"{API}/languages/{language['id']}/levels", json={"title": "N5", "order": 1}, headers=as_user(admin)
    )
    level = response.json()["data"]
    assert level["language_id"] == language["id"]

    response = client.post(f"{API}/levels/{level['id']}/chapters", json={"title": "Kana"}, headers=as_user(admin))
    chapter = response.json()["data"]

    response = client.post(
        f"{API}/chapters/{chapter['id']}/words",
        json={"korean": "あ", "translation": {"en": "a", "ru": "а"}, "order": 1},
        headers=as_user(admin),
    )
    word = response.json()["data"]
    assert word["translation"] == "a"
    assert word["translations"] == {"en": "a", "ru": "а", "uz": None}

    response = client.put(f"{API}/words/{word['id']}", json={"audio": "a.mp3"}, headers=as_user(admin))
    assert response.json()["data"]["audio"] == "a.mp3"


def test_mutation_without_admin_is_403(client: TestClient, learner, level):
    response = client.post(
        f"{API}/levels/{level.id}/chapters", json={"title": "Nope"}, headers=as_user(learner)
    )
    assert response.status_code == 403
    assert response.json() == {"code": 403, "message": "Not authorized.", "data": None}

    response = client.delete(f"{API}/languages/{level.language_id}")
    assert response.status_code == 403


def test_duplicate_is_409(client: TestClient, admin, level, chapter):
    response = client.post(
        f"{API}/levels/{level.id}/chapters", json={"title": "Chapter 1"}, headers=as_user(admin)
    )

    assert response.status_code == 409
    assert "already exists" in response.json()["message"]


def test_empty_title_is_422(client: TestClient, admin, level):
    response = client.post(f"{API}/levels/{level.id}/chapters", json={"title": ""}, headers=as_user(admin))

    assert response.status_code == 422


def test_delete_chapter(client: TestClient, admin, level, chapter, words):
    response = client.delete(f"{API}/chapters/{chapter.id}", headers=as_user(admin))

    assert response.json()["data"] is True
    assert client.get(f"{API}/levels/{level.id}/chapters").json()["data"] == []
    assert client.delete(f"{API}/chapters/{chapter.id}", headers=as_user(admin)).status_code == 404


def test_import_endpoints(client: TestClient, admin, level, chapter):
    response = client.post(
        f"{API}/chapters/{chapter.id}/import",
        json={"csv": "order,korean,translation\n4,넷,four\n5,다섯,five\n"},
        headers=as_user(admin),
    )
    assert response.json()["data"] == {"inserted": 2, "skipped": 0, "errors": []}

    csv_text = (
        "order,korean,translation,chapter\n"
        "1,사과,apple,Food\n"
        "2,바나나,banana,Food\n"
        "3,,grape,Food\n"
        "4,물,water,Drinks\n"
    )
    response = client.post(f"{API}/levels/{level.id}/import", json={"csv": csv_text}, headers=as_user(admin))
    assert response.json()["data"] == {"inserted": 3, "skipped": 1, "errors": []}

    titles = [x["title"] for x in client.get(f"{API}/levels/{level.id}/chapters").json()["data"]]
    assert titles == ["Chapter 1", "Food", "Drinks"]


def test_import_with_bad_headers(client: TestClient, admin, level):
    response = client.post(
        f"{API}/levels/{level.id}/import",
        json={"csv": "order,korean,chapter\n1,사과,Food\n"},
        headers=as_user(admin),
    )

    assert response.status_code == 200
    assert response.json()["data"] == {
        "inserted": 0,
        "skipped": 0,
        "errors": ["CSV headers must be exactly: order, korean, translation, chapter."],
    }
