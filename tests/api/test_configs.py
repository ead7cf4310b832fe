import json

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(tmp_path, monkeypatch):
    config_file = tmp_path / "config.toml"
    config_file.write_text(
        f"""
timezone = "UTC"

[database]
path = "{(tmp_path / 'formforge.db').as_posix()}"

[export]
indent = 2
""",
        encoding="utf-8",
    )

    monkeypatch.setenv("FORMFORGE_CONFIG_FILE", str(config_file))
    monkeypatch.delenv("FORMFORGE_DB_PATH", raising=False)

    from formforge.api import create_app

    app = create_app()
    with TestClient(app) as client:
        yield client


@pytest.fixture
def config_url(client):
    brand = client.post("/api/v1/brands", json={"name": "acme"}).json()
    definition = client.post(
        f"/api/v1/brands/{brand['id']}/configs", json={"name": "checkout"}
    ).json()
    return f"/api/v1/brands/{brand['id']}/configs/{definition['id']}"


def test_create_definition(client):
    brand = client.post("/api/v1/brands", json={"name": "acme"}).json()
    response = client.post(f"/api/v1/brands/{brand['id']}/configs", json={"name": "checkout"})

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "checkout"
    assert data["current_version"] == 1
    assert data["active_version"] == 1


def test_duplicate_brand_is_conflict(client):
    client.post("/api/v1/brands", json={"name": "acme"})
    response = client.post("/api/v1/brands", json={"name": "acme"})
    assert response.status_code == 409
    assert response.json()["success"] is False


def test_unknown_brand_is_not_found(client):
    response = client.get("/api/v1/brands/42/configs")
    assert response.status_code == 404
    assert "not found" in response.json()["error"]


def test_add_field_creates_version(client, config_url):
    response = client.post(
        f"{config_url}/fields",
        json={"name": "color", "type": "select", "options": "Red, Green, Blue", "required": True},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["version"]["version"] == 2
    assert data["version"]["schema"]["properties"]["color"]["enum"] == ["Red", "Green", "Blue"]
    assert data["version"]["schema"]["required"] == ["color"]
    assert data["version"]["formData"] == {"color": "Red"}
    assert data["versions"] == [2, 1]


def test_add_field_with_empty_name_is_rejected(client, config_url):
    response = client.post(f"{config_url}/fields", json={"name": "  ", "type": "text"})
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert client.get(f"{config_url}/versions").json()["total"] == 1


def test_update_field_renames_and_resets(client, config_url):
    client.post(f"{config_url}/fields", json={"name": "age", "type": "text"})

    response = client.put(
        f"{config_url}/fields/age",
        json={"name": "years", "type": "number", "min": 0, "maxLength": 3},
    )

    assert response.status_code == 200
    version = response.json()["version"]
    assert list(version["schema"]["properties"]) == ["years"]
    assert version["schema"]["properties"]["years"]["minimum"] == 0
    assert version["formData"] == {"years": 0}
    assert version["uiSchema"] == {}


def test_update_unknown_field(client, config_url):
    response = client.put(f"{config_url}/fields/missing", json={"name": "x", "type": "text"})
    assert response.status_code == 404
    assert response.json()["field"] == "missing"


def test_delete_field(client, config_url):
    client.post(f"{config_url}/fields", json={"name": "tel", "type": "tel"})
    response = client.delete(f"{config_url}/fields/tel")

    assert response.status_code == 200
    version = response.json()["version"]
    assert version["version"] == 3
    assert version["schema"]["properties"] == {}
    assert version["uiSchema"] == {}


def test_save_and_activate_versions(client, config_url):
    for n in range(2, 4):
        client.post(f"{config_url}/versions", json={"schema": None, "uiSchema": {}, "formData": {"n": n}})

    response = client.put(f"{config_url}/active-version", json={"version": 2})
    assert response.status_code == 200
    assert response.json()["active_version"] == 2

    client.post(f"{config_url}/versions", json={"formData": {"n": 4}})

    data = client.get(f"{config_url}/versions").json()
    assert [v["version"] for v in data["versions"]] == [4, 3, 2, 1]
    assert data["active_version"] == 2
    assert [v["active"] for v in data["versions"]] == [False, False, True, False]


def test_activate_missing_version(client, config_url):
    response = client.put(f"{config_url}/active-version", json={"version": 9})
    assert response.status_code == 404
    assert response.json()["version"] == 9


def test_get_definition_detail(client, config_url):
    client.post(f"{config_url}/fields", json={"name": "site", "type": "url"})
    client.put(f"{config_url}/active-version", json={"version": 2})

    data = client.get(config_url).json()

    assert data["definition"]["name"] == "checkout"
    assert data["version"]["version"] == 2
    assert data["fields"] == [
        {
            "name": "site",
            "type": "url",
            "label": "site",
            "options": None,
            "required": False,
            "min": None,
            "max": None,
            "maxLength": None,
            "pattern": None,
        }
    ]


def test_rename_does_not_create_version(client, config_url):
    response = client.patch(f"{config_url}/name", json={"name": "payment"})
    assert response.status_code == 200
    assert response.json()["name"] == "payment"
    assert client.get(f"{config_url}/versions").json()["total"] == 1


def test_delete_definition(client, config_url):
    assert client.delete(config_url).status_code == 204
    assert client.get(config_url).status_code == 404


def test_export_is_byte_identical(client, config_url):
    client.post(f"{config_url}/fields", json={"name": "agree", "type": "checkbox"})
    client.put(f"{config_url}/active-version", json={"version": 2})

    first = client.get(f"{config_url}/export")
    second = client.get(f"{config_url}/export")

    assert first.status_code == 200
    assert first.content == second.content
    doc = json.loads(first.content)
    assert doc["name"] == "checkout"
    assert doc["formData"] == {"agree": False}
    assert set(doc) == {"name", "schema", "uiSchema", "formData"}


def test_export_specific_version(client, config_url):
    client.post(f"{config_url}/fields", json={"name": "agree", "type": "checkbox"})
    doc = client.get(f"{config_url}/export", params={"version": 1}).json()
    assert doc["formData"] == {}


def test_malformed_save_is_rejected(client, config_url):
    response = client.post(
        f"{config_url}/versions",
        json={"schema": {"type": "object", "properties": {"a": {"type": "string", "title": 5}}}},
    )

    assert response.status_code == 400
    assert response.json()["field"] == "a"
    assert client.get(config_url).status_code == 200
    assert client.get(f"{config_url}/versions").json()["total"] == 1


def test_create_definition_with_description(client):
    brand = client.post("/api/v1/brands", json={"name": "acme"}).json()
    response = client.post(
        f"/api/v1/brands/{brand['id']}/configs",
        json={"name": "checkout", "description": "Checkout page"},
    )

    assert response.status_code == 201
    assert response.json()["description"] == "Checkout page"
