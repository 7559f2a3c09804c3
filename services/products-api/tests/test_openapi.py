# /docs y /openapi.json se generan a partir de las rutas; validamos que documentan el recurso.
from fastapi.testclient import TestClient


def test_openapi_exposes_products_routes(client: TestClient):
    r = client.get("/openapi.json")
    assert r.status_code == 200, r.text
    data = r.json()

    paths = data.get("paths", {})
    assert "/api/products" in paths, f"paths disponibles: {sorted(paths.keys())}"
    assert set(paths["/api/products"]) == {"get", "post"}
    assert set(paths["/api/products/{id}"]) == {"get", "put", "patch", "delete"}

    assert {"name": "Products", "description": "API operations related to products"} in data["tags"]
    assert "ProductRead" in data["components"]["schemas"]


def test_openapi_documents_bodies_and_error_responses(client: TestClient):
    paths = client.get("/openapi.json").json()["paths"]

    create = paths["/api/products"]["post"]
    body_schema = create["requestBody"]["content"]["application/json"]["schema"]
    assert set(body_schema["properties"]) == {"name", "price"}
    assert "201" in create["responses"]
    assert "400" in create["responses"]

    update = paths["/api/products/{id}"]["put"]
    assert "availability" in update["requestBody"]["content"]["application/json"]["schema"]["properties"]
    assert {"200", "400", "404"} <= set(update["responses"])


def test_swagger_ui_is_served(client: TestClient):
    r = client.get("/docs")
    assert r.status_code == 200
    assert "swagger" in r.text.lower()
