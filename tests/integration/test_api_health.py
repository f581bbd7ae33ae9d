def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


def test_health_reports_database_and_cache(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["details"]["database"] == {"status": "healthy"}
    assert body["details"]["cache"] == {"status": "healthy"}


def test_request_id_is_echoed(client):
    r = client.get("/quotes/9999", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"
    assert r.json()["request_id"] == "req-123"


def test_unknown_route_uses_error_body(client):
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "NotFound"


def test_openapi_documents_error_body(client):
    schema = client.get("/openapi.json").json()
    assert "ErrorResponse" in schema["components"]["schemas"]
    unauthorized = schema["paths"]["/favorites"]["post"]["responses"]["401"]
    assert unauthorized["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
