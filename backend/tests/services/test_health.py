"""Health & Readiness — liveness and DB readiness checks."""


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json() == {"status": "ready", "checks": {"database": "healthy"}}


async def test_readiness_without_database(client):
    from sodav.main import app

    manager = app.state.db_manager
    del app.state.db_manager
    try:
        res = await client.get("/api/v1/health/ready")
    finally:
        app.state.db_manager = manager
    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"
