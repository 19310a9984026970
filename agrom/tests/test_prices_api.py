import pytest

PRICES = [
    {"service_type": "siembra", "region": "Pergamino", "price_avg": 25000, "source": "manual"},
    {"service_type": "cosecha", "region": "Junín", "price_avg": 40001, "source": "publicaciones"},
    {"service_type": "siembra", "region": "Junín", "price_avg": 27000, "source": "publicaciones"},
]


@pytest.mark.asyncio
async def test_update_prices_requires_session(client, backend):
    response = await client.post("/api/update-prices")
    assert response.status_code == 401
    assert response.json() == {"error": "No autorizado"}
    assert backend.rpc_calls == []


@pytest.mark.asyncio
async def test_update_prices_success(client, backend, producer_headers):
    response = await client.post("/api/update-prices", headers=producer_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Precios actualizados correctamente"}
    assert backend.rpc_calls == [("update_reference_prices", None)]


@pytest.mark.asyncio
async def test_update_prices_backend_failure(client, backend, producer_headers):
    backend.failing_rpcs.add("update_reference_prices")
    response = await client.post("/api/update-prices", headers=producer_headers)
    assert response.status_code == 500
    assert response.json() == {"error": "Error al actualizar precios"}


@pytest.mark.asyncio
async def test_update_prices_accepts_session_cookie(client, backend, producer, headers_for):
    token = headers_for(producer)["Authorization"].removeprefix("Bearer ")
    client.cookies.set("agrom_session", token)
    response = await client.post("/api/update-prices")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_price_table(client, backend, producer_headers):
    backend.rpc_results["get_reference_prices"] = PRICES

    response = await client.get("/api/v1/prices", headers=producer_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["overview"] == {"total": 3, "regions": ["Pergamino", "Junín"], "average_price": 30667}
    assert backend.rpc_calls[-1] == ("get_reference_prices", {"p_service_type": None, "p_region": None})


@pytest.mark.asyncio
async def test_price_table_filters(client, backend, producer_headers):
    backend.rpc_results["get_reference_prices"] = PRICES

    response = await client.get(
        "/api/v1/prices", params={"service_type": "siembra", "region": "jun"}, headers=producer_headers,
    )
    data = response.json()
    assert [(p["service_type"], p["region"]) for p in data["prices"]] == [("siembra", "Junín")]
    assert backend.rpc_calls[-1] == ("get_reference_prices", {"p_service_type": "siembra", "p_region": "jun"})
