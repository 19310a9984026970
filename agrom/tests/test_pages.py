import pytest

from agrom.common.security import create_access_token


@pytest.mark.asyncio
async def test_home_redirects_to_login_without_session(client):
    response = await client.get("/")
    assert response.status_code == 303
    assert response.headers["location"] == "/auth/login"


@pytest.mark.asyncio
async def test_home_redirects_to_onboarding_without_profile(client):
    token = create_access_token({"sub": "fresh-user"})
    response = await client.get("/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 303
    assert response.headers["location"] == "/onboarding"


@pytest.mark.asyncio
async def test_home_shows_producer_tabs(client, backend, contractor, producer_headers):
    backend.seed(
        "services", contractor_id=contractor["id"], title="Siembra directa", service_type="siembra", status="active",
    )
    response = await client.get("/", headers=producer_headers)
    assert response.status_code == 200
    assert "Mis Solicitudes" in response.text
    assert "Siembra directa" in response.text
    assert "Nueva solicitud" in response.text
    assert "Publicar servicio" not in response.text


@pytest.mark.asyncio
async def test_home_filters_feed(client, backend, contractor, producer_headers):
    backend.seed("services", contractor_id=contractor["id"], title="Siembra directa", service_type="siembra", status="active")
    backend.seed("services", contractor_id=contractor["id"], title="Cosecha gruesa", service_type="cosecha", status="active")
    response = await client.get("/", params={"service_type": "cosecha"}, headers=producer_headers)
    assert "Cosecha gruesa" in response.text
    assert "Siembra directa" not in response.text


@pytest.mark.asyncio
async def test_login_sets_session_cookie(client, backend, producer):
    backend.accounts["juan@test.com"] = (producer["id"], "secreto123")
    response = await client.post("/auth/login", data={"email": "juan@test.com", "password": "secreto123"})
    assert response.status_code == 303
    assert "agrom_session=" in response.headers["set-cookie"]
    assert "httponly" in response.headers["set-cookie"].lower()


@pytest.mark.asyncio
async def test_login_wrong_password_rerenders(client, backend, producer):
    backend.accounts["juan@test.com"] = (producer["id"], "secreto123")
    response = await client.post("/auth/login", data={"email": "juan@test.com", "password": "otra"})
    assert response.status_code == 403
    assert "Correo o contraseña incorrectos" in response.text


@pytest.mark.asyncio
async def test_register_password_mismatch(client, backend):
    response = await client.post(
        "/auth/register",
        data={"email": "nuevo@test.com", "password": "secreto123", "confirm_password": "secreto999"},
    )
    assert response.status_code == 422
    assert "Las contraseñas no coinciden" in response.text
    assert backend.sign_ups == []


@pytest.mark.asyncio
async def test_register_page_shows_password_hint(client):
    response = await client.get("/auth/register")
    assert "mínimo 8 caracteres" in response.text


@pytest.mark.asyncio
async def test_register_success_redirects_to_login(client, backend):
    response = await client.post(
        "/auth/register",
        data={"email": "nuevo@test.com", "password": "secreto123", "confirm_password": "secreto123"},
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/auth/login?registered=true"
    assert backend.sign_ups == ["nuevo@test.com"]


@pytest.mark.asyncio
async def test_onboarding_form(client, backend):
    headers = {"Authorization": f"Bearer {create_access_token({'sub': 'fresh-user'})}"}
    response = await client.post(
        "/onboarding",
        data={"name": "Marta", "role": "Contratista", "base_location": "Salto", "phone": ""},
        headers=headers,
    )
    assert response.status_code == 422
    assert "El teléfono es requerido" in response.text

    response = await client.post(
        "/onboarding",
        data={"name": "Marta", "role": "Contratista", "base_location": "Salto", "phone": "2474 1234"},
        headers=headers,
    )
    assert response.status_code == 303
    assert backend.inserts[-1][0] == "users_public"


@pytest.mark.asyncio
async def test_request_form_without_location_not_submitted(client, backend, producer_headers):
    response = await client.post(
        "/requests/new",
        data={"service_type": "siembra", "hectares": "50", "date_target": "2026-04-01", "location": ""},
        headers=producer_headers,
    )
    assert response.status_code == 422
    assert "Los campos obligatorios deben completarse" in response.text
    assert backend.inserts == []


@pytest.mark.asyncio
async def test_contractor_cannot_open_request_form(client, contractor_headers):
    response = await client.get("/requests/new", headers=contractor_headers)
    assert response.status_code == 403
    assert "Solo los Productores pueden crear solicitudes" in response.text


@pytest.mark.asyncio
async def test_service_form_uploads_images(client, backend, contractor_headers):
    backend.failing_uploads.add("roto.jpg")
    response = await client.post(
        "/services/new",
        data={
            "service_type": "siembra",
            "title": "Siembra directa",
            "description": "Sembradora de 16 surcos",
            "coverage_area": "Junín",
        },
        files=[
            ("images", ("lote.jpg", b"jpeg-bytes", "image/jpeg")),
            ("images", ("roto.jpg", b"more-bytes", "image/jpeg")),
        ],
        headers=contractor_headers,
    )
    assert response.status_code == 303
    assert response.headers["location"].startswith("/services/")

    table, row = backend.inserts[-1]
    assert table == "services"
    assert len(row["images"]) == 1
    assert row["images"][0].endswith("-lote.jpg")
    assert backend.uploads[0][0] == "service-images"


@pytest.mark.asyncio
async def test_service_detail_page(client, backend, contractor, producer_headers):
    service = backend.seed(
        "services", contractor_id=contractor["id"], title="Cosecha fina", service_type="cosecha", status="active",
    )
    response = await client.get(f"/services/{service['id']}", headers=producer_headers)
    assert response.status_code == 200
    assert "https://wa.me/5492365550101?text=" in response.text
    assert "Valorar" in response.text


@pytest.mark.asyncio
async def test_missing_listing_renders_not_found(client, producer_headers):
    response = await client.get("/services/nope", headers=producer_headers)
    assert response.status_code == 404
    assert "Volver al inicio" in response.text


@pytest.mark.asyncio
async def test_rate_from_profile_page(client, backend, contractor, producer_headers):
    response = await client.post(
        f"/users/{contractor['id']}/rate", data={"stars": "5", "comment": "Excelente"}, headers=producer_headers,
    )
    assert response.status_code == 303
    assert response.headers["location"] == f"/users/{contractor['id']}?rated=true"

    page = await client.get(f"/users/{contractor['id']}", params={"rated": True}, headers=producer_headers)
    assert "Excelente" in page.text


@pytest.mark.asyncio
async def test_rate_without_stars_rerenders(client, backend, contractor, producer_headers):
    response = await client.post(
        f"/users/{contractor['id']}/rate", data={"comment": "Sin estrellas"}, headers=producer_headers,
    )
    assert response.status_code == 422
    assert "Por favor selecciona una calificación" in response.text
    assert backend.inserts == []


@pytest.mark.asyncio
async def test_prices_page_shows_backend_error(client, backend, producer_headers):
    backend.failing_rpcs.add("get_reference_prices")
    response = await client.get("/prices", headers=producer_headers)
    assert response.status_code == 200
    assert "get_reference_prices failed" in response.text


@pytest.mark.asyncio
async def test_logout_clears_cookie(client, backend, producer_headers):
    response = await client.post("/auth/logout", headers=producer_headers)
    assert response.status_code == 303
    assert backend.sign_outs == 1
    assert 'agrom_session=""' in response.headers["set-cookie"]


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["backend"] == "up"
    assert "x-request-duration-ms" in response.headers


@pytest.mark.asyncio
async def test_listing_page_shows_rounded_owner_reputation(client, backend, contractor, producer_headers):
    row = next(u for u in backend.tables["users_public"] if u["id"] == contractor["id"])
    row.update(reputation_avg=4.333333, reputation_count=3)
    service = backend.seed(
        "services", contractor_id=contractor["id"], title="Cosecha fina", service_type="cosecha", status="active",
    )
    response = await client.get(f"/services/{service['id']}", headers=producer_headers)
    assert "Promedio de 4.3 estrellas basado en 3 valoraciones" in response.text
    assert "4.333333" not in response.text


@pytest.mark.asyncio
async def test_stored_script_video_link_not_rendered(client, backend, contractor, producer_headers):
    service = backend.seed(
        "services", contractor_id=contractor["id"], title="Viejo", service_type="arado",
        status="active", video_url="javascript:alert(1)",
    )
    response = await client.get(f"/services/{service['id']}", headers=producer_headers)
    assert response.status_code == 200
    assert "javascript:alert(1)" not in response.text


@pytest.mark.asyncio
async def test_empty_own_tab_invites_to_publish(client, producer_headers):
    response = await client.get("/", params={"tab": "requests"}, headers=producer_headers)
    assert "Todavía no publicaste nada en esta sección." in response.text


@pytest.mark.asyncio
async def test_empty_filtered_feed_mentions_filters(client, backend, contractor, producer_headers):
    backend.seed("services", contractor_id=contractor["id"], title="Siembra", service_type="siembra", status="active")
    response = await client.get("/", params={"service_type": "cosecha"}, headers=producer_headers)
    assert "Ninguna publicación coincide con los filtros." in response.text
