"""
HTTP tests for the FastAPI app with a scripted model and an in-memory store.
"""
import json
import uuid

import fitz  # PyMuPDF
import httpx
import pytest
from fastapi.testclient import TestClient

from portfolioforge.dependencies import get_portfolio_store, get_text_generator
from portfolioforge.main import app
from portfolioforge.schemas.portfolio import PortfolioProfile, PortfolioRecord
from portfolioforge.services.storage import SupabasePortfolioStore
from portfolioforge.services.themes import THEMES

BASE = "https://portfolios.example.com"


def make_pdf(text: str) -> bytes:
    document = fitz.open()
    document.new_page().insert_text((72, 72), text)
    data = document.tobytes()
    document.close()
    return data


def create_manual(client, **personal_info):
    response = client.post("/api/generate-portfolio", json={
        "manualData": {
            "personalInfo": {"name": "Grace Hopper", **personal_info},
            "summary": "Compiler pioneer.",
            "skills": ["COBOL"],
        }
    })
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"


def test_server_info(client):
    body = client.get("/api/server-info").json()
    assert body["url"] == BASE
    assert body["port"] == 3000
    assert body["ip"]


# ============================================================================
# Generate
# ============================================================================

def test_generate_from_resume_text(client, generator, store, extraction_reply):
    generator.replies = [extraction_reply, "Software Developer"]
    response = client.post("/api/generate-portfolio", json={"resumeText": "Ada Lovelace ..."})

    assert response.status_code == 200, response.text
    body = response.json()
    assert set(body) == {"portfolioId", "portfolioData", "theme", "profilePictureUrl", "shareUrl"}
    assert body["theme"]["name"] == "Developer Dark"
    assert body["theme"]["primaryColor"] == "bg-blue-500"
    assert body["portfolioData"]["profession"] == "Software Developer"
    assert body["portfolioData"]["personalInfo"]["github"] == "https://github.com/adal"
    assert body["shareUrl"] == f"{BASE}/portfolio/{body['portfolioId']}"
    assert body["profilePictureUrl"] == "https://placehold.co/150x150/222/fff?text=A"
    assert store.ids() == [body["portfolioId"]]


def test_generate_from_manual_json(client, generator):
    body = create_manual(client, linkedin="ghopper")
    assert generator.prompts == []
    assert body["portfolioData"]["profession"] == "Default"
    assert body["theme"]["name"] == "Professional Blue"
    assert body["portfolioData"]["personalInfo"]["linkedin"] == "https://linkedin.com/in/ghopper"


def test_generate_from_uploaded_pdf_with_photo(client, generator, extraction_reply):
    generator.replies = [extraction_reply, "Data Scientist"]
    response = client.post(
        "/api/generate-portfolio",
        files={
            "resume": ("resume.pdf", make_pdf("Ada Lovelace, Senior Engineer"), "application/pdf"),
            "photo": ("me.png", b"\x89PNG\r\n\x1a\nfake", "image/png"),
        },
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["theme"]["name"] == "Data Green"
    assert body["profilePictureUrl"].startswith("data:image/png;base64,")
    assert "Ada Lovelace, Senior Engineer" in generator.prompts[0]


def test_generate_manual_multipart(client, generator):
    response = client.post(
        "/api/generate-portfolio",
        data={"manualData": json.dumps({"personalInfo": {"name": "Linus"}, "skills": ["C"]})},
    )
    assert response.status_code == 200, response.text
    assert response.json()["profilePictureUrl"] == "https://placehold.co/150x150/222/fff?text=L"
    assert generator.prompts == []


def test_empty_resume_text_is_400(client, generator, store):
    response = client.post("/api/generate-portfolio", json={"resumeText": "   "})
    assert response.status_code == 400
    assert "Could not extract text" in response.json()["error"]
    assert generator.prompts == []
    assert len(store) == 0


def test_corrupted_pdf_is_400(client, generator, store):
    response = client.post(
        "/api/generate-portfolio",
        files={"resume": ("resume.pdf", b"this is not a pdf at all", "application/pdf")},
    )
    assert response.status_code == 400
    assert "corrupted" in response.json()["error"]
    assert generator.prompts == []
    assert len(store) == 0


def test_missing_input_is_400(client):
    assert client.post("/api/generate-portfolio", json={}).status_code == 400
    assert client.post("/api/generate-portfolio", data={"other": "x"}).status_code == 400


def test_malformed_json_body_is_400(client):
    response = client.post(
        "/api/generate-portfolio",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400


def test_malformed_model_output_is_generic_500(client, generator, store):
    generator.replies = ["Sorry, I can't help with that."]
    response = client.post("/api/generate-portfolio", json={"resumeText": "Ada"})
    assert response.status_code == 500
    assert response.json()["error"].startswith("An unexpected error occurred")
    assert len(store) == 0


def test_api_responses_are_not_cached(client):
    response = client.post("/api/generate-portfolio", json={"manualData": {}})
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"


# ============================================================================
# Update
# ============================================================================

def test_update_portfolio(client, store):
    created = create_manual(client)
    portfolio_id = created["portfolioId"]

    response = client.post(f"/api/update-portfolio/{portfolio_id}", json={
        "portfolioData": {"personalInfo": {"name": "Grace B. Hopper", "github": "ghopper"}},
        "theme": created["theme"],
    })
    assert response.status_code == 200
    assert response.json() == {"success": True, "portfolioId": portfolio_id}

    page = client.get(f"/portfolio/{portfolio_id}").text
    assert "Grace B. Hopper" in page
    assert 'href="https://github.com/ghopper"' in page


def test_update_unknown_portfolio_is_404(client):
    response = client.post(f"/api/update-portfolio/{uuid.uuid4()}", json={"portfolioData": {}})
    assert response.status_code == 404
    assert response.json() == {"error": "Portfolio not found"}


def test_update_without_body_is_400(client):
    created = create_manual(client)
    response = client.post(f"/api/update-portfolio/{created['portfolioId']}", json={})
    assert response.status_code == 400


# ============================================================================
# Public page and image
# ============================================================================

def test_view_portfolio(client):
    created = create_manual(client)
    portfolio_id = created["portfolioId"]

    response = client.get(f"/portfolio/{portfolio_id}")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["cache-control"] == "public, max-age=3600"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["x-content-type-options"] == "nosniff"
    assert "Grace Hopper" in response.text
    assert "No projects listed." in response.text
    assert f"{BASE}/portfolio/{portfolio_id}" in response.text

    assert client.get(f"/shared/{portfolio_id}").status_code == 200


def test_view_invalid_id_is_400(client):
    response = client.get("/portfolio/not-a-uuid")
    assert response.status_code == 400
    assert "Invalid Portfolio ID" in response.text


def test_view_unknown_id_is_404(client):
    response = client.get(f"/portfolio/{uuid.uuid4()}")
    assert response.status_code == 404
    assert "Portfolio Not Found" in response.text


def test_view_escapes_user_content(client):
    created = create_manual(client, name="<script>alert('x')</script>")
    page = client.get(f"/portfolio/{created['portfolioId']}").text
    assert "<script>alert(" not in page


def test_image_from_data_url(client):
    photo = b"\x89PNG\r\n\x1a\nfake-image"
    response = client.post(
        "/api/generate-portfolio",
        data={"manualData": json.dumps({"personalInfo": {"name": "Ada"}})},
        files={"photo": ("me.png", photo, "image/png")},
    )
    portfolio_id = response.json()["portfolioId"]

    image = client.get(f"/api/portfolio-image/{portfolio_id}")
    assert image.status_code == 200
    assert image.headers["content-type"] == "image/png"
    assert image.content == photo

    page = client.get(f"/portfolio/{portfolio_id}").text
    assert f'content="{BASE}/api/portfolio-image/{portfolio_id}"' in page


def test_image_without_upload_redirects(client):
    created = create_manual(client)
    response = client.get(f"/api/portfolio-image/{created['portfolioId']}", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == created["profilePictureUrl"]


def test_image_unknown_id_is_404(client):
    assert client.get(f"/api/portfolio-image/{uuid.uuid4()}").status_code == 404


def test_non_image_photo_is_rejected(client):
    response = client.post(
        "/api/generate-portfolio",
        data={"manualData": json.dumps({"personalInfo": {"name": "Ada"}})},
        files={"photo": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400


# ============================================================================
# Inline picture handling
# ============================================================================

HTML_DATA_URL = "data:text/html;base64,PHNjcmlwdD5hbGVydChkb2N1bWVudC5jb29raWUpPC9zY3JpcHQ+"


def test_generate_rejects_non_image_picture_url(client, store):
    response = client.post("/api/generate-portfolio", json={
        "manualData": {"personalInfo": {"name": "Mallory"}},
        "profilePictureUrl": HTML_DATA_URL,
    })
    assert response.status_code == 400
    assert len(store) == 0


def test_update_rejects_non_image_picture_url(client):
    created = create_manual(client)
    response = client.post(f"/api/update-portfolio/{created['portfolioId']}", json={
        "portfolioData": {"personalInfo": {"name": "Grace Hopper"}},
        "profilePictureUrl": "data:image/svg+xml;base64,PHN2Zy8+",
    })
    assert response.status_code == 400
    image = client.get(f"/api/portfolio-image/{created['portfolioId']}", follow_redirects=False)
    assert image.headers["location"] == created["profilePictureUrl"]


def test_svg_photo_is_rejected(client, store):
    response = client.post(
        "/api/generate-portfolio",
        data={"manualData": json.dumps({"personalInfo": {"name": "Ada"}})},
        files={"photo": ("me.svg", b"<svg onload='alert(1)'/>", "image/svg+xml")},
    )
    assert response.status_code == 400
    assert len(store) == 0


def test_image_response_is_nosniff(client):
    response = client.post(
        "/api/generate-portfolio",
        data={"manualData": json.dumps({"personalInfo": {"name": "Ada"}})},
        files={"photo": ("me.jpg", b"\xff\xd8\xff\xe0fake", "image/jpeg")},
    )
    image = client.get(f"/api/portfolio-image/{response.json()['portfolioId']}")
    assert image.headers["content-type"] == "image/jpeg"
    assert image.headers["x-content-type-options"] == "nosniff"


def test_stored_non_raster_data_url_is_never_served(client, store):
    share_id = str(uuid.uuid4())
    store._records[share_id] = PortfolioRecord(
        share_id=share_id,
        profile=PortfolioProfile.model_validate({"personalInfo": {"name": "Old"}}),
        theme=THEMES["Default"],
        profile_picture_url=HTML_DATA_URL,
    )
    response = client.get(f"/api/portfolio-image/{share_id}", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"].startswith("https://via.placeholder.com/")


# ============================================================================
# Malformed ids against a PostgREST backend
# ============================================================================

def rejecting_postgrest(request: httpx.Request) -> httpx.Response:
    # PostgREST answer for a value that is not a valid uuid
    return httpx.Response(400, json={
        "code": "22P02",
        "message": 'invalid input syntax for type uuid: "abc"',
    })


@pytest.fixture
def supabase_client(generator):
    store = SupabasePortfolioStore(
        "https://project.supabase.co", "anon-key",
        transport=httpx.MockTransport(rejecting_postgrest),
    )
    app.dependency_overrides[get_portfolio_store] = lambda: store
    app.dependency_overrides[get_text_generator] = lambda: generator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_update_malformed_id_is_404_on_supabase(supabase_client):
    response = supabase_client.post("/api/update-portfolio/abc", json={"portfolioData": {}})
    assert response.status_code == 404
    assert response.json() == {"error": "Portfolio not found"}


def test_image_malformed_id_is_404_on_supabase(supabase_client):
    assert supabase_client.get("/api/portfolio-image/abc").status_code == 404


def test_update_read_failure_reports_load_error(supabase_client):
    response = supabase_client.post(f"/api/update-portfolio/{uuid.uuid4()}", json={"portfolioData": {}})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to load portfolio"}
