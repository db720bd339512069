import pytest

from review_booster import schema


def sample_document(**overrides):
    base = {
        "clientId": "acme123",
        "clientName": "Acme Plumbing",
        "googleReviewLink": "https://g.page/r/acme/review",
        "logoUrl": "",
        "primaryColor": "#112233",
        "secondaryColor": "#AABBCC",
        "reviews": ["Good", "Bad"],
    }
    base.update(overrides)
    return base


def test_loads_default_schema():
    loaded = schema.load_schema()
    assert loaded.get("title") == "ClientDocument"
    assert "properties" in loaded


def test_validate_accepts_minimal_valid_document():
    payload = sample_document()
    assert schema.validate_client_document(payload) == payload


def test_validate_rejects_missing_reviews():
    payload = sample_document()
    payload.pop("reviews")
    with pytest.raises(ValueError) as excinfo:
        schema.validate_client_document(payload)
    assert "reviews" in str(excinfo.value)


def test_validate_rejects_bad_client_id_and_color():
    with pytest.raises(ValueError) as excinfo:
        schema.validate_client_document(sample_document(clientId="no spaces!"))
    assert "clientId" in str(excinfo.value)
    with pytest.raises(ValueError) as excinfo:
        schema.validate_client_document(sample_document(secondaryColor="#abc"))
    assert "secondaryColor" in str(excinfo.value)


def test_validate_rejects_relative_review_link():
    with pytest.raises(ValueError):
        schema.validate_client_document(sample_document(googleReviewLink="/review/acme"))


def test_seed_schema_requires_string_list():
    assert schema.validate_seed_file({"reviews": ["Nice"]}) == {"reviews": ["Nice"]}
    assert schema.validate_seed_file({"reviews": []}) == {"reviews": []}
    for bad in ({}, {"reviews": "Nice"}, {"reviews": [1, 2]}, ["Nice"]):
        with pytest.raises(ValueError):
            schema.validate_seed_file(bad)


def test_logo_url_is_empty_or_uri():
    assert schema.validate_client_document(sample_document(logoUrl=""))
    assert schema.validate_client_document(
        sample_document(logoUrl="https://example.com/logo.png")
    )
    with pytest.raises(ValueError) as excinfo:
        schema.validate_client_document(sample_document(logoUrl="logo.png"))
    assert "logoUrl" in str(excinfo.value)


def test_review_link_uses_uri_format_check():
    with pytest.raises(ValueError) as excinfo:
        schema.validate_client_document(sample_document(googleReviewLink="not a uri"))
    assert "googleReviewLink" in str(excinfo.value)
