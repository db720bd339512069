import json

import pytest

from review_booster.config import StoreConfig
from review_booster.errors import ClientConflict, ClientNotFound, InvalidPath, StorageIOError
from review_booster.models import ClientDetails
from review_booster.store import ReviewStore


def sample_details(**overrides) -> ClientDetails:
    base = {
        "clientName": "Acme Plumbing",
        "googleReviewLink": "https://g.page/r/acme/review",
        "logoUrl": "https://example.com/logo.png",
        "primaryColor": "#112233",
        "secondaryColor": "#AABBCC",
    }
    base.update(overrides)
    return ClientDetails.model_validate(base)


def make_store(tmp_path, seed=("Good", "Bad")) -> ReviewStore:
    if seed is not None:
        (tmp_path / "sample-reviews.json").write_text(
            json.dumps({"reviews": list(seed)}), encoding="utf-8"
        )
    return ReviewStore(StoreConfig(data_root=tmp_path))


def test_create_seeds_reviews_from_default_file(tmp_path):
    store = make_store(tmp_path)
    created = store.create_client("acme123", sample_details())

    assert created.client_id == "acme123"
    assert created.reviews == ["Good", "Bad"]
    assert store.get_client("acme123").reviews == ["Good", "Bad"]


def test_create_uses_selected_seed_file(tmp_path):
    store = make_store(tmp_path)
    (tmp_path / "cafe.json").write_text(
        json.dumps({"reviews": ["Lovely coffee", "Cosy corner"]}), encoding="utf-8"
    )
    created = store.create_client("cafe42", sample_details(), "cafe.json")
    assert created.reviews == ["Lovely coffee", "Cosy corner"]


def test_create_from_empty_seed_starts_without_reviews(tmp_path):
    store = make_store(tmp_path, seed=("Default",))
    (tmp_path / "blank.json").write_text(json.dumps({"reviews": []}), encoding="utf-8")
    created = store.create_client("acme123", sample_details(), "blank.json")
    assert created.reviews == []
    assert store.get_client("acme123").reviews == []


def test_create_forces_client_id_over_payload(tmp_path):
    store = make_store(tmp_path)
    details = ClientDetails.model_validate(
        {**sample_details().model_dump(by_alias=True), "clientId": "hijack"}
    )
    created = store.create_client("acme123", details)
    assert created.client_id == "acme123"
    assert not (tmp_path / "hijack.json").exists()


def test_create_twice_conflicts_and_keeps_first_document(tmp_path):
    store = make_store(tmp_path)
    store.create_client("acme123", sample_details())
    before = (tmp_path / "acme123.json").read_text(encoding="utf-8")

    with pytest.raises(ClientConflict):
        store.create_client("acme123", sample_details(clientName="Someone Else"))

    assert (tmp_path / "acme123.json").read_text(encoding="utf-8") == before


def test_create_conflicts_with_corrupt_existing_file(tmp_path):
    store = make_store(tmp_path)
    (tmp_path / "acme123.json").write_text("{oops", encoding="utf-8")
    with pytest.raises(ClientConflict):
        store.create_client("acme123", sample_details())
    assert (tmp_path / "acme123.json").read_text(encoding="utf-8") == "{oops"


def test_get_detail_omits_reviews(tmp_path):
    store = make_store(tmp_path)
    store.create_client("acme123", sample_details())

    detail = store.get_client_detail("acme123")
    assert "reviews" not in detail
    assert detail["clientId"] == "acme123"
    assert detail["clientName"] == "Acme Plumbing"
    assert detail["primaryColor"] == "#112233"


def test_get_missing_client_raises_not_found(tmp_path):
    store = make_store(tmp_path)
    with pytest.raises(ClientNotFound):
        store.get_client("ghost99")
    with pytest.raises(ClientNotFound):
        store.get_client_detail("ghost99")


def test_update_never_changes_reviews(tmp_path):
    store = make_store(tmp_path)
    store.create_client("acme123", sample_details())
    store.add_review("acme123", "Came back twice already")
    before = store.list_reviews("acme123")

    updated = store.update_client(
        "acme123", sample_details(clientName="Acme Plumbing & Heating", primaryColor="#000000")
    )

    assert updated.client_name == "Acme Plumbing & Heating"
    assert updated.primary_color == "#000000"
    assert updated.reviews == before
    assert store.list_reviews("acme123") == before


def test_update_ignores_reviews_and_client_id_in_payload(tmp_path):
    store = make_store(tmp_path)
    store.create_client("acme123", sample_details())
    details = ClientDetails.model_validate(
        {
            **sample_details().model_dump(by_alias=True),
            "clientId": "renamed",
            "reviews": ["Injected"],
        }
    )
    updated = store.update_client("acme123", details)
    assert updated.client_id == "acme123"
    assert updated.reviews == ["Good", "Bad"]


def test_update_keeps_logo_when_not_supplied(tmp_path):
    store = make_store(tmp_path)
    store.create_client("acme123", sample_details())
    partial = ClientDetails.model_validate(
        {
            "clientName": "Acme Two",
            "googleReviewLink": "https://g.page/r/acme/review",
            "primaryColor": "#112233",
            "secondaryColor": "#AABBCC",
        }
    )
    updated = store.update_client("acme123", partial)
    assert updated.logo_url == "https://example.com/logo.png"


def test_update_missing_client_raises_not_found(tmp_path):
    store = make_store(tmp_path)
    with pytest.raises(ClientNotFound):
        store.update_client("ghost99", sample_details())
    assert not (tmp_path / "ghost99.json").exists()


def test_delete_removes_document(tmp_path):
    store = make_store(tmp_path)
    store.create_client("acme123", sample_details())
    store.delete_client("acme123")

    assert not (tmp_path / "acme123.json").exists()
    with pytest.raises(ClientNotFound):
        store.get_client("acme123")
    with pytest.raises(ClientNotFound):
        store.delete_client("acme123")


def test_delete_io_failure_is_not_reported_as_not_found(tmp_path, monkeypatch):
    store = make_store(tmp_path)
    store.create_client("acme123", sample_details())

    def fail_unlink(self, missing_ok=False):
        raise PermissionError("read-only")

    monkeypatch.setattr("pathlib.Path.unlink", fail_unlink)
    with pytest.raises(StorageIOError):
        store.delete_client("acme123")


def test_unsafe_client_id_is_invalid_path_not_not_found(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    store = make_store(data)
    with pytest.raises(InvalidPath):
        store.get_client("../../etc/passwd")
    with pytest.raises(InvalidPath):
        store.delete_client("../outside")


def test_list_clients_skips_broken_and_foreign_files(tmp_path):
    store = make_store(tmp_path)
    store.create_client("acme123", sample_details())
    (tmp_path / "broken.json").write_text("{not valid json", encoding="utf-8")
    (tmp_path / "noname.json").write_text(json.dumps({"clientId": "noname"}), encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    summaries = store.list_clients()

    assert [s.model_dump(by_alias=True) for s in summaries] == [
        {"clientId": "acme123", "clientName": "Acme Plumbing"}
    ]


def test_list_data_files_includes_seed_files_only_json(tmp_path):
    store = make_store(tmp_path)
    store.create_client("zeta999", sample_details())
    store.create_client("acme123", sample_details())
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    (tmp_path / "folder.json").mkdir()

    assert store.list_data_files() == ["acme123.json", "sample-reviews.json", "zeta999.json"]


def test_export_bundles_valid_documents(tmp_path):
    store = make_store(tmp_path)
    store.create_client("acme123", sample_details())
    store.create_client("bravo42", sample_details(clientName="Bravo Bakery"))
    (tmp_path / "broken.json").write_text("[", encoding="utf-8")

    bundle = store.export_clients()

    assert sorted(bundle) == ["acme123", "bravo42"]
    assert bundle["bravo42"]["clientName"] == "Bravo Bakery"
    assert bundle["acme123"]["reviews"] == ["Good", "Bad"]


def test_store_creates_missing_data_directory(tmp_path):
    root = tmp_path / "nested" / "data"
    store = ReviewStore(StoreConfig(data_root=root))
    assert root.is_dir()
    assert store.list_data_files() == []
