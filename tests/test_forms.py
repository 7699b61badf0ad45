import pytest

from app.libs.errors import ConfigurationError
from app.search.forms import (
    FULL_FORM,
    SHORT_FORM,
    AdditionalField,
    FormState,
    get_form_config,
)


def test_variants_differ_only_in_configuration():
    assert get_form_config("short") is SHORT_FORM
    assert get_form_config(None) is FULL_FORM
    assert get_form_config("unknown") is FULL_FORM
    assert SHORT_FORM.name == FULL_FORM.name
    assert SHORT_FORM.action_label == "Go"
    assert [f.name for f in SHORT_FORM.fields] == ["keyword"]
    assert [f.name for f in FULL_FORM.fields] == ["keyword", "min_price", "max_price"]


def test_describe_restores_values_and_offers_section_checkbox():
    described = FULL_FORM.describe(
        {"keyword": "mug", "min_price": 5.0}, section_name="Kitchen", section_size=2
    )

    values = {f["name"]: f["value"] for f in described["fields"]}
    assert values["keyword"] == "mug"
    assert values["min_price"] == 5.0
    assert values["max_price"] is None
    assert values["only_in_section"] is True
    assert "Kitchen" in described["fields"][-1]["label"]


def test_describe_without_section_has_no_checkbox():
    described = SHORT_FORM.describe()
    assert [f["name"] for f in described["fields"]] == ["keyword"]


def test_additional_field_is_added_once_per_db_field():
    config = FULL_FORM.with_additional_field(
        AdditionalField("sku", "SKU", "sku", "startswith")
    ).with_additional_field(AdditionalField("sku_code", "SKU code", "sku", "eq"))

    assert [f.name for f in config.additional_fields] == ["sku_code"]
    assert FULL_FORM.additional_fields == ()
    assert "sku_code" in [f["name"] for f in config.describe()["fields"]]


def test_additional_field_rejects_unknown_lookup():
    with pytest.raises(ConfigurationError):
        AdditionalField("sku", "SKU", "sku", "sounds_like")


def test_form_state_round_trip_drops_empty_values():
    store = {}
    state = FormState(store, "ProductSearchForm")

    state.save({"keyword": "mug", "min_price": None, "only_in_section": False})

    assert store == {
        "FormInfo.ProductSearchForm.data": {"keyword": "mug", "only_in_section": False}
    }
    assert state.load() == {"keyword": "mug", "only_in_section": False}

    state.clear()
    assert state.load() == {}


def test_form_state_ignores_garbage():
    store = {"FormInfo.ProductSearchForm.data": "not a dict"}
    assert FormState(store, "ProductSearchForm").load() == {}


def test_form_state_saves_only_listed_fields():
    store = {}
    state = FormState(store, "ProductSearchForm")

    state.save(
        {"keyword": "mug", "min_price": 5.0, "tracking": "abc", "section_id": 3},
        FULL_FORM.state_fields,
    )

    assert state.load() == {"keyword": "mug", "min_price": 5.0, "section_id": 3}


def test_state_fields_include_additional_and_section_fields():
    config = SHORT_FORM.with_additional_field(AdditionalField("sku", "SKU", "sku"))
    assert config.state_fields == ("keyword", "sku", "only_in_section", "section_id")
