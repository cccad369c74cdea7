import pytest

from traitsearch.errors import MissingParameterError, UnknownFieldError, ValidationError
from traitsearch.factory import build_trait_service, load_runtime_config


@pytest.fixture()
def traits(services):
    return services.traits["traits"]


def result_names(payload):
    return [r.name for r in payload["results"]]


def test_global_query_finds_record(traits):
    payload = traits.search_service({"q": "brave"})
    assert payload["total"] >= 1
    assert result_names(payload)[0] == "Brave Heart"


def test_field_search_is_scoped_to_requested_fields(traits):
    # "courage" is a tag of Brave Heart, not part of any name
    assert traits.search_service({"name": "courage"})["total"] == 0
    assert result_names(traits.search_service({"tags": "courage"})) == ["Brave Heart"]


def test_field_results_precede_global_results(traits):
    payload = traits.search_service({"name": "shadow", "q": "iron"})
    names = result_names(payload)
    assert names[0] == "Shadow Step"
    assert "Iron Skin" in names
    assert len(names) == len(set(names))


def test_duplicates_are_removed(traits):
    payload = traits.search_service({"name": "brave", "tags": "courage", "q": "brave heart"})
    names = result_names(payload)
    assert names.count("Brave Heart") == 1


def test_limit_and_total(traits):
    payload = traits.search_service({"name": "xx", "limit": "1"})
    assert payload["returned"] == 1
    assert payload["total"] >= 2


def test_params_echo_is_sanitized(traits):
    payload = traits.search_service({"q": "brave!"})
    assert payload["params"] == {"q": "brave"}


def test_sanitized_to_empty_counts_as_missing(traits):
    with pytest.raises(MissingParameterError):
        traits.search_service({"q": "!!!"})


def test_short_parameter_rejected(traits):
    with pytest.raises(ValidationError, match="tags"):
        traits.search_service({"tags": "a"})


def test_underscore_params_are_ignored(traits):
    payload = traits.search_service({"q": "brave", "_": "123"})
    assert result_names(payload)[0] == "Brave Heart"
    assert payload["params"] == {"q": "brave"}


def test_unknown_field_rejected(traits):
    with pytest.raises(UnknownFieldError):
        traits.search_service({"q": "brave", "rarity": "rare"})


def test_scoped_index_rejects_unweighted_field(traits):
    with pytest.raises(UnknownFieldError):
        traits.scoped_index(["rarity"])


def test_scoped_index_reuses_default_for_full_field_set(traits):
    assert traits.scoped_index(["effects", "tags", "name", "description"]) is traits.default_index
    assert traits.scoped_index(["name"]) is not traits.default_index
    assert traits.scoped_index(["name"]).key_names == ("name",)


def test_results_are_deterministic(traits):
    query = {"q": "defense", "name": "iron"}
    first = result_names(traits.search_service(query))
    second = result_names(traits.search_service(query))
    assert first == second


@pytest.mark.parametrize("query", [{"q": "trait"}, {"q": "trait", "limit": "3"}, {"q": "trait", "limit": "999"}])
def test_returned_never_exceeds_total_or_cap(services, query):
    payload = services.traits["many"].search_service(query)
    assert payload["returned"] <= payload["total"]
    assert payload["returned"] <= 20


def test_lenient_endpoint_skips_length_checks(services):
    payload = services.traits["zoldy"].search_service({"q": "^thunder"})
    assert [r.name for r in payload["results"]] == ["Thunderbolt"]
    assert payload["params"] == {"q": "^thunder"}


def test_build_trait_service_unknown_endpoint(runtime_cfg, data_dir):
    cfg = load_runtime_config(runtime_cfg)
    with pytest.raises(ValueError, match="Unknown endpoint"):
        build_trait_service(cfg, "nope", data_dir=data_dir)


def test_perk_search(services):
    assert [p.name for p in services.perks.search("heal")] == ["Self-Care"]
    with pytest.raises(MissingParameterError):
        services.perks.search(None)


def test_reject_endpoint_has_no_upper_limit(services):
    payload = services.traits["many-strict"].search_service({"q": "trait", "limit": "25"})
    assert payload["total"] == 25
    assert payload["returned"] == 25
