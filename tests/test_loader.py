import json

import pytest
import yaml
from pydantic import ValidationError

from catalog.loader import DataLoadError, load_perks, load_traits
from catalog.models import Trait


def test_load_traits_preserves_order(data_dir):
    traits = load_traits(data_dir / "traits" / "traits.yaml")
    assert isinstance(traits, tuple)
    assert [t.name for t in traits][:3] == ["Brave Heart", "Foxx Runner", "Maxx Guard"]
    assert traits[0].effects[0].scope == "fear"


def test_load_perks_from_json_list(data_dir):
    perks = load_perks(data_dir / "perks.json")
    assert [p.name for p in perks] == ["Sprint Burst", "Self-Care", "Spine Chill"]


def test_records_are_frozen(data_dir):
    trait = load_traits(data_dir / "traits" / "traits.yaml")[0]
    with pytest.raises(ValidationError):
        trait.name = "Renamed"


def test_extra_keys_are_kept(tmp_path):
    path = tmp_path / "traits.yaml"
    path.write_text(yaml.safe_dump({"traits": [{"name": "Odd", "rarity": "rare"}]}), encoding="utf-8")
    trait = load_traits(path)[0]
    assert trait.model_dump()["rarity"] == "rare"
    assert trait.tags == [] and trait.effects == []


def test_missing_file_raises(tmp_path):
    with pytest.raises(DataLoadError, match="not found"):
        load_traits(tmp_path / "nope.yaml")


def test_unparsable_file_raises(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("traits: [unclosed", encoding="utf-8")
    with pytest.raises(DataLoadError):
        load_traits(path)


def test_wrong_shape_raises(tmp_path):
    path = tmp_path / "shape.yaml"
    path.write_text(yaml.safe_dump({"items": []}), encoding="utf-8")
    with pytest.raises(DataLoadError, match="traits"):
        load_traits(path)


def test_invalid_record_raises(tmp_path):
    path = tmp_path / "perks.json"
    path.write_text(json.dumps([{"description": "no name"}]), encoding="utf-8")
    with pytest.raises(DataLoadError, match="invalid Perk"):
        load_perks(path)


def test_duplicate_names_raise(tmp_path):
    path = tmp_path / "dupes.yaml"
    path.write_text(yaml.safe_dump({"traits": [{"name": "Twin"}, {"name": "Twin"}]}), encoding="utf-8")
    with pytest.raises(DataLoadError, match="duplicate"):
        load_traits(path)


def test_trait_model_requires_name():
    with pytest.raises(ValidationError):
        Trait(name="")
