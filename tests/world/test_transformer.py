"""Tests for WorldTreeTransformer -- region/map traversal into layers."""

import copy

import pytest

from gw2map.dataset import parse_dataset
from gw2map.world import InvalidResponseShape, Overrides, WorldTreeTransformer, localize


def _names(store, layer):
    return [f.properties["name"] for f in store.get(layer)]


@pytest.fixture
def transformer(dataset, objectives_table, extra_layers_table):
    return WorldTreeTransformer(
        dataset,
        objectives=objectives_table,
        extra_layers=extra_layers_table,
    )


@pytest.mark.unit
class TestLocalize:
    def test_plain_string(self):
        assert localize("Lion's Arch", "de") == "Lion's Arch"

    def test_mapping_picks_language(self):
        assert localize({"en": "Keep", "de": "Feste"}, "de") == "Feste"

    def test_missing_language_is_empty(self):
        assert localize({"en": "Keep"}, "fr") == ""

    def test_none_is_empty(self):
        assert localize(None, "en") == ""


@pytest.mark.unit
class TestRootShapes:
    def test_single_region(self, transformer, region_response):
        store = transformer.transform(region_response)
        assert store.get("region_label").features[0].feature_id == 7
        assert sorted(store.map_rects) == [38, 899, 922]

    def test_regions_container(self, transformer, region_response):
        store = transformer.transform({"7": region_response})
        assert len(store.get("region_label")) == 1
        assert len(store.get("map_label").features) >= 3

    def test_single_map(self, transformer, region_response):
        store = transformer.transform(region_response["maps"]["38"])
        assert "region_label" not in store
        assert [f.feature_id for f in store.get("sector_label")] == [833, 850]

    @pytest.mark.parametrize("root", [None, [], {}, "maps", {"foo": "bar"}, {"7": {"id": 7}}])
    def test_unrecognized_root_raises(self, transformer, root):
        with pytest.raises(InvalidResponseShape):
            transformer.transform(root)

    def test_bad_record_raises(self, transformer, region_response):
        del region_response["maps"]["38"]["continent_rect"]
        with pytest.raises(InvalidResponseShape):
            transformer.transform(region_response)

    def test_invalid_shape_is_value_error(self, transformer):
        with pytest.raises(ValueError):
            transformer.transform({"foo": 1})


@pytest.mark.unit
class TestMapLabels:
    def test_label_coordinate(self, transformer, region_response):
        store = transformer.transform(region_response)
        label = store.find("map_label", 38)
        assert label.coordinates == [10494, 14334]
        assert label.properties["min_level"] == 80
        assert label.properties["type"] == "map"
        assert label.properties["layertype"] == "label"
        assert label.properties["mapID"] == 38

    def test_obsidian_sanctum_override(self, transformer, region_response):
        store = transformer.transform(region_response)
        assert store.find("map_label", 899).coordinates == [11500, 13400]

    def test_zero_label_falls_back_to_center(self, transformer, region_response):
        store = transformer.transform(region_response)
        assert store.find("map_label", 922).coordinates == [2000.0, 3000.0]

    @pytest.mark.parametrize("label", [[0, 3500], [2500, 0], None])
    def test_partial_or_missing_label_falls_back_to_center(self, transformer, region_response, label):
        if label is None:
            del region_response["maps"]["922"]["label_coord"]
        else:
            region_response["maps"]["922"]["label_coord"] = label
        store = transformer.transform(region_response)
        assert store.find("map_label", 922).coordinates == [2000.0, 3000.0]

    def test_injected_label_override(self, dataset, region_response):
        overrides = Overrides.from_tables(map_label_coords={"38": [1, 2]})
        store = WorldTreeTransformer(dataset, overrides=overrides).transform(region_response)
        assert store.find("map_label", 38).coordinates == [1, 2]
        # built-in correction survives a supplied table
        assert store.find("map_label", 899).coordinates == [11500, 13400]

    def test_no_region_label_without_coordinate(self, transformer, region_response):
        del region_response["label_coord"]
        store = transformer.transform(region_response)
        assert "region_label" not in store


@pytest.mark.unit
class TestSectors:
    def test_label_and_polygon_share_id(self, transformer, region_response):
        store = transformer.transform(region_response)
        label = store.find("sector_label", 833)
        poly = store.find("sector_poly", 833)
        assert label.geometry_type == "Point"
        assert label.coordinates == [10500, 14300]
        assert label.properties["chat_link"] == "[&BEEDAAA=]"
        assert label.properties["level"] == 80
        assert poly.geometry_type == "Polygon"
        assert poly.coordinates == [[[10400, 14200], [10600, 14200], [10600, 14400], [10400, 14400]]]
        assert poly.properties["layertype"] == "poly"

    def test_name_override(self, dataset, region_response):
        overrides = Overrides.from_tables(sector_names={"833": {"en": "Stonemist Castle (WvW)"}})
        store = WorldTreeTransformer(dataset, overrides=overrides).transform(region_response)
        assert store.find("sector_label", 833).properties["name"] == "Stonemist Castle (WvW)"
        assert store.find("sector_poly", 833).properties["name"] == "Stonemist Castle (WvW)"
        assert store.find("sector_label", 850).properties["name"] == "Overlook"

    def test_override_for_other_language_ignored(self, dataset, region_response):
        overrides = Overrides.from_tables(sector_names={"833": {"de": "Schloss"}})
        store = WorldTreeTransformer(dataset, overrides=overrides).transform(region_response)
        assert store.find("sector_label", 833).properties["name"] == "Stonemist Castle"


@pytest.mark.unit
class TestPointsOfInterest:
    def test_layer_per_type(self, transformer, region_response):
        store = transformer.transform(region_response)
        assert _names(store, "waypoint_icon") == ["Stonemist Waypoint"]
        assert [f.feature_id for f in store.get("vista_icon")] == [3]

    def test_chat_link_false_sentinel(self, transformer, region_response):
        store = transformer.transform(region_response)
        assert store.find("waypoint_icon", 1).properties["chat_link"] == "[&BAEAAAA=]"
        assert store.find("vista_icon", 3).properties["chat_link"] is False

    def test_name_falls_back_to_id(self, transformer, region_response):
        region_response["maps"]["38"]["points_of_interest"]["7"] = {
            "id": "poi-7", "type": "landmark", "coord": [1, 1],
        }
        store = transformer.transform(region_response)
        assert store.find("landmark_icon", 2).properties["name"] == "2"
        assert store.find("landmark_icon", "poi-7").properties["name"] == "poi-7"

    def test_no_name_no_id_is_empty(self, transformer, region_response):
        region_response["maps"]["38"]["points_of_interest"] = [
            {"type": "landmark", "coord": [1, 1]},
        ]
        store = transformer.transform(region_response)
        assert _names(store, "landmark_icon") == [""]

    def test_pois_without_ids_are_all_kept(self, transformer, region_response):
        region_response["maps"]["38"]["points_of_interest"] = [
            {"type": "landmark", "name": "North", "coord": [1, 1]},
            {"type": "landmark", "name": "South", "coord": [2, 2]},
        ]
        store = transformer.transform(region_response)
        assert _names(store, "landmark_icon") == ["North", "South"]
        assert [f.coordinates for f in store.get("landmark_icon")] == [[1, 1], [2, 2]]

    def test_override_wins(self, dataset, region_response):
        overrides = Overrides.from_tables(poi_names={"vista": {"3": {"en": "Stonemist Vista"}}})
        store = WorldTreeTransformer(dataset, overrides=overrides).transform(region_response)
        assert _names(store, "vista_icon") == ["Stonemist Vista"]


@pytest.mark.unit
class TestHeroPoints:
    def test_name_from_override_only(self, dataset, region_response):
        overrides = Overrides.from_tables(heropoint_names={"0-1": {"en": "Obsidian Sanctum Challenge"}})
        store = WorldTreeTransformer(dataset, overrides=overrides).transform(region_response)
        hp = store.find("heropoint_icon", "0-1")
        assert hp.properties["name"] == "Obsidian Sanctum Challenge"
        assert hp.properties["mapID"] == 899

    def test_no_override_is_empty(self, dataset, region_response):
        region_response["maps"]["899"]["skill_challenges"][0]["name"] = "ignored"
        store = WorldTreeTransformer(dataset).transform(region_response)
        assert _names(store, "heropoint_icon") == [""]

    def test_empty_list_emits_nothing(self, dataset, region_response):
        region_response["maps"]["899"]["skill_challenges"] = []
        store = WorldTreeTransformer(dataset).transform(region_response)
        assert "heropoint_icon" not in store


@pytest.mark.unit
class TestObjectives:
    def test_objective_icons(self, transformer, region_response):
        store = transformer.transform(region_response)
        assert [f.feature_id for f in store.get("objective_icon")] == ["38-6", "38-9", "38-3"]
        keep = store.find("objective_icon", "38-6")
        assert keep.properties["type"] == "keep"
        assert keep.properties["sector"] == 833
        assert keep.properties["name"] == "Speldan Clearcut"

    def test_localized_objective_name(self, options, objectives_table, region_response):
        ds = parse_dataset({"language": "de"}, options)
        store = WorldTreeTransformer(ds, objectives=objectives_table).transform(region_response)
        assert store.find("objective_icon", "38-9").properties["name"] == "Schloss Steinnebel"
        # no German name for the spawn
        assert store.find("map_label", "38-15").properties["name"] == ""

    def test_spawn_becomes_shifted_map_label(self, transformer, region_response):
        store = transformer.transform(region_response)
        assert store.find("objective_icon", "38-15") is None
        spawn = store.find("map_label", "38-15")
        assert spawn.coordinates == [10700, 13460]
        assert spawn.properties["type"] == "spawn"
        assert spawn.properties["layertype"] == "label"

    def test_spawn_shift_does_not_mutate_source(self, dataset, objectives_table, region_response):
        before = copy.deepcopy(objectives_table)
        t = WorldTreeTransformer(dataset, objectives=objectives_table)
        first = t.transform(region_response)
        second = t.transform(region_response)
        assert objectives_table == before
        assert t.objectives[38][3].label_coord == [10700, 13500]
        assert second.find("map_label", "38-15").coordinates == first.find("map_label", "38-15").coordinates

    def test_excluded_map(self, dataset, objectives_table, region_response):
        t = WorldTreeTransformer(dataset, objectives=objectives_table, excluded_objective_maps=[38])
        store = t.transform(region_response)
        assert "objective_icon" not in store
        assert store.find("map_label", "38-15") is None

    def test_bad_table_raises(self, dataset):
        with pytest.raises(ValueError):
            WorldTreeTransformer(dataset, objectives={"38": [{"id": "38-1"}]})


@pytest.mark.unit
class TestExtraLayers:
    def test_all_layers_when_none_selected(self, transformer, region_response):
        store = transformer.transform(region_response)
        assert [f.feature_id for f in store.get("jumpingpuzzle_icon")] == ["jp-1", "jp-2"]

    def test_unselected_layer_is_skipped(self, options, extra_layers_table, region_response):
        ds = parse_dataset({"extraLayers": "mastery_icon"}, options)
        t = WorldTreeTransformer(ds, extra_layers=extra_layers_table, extra_markers=[])
        store = t.transform(region_response)
        assert "jumpingpuzzle_icon" not in store

    def test_extra_markers_merge_into_selection(self, options, extra_layers_table):
        ds = parse_dataset({"extraLayers": "mastery_icon"}, options)
        t = WorldTreeTransformer(ds, extra_layers=extra_layers_table, extra_markers=["jumpingpuzzle_icon"])
        assert t.selected_layers == ["jumpingpuzzle_icon", "mastery_icon"]

    def test_entry_inherits_layer_defaults(self, transformer, region_response):
        store = transformer.transform(region_response)
        jp = store.find("jumpingpuzzle_icon", "jp-1")
        assert jp.geometry_type == "Point"
        assert jp.properties["color"] == "#ff0000"
        assert jp.properties["className"] == "jp"
        assert jp.properties["type"] == "jumpingpuzzle"
        assert jp.properties["layertype"] == "icon"
        assert jp.properties["name"] == "Obsidian Sanctum"

    def test_entry_value_wins(self, transformer, region_response):
        store = transformer.transform(region_response)
        path = store.find("jumpingpuzzle_icon", "jp-2")
        assert path.properties["color"] == "#00ff00"
        assert path.geometry_type == "LineString"

    def test_ant_path_group_only_when_enabled(self, transformer, region_response):
        store = transformer.transform(region_response)
        plain = store.find("jumpingpuzzle_icon", "jp-1").properties
        path = store.find("jumpingpuzzle_icon", "jp-2").properties
        assert not {"antPath", "antColor", "antOpacity", "antDashArray"} & set(plain)
        assert path["antPath"] is True
        assert path["antColor"] == "#ffffff"
        assert "antOpacity" in path

    def test_layer_level_ant_path(self, dataset, extra_layers_table, region_response):
        extra_layers_table["layer_jumpingpuzzle_icon"]["antPath"] = True
        extra_layers_table["layer_jumpingpuzzle_icon"]["antDashArray"] = "10,20"
        store = WorldTreeTransformer(dataset, extra_layers=extra_layers_table).transform(region_response)
        assert store.find("jumpingpuzzle_icon", "jp-1").properties["antDashArray"] == "10,20"


@pytest.mark.unit
class TestDeterminism:
    def test_same_input_same_output(self, transformer, region_response):
        first = transformer.transform(region_response).to_geojson()
        second = transformer.transform(region_response).to_geojson()
        assert first == second

    def test_each_transform_uses_a_fresh_store(self, transformer, region_response):
        first = transformer.transform(region_response)
        second = transformer.transform(region_response)
        assert first is not second
        assert len(first.get("sector_label")) == len(second.get("sector_label")) == 2

    def test_layer_order(self, transformer, region_response):
        keys = transformer.transform(region_response).keys()
        assert keys == [
            "objective_icon",
            "landmark_icon",
            "waypoint_icon",
            "heropoint_icon",
            "vista_icon",
            "jumpingpuzzle_icon",
            "region_label",
            "map_label",
            "sector_label",
            "sector_poly",
        ]
