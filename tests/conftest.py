"""Shared fixtures: a small synthetic WvW region and its static tables."""

from __future__ import annotations

import copy

import pytest

from gw2map.config import Settings
from gw2map.dataset import parse_dataset

_REGION = {
    "id": 7,
    "name": "World vs. World",
    "label_coord": [10240, 12288],
    "maps": {
        "38": {
            "id": 38,
            "name": "Eternal Battlegrounds",
            "min_level": 80,
            "max_level": 80,
            "continent_rect": [[8958, 12798], [12030, 15870]],
            "map_rect": [[-36864, -36864], [36864, 36864]],
            "label_coord": [10494, 14334],
            "sectors": {
                "833": {
                    "id": 833,
                    "name": "Stonemist Castle",
                    "level": 80,
                    "chat_link": "[&BEEDAAA=]",
                    "coord": [10500, 14300],
                    "bounds": [[10400, 14200], [10600, 14200], [10600, 14400], [10400, 14400]],
                },
                "850": {
                    "id": 850,
                    "name": "Overlook",
                    "level": 80,
                    "chat_link": "[&BFIDAAA=]",
                    "coord": [10700, 13500],
                    "bounds": [[10600, 13400], [10800, 13400], [10800, 13600], [10600, 13600]],
                },
            },
            "points_of_interest": {
                "1": {
                    "id": 1,
                    "type": "waypoint",
                    "name": "Stonemist Waypoint",
                    "chat_link": "[&BAEAAAA=]",
                    "coord": [10510, 14310],
                },
                "2": {"id": 2, "type": "landmark", "name": "", "coord": [10520, 14320]},
                "3": {"id": 3, "type": "vista", "name": "Vista", "coord": [10530, 14330]},
            },
            "skill_challenges": [],
        },
        "899": {
            "id": 899,
            "name": "Obsidian Sanctum",
            "min_level": 80,
            "max_level": 80,
            "continent_rect": [[11264, 13312], [11776, 13824]],
            "map_rect": [[-3072, -3072], [3072, 3072]],
            "label_coord": [11400, 13500],
            "sectors": {},
            "points_of_interest": {},
            "skill_challenges": [{"id": "0-1", "coord": [11600, 13600]}],
        },
        "922": {
            "id": 922,
            "name": "Labyrinthine Cliffs",
            "min_level": 80,
            "max_level": 80,
            "continent_rect": [[1000, 2000], [3000, 4000]],
            "map_rect": [[-1000, -1000], [1000, 1000]],
            "label_coord": [0, 0],
            "sectors": {},
            "points_of_interest": {},
            "skill_challenges": [],
        },
    },
}

_OBJECTIVES = {
    "objectives": {
        "38": [
            {
                "id": "38-6",
                "type": "Keep",
                "name": {"en": "Speldan Clearcut", "de": "Speldan-Kahlschlag"},
                "sector_id": 833,
                "chat_link": "[&DAYAAAAmAAAA]",
                "coord": [10600, 14400],
            },
            {
                "id": "38-9",
                "type": "castle",
                "name": {"en": "Stonemist Castle", "de": "Schloss Steinnebel"},
                "sector_id": 833,
                "chat_link": "[&DAkAAAAmAAAA]",
                "coord": [10500, 14300],
            },
            {
                "id": "38-3",
                "type": "camp",
                "name": {"en": "Danelon Passage", "de": "Danelon-Passage"},
                "sector_id": 850,
                "chat_link": "[&DAMAAAAmAAAA]",
                "coord": [10750, 13550],
            },
            {
                "id": "38-15",
                "type": "spawn",
                "name": {"en": "Overlook Spawn"},
                "sector_id": 850,
                "label_coord": [10700, 13500],
            },
        ],
    },
}

_EXTRA_LAYERS = {
    "layer_jumpingpuzzle_icon": {
        "type": "jumpingpuzzle",
        "layertype": "icon",
        "className": "jp",
        "color": "#ff0000",
        "data": {
            "38": [
                {"id": "jp-1", "name": {"en": "Obsidian Sanctum", "de": "Obsidian-Refugium"},
                 "coord": [10800, 14000]},
                {"id": "jp-2", "name": "Shortcut", "color": "#00ff00", "featureType": "LineString",
                 "antPath": True, "antColor": "#ffffff", "coord": [[10800, 14000], [10900, 14100]]},
            ],
        },
    },
}


@pytest.fixture
def region_response():
    return copy.deepcopy(_REGION)


@pytest.fixture
def objectives_table():
    return copy.deepcopy(_OBJECTIVES)


@pytest.fixture
def extra_layers_table():
    return copy.deepcopy(_EXTRA_LAYERS)


@pytest.fixture
def options():
    return Settings(_env_file=None)


@pytest.fixture
def dataset(options):
    return parse_dataset({}, options)
