from processing.pipeline import (
    ExtractionConfig,
    attach_episode_usage,
    build_location_catalog,
    build_reference_catalog,
    sort_groups,
)
from extraction.models import LocationGroup


def greenlit_episodes():
    return [
        {
            "episodeNumber": 1,
            "episodeTitle": "Pilot",
            "breakdownScenes": [{"sceneNumber": 1, "location": "INT. Greenlit HQ - Loft"}],
        },
        {
            "episodeNumber": 2,
            "episodeTitle": "Launch",
            "breakdownScenes": [{"sceneNumber": 1, "location": "INT. Greenlit HQ"}],
        },
    ]


def test_end_to_end_single_group():
    groups = build_location_catalog(greenlit_episodes())

    assert len(groups) == 1
    group = groups[0]
    assert group.parent_location_name == "Greenlit HQ"
    assert len(group.sub_locations) == 2
    assert {s.name for s in group.sub_locations} == {"Loft", "Greenlit HQ"}
    assert any(s.id.endswith("-main") for s in group.sub_locations)
    assert group.total_episodes == 2
    assert group.total_scenes == 2
    assert [u.episode_title for u in group.episode_usage] == ["Pilot", "Launch"]
    assert group.canonical_reference_name is None
    assert group.confidence == 0.0


def test_references_bind_groups():
    groups = build_location_catalog(greenlit_episodes(), references=[{"name": "Greenlit HQ"}])
    assert groups[0].canonical_reference_name == "Greenlit HQ"
    assert groups[0].confidence == 1.0


def test_unbound_when_reference_too_different():
    groups = build_location_catalog(greenlit_episodes(), references=["Greenlit Headquarters"])
    assert groups[0].canonical_reference_name is None
    assert groups[0].confidence == 0.0


def test_breakdown_precedence_end_to_end():
    episodes = [{
        "episodeNumber": 5,
        "scriptText": "INT. KITCHEN - DAY\nEXT. BACKYARD - NIGHT",
        "breakdownScenes": [{"sceneNumber": 1, "location": "INT. Diner"}],
    }]
    groups = build_location_catalog(episodes)
    assert [g.parent_location_name for g in groups] == ["Diner"]


def test_sorted_by_total_episodes_with_stable_ties():
    episodes = [
        {"episodeNumber": 1, "scriptText": "INT. KITCHEN - DAY\nEXT. PIER - DUSK\nINT. LOFT - DAY"},
        {"episodeNumber": 2, "scriptText": "EXT. PIER - NIGHT"},
        {"episodeNumber": 3, "scriptText": "EXT. PIER - DAY\nINT. LOFT - NIGHT"},
    ]
    groups = build_location_catalog(episodes)
    assert [(g.parent_location_name, g.total_episodes) for g in groups] == [
        ("PIER", 3),
        ("LOFT", 2),
        ("KITCHEN", 1),
    ]


def test_sort_groups_is_stable():
    a = LocationGroup(id="a", parent_location_name="A", total_episodes=1)
    b = LocationGroup(id="b", parent_location_name="B", total_episodes=2)
    c = LocationGroup(id="c", parent_location_name="C", total_episodes=1)
    assert [g.id for g in sort_groups([a, b, c])] == ["b", "a", "c"]


def test_preproduction_mapping_input():
    data = {
        "1": {"scriptBreakdown": {"scenes": [{"sceneNumber": 1, "location": "INT. Greenlit HQ - Loft"}]}},
        "2": {"scriptText": "INT. GREENLIT HQ - DAY"},
    }
    groups = build_location_catalog(data)
    assert len(groups) == 1
    assert groups[0].total_episodes == 2


def test_containment_off_keeps_groups_apart():
    episodes = [{"episodeNumber": 1, "scriptText": "INT. DINER - DAY\nEXT. DINER PARKING LOT - NIGHT"}]
    assert len(build_location_catalog(episodes)) == 1
    assert len(build_location_catalog(episodes, config=ExtractionConfig(containment="off"))) == 2


def test_malformed_corpus_yields_empty_catalog():
    assert build_location_catalog(None) == []
    assert build_location_catalog([{"episodeNumber": 1, "scriptText": None}]) == []


def test_reference_catalog_with_usage():
    episodes = [
        {"episodeNumber": 1, "scriptText": "INT. GREENLIT HQ - DAY\nEXT. ZEPPELIN HANGAR - NIGHT"},
        {"episodeNumber": 2, "scriptText": "EXT. HARBOR DINER - DAY\nINT. GREENLIT HQ - NIGHT"},
    ]
    groups = build_reference_catalog(["Harbor Diner", "Greenlit HQ", "Old Mill"], episodes)

    assert [g.parent_location_name for g in groups] == ["Greenlit HQ", "Harbor Diner", "Old Mill"]
    assert [g.total_episodes for g in groups] == [2, 1, 0]
    assert all(g.confidence == 1.0 for g in groups)
    assert groups[0].time_of_day == ["DAY", "NIGHT"]


def test_reference_catalog_without_episodes():
    groups = build_reference_catalog(["Greenlit HQ"])
    assert len(groups) == 1
    assert groups[0].episode_usage == []


def test_attach_episode_usage_never_adds_groups():
    seeded = build_reference_catalog(["Greenlit HQ"])
    updated = attach_episode_usage(seeded, [{"episodeNumber": 9, "scriptText": "EXT. ZEPPELIN HANGAR - DAY"}])
    assert [g.id for g in updated] == [g.id for g in seeded]
    assert updated[0].total_scenes == 0


def test_hyphenated_time_does_not_create_sub_location():
    groups = build_location_catalog([{"episodeNumber": 1, "scriptText": "EXT. BEACH - DAY\nEXT. BEACH - PRE-DAWN"}])
    assert len(groups) == 1
    assert groups[0].parent_location_name == "BEACH"
    assert [s.name for s in groups[0].sub_locations] == ["BEACH"]
    assert groups[0].time_of_day == ["DAY", "PRE-DAWN"]
