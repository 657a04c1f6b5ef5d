from extraction.models import LocationGroup, LocationMention
from processing.attacher import attach_mentions
from processing.matcher import seed_groups_from_references


def mention(name, episode=1, scene=1, time_of_day=None):
    return LocationMention(
        name=name,
        full_name=name,
        type="interior",
        episode_number=episode,
        scene_number=scene,
        time_of_day=time_of_day,
    )


def seeded():
    return seed_groups_from_references(["Greenlit HQ", "Harbor Diner"])


def test_attaches_to_best_match():
    groups = attach_mentions(seeded(), [mention("GREENLIT HQ", episode=2, scene=4, time_of_day="NIGHT")], {2: "Second"})

    hq = groups[0]
    main = hq.sub_locations[0]
    assert [(r.episode_number, r.scene_number) for r in main.scene_references] == [(2, 4)]
    assert main.total_scenes == 1
    assert len(hq.episode_usage) == 1
    assert hq.episode_usage[0].episode_title == "Second"
    assert hq.episode_usage[0].scene_numbers == [4]
    assert hq.episode_usage[0].sub_location_ids == [main.id]
    assert hq.total_scenes == 1
    assert hq.total_episodes == 1
    assert hq.episodes_used == [2]
    assert hq.first_used_episode == hq.last_used_episode == 2
    assert hq.time_of_day == ["NIGHT"]
    assert hq.confidence == 1.0

    assert groups[1].total_episodes == 0


def test_near_match_above_lower_threshold():
    groups = attach_mentions(seeded(), [mention("Greenlit HQ Loft", episode=1, scene=2)])
    assert groups[0].total_scenes == 1


def test_below_threshold_never_creates_groups():
    original = seeded()
    groups = attach_mentions(original, [mention("Zeppelin Hangar", episode=3, scene=1)])

    assert [g.id for g in groups] == [g.id for g in original]
    assert all(g.total_scenes == 0 for g in groups)
    assert all(g.episode_usage == [] for g in groups)


def test_input_groups_are_not_mutated():
    original = seeded()
    attach_mentions(original, [mention("Greenlit HQ", episode=1, scene=1)])
    assert original[0].episode_usage == []
    assert original[0].sub_locations[0].scene_references == []


def test_repeated_scenes_are_counted_once():
    groups = attach_mentions(seeded(), [
        mention("Greenlit HQ", episode=1, scene=1),
        mention("Greenlit HQ", episode=1, scene=1),
        mention("Greenlit HQ", episode=1, scene=2),
        mention("Greenlit HQ", episode=3, scene=1),
    ])
    hq = groups[0]
    assert hq.sub_locations[0].total_scenes == 3
    assert [u.episode_number for u in hq.episode_usage] == [1, 3]
    assert hq.episode_usage[0].scene_numbers == [1, 2]
    assert hq.total_scenes == 3
    assert hq.total_episodes == 2
    assert hq.scenes_used == [1, 2]


def test_group_without_sub_locations_gets_main():
    bare = LocationGroup(id="locgroup-bare", parent_location_name="Pier", confidence=1.0)
    groups = attach_mentions([bare], [mention("Pier", episode=1, scene=5)])
    assert groups[0].sub_locations[0].id == "locgroup-bare-main"
    assert groups[0].total_scenes == 1


def test_existing_time_of_day_is_kept():
    first = attach_mentions(seeded(), [mention("Greenlit HQ", episode=1, scene=1, time_of_day="DAY")])
    second = attach_mentions(first, [mention("Greenlit HQ", episode=2, scene=1, time_of_day="NIGHT")])
    assert second[0].time_of_day == ["DAY", "NIGHT"]
    assert second[0].episodes_used == [1, 2]


def test_empty_inputs():
    assert attach_mentions([], [mention("Greenlit HQ")]) == []
    groups = attach_mentions(seeded(), [])
    assert [g.parent_location_name for g in groups] == ["Greenlit HQ", "Harbor Diner"]
