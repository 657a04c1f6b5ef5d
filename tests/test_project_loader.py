import json

import pytest

from sources.project_loader import load_project, project_id_from_path, read_project_file


def test_load_project_with_story_bible():
    project = load_project({
        "projectId": "greenlit",
        "title": "Greenlit",
        "storyBible": {"worldBuilding": {"locations": ["Greenlit HQ", {"name": "Pier"}]}},
        "episodes": [{"episodeNumber": 1, "scriptText": "INT. GREENLIT HQ - DAY"}],
    })
    assert project.project_id == "greenlit"
    assert project.title == "Greenlit"
    assert [ep.episode_number for ep in project.episodes] == [1]
    assert project.references == ["Greenlit HQ", {"name": "Pier"}]
    assert project.location_groups == []


def test_explicit_references_override_story_bible():
    project = load_project({
        "references": ["Old Mill"],
        "storyBible": {"worldBuilding": {"locations": ["Greenlit HQ"]}},
    }, fallback_id="fallback")
    assert project.project_id == "fallback"
    assert project.references == ["Old Mill"]


def test_preproduction_fallback():
    project = load_project({"episodePreProduction": {"3": {"scriptText": "EXT. PIER - DAY"}}})
    assert [ep.episode_number for ep in project.episodes] == [3]


def test_bare_episode_list():
    project = load_project([{"episodeNumber": 2}], fallback_id="show")
    assert project.project_id == "show"
    assert [ep.episode_number for ep in project.episodes] == [2]


def test_invalid_top_level():
    with pytest.raises(ValueError):
        load_project("not a project")


def test_read_project_file(tmp_path):
    path = tmp_path / "harbor.json"
    path.write_text(json.dumps({"episodes": [{"episodeNumber": 1}]}), encoding="utf-8")
    project = read_project_file(str(path))
    assert project.project_id == "harbor"


def test_project_id_from_path():
    assert project_id_from_path("/data/show.json") == "show"
    assert project_id_from_path("https://host/projects/show.json") == "show"
