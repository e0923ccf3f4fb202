from pathlib import Path

import pytest

from jobseeker.profile import Profile, ProfileError, load_profile

PROJECT_PROFILE = Path(__file__).resolve().parent.parent / "config" / "profile.yaml"


def test_load_project_profile():
    profile = load_profile(PROJECT_PROFILE)
    assert "Head of Engineering" in profile.target_titles
    assert "Python" in profile.skills.primary
    assert "PHP" in profile.deal_breakers.excluded_tech
    assert profile.deal_breakers.equity_only is True
    assert profile.search.keywords and profile.search.locations


def test_combined_skills_in_order(profile):
    assert profile.skills.combined[:4] == ("Python", "Kubernetes", "AWS", "Docker")
    assert profile.skills.combined[-1] == "CI/CD"


def test_from_dict_defaults():
    profile = Profile.from_dict({"target_titles": "CTO"})
    assert profile.target_titles == ("CTO",)
    assert profile.skills.combined == ()
    assert profile.deal_breakers.equity_only is True
    assert profile.deal_breakers.excluded_tech == ()


def test_informational_keys_are_not_loaded():
    profile = Profile.from_dict({
        "location_preference": {"remote": 100, "preferred_cities": ["Valencia"]},
        "deal_breakers": {"excluded_tech": ["PHP"], "excluded_types": ["agency"], "min_team_size": 3},
    })
    assert profile.deal_breakers.excluded_tech == ("PHP",)
    assert not hasattr(profile, "location")
    assert not hasattr(profile.deal_breakers, "min_team_size")


def test_missing_file(tmp_path):
    with pytest.raises(ProfileError, match="not found"):
        load_profile(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("skills: [unclosed\n", encoding="utf-8")
    with pytest.raises(ProfileError, match="Invalid YAML"):
        load_profile(path)


def test_not_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ProfileError, match="mapping"):
        load_profile(path)


def test_bad_section_type():
    with pytest.raises(ProfileError):
        Profile.from_dict({"skills": ["Python"]})
