import pytest

from bizpage.editor.errors import ValidationError
from bizpage.editor.paths import NestedGroup, PathResolver
from bizpage.models.business import SOCIAL_PLATFORMS

CURRENT = {
    "name": "Joe's",
    "socials": {"facebook": "https://fb.test/joe", "instagram": "https://ig.test/joe"},
    "operating_hours": {"monday": "9-5"},
}


@pytest.fixture
def resolver():
    return PathResolver()


@pytest.mark.parametrize("field", ["name", "email", "operating_hours", "socials", "foo.bar", "socialsx.facebook"])
def test_non_social_fields_are_flat_assignments(resolver, field):
    assert resolver.resolve(field, "v", CURRENT) == {field: "v"}


@pytest.mark.parametrize("platform", SOCIAL_PLATFORMS)
def test_social_path_keeps_sibling_platforms(resolver, platform):
    patch = resolver.resolve(f"socials.{platform}", "https://new.test", CURRENT)

    assert list(patch) == ["socials"]
    assert patch["socials"][platform] == "https://new.test"
    for key, value in CURRENT["socials"].items():
        if key != platform:
            assert patch["socials"][key] == value


def test_social_path_does_not_mutate_current(resolver):
    before = {"socials": dict(CURRENT["socials"])}
    resolver.resolve("socials.twitter", "https://x.test", before)
    assert before == {"socials": dict(CURRENT["socials"])}


def test_social_path_with_no_existing_socials(resolver):
    assert resolver.resolve("socials.github", "gh", {"socials": None}) == {"socials": {"github": "gh"}}


@pytest.mark.parametrize("field", ["", "   ", "socials.", "socials.myspace", "socials.facebook.extra"])
def test_invalid_paths_fail_fast(resolver, field):
    with pytest.raises(ValidationError):
        resolver.resolve(field, "v", CURRENT)


def test_merge_matches_resolve_rule(resolver):
    patch = resolver.resolve("socials.youtube", "yt", CURRENT)
    merged = resolver.merge(CURRENT, patch)

    assert merged["socials"] == {**CURRENT["socials"], "youtube": "yt"}
    assert merged["name"] == CURRENT["name"]


def test_merge_shallow_merges_partial_group(resolver):
    merged = resolver.merge(CURRENT, {"socials": {"reddit": "r"}})
    assert merged["socials"] == {**CURRENT["socials"], "reddit": "r"}


def test_merge_rejects_unknown_group_keys(resolver):
    with pytest.raises(ValidationError):
        resolver.merge(CURRENT, {"socials": {"myspace": "m"}})


def test_new_groups_are_registry_entries():
    resolver = PathResolver({
        "operating_hours": NestedGroup(keys=frozenset({"monday", "tuesday"})),
        "meta": NestedGroup(children={"seo": NestedGroup()}),
    })

    assert resolver.resolve("operating_hours.tuesday", "10-2", CURRENT) == {
        "operating_hours": {"monday": "9-5", "tuesday": "10-2"}
    }
    assert resolver.resolve("meta.seo.title", "Best bread", {"meta": {"seo": {"keywords": "bread"}}}) == {
        "meta": {"seo": {"keywords": "bread", "title": "Best bread"}}
    }
    with pytest.raises(ValidationError):
        resolver.resolve("operating_hours.funday", "x", CURRENT)
