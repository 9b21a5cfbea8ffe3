from note_lookup.models import CandidateEntry
from note_lookup.ranking import (
    closeness,
    common_prefix_length,
    rank_by_path,
    rank_by_title,
    sort_by_closeness,
    title_key,
    top_level,
)


def _entries(*paths: str, collection: str = "vault") -> list[CandidateEntry]:
    return [CandidateEntry(path=p, title=p.rsplit(".", 1)[-1], collection=collection) for p in paths]


def _paths(entries) -> list[str]:
    return [e.path for e in entries]


def test_common_prefix_length():
    assert common_prefix_length("foo", "foobar") == 3
    assert common_prefix_length("foobar", "foo") == 3
    assert common_prefix_length("foo", "zfoo") == 0
    assert common_prefix_length("", "foo") == 0
    assert common_prefix_length("fox", "foo") == 2


def test_closeness_prefers_prefix_over_distance():
    # "fo.zzzzz" shares a longer prefix but is further away by edits
    assert closeness("fox", "fo.zzzzz") < closeness("fox", "xfox")


def test_prefix_matches_precede_substring_matches():
    ranked = rank_by_path(_entries("foobar", "zfoo", "fooz"), "foo")
    assert _paths(ranked) == ["fooz", "foobar", "zfoo"]


def test_prefix_partition_wins_regardless_of_distance():
    ranked = rank_by_path(_entries("xfoo", "foo.a.very.long.hierarchy.path"), "foo")
    assert _paths(ranked) == ["foo.a.very.long.hierarchy.path", "xfoo"]


def test_non_matching_entries_are_dropped():
    ranked = rank_by_path(_entries("alpha", "beta", "gamma"), "et")
    assert _paths(ranked) == ["beta"]


def test_path_matching_is_case_insensitive():
    ranked = rank_by_path(_entries("Projects.Alpha", "archive"), "projects")
    assert _paths(ranked) == ["Projects.Alpha"]


def test_ties_keep_input_order():
    ranked = rank_by_path(_entries("foo.b", "foo.a", "foo.c"), "foo")
    assert _paths(ranked) == ["foo.b", "foo.a", "foo.c"]


def test_entries_beyond_threshold_tie_and_keep_order():
    far = _entries("a" + "x" * 30, "a" + "y" * 20, "a" + "z" * 25)
    assert _paths(sort_by_closeness(far, "a")) == _paths(far)


def test_duplicates_across_collections_are_kept():
    entries = _entries("daily", collection="one") + _entries("daily", collection="two")
    ranked = rank_by_path(entries, "dai")
    assert [e.collection for e in ranked] == ["one", "two"]


def test_title_ranking_ignores_paths():
    entries = [
        CandidateEntry(path="proj.notes", title="Meeting notes", collection="v"),
        CandidateEntry(path="misc", title="Side project", collection="v"),
        CandidateEntry(path="work", title="Project plan", collection="v"),
    ]
    ranked = rank_by_title(entries, "proj")
    assert [e.title for e in ranked] == ["Project plan", "Side project"]


def test_title_key_lowercases():
    assert title_key(CandidateEntry(path="x", title="Hello World", collection="v")) == "hello world"


def test_top_level_keeps_original_order():
    entries = _entries("zeta", "alpha.child", "alpha", "root")
    assert _paths(top_level(entries)) == ["zeta", "alpha", "root"]
