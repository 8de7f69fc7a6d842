"""Tests for value tree flattening, aggregation and top path selection."""

from __future__ import annotations

from conftest import PLEX_VALUES
from kubesearch.core.value_index import (
    aggregate_values,
    collect_paths,
    count_paths,
    flatten,
    path_index,
    top_paths,
)
from kubesearch.models.deployment import RepoEntry
from kubesearch.models.weights import AuthorWeights


def _entry(url: str, repo: str = "user/repo", stars: int = 10) -> RepoEntry:
    return RepoEntry(
        name="plex",
        repo=repo,
        helm_repo_name="repo",
        helm_repo_url="oci://ghcr.io/test/helm/",
        url=url,
        repo_url=f"https://github.com/{repo}",
        stars=stars,
    )


def test_flatten_nested_tree() -> None:
    flat = flatten(PLEX_VALUES, "testuser/cluster", "https://github.com/testuser/cluster", 150)

    assert "persistence.config.enabled" in flat
    assert "service.main.ports.http.port" in flat
    assert "persistence" not in flat
    leaf = flat["persistence.config.enabled"]
    assert leaf.types == ["boolean"]
    assert leaf.values[0].value is True
    assert leaf.values[0].repo == "testuser/cluster"
    assert leaf.values[0].stars == 150


def test_flatten_classifies_leaf_types() -> None:
    flat = flatten({"s": "x", "n": 1.5, "i": 3, "b": False, "z": None, "a": [1, {"x": 1}]})

    assert {p: agg.types for p, agg in flat.items()} == {
        "s": ["string"],
        "n": ["number"],
        "i": ["number"],
        "b": ["boolean"],
        "z": ["null"],
        "a": ["array"],
    }
    # arrays are opaque
    assert "a.x" not in flat
    assert flat["a"].values[0].value == [1, {"x": 1}]


def test_flatten_empty_objects_produce_no_paths() -> None:
    assert flatten({"a": {}}) == {}


def test_flatten_guards_non_object_input() -> None:
    assert flatten(None) == {}
    assert flatten([1, 2]) == {}
    assert flatten("text") == {}


def test_flatten_merges_colliding_paths() -> None:
    flat = flatten({"a.b": 1, "a": {"b": "two"}})

    agg = flat["a.b"]
    assert [o.value for o in agg.values] == [1, "two"]
    assert agg.types == ["number", "string"]


def test_flatten_is_idempotent_on_its_own_output() -> None:
    flat = flatten(PLEX_VALUES)
    reflattened = flatten({path: agg.values[0].value for path, agg in flat.items()})
    assert list(reflattened) == list(flat)


def test_collect_paths_matches_flatten_keys() -> None:
    assert list(collect_paths(PLEX_VALUES)) == list(flatten(PLEX_VALUES))


def test_aggregate_values_unions_trees_in_entry_order() -> None:
    entries = [_entry("u1", "a/one", 5), _entry("u2", "b/two", 50), _entry("u3", "c/three", 1)]
    values = {
        "u1": {"replicas": 1, "image": {"tag": "v1"}},
        "u2": {"replicas": 2},
    }
    agg = aggregate_values(entries, values)

    assert list(agg) == ["replicas", "image.tag"]
    assert [o.repo for o in agg["replicas"].values] == ["a/one", "b/two"]
    assert agg["replicas"].count == 2


def test_top_paths_orders_paths_by_count_with_stable_ties() -> None:
    entries = [_entry("u1"), _entry("u2")]
    values = {
        "u1": {"z": 1, "a": 1, "common": True},
        "u2": {"m": 2, "common": False},
    }
    result = top_paths(aggregate_values(entries, values))

    assert [p.path for p in result] == ["common", "z", "a", "m"]
    assert result[0].count == 2


def test_top_paths_ranks_values_by_repo_score() -> None:
    entries = [
        _entry("u1", "low/repo", 5),
        _entry("u2", "high/repo", 100),
        _entry("u3", "bjw-s/home-ops", 80),
        _entry("u4", "tie/repo", 5),
    ]
    values = {u: {"replicas": i} for i, u in enumerate(["u1", "u2", "u3", "u4"])}
    weights = AuthorWeights.from_mapping({"bjw-s": 1.5})

    result = top_paths(aggregate_values(entries, values), author_weights=weights)

    ranked = result[0].values
    assert [v.repo for v in ranked] == ["bjw-s/home-ops", "high/repo", "low/repo", "tie/repo"]
    assert ranked[0].score == 120.0
    assert ranked[0].stars == 80


def test_top_paths_applies_case_insensitive_prefix_filter() -> None:
    agg = aggregate_values([_entry("u1")], {"u1": PLEX_VALUES})
    result = top_paths(agg, paths_limit=20, path_prefix="PERSISTENCE.config")

    assert result
    assert all(p.path.startswith("persistence.config") for p in result)


def test_top_paths_caps_requested_limits() -> None:
    entries = [_entry(f"u{i}", f"user{i}/repo", i) for i in range(15)]
    tree = {f"key{n}": n for n in range(30)}
    agg = aggregate_values(entries, {e.url: tree for e in entries})

    result = top_paths(agg, paths_limit=500, values_limit=500)

    assert len(result) == 20
    assert all(len(p.values) == 10 for p in result)
    assert all(p.count == 15 for p in result)


def test_top_paths_clamps_negative_limits() -> None:
    agg = aggregate_values([_entry("u1")], {"u1": {"a": 1}})
    assert top_paths(agg, paths_limit=-1) == []
    assert top_paths(agg, values_limit=-3)[0].values == []


def test_count_paths_counts_deployments_not_occurrences() -> None:
    entries = [_entry("u1"), _entry("u2"), _entry("missing")]
    values = {
        "u1": {"a.b": 1, "a": {"b": 2}, "c": True},
        "u2": {"a": {"b": 3}},
    }
    assert count_paths(entries, values) == {"a.b": 2, "c": 1}


def test_path_index_sorts_alphabetically_and_filters() -> None:
    counts = {"service.port": 3, "image.tag": 1, "ingress.enabled": 2, "Image.pullPolicy": 1}

    assert [p.path for p in path_index(counts)] == [
        "Image.pullPolicy", "image.tag", "ingress.enabled", "service.port",
    ]
    filtered = path_index(counts, "image")
    assert [(p.path, p.usage_count) for p in filtered] == [("Image.pullPolicy", 1), ("image.tag", 1)]
