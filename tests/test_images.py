from __future__ import annotations

from conftest import make_row
from kubesearch.core.images import (
    build_image_map,
    extract_images,
    repo_name_from_url,
    search_container_images,
    split_image,
)


def test_split_image_defaults_to_latest() -> None:
    assert split_image("nginx") == ("nginx", "latest")
    assert split_image("ghcr.io/home-assistant/home-assistant:2024.1") == (
        "ghcr.io/home-assistant/home-assistant", "2024.1",
    )


def test_split_image_uses_first_colon() -> None:
    assert split_image("registry:5000/app:1.0") == ("registry", "5000/app:1.0")


def test_extract_images_walks_nested_objects_and_lists() -> None:
    tree = {
        "image": {"repository": "ghcr.io/onedr0p/plex:1.40.0", "tag": "ignored"},
        "sidecars": [{"image": "busybox/busybox:1.36"}],
        "controllers": {"main": {"containers": {"app": {"image": {"repository": "plexinc/pms-docker"}}}}},
        "repository": "not-an-image",
        "name": "plex",
    }
    images = extract_images(tree)

    assert images == {
        "ghcr.io/onedr0p/plex": {"1.40.0": None},
        "busybox/busybox": {"1.36": None},
        "plexinc/pms-docker": {"latest": None},
    }


def test_extract_images_ignores_non_string_references() -> None:
    assert extract_images({"image": {"repository": 42}}) == {}
    assert extract_images("not a tree") == {}


def test_build_image_map_groups_urls_by_tag() -> None:
    values = {
        "u1": {"image": "org/app:1.0"},
        "u2": {"image": "org/app:1.0"},
        "u3": {"image": "org/app:2.0"},
    }
    assert build_image_map(values) == {"org/app": {"1.0": ["u1", "u2"], "2.0": ["u3"]}}


def test_repo_name_from_url() -> None:
    assert repo_name_from_url("https://github.com/owner/repo/blob/main/x.yaml") == "owner/repo"
    assert repo_name_from_url("https://gitlab.com/x/y") == "https://gitlab.com/x/y"


def test_search_container_images(make_collector) -> None:
    rows = [
        make_row(url="https://github.com/a/one/blob/main/plex.yaml", repo_name="a/one"),
        make_row(url="https://github.com/b/two/blob/main/plex.yaml", repo_name="b/two"),
        make_row(url="https://github.com/c/three/blob/main/plex.yaml", repo_name="c/three"),
    ]
    values = {
        rows[0]["url"]: {"image": {"repository": "ghcr.io/onedr0p/plex:1.40.0"}},
        rows[1]["url"]: {"image": {"repository": "ghcr.io/onedr0p/plex:1.41.0"}},
        rows[2]["url"]: {"image": {"repository": "ghcr.io/onedr0p/plex:1.41.0"}},
    }
    results = search_container_images(make_collector(rows, values), "ONEDR0P/PLEX")

    assert len(results) == 1
    result = results[0]
    assert result.repository == "ghcr.io/onedr0p/plex"
    assert result.usage_count == 3
    assert [(t.tag, t.usage_count) for t in result.tags] == [("1.41.0", 2), ("1.40.0", 1)]
    assert [d.repo_name for d in result.tags[0].deployments] == ["b/two", "c/three"]
    assert result.to_dict()["tags"][0]["deployments"][0]["repoUrl"] == rows[1]["url"]


def test_search_container_images_orders_and_limits(make_collector) -> None:
    rows = [make_row(url=f"u{i}", repo_name=f"r/{i}") for i in range(8)]
    values = {f"u{i}": {"image": "org/popular:1"} for i in range(7)}
    values["u7"] = {"image": "org/rare:1"}
    collector = make_collector(rows, values)

    results = search_container_images(collector, "org/")
    assert [r.repository for r in results] == ["org/popular", "org/rare"]
    # example deployments are capped per tag
    assert len(results[0].tags[0].deployments) == 5
    assert results[0].tags[0].usage_count == 7

    assert len(search_container_images(collector, "org/", limit=1)) == 1
    assert search_container_images(collector, "missing") == []


def test_search_container_images_falls_back_to_url_repo_name(make_collector) -> None:
    url = "https://github.com/owner/repo/blob/main/app.yaml"
    collector = make_collector([make_row(url=url, repo_name="")], {url: {"image": "org/app:1"}})

    results = search_container_images(collector, "org/app")
    assert results[0].tags[0].deployments[0].repo_name == "owner/repo"
