from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

import pytest

from kubesearch.core import database
from kubesearch.core.collector import DataCollector
from kubesearch.core.errors import DatabaseError
from kubesearch.core.images import search_container_images
from kubesearch.core.search import search_deployments


def test_fetch_deployment_rows(sqlite_dbs) -> None:
    with database.SqliteProvider(*sqlite_dbs) as provider:
        rows = provider.fetch_deployment_rows()

    by_repo = {r["repo_name"]: r for r in rows}
    assert set(by_repo) == {"testuser/cluster", "bjw-s/home-ops", "other/gitops"}
    assert by_repo["testuser/cluster"]["helm_repo_url"] == "https://bjw-s.github.io/helm-charts/"
    assert by_repo["testuser/cluster"]["stars"] == 150
    assert by_repo["bjw-s/home-ops"]["helm_repo_url"] == "oci://ghcr.io/bjw-s/helm/"
    assert by_repo["bjw-s/home-ops"]["chart_version"] is None
    assert by_repo["other/gitops"]["helm_repo_name"] == ""
    assert by_repo["other/gitops"]["repo_url"] == "https://github.com/other/gitops"


def test_http_and_oci_sources_share_a_key(sqlite_dbs) -> None:
    with database.SqliteProvider(*sqlite_dbs) as provider:
        data = DataCollector(provider).collect_releases()

    assert data.repos.count("ghcr.io-bjw-s-helm-plex") == 2
    assert data.repos.count("registry-1.docker.io-bitnamicharts-nginx") == 1


def test_fetch_value_blobs_in_chunks(sqlite_dbs, monkeypatch) -> None:
    monkeypatch.setattr(database, "MAX_QUERY_PARAMS", 1)
    urls = [
        "https://github.com/testuser/cluster/blob/main/plex.yaml",
        "https://github.com/other/gitops/blob/main/nginx.yaml",
        "https://github.com/unknown/repo/blob/main/x.yaml",
        "https://github.com/testuser/cluster/blob/main/plex.yaml",
    ]
    with database.SqliteProvider(*sqlite_dbs) as provider:
        blobs = provider.fetch_value_blobs(urls)

    assert [b["url"] for b in blobs] == urls[:2]


def test_missing_database_file(tmp_path: Path) -> None:
    provider = database.SqliteProvider(tmp_path / "missing.db", tmp_path / "missing-extended.db")
    with pytest.raises(DatabaseError, match="Database file not found"):
        provider.fetch_deployment_rows()
    assert not provider.is_connected


def test_connections_are_lazy_and_closed(sqlite_dbs) -> None:
    provider = database.SqliteProvider(*sqlite_dbs)
    assert not provider.is_connected
    provider.fetch_deployment_rows()
    provider.fetch_value_blobs(["x"])
    assert provider.is_connected
    provider.close()
    assert not provider.is_connected


def test_connections_are_read_only(sqlite_dbs) -> None:
    with database.SqliteProvider(*sqlite_dbs) as provider:
        with pytest.raises(sqlite3.OperationalError):
            provider.db.execute("delete from repo")


def test_search_over_sqlite(sqlite_dbs) -> None:
    with database.SqliteProvider(*sqlite_dbs) as provider:
        results = search_deployments(DataCollector(provider), "plex")

    assert [(r.repo, r.score) for r in results] == [
        ("testuser/cluster", 25.0),
        ("bjw-s/home-ops", 14.0),
    ]
    assert results[1].version == ""


def test_malformed_values_are_skipped(sqlite_dbs, caplog) -> None:
    with database.SqliteProvider(*sqlite_dbs) as provider, caplog.at_level(logging.WARNING):
        results = search_container_images(DataCollector(provider), "/")

    assert [r.repository for r in results] == ["ghcr.io/onedr0p/plex", "bitnami/nginx"]
    assert results[1].tags[0].tag == "latest"
    assert "Failed to parse values for https://github.com/bjw-s/home-ops" in caplog.text
