from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Callable, Iterable

import pytest

from kubesearch.core.collector import DataCollector

PLEX_URL = "https://github.com/testuser/cluster/blob/main/kubernetes/apps/media/plex/app/helmrelease.yaml"

PLEX_ROW: dict[str, Any] = {
    "helm_repo_url": "oci://ghcr.io/bjw-s/helm/",
    "helm_repo_name": "bjw-s",
    "chart_name": "plex",
    "chart_version": "1.0.0",
    "release_name": "plex",
    "url": PLEX_URL,
    "repo_name": "testuser/cluster",
    "hajimari_icon": "mdi:plex",
    "hajimari_group": "media",
    "timestamp": 1704067200,
    "stars": 150,
    "repo_url": "https://github.com/testuser/cluster",
}

PLEX_VALUES: dict[str, Any] = {
    "persistence": {
        "config": {"enabled": True, "size": "10Gi", "storageClass": "local-path"},
        "media": {"enabled": True, "type": "nfs", "server": "192.168.1.100", "path": "/mnt/media"},
    },
    "image": {"repository": "plexinc/pms-docker", "tag": "latest", "pullPolicy": "IfNotPresent"},
    "service": {"main": {"enabled": True, "type": "LoadBalancer", "ports": {"http": {"port": 32400}}}},
    "ingress": {"enabled": False},
    "env": {"TZ": "America/New_York", "PLEX_CLAIM": "claim-token"},
}


class FakeProvider:
    """In-memory data provider recording the value URLs it was asked for."""

    def __init__(self, rows: Iterable[dict[str, Any]] = (), blobs: dict[str, str] | None = None):
        self.rows = list(rows)
        self.blobs = dict(blobs or {})
        self.value_requests: list[list[str]] = []

    def fetch_deployment_rows(self) -> list[dict[str, Any]]:
        return [dict(r) for r in self.rows]

    def fetch_value_blobs(self, urls: Iterable[str]) -> list[dict[str, Any]]:
        urls = list(urls)
        self.value_requests.append(urls)
        return [{"url": u, "val": self.blobs[u]} for u in urls if u in self.blobs]


@pytest.fixture(autouse=True)
def _reset_kubesearch_logger():
    """Undo CLI logging setup so caplog sees kubesearch records."""
    yield
    logger = logging.getLogger("kubesearch")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def make_row(**overrides: Any) -> dict[str, Any]:
    row = dict(PLEX_ROW)
    row.update(overrides)
    return row


@pytest.fixture
def row() -> Callable[..., dict[str, Any]]:
    """Factory for deployment rows based on a plex deployment."""
    return make_row


@pytest.fixture
def make_collector() -> Callable[..., DataCollector]:
    """Build a collector over rows and {url: tree or raw json string}."""

    def build(rows: Iterable[dict[str, Any]], values: dict[str, Any] | None = None) -> DataCollector:
        blobs = {
            url: v if isinstance(v, str) else json.dumps(v)
            for url, v in (values or {}).items()
        }
        return DataCollector(FakeProvider(rows, blobs))

    return build


@pytest.fixture
def plex_collector(make_collector) -> DataCollector:
    return make_collector([make_row()], {PLEX_URL: PLEX_VALUES})


def _create_databases(root: Path) -> tuple[Path, Path]:
    db_path = root / "repos.db"
    ext_path = root / "repos-extended.db"

    conn = sqlite3.connect(db_path)
    conn.executescript(
        """
        create table repo (repo_name text, url text, stars integer);
        create table flux_helm_repo (helm_repo_name text, namespace text, repo_name text, helm_repo_url text);
        create table flux_oci_repository (name text, namespace text, url text);
        create table flux_helm_release (
          release_name text, chart_name text, chart_version text, helm_repo_name text,
          helm_repo_namespace text, chart_ref_kind text, url text, repo_name text,
          hajimari_icon text, hajimari_group text, timestamp integer
        );
        create table argo_helm_application (
          release_name text, chart_name text, chart_version text, helm_repo_url text,
          url text, repo_name text, hajimari_icon text, hajimari_group text, timestamp integer
        );

        insert into repo values ('testuser/cluster', 'https://github.com/testuser/cluster', 150);
        insert into repo values ('bjw-s/home-ops', 'https://github.com/bjw-s/home-ops', 40);
        insert into repo values ('other/gitops', 'https://github.com/other/gitops', 5);

        insert into flux_helm_repo values ('bjw-s', 'flux-system', 'testuser/cluster', 'https://bjw-s.github.io/helm-charts/');
        insert into flux_oci_repository values ('plex', 'flux-system', 'oci://ghcr.io/bjw-s/helm/');

        insert into flux_helm_release values (
          'plex', 'plex', '3.0.0', 'bjw-s', 'flux-system', 'HelmRepository',
          'https://github.com/testuser/cluster/blob/main/plex.yaml', 'testuser/cluster',
          'mdi:plex', 'media', 1704067200
        );
        insert into flux_helm_release values (
          'plex', 'plex', null, 'plex', null, 'OCIRepository',
          'https://github.com/bjw-s/home-ops/blob/main/plex.yaml', 'bjw-s/home-ops',
          null, null, 1704067300
        );
        insert into argo_helm_application values (
          'nginx', 'nginx', '15.0.0', 'https://charts.bitnami.com/bitnami/',
          'https://github.com/other/gitops/blob/main/nginx.yaml', 'other/gitops',
          null, null, 1704067400
        );
        """
    )
    conn.commit()
    conn.close()

    conn = sqlite3.connect(ext_path)
    conn.executescript(
        """
        create table flux_helm_release_values (url text, val text);
        create table argo_helm_application_values (url text, val text);
        """
    )
    conn.executemany(
        "insert into flux_helm_release_values values (?, ?)",
        [
            ("https://github.com/testuser/cluster/blob/main/plex.yaml",
             json.dumps({"image": {"repository": "ghcr.io/onedr0p/plex:1.40.0"}, "persistence": {"config": {"enabled": True}}})),
            ("https://github.com/bjw-s/home-ops/blob/main/plex.yaml", "{ invalid json"),
        ],
    )
    conn.execute(
        "insert into argo_helm_application_values values (?, ?)",
        ("https://github.com/other/gitops/blob/main/nginx.yaml", json.dumps({"image": {"repository": "bitnami/nginx"}})),
    )
    conn.commit()
    conn.close()
    return db_path, ext_path


@pytest.fixture
def sqlite_dbs(tmp_path: Path) -> tuple[Path, Path]:
    """Main and extended databases with three deployments (two plex, one nginx)."""
    return _create_databases(tmp_path)
