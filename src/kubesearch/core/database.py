"""Read-only access to the harvested deployment databases."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, Protocol

from kubesearch.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# SQLite builds may cap bound parameters at 999.
MAX_QUERY_PARAMS = 900

# Flux HelmReleases backed by a HelmRepository (or GitRepository), Flux
# HelmReleases backed by an OCIRepository, and Argo CD Helm applications.
DEPLOYMENTS_QUERY = """
select
  hrep.helm_repo_url,
  hrep.helm_repo_name,
  rel.chart_name,
  rel.chart_version,
  rel.release_name,
  rel.url,
  rel.repo_name,
  rel.hajimari_icon,
  rel.hajimari_group,
  rel.timestamp,
  repo.stars,
  repo.url as repo_url
from flux_helm_release rel
join flux_helm_repo hrep
  on rel.helm_repo_name = hrep.helm_repo_name
  and rel.helm_repo_namespace = hrep.namespace
  and rel.repo_name = hrep.repo_name
  and (rel.chart_ref_kind = 'HelmRepository' or rel.chart_ref_kind = 'GitRepository')
join repo repo
  on rel.repo_name = repo.repo_name
group by rel.url

union all

select
  flor.url as helm_repo_url,
  flor.name as helm_repo_name,
  rel.chart_name,
  rel.chart_version,
  rel.release_name,
  rel.url,
  rel.repo_name,
  rel.hajimari_icon,
  rel.hajimari_group,
  rel.timestamp,
  repo.stars,
  repo.url as repo_url
from flux_helm_release rel
join flux_oci_repository flor
  on rel.helm_repo_name = flor.name
  and rel.chart_ref_kind = 'OCIRepository'
  and (
    flor.namespace = rel.helm_repo_namespace
    or (rel.helm_repo_namespace is null and (flor.namespace is null or flor.namespace = 'flux-system'))
  )
join repo repo
  on rel.repo_name = repo.repo_name
group by rel.url

union all

select
  rel.helm_repo_url as helm_repo_url,
  '' as helm_repo_name,
  rel.chart_name,
  rel.chart_version,
  rel.release_name,
  rel.url,
  rel.repo_name,
  rel.hajimari_icon,
  rel.hajimari_group,
  rel.timestamp,
  repo.stars,
  repo.url as repo_url
from argo_helm_application rel
join repo repo
  on rel.repo_name = repo.repo_name
"""

VALUES_QUERY = """
select url, val
from (
  select url, val from flux_helm_release_values
  union all
  select url, val from argo_helm_application_values
)
where url in ({placeholders})
"""


class DataProvider(Protocol):
    """Source of raw deployment rows and value blobs."""

    def fetch_deployment_rows(self) -> list[dict[str, Any]]:
        ...

    def fetch_value_blobs(self, urls: Iterable[str]) -> list[dict[str, Any]]:
        ...


def _chunked(items: list[str], size: int) -> Iterable[list[str]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class SqliteProvider:
    """Thin wrapper around the main and extended SQLite databases.

    Connections are opened lazily in read-only mode and reused until
    :meth:`close` is called.
    """

    def __init__(self, db_path: Path, db_extended_path: Path):
        self.db_path = Path(db_path)
        self.db_extended_path = Path(db_extended_path)
        self._db: sqlite3.Connection | None = None
        self._db_extended: sqlite3.Connection | None = None

    def __enter__(self) -> SqliteProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @staticmethod
    def _open(path: Path) -> sqlite3.Connection:
        if not path.is_file():
            raise DatabaseError(f"Database file not found: {path}")
        uri = f"{path.resolve().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as exc:
            raise DatabaseError(f"Failed to open database {path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        logger.debug("Opened database %s", path)
        return conn

    @property
    def db(self) -> sqlite3.Connection:
        if self._db is None:
            self._db = self._open(self.db_path)
        return self._db

    @property
    def db_extended(self) -> sqlite3.Connection:
        if self._db_extended is None:
            self._db_extended = self._open(self.db_extended_path)
        return self._db_extended

    @property
    def is_connected(self) -> bool:
        return self._db is not None and self._db_extended is not None

    def close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None
        if self._db_extended is not None:
            self._db_extended.close()
            self._db_extended = None

    def fetch_deployment_rows(self) -> list[dict[str, Any]]:
        rows = self.db.execute(DEPLOYMENTS_QUERY).fetchall()
        logger.debug("Fetched %d deployment rows", len(rows))
        return [dict(row) for row in rows]

    def fetch_value_blobs(self, urls: Iterable[str]) -> list[dict[str, Any]]:
        unique = list(dict.fromkeys(urls))
        results: list[dict[str, Any]] = []
        for chunk in _chunked(unique, MAX_QUERY_PARAMS):
            query = VALUES_QUERY.format(placeholders=",".join("?" for _ in chunk))
            results.extend(dict(row) for row in self.db_extended.execute(query, chunk))
        logger.debug("Fetched %d value blobs for %d urls", len(results), len(unique))
        return results
