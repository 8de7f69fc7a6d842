"""Chart source canonicalization and dedup key derivation."""

from __future__ import annotations

import re

# HTTP chart repositories that are mirrored to an OCI registry. Deployments
# from either source are grouped under the OCI URL.
SOURCE_URL_ALIASES: dict[str, str] = {
    "https://bjw-s.github.io/helm-charts/": "oci://ghcr.io/bjw-s/helm/",
    "https://charts.bitnami.com/bitnami/": "oci://registry-1.docker.io/bitnamicharts/",
    "https://github.com/prometheus-community/helm-charts/": "oci://ghcr.io/prometheus-community/charts/",
    "https://prometheus-community.github.io/helm-charts/": "oci://ghcr.io/prometheus-community/charts/",
    "https://actions.github.io/actions-runner-controller/": "oci://ghcr.io/actions/actions-runner-controller-charts/",
    "https://kyverno.github.io/kyverno/": "oci://ghcr.io/kyverno/charts/",
    "https://grafana.github.io/helm-charts/": "oci://ghcr.io/grafana-operator/helm-charts/",
}

_URL_SCHEMES = ("https://", "http://", "oci://")
_WHITESPACE_RE = re.compile(r"\s+")
_INVALID_KEY_CHARS_RE = re.compile(r"[^a-zA-Z0-9.-]")
_LEADING_DOTS_RE = re.compile(r"^\.+")


def merge_source_url(url: str) -> str:
    """Map a known HTTP Helm repository URL to its OCI equivalent."""
    return SOURCE_URL_ALIASES.get(url, url)


def simplify_url(url: str) -> str:
    """Strip the scheme and one trailing slash from a chart source URL."""
    for scheme in _URL_SCHEMES:
        url = url.replace(scheme, "", 1)
    if url.endswith("/"):
        url = url[:-1]
    return url


def derive_key(source_url: str, chart_name: str, release_name: str) -> str:
    """Build the dedup key for a (chart source, chart, release) triple.

    OCI registries usually carry the chart name as the last path segment,
    classic Helm repositories do not, so the chart name is only appended
    in the latter case.
    """
    url = simplify_url(source_url).replace("/", "-")

    if url.endswith(chart_name):
        key = url if chart_name == release_name else f"{url}-{release_name}"
    elif chart_name == release_name:
        key = f"{url}-{chart_name}"
    else:
        key = f"{url}-{chart_name}-{release_name}"

    key = _WHITESPACE_RE.sub("-", key)
    key = _INVALID_KEY_CHARS_RE.sub("", key)
    key = _LEADING_DOTS_RE.sub("", key)
    return key.lower()
