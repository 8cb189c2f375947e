"""Unity release catalog client with a release-notes page fallback."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from common.errors import CatalogError, ResolutionError
from common.http_client import get_json, robust_get
from common.logging_utils import safe_url
from constants import Constants
from versioning.models import ReleaseInfo
from versioning.unity_version import RELEASE_RE, TAG_ORDER, UnityVersion

logger = logging.getLogger(__name__)

_QUERY_PREFIX_RE = re.compile(r"^(\d{1,4})(?:\.(\d+))?")
_HUB_LINK_RE = re.compile(r"unityhub://(?P<version>\d+\.\d+\.\d+[abcfpx]?\d*)/(?P<changeset>[a-zA-Z0-9]+)")


def catalog_query(version: UnityVersion) -> str:
    """Most specific query the catalog understands: ``X.Y.Zt#``, else ``X.Y``, else ``X``."""
    if version.is_fully_qualified():
        return version.version
    match = _QUERY_PREFIX_RE.match(version.version)
    if match:
        return f"{match.group(1)}.{match.group(2)}" if match.group(2) else match.group(1)
    return version.version.split(".")[0]


def _release_rank(release: str):
    match = RELEASE_RE.search(release)
    if not match:
        return 0, 0, TAG_ORDER["f"], 0
    return (
        int(match.group("minor")),
        int(match.group("patch")),
        TAG_ORDER[match.group("tag")],
        int(match.group("build")),
    )


def pick_release(version: UnityVersion, results: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Best catalog result: stable releases only unless a pre-release was asked for."""
    allow_prerelease = version.is_prerelease()
    usable = [
        r for r in results
        if r.get("version") and (allow_prerelease or re.search(r"f\d+$", r["version"]))
    ]
    usable.sort(key=lambda r: _release_rank(r["version"]), reverse=True)
    return usable[0] if usable else None


class ReleaseCatalog:
    """Looks up authoritative releases (version + changeset)."""

    def __init__(self, platform_name: str, api_url: str = Constants.RELEASES_API_URL,
                 notes_url: str = Constants.RELEASE_NOTES_URL):
        self.platform_name = platform_name
        self.api_url = api_url
        self.notes_url = notes_url

    def get_release_info(self, version: UnityVersion) -> ReleaseInfo:
        """Query the releases API for ``version``.

        Raises:
            CatalogError: On transport errors, bad responses or no usable release.
        """
        query = catalog_query(version)
        params = {
            "version": query,
            "architecture": version.architecture.value,
            "platform": self.platform_name,
            "limit": Constants.RELEASES_API_LIMIT,
        }
        logger.debug("Get Unity Release: %s", params)
        status_code, _, data = get_json(self.api_url, params=params, headers={"Accept": "application/json"})
        if status_code != 200:
            raise CatalogError(f"Failed to get Unity releases [{status_code}] for version: {query}")
        results = (data or {}).get("results") or []
        if not results:
            raise CatalogError(f"No Unity releases found for version: {query}")

        picked = pick_release(version, results)
        if picked is None:
            raise CatalogError(f"No suitable Unity releases (stable) found for version: {query}")
        logger.debug("Found Unity Release: query=%s picked=%s", query, picked.get("version"))
        return ReleaseInfo(version=picked["version"], short_revision=picked.get("shortRevision"))

    def fallback_lookup(self, version: UnityVersion) -> UnityVersion:
        """Scrape the public release notes page for a ``unityhub://`` link.

        Partial versions take the newest stable link in the requested major
        (and minor). Returns ``version`` unchanged if the page cannot be
        reached or holds no matching link.

        Raises:
            CatalogError: If the page answers with an error status.
        """
        url = f"{self.notes_url}{version.version.split('.')[0]}"
        logger.debug('Fetching release page: "%s"', safe_url(url))
        status_code, _, text = robust_get(url)
        if status_code == 0:
            logger.warning("Failed to fetch changeset for Unity %s [network error]: %s", version, text)
            return version
        if status_code != 200:
            raise CatalogError(f'Failed to fetch changeset [{status_code}] "{url}"')

        changesets: Dict[str, str] = {}
        for link in _HUB_LINK_RE.finditer(text):
            changesets.setdefault(link.group("version"), link.group("changeset"))

        # Same major/minor rules as local fallback matching
        best = version.find_match(list(changesets))
        if best.version in changesets:
            return UnityVersion(best.version, changesets[best.version], version.architecture)

        logger.error("Failed to find changeset for Unity %s", version)
        return version

    def resolve(self, version: UnityVersion) -> UnityVersion:
        """Resolve a concrete release, falling back to the release notes page.

        Raises:
            ResolutionError: If neither source yields a release and the version
                is not already fully qualified.
        """
        try:
            info = self.get_release_info(version)
            return UnityVersion(info.version, info.short_revision, version.architecture)
        except CatalogError as error:
            logger.warning(
                "Failed to get Unity release info for %s! falling back to legacy search...\n%s",
                version, error,
            )
        try:
            resolved = self.fallback_lookup(version)
        except CatalogError as error:
            if version.is_fully_qualified():
                logger.warning("%s", error)
                return version
            raise ResolutionError(f"Failed to resolve Unity {version}: {error}") from error
        if resolved.changeset is None and not version.is_fully_qualified():
            raise ResolutionError(f"Failed to resolve a release for Unity {version}")
        return resolved
