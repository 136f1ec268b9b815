"""npm registry client for peerbump.

Package metadata ("packuments") is fetched asynchronously, once per
package, and cached for the rest of the run. Dependency resolution then
queries :meth:`NpmRegistry.info` synchronously for ``name`` or
``name@version``, answering from the cache.

Typical usage::

    async with HTTPClient(headers={"Accept": NPM_ABBREVIATED_ACCEPT}) as http:
        registry = NpmRegistry(http)
        await registry.prefetch_packages(["react", "react-dom"])

    info = registry.info("react-dom@18.2.0")
    print(info.peer_dependencies)      # {'react': '^18.2.0'}
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import quote

from peerbump.constants import DEFAULT_CONCURRENCY, DEFAULT_REGISTRY
from peerbump.exceptions import RegistryError
from peerbump.models.package import PackageInfo
from peerbump.utils.http import HTTPClient
from peerbump.utils.logger import get_logger
from peerbump.utils.version_utils import is_semver, sort_versions

logger = get_logger("registry")

__all__ = ["NpmRegistry", "NpmPackageData", "split_spec"]


def split_spec(spec: str) -> Tuple[str, Optional[str]]:
    """Split ``name@version`` into its parts, keeping npm scopes intact.

    Examples::

        >>> split_spec("react@18.2.0")
        ('react', '18.2.0')
        >>> split_spec("@types/node")
        ('@types/node', None)
        >>> split_spec("@types/node@20.1.0")
        ('@types/node', '20.1.0')
    """
    at = spec.find("@", 1) if spec.startswith("@") else spec.find("@")
    if at <= 0:
        return spec, None
    return spec[:at], spec[at + 1 :] or None


@dataclass
class NpmPackageData:
    """Cached packument of one npm package.

    Attributes:
        name: Package name.
        latest_version: ``dist-tags.latest``.
        versions: Semver-valid published versions, oldest first.
        manifests: Raw per-version manifests keyed by version. Peer
            dependencies are validated when a version is queried.
    """

    name: str
    latest_version: str
    versions: Tuple[str, ...] = ()
    manifests: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def info(self, version: Optional[str] = None) -> PackageInfo:
        """Return :class:`PackageInfo` for *version* (latest by default)."""
        target = version or self.latest_version
        spec = f"{self.name}@{target}"

        manifest = self.manifests.get(target)
        if manifest is None:
            raise RegistryError(
                f"Version {target} of {self.name} is not published",
                package_name=spec,
            )

        return PackageInfo(
            name=self.name,
            version=target,
            versions=self.versions,
            peer_dependencies=_validate_peers(spec, manifest.get("peerDependencies")),
        )


def _validate_peers(spec: str, peers: Any) -> Dict[str, str]:
    """Check that *peers* is a ``str -> str`` mapping (or absent)."""
    if peers is None:
        return {}
    if not isinstance(peers, Mapping):
        raise RegistryError(
            f"Invalid peerDependencies in {spec}: expected an object",
            package_name=spec,
        )
    for peer_name, peer_range in peers.items():
        if not isinstance(peer_name, str) or not isinstance(peer_range, str):
            raise RegistryError(
                f"Invalid peerDependencies entry in {spec}: {peer_name!r} = {peer_range!r}",
                package_name=spec,
            )
    return dict(peers)


class NpmRegistry:
    """Per-run cache of npm registry metadata.

    Args:
        http_client: Open :class:`HTTPClient`, used only while fetching.
        registry_url: Registry base URL.
        concurrent_limit: Maximum packument fetches in flight.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        registry_url: str = DEFAULT_REGISTRY,
        concurrent_limit: int = DEFAULT_CONCURRENCY,
    ) -> None:
        self.http_client = http_client
        self.registry_url = registry_url.rstrip("/")
        self._semaphore = asyncio.Semaphore(concurrent_limit)
        self._package_data: Dict[str, NpmPackageData] = {}

    # ------------------------------------------------------------------
    # Async fetching
    # ------------------------------------------------------------------

    async def get_package_data(self, name: str) -> NpmPackageData:
        """Fetch (or return cached) metadata for *name*.

        Raises:
            RegistryError: The package does not exist or its metadata is
                malformed.
            NetworkError: The registry could not be reached.
        """
        if name in self._package_data:
            return self._package_data[name]

        async with self._semaphore:
            # Another coroutine may have populated it while we waited
            if name in self._package_data:
                return self._package_data[name]

            logger.debug("Fetching registry metadata for %s", name)
            raw = await self.http_client.get_json(self.package_url(name))
            data = self._parse_package_data(name, raw)
            self._package_data[name] = data
            return data

    async def prefetch_packages(self, names: Iterable[str]) -> None:
        """Concurrently fetch every package in *names*.

        All fetches run to completion; the first failure is then raised
        so that no section is resolved against partial metadata.
        """
        unique: List[str] = list(dict.fromkeys(names))
        results = await asyncio.gather(
            *(self.get_package_data(name) for name in unique),
            return_exceptions=True,
        )
        for name, result in zip(unique, results):
            if isinstance(result, BaseException):
                logger.debug("Fetching %s failed: %s", name, result)
                raise result

    # ------------------------------------------------------------------
    # Synchronous queries (cache only)
    # ------------------------------------------------------------------

    def info(self, spec: str) -> PackageInfo:
        """Return metadata for ``name`` or ``name@version`` from the cache.

        Raises:
            RegistryError: The package was not prefetched or the version
                is unknown / malformed.
        """
        name, version = split_spec(spec)
        data = self._package_data.get(name)
        if data is None:
            raise RegistryError(
                f"Registry metadata for {name} has not been fetched",
                package_name=name,
            )
        return data.info(version)

    def package_url(self, name: str) -> str:
        """Packument URL; the ``/`` of scoped names is percent-encoded."""
        return f"{self.registry_url}/{quote(name, safe='@')}"

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_package_data(name: str, raw: Mapping[str, Any]) -> NpmPackageData:
        """Validate a packument and order its versions.

        Raises:
            RegistryError: ``dist-tags.latest`` is not a string or
                ``versions`` is not an object of version manifests.
        """
        dist_tags = raw.get("dist-tags")
        latest = dist_tags.get("latest") if isinstance(dist_tags, Mapping) else None
        if not isinstance(latest, str):
            raise RegistryError(
                f"Invalid registry metadata for {name}: missing latest version",
                package_name=name,
            )

        raw_versions = raw.get("versions")
        if not isinstance(raw_versions, Mapping):
            raise RegistryError(
                f"Invalid registry metadata for {name}: versions must be an object",
                package_name=name,
            )

        manifests: Dict[str, Dict[str, Any]] = {}
        for version, manifest in raw_versions.items():
            if not isinstance(version, str) or not isinstance(manifest, Mapping):
                raise RegistryError(
                    f"Invalid registry metadata for {name}: bad entry for {version!r}",
                    package_name=name,
                )
            if not is_semver(version):
                logger.debug("Skipping non-semver version %s of %s", version, name)
                continue
            manifests[version] = dict(manifest)

        versions = tuple(sort_versions(manifests))

        return NpmPackageData(
            name=name,
            latest_version=latest,
            versions=versions,
            manifests=manifests,
        )
