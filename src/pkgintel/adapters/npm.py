"""NPM registry adapter."""

from pkgintel.adapters.base import BaseAdapter, encode_name, normalize_repo_url
from pkgintel.client import RegistryClient
from pkgintel.errors import PayloadParseError
from pkgintel.models.schemas import (
    Deprecation,
    Ecosystem,
    PackageSummary,
    ReleaseEntry,
)


class NpmAdapter(BaseAdapter):
    """Adapter for the NPM package registry.

    Data sources:
    - Package document: https://registry.npmjs.org/{package}

    The document carries ``dist-tags`` (the ``latest`` tag names the current
    version), per-version records under ``versions``, and a ``time`` map from
    version to publish timestamp.
    """

    REGISTRY_URL = "https://registry.npmjs.org"

    # Keys in the ``time`` map that are not versions
    TIME_META_KEYS = frozenset({"created", "modified"})

    def __init__(self, client: RegistryClient, base_url: str | None = None) -> None:
        super().__init__(client, base_url or self.REGISTRY_URL)

    @property
    def ecosystem(self) -> Ecosystem:
        return Ecosystem.NPM

    def package_url(self, name: str) -> str:
        # Scoped packages (@org/pkg) are encoded into a single path segment
        return f"{self.base_url}/{encode_name(name)}"

    def package_name(self, name: str, data: dict) -> str:
        return data.get("name") or name

    def warnings(self, data: dict) -> list[str]:
        latest_version, _ = self._latest(data)
        if not latest_version:
            return ["No 'latest' dist-tag published; version reported as unknown"]
        return []

    def _latest(self, data: dict) -> tuple[str | None, dict]:
        dist_tags = data.get("dist-tags") or {}
        latest_version = dist_tags.get("latest") if isinstance(dist_tags, dict) else None
        versions = data.get("versions") or {}
        version_data = versions.get(latest_version) if latest_version else None
        return latest_version, version_data if isinstance(version_data, dict) else {}

    def parse_summary(self, name: str, data: dict) -> PackageSummary:
        latest_version, version_data = self._latest(data)

        repository = data.get("repository") or version_data.get("repository")

        return PackageSummary(
            name=self.package_name(name, data),
            version=latest_version or "unknown",
            description=data.get("description") or version_data.get("description") or None,
            homepage=data.get("homepage") or version_data.get("homepage") or None,
            repository=normalize_repo_url(repository),
            license=self._extract_license(data, version_data),
            keywords=self._extract_keywords(data, version_data),
        )

    def _extract_license(self, data: dict, version_data: dict) -> str | None:
        """Extract license from npm package data.

        Package-level strings win, then the latest version's string, then a
        legacy ``{"type": ...}`` object on the latest version.
        """
        if isinstance(data.get("license"), str):
            return data["license"]

        license_info = version_data.get("license")
        if isinstance(license_info, str):
            return license_info
        if isinstance(license_info, dict):
            return license_info.get("type") or None

        return None

    def _extract_keywords(self, data: dict, version_data: dict) -> list[str]:
        keywords = data.get("keywords") or version_data.get("keywords") or []
        if not isinstance(keywords, list):
            return []
        return [k for k in keywords if isinstance(k, str)]

    def parse_timeline(self, data: dict) -> list[ReleaseEntry]:
        times = data.get("time")
        if not isinstance(times, dict):
            raise PayloadParseError("npm document has no 'time' map")

        return [
            self._entry(version, date)
            for version, date in times.items()
            if version not in self.TIME_META_KEYS
        ]

    def parse_deprecation(self, data: dict) -> Deprecation:
        """A package is deprecated when its latest version carries ``deprecated``."""
        _, version_data = self._latest(data)
        message = version_data.get("deprecated")
        if message:
            return Deprecation(
                is_deprecated=True,
                message=message if isinstance(message, str) else None,
            )
        return Deprecation()
