"""crates.io registry adapter."""

from pkgintel.adapters.base import BaseAdapter, encode_name, normalize_repo_url
from pkgintel.client import RegistryClient
from pkgintel.errors import PayloadParseError
from pkgintel.models.schemas import (
    Deprecation,
    Downloads,
    Ecosystem,
    PackageSummary,
    ReleaseEntry,
)


class CratesAdapter(BaseAdapter):
    """Adapter for the crates.io Rust registry.

    Data sources:
    - Crate document: https://crates.io/api/v1/crates/{crate}

    The document has a ``crate`` record (download counters, max versions)
    and a ``versions`` list where each entry carries a ``yanked`` flag.
    Yanked versions are left out of timelines and scoring.
    """

    REGISTRY_URL = "https://crates.io/api/v1/crates"

    YANKED_MESSAGE = "All published versions have been yanked"

    def __init__(self, client: RegistryClient, base_url: str | None = None) -> None:
        super().__init__(client, base_url or self.REGISTRY_URL)

    @property
    def ecosystem(self) -> Ecosystem:
        return Ecosystem.CRATES

    def package_url(self, name: str) -> str:
        return f"{self.base_url}/{encode_name(name)}"

    def _crate(self, data: dict) -> dict:
        crate = data.get("crate")
        if not isinstance(crate, dict):
            raise PayloadParseError("crates.io document has no 'crate' record")
        return crate

    def _versions(self, data: dict) -> list[dict]:
        versions = data.get("versions")
        if not isinstance(versions, list):
            raise PayloadParseError("crates.io document has no 'versions' list")
        return [v for v in versions if isinstance(v, dict)]

    def package_name(self, name: str, data: dict) -> str:
        return self._crate(data).get("name") or name

    def warnings(self, data: dict) -> list[str]:
        versions = data.get("versions")
        if not isinstance(versions, list):
            return []
        yanked = sum(1 for v in versions if isinstance(v, dict) and v.get("yanked"))
        if yanked:
            return [f"{yanked} yanked version(s) excluded"]
        return []

    def parse_summary(self, name: str, data: dict) -> PackageSummary:
        crate = self._crate(data)
        versions = self._versions(data)

        max_version = crate.get("max_version")
        # License lives on the version record, not the crate
        latest = next((v for v in versions if v.get("num") == max_version), {})

        keywords = crate.get("keywords") or []

        return PackageSummary(
            name=crate.get("name") or name,
            version=crate.get("max_stable_version") or max_version or "unknown",
            description=crate.get("description") or None,
            homepage=crate.get("homepage") or None,
            repository=normalize_repo_url(crate.get("repository")),
            license=latest.get("license") or None,
            keywords=[k for k in keywords if isinstance(k, str)],
            # crates.io only publishes a 90-day "recent" counter; it fills the weekly slot
            downloads=Downloads(
                total=crate.get("downloads"),
                weekly=crate.get("recent_downloads") or None,
            ),
        )

    def parse_timeline(self, data: dict) -> list[ReleaseEntry]:
        self._crate(data)
        return [
            self._entry(str(v.get("num", "")), v.get("created_at"))
            for v in self._versions(data)
            if not v.get("yanked")
        ]

    def parse_deprecation(self, data: dict) -> Deprecation:
        """A crate is deprecated when no unyanked version remains."""
        versions = self._versions(data)
        if all(v.get("yanked") for v in versions):
            return Deprecation(is_deprecated=True, message=self.YANKED_MESSAGE)
        return Deprecation()
