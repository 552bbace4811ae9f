"""PyPI package index adapter."""

import re

from pkgintel.adapters.base import BaseAdapter, encode_name, normalize_repo_url
from pkgintel.client import RegistryClient
from pkgintel.errors import PayloadParseError
from pkgintel.models.schemas import (
    Deprecation,
    Ecosystem,
    PackageSummary,
    ReleaseEntry,
)


class PyPiAdapter(BaseAdapter):
    """Adapter for the Python Package Index (PyPI).

    Data sources:
    - Package document: https://pypi.org/pypi/{package}/json
    """

    REGISTRY_URL = "https://pypi.org/pypi"

    # project_urls labels for source code URLs (in priority order)
    REPO_KEYS = ("Repository", "Source", "GitHub", "Source Code")

    # Lifecycle classifiers treated as "not maintained"
    INACTIVE_CLASSIFIERS = (
        "Development Status :: 7 - Inactive",
        "Development Status :: 1 - Planning",
    )

    def __init__(self, client: RegistryClient, base_url: str | None = None) -> None:
        super().__init__(client, base_url or self.REGISTRY_URL)

    @property
    def ecosystem(self) -> Ecosystem:
        return Ecosystem.PYPI

    def package_url(self, name: str) -> str:
        return f"{self.base_url}/{encode_name(name)}/json"

    def _info(self, data: dict) -> dict:
        info = data.get("info")
        if not isinstance(info, dict):
            raise PayloadParseError("PyPI document has no 'info' record")
        return info

    def package_name(self, name: str, data: dict) -> str:
        return self._info(data).get("name") or name

    def parse_summary(self, name: str, data: dict) -> PackageSummary:
        info = self._info(data)

        return PackageSummary(
            name=info.get("name") or name,
            version=info.get("version") or "unknown",
            description=info.get("summary") or None,
            homepage=info.get("home_page") or info.get("project_url") or None,
            repository=normalize_repo_url(self._extract_repo_url(info)),
            license=info.get("license") or None,
            keywords=self._parse_keywords(info),
        )

    def _extract_repo_url(self, info: dict) -> str | None:
        """Pick the first well-known source link from project_urls."""
        project_urls = info.get("project_urls") or {}
        if not isinstance(project_urls, dict):
            return None

        for key in self.REPO_KEYS:
            url = project_urls.get(key)
            if url:
                return url

        return None

    def _parse_keywords(self, info: dict) -> list[str]:
        """Parse keywords from PyPI info.

        Keywords can be a comma-separated string or already a list.
        """
        keywords = info.get("keywords")
        if not keywords:
            return []

        if isinstance(keywords, list):
            return [k for k in keywords if isinstance(k, str) and k]

        if isinstance(keywords, str):
            # Split by comma or whitespace
            return [k for k in re.split(r"[,\s]+", keywords) if k]

        return []

    def parse_timeline(self, data: dict) -> list[ReleaseEntry]:
        """One entry per version, dated by its earliest uploaded file.

        Versions without any uploaded files are skipped.
        """
        self._info(data)
        releases = data.get("releases") or {}
        if not isinstance(releases, dict):
            raise PayloadParseError("PyPI document has a malformed 'releases' map")

        entries = []
        for version, files in releases.items():
            if not files or not isinstance(files, list):
                continue

            dates = sorted(
                date
                for date in (
                    f.get("upload_time_iso_8601") or f.get("upload_time")
                    for f in files
                    if isinstance(f, dict)
                )
                if date
            )
            if dates:
                entries.append(self._entry(version, dates[0]))

        return entries

    def parse_deprecation(self, data: dict) -> Deprecation:
        classifiers = self._info(data).get("classifiers") or []
        is_deprecated = any(
            marker in classifier
            for classifier in classifiers
            if isinstance(classifier, str)
            for marker in self.INACTIVE_CLASSIFIERS
        )
        return Deprecation(is_deprecated=is_deprecated)
