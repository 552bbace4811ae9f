"""Shared test fixtures."""

import copy
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from pkgintel.client import RegistryClient
from pkgintel.config import EngineConfig
from pkgintel.engine import RegistryEngine

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)

NPM_PACKAGE = {
    "name": "lodash",
    "dist-tags": {"latest": "4.17.21"},
    "versions": {
        "4.17.21": {
            "name": "lodash",
            "version": "4.17.21",
            "description": "Lodash modular utilities.",
            "homepage": "https://lodash.com/",
            "repository": {"type": "git", "url": "git+https://github.com/lodash/lodash.git"},
            "license": "MIT",
            "keywords": ["modules", "stdlib", "util"],
        },
        "4.17.20": {"name": "lodash", "version": "4.17.20"},
    },
    "time": {
        "created": "2012-04-23T17:17:21.587Z",
        "modified": "2023-01-15T10:00:00.000Z",
        "4.17.20": "2020-08-12T20:00:00.000Z",
        "4.17.21": "2021-02-20T15:42:04.000Z",
    },
    "description": "Lodash modular utilities.",
    "homepage": "https://lodash.com/",
    "repository": {"type": "git", "url": "git+https://github.com/lodash/lodash.git"},
    "license": "MIT",
    "keywords": ["modules", "stdlib", "util"],
}

PYPI_PACKAGE = {
    "info": {
        "name": "requests",
        "version": "2.31.0",
        "summary": "Python HTTP for Humans.",
        "home_page": "https://requests.readthedocs.io",
        "project_url": None,
        "project_urls": {
            "Documentation": "https://requests.readthedocs.io",
            "Source": "https://github.com/psf/requests",
        },
        "license": "Apache 2.0",
        "keywords": "http, client  python,",
        "classifiers": [
            "Development Status :: 5 - Production/Stable",
            "License :: OSI Approved :: Apache Software License",
        ],
    },
    "releases": {
        "2.30.0": [
            {"upload_time": "2023-05-01T10:00:00", "upload_time_iso_8601": "2023-05-01T10:00:00.000Z"},
        ],
        "2.31.0": [
            {"upload_time": "2023-05-22T12:00:00", "upload_time_iso_8601": "2023-05-22T12:00:00.000Z"},
            {"upload_time": "2023-05-22T10:00:00", "upload_time_iso_8601": "2023-05-22T10:00:00.000Z"},
        ],
        "2.32.0rc1": [
            {"upload_time": "2023-06-01T09:00:00", "upload_time_iso_8601": "2023-06-01T09:00:00.000Z"},
        ],
        "0.0.1": [],
    },
    "urls": [],
}

CRATES_PACKAGE = {
    "crate": {
        "id": "serde",
        "name": "serde",
        "description": "A generic serialization/deserialization framework",
        "homepage": "https://serde.rs",
        "repository": "https://github.com/serde-rs/serde",
        "max_version": "1.0.189-alpha",
        "max_stable_version": "1.0.188",
        "downloads": 200000000,
        "recent_downloads": 10000000,
        "keywords": ["serde", "serialization"],
        "categories": [],
    },
    "versions": [
        {
            "id": 4,
            "crate": "serde",
            "num": "1.0.189-alpha",
            "created_at": "2023-08-20T10:00:00.000Z",
            "updated_at": "2023-08-20T10:00:00.000Z",
            "yanked": False,
            "license": "MIT OR Apache-2.0",
        },
        {
            "id": 1,
            "crate": "serde",
            "num": "1.0.188",
            "created_at": "2023-08-15T10:00:00.000Z",
            "updated_at": "2023-08-15T10:00:00.000Z",
            "yanked": False,
            "license": "MIT",
        },
        {
            "id": 2,
            "crate": "serde",
            "num": "1.0.187",
            "created_at": "2023-07-20T10:00:00.000Z",
            "updated_at": "2023-07-20T10:00:00.000Z",
            "yanked": True,
            "license": "MIT OR Apache-2.0",
        },
        {
            "id": 3,
            "crate": "serde",
            "num": "1.0.186",
            "created_at": "2023-07-15T10:00:00.000Z",
            "updated_at": "2023-07-15T10:00:00.000Z",
            "yanked": False,
            "license": "MIT OR Apache-2.0",
        },
    ],
}


def crates_with_versions(count: int, start: datetime = NOW) -> dict:
    """A crate document with ``count`` unyanked versions, one day apart."""
    data = copy.deepcopy(CRATES_PACKAGE)
    data["versions"] = [
        {
            "id": i,
            "crate": "serde",
            "num": f"1.0.{i}",
            "created_at": (start - timedelta(days=count - i)).isoformat(),
            "yanked": False,
            "license": "MIT",
        }
        for i in range(count)
    ]
    return data


def make_engine(handler, timeout: float = 5.0, **kwargs) -> RegistryEngine:
    """Build an engine whose HTTP traffic goes to ``handler``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    config = EngineConfig(timeout=timeout, user_agent="pkgintel-tests/1.0")
    return RegistryEngine(config, client=client, **kwargs)


def json_handler(payload, status: int = 200, calls: list | None = None):
    """Handler answering every request with ``payload``."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status, json=payload)

    return handler


@pytest.fixture
def npm_package():
    return copy.deepcopy(NPM_PACKAGE)


@pytest.fixture
def pypi_package():
    return copy.deepcopy(PYPI_PACKAGE)


@pytest.fixture
def crates_package():
    return copy.deepcopy(CRATES_PACKAGE)


@pytest.fixture
def registry_client():
    return RegistryClient(user_agent="pkgintel-tests/1.0", timeout=5.0)
