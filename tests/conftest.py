"""Shared pytest fixtures for connfs tests."""
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List
from unittest.mock import MagicMock

import fsspec
import pytest
import yaml

from connfs.connections.details import ConnectionDescriptor
from connfs.connections.directory import InMemoryConnectionDirectory
from connfs.core.logging import Logger
from connfs.drivers.fsspec_driver import FsspecStorageDriver
from connfs.provider.resolver import VirtualFileResolver
from connfs.uri.transform import TransformKind


class JobContext:
    """A rich object that also exposes variables, like a running job would."""

    def __init__(self, values: Dict[str, Any], name: str = "job"):
        self.name = name
        self.steps: List[str] = []
        self._values = dict(values)

    def list_variables(self) -> List[str]:
        return list(self._values)

    def get_variable(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def __eq__(self, other: object) -> bool:
        # identity only, like objects that never defined value equality
        return self is other

    def __hash__(self) -> int:
        return id(self)


def _reset_memory_store() -> None:
    fs = fsspec.filesystem("memory")
    fs.store.clear()
    fs.pseudo_dirs.clear()
    fs.pseudo_dirs.append("")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def memory_fs():
    """fsspec in-memory filesystem, emptied before and after each test."""
    _reset_memory_store()
    yield fsspec.filesystem("memory")
    _reset_memory_store()


@pytest.fixture
def populated_memory(memory_fs):
    """In-memory tree used by driver and resolver tests.

    /bucket/top.txt
    /bucket/dir/a.txt
    /bucket/dir/b.txt
    /bucket/dir/sub/c.txt
    """
    memory_fs.pipe("/bucket/top.txt", b"top")
    memory_fs.pipe("/bucket/dir/a.txt", b"alpha")
    memory_fs.pipe("/bucket/dir/b.txt", b"bravo")
    memory_fs.pipe("/bucket/dir/sub/c.txt", b"charlie")
    return memory_fs


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger double recording every call."""
    return MagicMock(spec=Logger)


@pytest.fixture
def directory() -> InMemoryConnectionDirectory:
    """Directory with one connection per addressing style."""
    return InMemoryConnectionDirectory(
        [
            # host-less: the first path segment is the bucket
            ConnectionDescriptor(name="scratch", type="memory"),
            # fixed bucket
            ConnectionDescriptor(name="data", type="memory", domain="bucket"),
            # bucket taken from a variable
            ConnectionDescriptor(
                name="templated",
                type="memory",
                domain="${bucket_name}",
                variables={"bucket_name": "bucket"},
            ),
            ConnectionDescriptor(name="legacy", type="memory", domain="bucket", transform=TransformKind.LEGACY),
            ConnectionDescriptor(name="buckets", type="memory", has_buckets=True),
        ]
    )


@pytest.fixture
def driver(mock_logger) -> FsspecStorageDriver:
    return FsspecStorageDriver(logger=mock_logger)


@pytest.fixture
def resolver(directory, driver, mock_logger) -> VirtualFileResolver:
    return VirtualFileResolver(directory, driver, logger=mock_logger)


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample connfs configuration."""
    return {
        "connfs": {
            "scheme": "pvfs",
            "connections": [
                {"name": "scratch", "type": "memory"},
                {"name": "data", "type": "memory", "domain": "bucket"},
                {
                    "name": "my reports",
                    "type": "memory",
                    "domain": "${env}-reports",
                    "variables": {"env": "dev"},
                    "description": "Reports per environment",
                },
            ],
            "cache": {
                "enabled": True,
                "max_filesystems": 8,
                "ttl_seconds": 60,
            },
            "logging": {
                "level": "WARNING",
                "file": None,
            },
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "connfs.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path
