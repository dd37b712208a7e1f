"""Shared pytest fixtures for all tests."""
import pytest
from pathlib import Path

from yonk_code_metacenter.meta.data_types import HostTypeRegistry, LogicalTypeRegistry
from yonk_code_metacenter.meta.stores import InMemoryMetadataStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"

ROUND_TRIP_DDL = (
    "CREATE TABLE t (id int COMMENT 'pk-id', s char(60) COMMENT 'testcomment', "
    "PRIMARY KEY(id)) COMMENT='tabletestcomment'"
)


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture(scope="session")
def logical_types():
    return LogicalTypeRegistry()


@pytest.fixture(scope="session")
def host_types():
    return HostTypeRegistry()


@pytest.fixture
def metadata_store():
    """Store loaded from fixtures/metadata.yaml (task_info and user tables)."""
    return InMemoryMetadataStore.from_yaml(FIXTURES_DIR / "metadata.yaml")


@pytest.fixture(scope="session")
def task_info_ddl() -> str:
    return (FIXTURES_DIR / "task_info.sql").read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def round_trip_ddl() -> str:
    return ROUND_TRIP_DDL
