"""
Shared fixtures for the OMI demo client tests.

Remote calls never leave the process: a FakeConnector hands out sessions
backed by a FakeService whose responses and failures are set per test.
"""

import logging

import pytest

from src.omi.exceptions import AuthenticationError
from src.omi.remote import Session

NAMESPACES_XML = '<namespaces><ns name="SAS"/></namespaces>'

REPOSITORIES_XML = (
    '<Repositories>'
    '<Repository Id="A0000001.A0000001" Name="REPOSMGR" RepositoryType="MANAGER"/>'
    '<Repository Id="A0000001.A5DRX7Y2" Name="Foundation" RepositoryType="FOUNDATION"/>'
    '</Repositories>'
)


class FakeService:
    """In-memory MetadataService recording every call."""

    def __init__(self, responses=None, error=None):
        self.responses = {
            "get_repositories": (REPOSITORIES_XML, 0),
            "get_namespaces": (NAMESPACES_XML, 0),
            "get_types": ('<Types><Type Id="Column"/></Types>', 0),
            "get_subtypes": ('<Subtypes><Type Id="PhysicalTable"/></Subtypes>', 0),
            "get_type_properties": ('<Properties><Attribute Name="Name"/></Properties>', 0),
            "get_metadata_objects": ('<Objects><Column Id="A5DRX7Y2.AA000001"/></Objects>', 0),
        }
        self.responses.update(responses or {})
        self.error = error
        self.calls = []

    def _respond(self, method, *args):
        self.calls.append((method, args))
        if self.error is not None:
            raise self.error
        return self.responses[method]

    def get_repositories(self, flags, options):
        return self._respond("get_repositories", flags, options)

    def get_namespaces(self, flags, options):
        return self._respond("get_namespaces", flags, options)

    def get_types(self, ns, flags, options):
        return self._respond("get_types", ns, flags, options)

    def get_subtypes(self, supertype, ns, flags, options):
        return self._respond("get_subtypes", supertype, ns, flags, options)

    def get_type_properties(self, type_name, ns, flags, options):
        return self._respond("get_type_properties", type_name, ns, flags, options)

    def get_metadata_objects(self, repos_id, type_name, ns, flags, options):
        return self._respond("get_metadata_objects", repos_id, type_name, ns, flags, options)


class CountingSession(Session):
    """Session that counts close() calls."""

    def __init__(self, service):
        super().__init__(service, user_name="sasdemo", identity="SAS Demo User")
        self.close_count = 0

    def close(self):
        self.close_count += 1
        super().close()


class FakeConnector:
    """Connector that counts connection attempts and hands out CountingSessions."""

    def __init__(self, service=None, reject_login=False):
        self.service = service or FakeService()
        self.reject_login = reject_login
        self.connect_count = 0
        self.sessions = []

    def __call__(self, params):
        self.connect_count += 1
        if self.reject_login:
            raise AuthenticationError(f"Login rejected for user '{params.user}'")
        session = CountingSession(self.service)
        self.sessions.append(session)
        return session

    @property
    def disconnect_count(self):
        return sum(session.close_count for session in self.sessions)


@pytest.fixture
def fake_service():
    return FakeService()


@pytest.fixture
def fake_connector(fake_service):
    return FakeConnector(fake_service)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI attached to the package logger during a test."""
    yield
    logger = logging.getLogger("src.omi")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def pytest_collection_modifyitems(config, items):
    """Mark tests that need a metadata server as integration and the rest as unit."""
    for item in items:
        if item.get_closest_marker("integration") or "test_integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
