"""Shared fixtures for messenger tests."""

import pytest

from messenger.changes import ChangeSet, FieldChange, PropertyKind
from messenger.config import Settings
from messenger.entities import CustomFieldInfo, IssueRef, ProjectRef, UserRef
from messenger.jobs import DeliverySubmitter
from messenger.lookup import ReferenceResolver
from messenger.project_config import ProjectConfig

HOOK_URL = "https://discord.com/api/webhooks/1/token"


class FakeResolver(ReferenceResolver):
    """In-memory lookups keyed the way the host would key them."""

    def __init__(self, names=None, issues=None, users=None):
        self.names = names or {}
        self.issues = issues or {}
        self.users = users or {}

    def resolve(self, kind, id):
        return self.names.get((kind, str(id)))

    def find_issue(self, id):
        return self.issues.get(int(id))

    def find_user(self, id):
        return self.users.get(str(id))


class RecordingSubmitter(DeliverySubmitter):
    def __init__(self):
        self.requests = []

    def submit(self, request):
        self.requests.append(request)


def attr(key, old=None, new=None):
    return FieldChange(PropertyKind.ATTRIBUTE, key, old, new)


def cf(key, old=None, new=None):
    return FieldChange(PropertyKind.CUSTOM_FIELD, str(key), old, new)


def make_settings(**overrides) -> Settings:
    values = dict(
        messenger_url=HOOK_URL,
        messenger_channel="#dev",
        host_url="https://tracker.example.com",
        default_language="ja",
        notification_type="discord",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def alice():
    return UserRef(id=1, login="alice", name="Alice", discord_user_id="1001")


@pytest.fixture
def bob():
    return UserRef(id=2, login="bob", name="Bob", discord_user_id="1002")


@pytest.fixture
def carol():
    return UserRef(id=3, login="carol", name="Carol")


@pytest.fixture
def project():
    return ProjectRef(id=10, name="Website", identifier="website")


@pytest.fixture
def other_project():
    return ProjectRef(id=20, name="Backend", identifier="backend")


@pytest.fixture
def severity_field():
    return CustomFieldInfo(id=7, name="Severity", field_format="list", options={"s1": "Critical"})


@pytest.fixture
def resolver(alice, bob, carol):
    return FakeResolver(
        names={
            ("status", "1"): "New",
            ("status", "2"): "In Progress",
            ("priority", "4"): "High",
            ("user", "1"): "Alice",
            ("user", "2"): "Bob",
            ("version", "5"): "v1.0",
        },
        users={"1": alice, "2": bob, "3": carol},
    )


@pytest.fixture
def issue(project, alice, bob):
    return IssueRef(
        id=100,
        subject="Login page broken",
        project=project,
        tracker="Bug",
        author=alice,
        status="New",
        priority="High",
        assigned_to=bob,
        description="Clicking <Login> does nothing",
    )


@pytest.fixture
def config():
    return ProjectConfig(make_settings())


@pytest.fixture
def change_set_factory(alice):
    def build(*changes, actor=None, note=None, private_note=False, id=55):
        return ChangeSet(
            changes=tuple(changes),
            actor=actor or alice,
            note=note,
            private_note=private_note,
            id=id,
        )
    return build

