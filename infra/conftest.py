from typing import Any, Callable, Optional

from dataclasses import dataclass

import pytest
from pytest_factoryboy import register

import pulumi

from tests.factories import (
    ScheduledTaskConfigFactory,
    ServiceSettingsFactory
)

TEST_ACCOUNT_ID = '123456789012'
TEST_REGION = 'us-west-2'


register(ScheduledTaskConfigFactory)
register(ServiceSettingsFactory)


@dataclass
class RecordedResource:
    typ: str
    name: str
    inputs: dict[str, Any]

    @property
    def kind(self) -> str:
        return self.typ.split(':')[-1]


class RecordingMocks(pulumi.runtime.Mocks):
    """
    Echoes inputs back as outputs, adds a fake ARN and name to every resource,
    and remembers every registration so tests can inspect the resource graph.
    """

    def __init__(self) -> None:
        self.resources: list[RecordedResource] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(RecordedResource(typ=args.typ, name=args.name,
                inputs=dict(args.inputs)))

        state = dict(args.inputs)
        state.setdefault('name', args.name)

        if args.typ == 'aws:ecs/taskDefinition:TaskDefinition':
            state['arn'] = f"arn:aws:ecs:{TEST_REGION}:{TEST_ACCOUNT_ID}:task-definition/{args.name}:1"
        else:
            kind = args.typ.split(':')[-1].lower()
            state['arn'] = f"arn:aws:mock:{TEST_REGION}:{TEST_ACCOUNT_ID}:{kind}/{args.name}"

        return [f"{args.name}_id", state]

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}

    def of_kind(self, kind: str) -> list[RecordedResource]:
        return [r for r in self.resources if r.kind == kind]

    def find(self, kind: str, name: str) -> Optional[RecordedResource]:
        return next((r for r in self.of_kind(kind) if r.name == name), None)


@pytest.fixture
def pulumi_mocks() -> RecordingMocks:
    mocks = RecordingMocks()
    pulumi.runtime.set_mocks(mocks, preview=False)
    return mocks


def run_pulumi(fn: Callable[[], Any]) -> Any:
    """
    Runs fn inside a Pulumi test program and waits for every output it
    returns, including resources declared inside apply() callbacks.
    Returns whatever fn returned, unwrapped from the (result, output) pair.
    """
    holder: dict[str, Any] = {}

    @pulumi.runtime.test
    def program():
        result, output = fn()
        holder['result'] = result
        return output

    program()
    return holder['result']


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS Credentials for moto."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', TEST_REGION)
    monkeypatch.delenv('AWS_REGION', raising=False)
