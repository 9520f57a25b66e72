from conftest import run_pulumi

import pulumi

from scorer_infra.secrets_manager import (
    make_environment,
    make_secret_ref,
    make_secret_refs
)


SECRET_ARN = 'arn:aws:secretsmanager:us-west-2:123456789012:secret:scorer-secrets'


def test_make_environment():
    assert make_environment({'DEBUG': 'off', 'BATCH_SIZE': 1000}) == [
        {'name': 'DEBUG', 'value': 'off'},
        {'name': 'BATCH_SIZE', 'value': '1000'},
    ]

    assert make_environment({}) == []


def test_make_secret_ref():
    assert make_secret_ref(SECRET_ARN, 'DATABASE_URL') == {
        'name': 'DATABASE_URL',
        'valueFrom': f'{SECRET_ARN}:DATABASE_URL::',
    }


def test_make_secret_refs(pulumi_mocks):
    refs: list = []

    def program():
        secret_arn = pulumi.Output.from_input(SECRET_ARN)
        output = make_secret_refs(secret_arn, ['SECRET_KEY', 'DATABASE_URL'])
        return (None, output.apply(refs.extend))

    run_pulumi(program)

    assert [ref['name'] for ref in refs] == ['SECRET_KEY', 'DATABASE_URL']
    assert refs[1]['valueFrom'] == f'{SECRET_ARN}:DATABASE_URL::'
