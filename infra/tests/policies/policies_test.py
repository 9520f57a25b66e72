import json

from scorer_infra.policies import (
    EXEC_CHANNEL_ACTIONS,
    make_events_assume_role_policy,
    make_events_role_inline_policies
)


TASK_DEFINITION_ARN = 'arn:aws:ecs:us-west-2:123456789012:task-definition/ReScore:3'
TASK_ROLE_ARN = 'arn:aws:iam::123456789012:role/scorer-task'
EXECUTION_ROLE_ARN = 'arn:aws:iam::123456789012:role/scorer-execution'
SECRET_ARN = 'arn:aws:secretsmanager:us-west-2:123456789012:secret:scorer-secrets'


def test_assume_role_policy():
    policy = json.loads(make_events_assume_role_policy())

    assert policy['Version'] == '2012-10-17'
    assert [
        (s['Effect'], s['Action'], s['Principal']['Service']) for s in policy['Statement']
    ] == [
        ('Allow', 'sts:AssumeRole', 'ecs-tasks.amazonaws.com'),
        ('Allow', 'sts:AssumeRole', 'events.amazonaws.com'),
    ]


def test_inline_policies_are_scoped():
    policies = {
        name: json.loads(policy) for name, policy in make_events_role_inline_policies(
            task_definition_arn=TASK_DEFINITION_ARN,
            task_role_arn=TASK_ROLE_ARN,
            execution_role_arn=EXECUTION_ROLE_ARN,
            secret_arn=SECRET_ARN).items()
    }

    assert list(policies.keys()) == [
        'allow_exec',
        'allow_iam_secrets_access',
        'allow_run_task',
        'allow_pass_role',
    ]

    exec_statement = policies['allow_exec']['Statement'][0]
    assert exec_statement['Action'] == EXEC_CHANNEL_ACTIONS
    assert exec_statement['Resource'] == '*'

    secrets_statement = policies['allow_iam_secrets_access']['Statement'][0]
    assert secrets_statement['Action'] == ['secretsmanager:GetSecretValue']
    assert secrets_statement['Resource'] == SECRET_ARN

    run_task_statement = policies['allow_run_task']['Statement'][0]
    assert run_task_statement['Action'] == ['ecs:RunTask']
    assert run_task_statement['Resource'] == TASK_DEFINITION_ARN

    pass_role_statement = policies['allow_pass_role']['Statement'][0]
    assert pass_role_statement['Action'] == ['iam:PassRole']
    assert pass_role_statement['Resource'] == [EXECUTION_ROLE_ARN, TASK_ROLE_ARN]

    for policy in policies.values():
        assert all(s['Effect'] == 'Allow' for s in policy['Statement'])
