from typing import Any

import json

POLICY_VERSION = '2012-10-17'

ECS_TASK_EXECUTION_ROLE_POLICY_ARN = \
    'arn:aws:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy'

ALLOW_EXEC_POLICY_NAME = 'allow_exec'
ALLOW_SECRETS_ACCESS_POLICY_NAME = 'allow_iam_secrets_access'
ALLOW_RUN_TASK_POLICY_NAME = 'allow_run_task'
ALLOW_PASS_ROLE_POLICY_NAME = 'allow_pass_role'

EXEC_CHANNEL_ACTIONS = [
    'ssmmessages:CreateControlChannel',
    'ssmmessages:CreateDataChannel',
    'ssmmessages:OpenControlChannel',
    'ssmmessages:OpenDataChannel',
]

ASSUME_ROLE_PRINCIPALS = [
    'ecs-tasks.amazonaws.com',
    'events.amazonaws.com',
]


def make_policy_document(statements: list[dict[str, Any]]) -> str:
    return json.dumps({
        'Version': POLICY_VERSION,
        'Statement': statements,
    })


def make_events_assume_role_policy() -> str:
    return make_policy_document([
        {
            'Action': 'sts:AssumeRole',
            'Effect': 'Allow',
            'Sid': '',
            'Principal': {
                'Service': service,
            },
        } for service in ASSUME_ROLE_PRINCIPALS
    ])


def make_exec_channel_policy() -> str:
    return make_policy_document([
        {
            'Effect': 'Allow',
            'Action': EXEC_CHANNEL_ACTIONS,
            'Resource': '*',
        }
    ])


def make_secrets_access_policy(secret_arn: str) -> str:
    return make_policy_document([
        {
            'Action': ['secretsmanager:GetSecretValue'],
            'Effect': 'Allow',
            'Resource': secret_arn,
        }
    ])


def make_run_task_policy(task_definition_arn: str) -> str:
    return make_policy_document([
        {
            'Action': ['ecs:RunTask'],
            'Effect': 'Allow',
            'Resource': task_definition_arn,
        }
    ])


def make_pass_role_policy(execution_role_arn: str, task_role_arn: str) -> str:
    return make_policy_document([
        {
            'Action': ['iam:PassRole'],
            'Effect': 'Allow',
            'Resource': [execution_role_arn, task_role_arn],
        }
    ])


def make_events_role_inline_policies(task_definition_arn: str,
        task_role_arn: str, execution_role_arn: str,
        secret_arn: str) -> dict[str, str]:
    """
    Returns the inline policies of the role EventBridge assumes to launch a
    scheduled task, keyed by policy name.
    """
    return {
        ALLOW_EXEC_POLICY_NAME: make_exec_channel_policy(),
        ALLOW_SECRETS_ACCESS_POLICY_NAME: make_secrets_access_policy(secret_arn),
        ALLOW_RUN_TASK_POLICY_NAME: make_run_task_policy(task_definition_arn),
        ALLOW_PASS_ROLE_POLICY_NAME: make_pass_role_policy(
            execution_role_arn=execution_role_arn,
            task_role_arn=task_role_arn),
    }
