from typing import Any, Optional

from dataclasses import dataclass
import json
import logging

import pulumi
import pulumi_aws as aws

from .alarms import AlarmSet, create_alarms
from .common import naming
from .policies import (
    ECS_TASK_EXECUTION_ROLE_POLICY_ARN,
    make_events_assume_role_policy,
    make_events_role_inline_policies
)
from .secrets_manager import EnvironmentVar, SecretRef
from .settings import AlarmSettings, ScheduledTaskConfig, ScheduledTaskOptions


logger = logging.getLogger(__name__)

LAUNCH_TYPE_FARGATE = 'FARGATE'
NETWORK_MODE_AWSVPC = 'awsvpc'
EVENTS_ROLE_TAGS = {
    'dpopp': '',
}


@dataclass
class ScheduledTargetResources:
    events_role: aws.iam.Role
    event_target: aws.cloudwatch.EventTarget


@dataclass
class ScheduledTaskResources:
    name: str
    log_group: aws.cloudwatch.LogGroup
    task_definition: aws.ecs.TaskDefinition
    event_rule: aws.cloudwatch.EventRule
    # Declared once the task definition and role ARNs are known
    target: pulumi.Output[ScheduledTargetResources]
    alarm_set: AlarmSet


def make_container_definitions(name: str, image: str, command: list[str],
        log_group_name: str, region: str, options: ScheduledTaskOptions,
        environment: list[EnvironmentVar], secrets: list[SecretRef]) -> str:
    container: dict[str, Any] = {
        'name': naming.container_name(name),
        'image': image,
        'cpu': options.cpu,
        'memory': options.memory,
        'essential': True,
        'command': command,
        'environment': list(environment),
        'secrets': list(secrets),
        'logConfiguration': {
            'logDriver': 'awslogs',
            'options': {
                'awslogs-group': log_group_name,
                'awslogs-region': region,
                'awslogs-stream-prefix': name,
            },
        },
    }

    return json.dumps([container])


def declare_events_target(name: str, config: ScheduledTaskConfig,
        event_rule: aws.cloudwatch.EventRule,
        task_definition: aws.ecs.TaskDefinition,
        task_definition_arn: str, task_role_arn: str,
        execution_role_arn: str, secret_arn: str) -> ScheduledTargetResources:
    logger.debug(f"Declaring events role for '{name}' with {task_definition_arn=}, " +
            f"{task_role_arn=}, {execution_role_arn=}")

    inline_policies = make_events_role_inline_policies(
        task_definition_arn=task_definition_arn,
        task_role_arn=task_role_arn,
        execution_role_arn=execution_role_arn,
        secret_arn=secret_arn)

    events_role = aws.iam.Role(naming.events_role_name(name),
        assume_role_policy=make_events_assume_role_policy(),
        inline_policies=[
            aws.iam.RoleInlinePolicyArgs(name=policy_name, policy=policy)
            for policy_name, policy in inline_policies.items()
        ],
        managed_policy_arns=[
            ECS_TASK_EXECUTION_ROLE_POLICY_ARN,
        ],
        tags=EVENTS_ROLE_TAGS)

    event_target = aws.cloudwatch.EventTarget(naming.target_name(name),
        rule=event_rule.name,
        arn=config.cluster_arn,
        role_arn=events_role.arn,
        ecs_target=aws.cloudwatch.EventTargetEcsTargetArgs(
            task_count=1,
            task_definition_arn=task_definition.arn,
            launch_type=LAUNCH_TYPE_FARGATE,
            network_configuration=aws.cloudwatch.EventTargetEcsTargetNetworkConfigurationArgs(
                assign_public_ip=False,
                security_groups=[config.security_group_id],
                subnets=config.subnets,
            ),
        ))

    return ScheduledTargetResources(events_role=events_role,
            event_target=event_target)


def provision_scheduled_task(name: str,
        config: ScheduledTaskConfig,
        environment: list[EnvironmentVar],
        secrets: pulumi.Input[list[SecretRef]],
        scorer_secret_manager_arn: pulumi.Input[str],
        alarm_period_seconds: Optional[int] = None,
        enable_invocation_alerts: bool = False) -> ScheduledTaskResources:
    """
    Declare everything needed to run a command on a schedule in a Fargate
    task: a log group, the task definition, the schedule rule and its
    target, the role EventBridge assumes to start the task, and optionally
    alarms on the rule metrics and the task's log output.

    The command is wrapped so that it prints a success marker when it exits
    with status 0. The unsuccessful runs alarm compares the count of that
    marker with the number of rule invocations.
    """
    options = ScheduledTaskOptions.from_config(config)
    alarm_settings = AlarmSettings(alarm_period_seconds=alarm_period_seconds,
            enable_invocation_alerts=enable_invocation_alerts)

    logger.info(f"Declaring scheduled task '{name}' with schedule '{config.schedule_expression}'")
    logger.debug(f"Scheduled task '{name}' {options=}, {alarm_settings=}")

    success_message = naming.make_success_message(name)
    command = naming.wrap_command(command=config.command, name=name)

    log_group = aws.cloudwatch.LogGroup(naming.log_group_name(name),
        retention_in_days=options.log_retention_in_days)

    ephemeral_storage: Optional[aws.ecs.TaskDefinitionEphemeralStorageArgs] = None

    if options.has_ephemeral_storage():
        ephemeral_storage = aws.ecs.TaskDefinitionEphemeralStorageArgs(
            size_in_gib=options.ephemeral_storage_size_in_gib)

    container_definitions = pulumi.Output.all(
        config.docker_image,
        log_group.name,
        secrets,
    ).apply(
        lambda args: make_container_definitions(
            name=name,
            image=args[0],
            command=command,
            log_group_name=args[1],
            region=config.region,
            options=options,
            environment=environment,
            secrets=args[2] or []))

    task_definition = aws.ecs.TaskDefinition(name,
        family=name,
        cpu=str(options.cpu),
        memory=str(options.memory),
        network_mode=NETWORK_MODE_AWSVPC,
        requires_compatibilities=[LAUNCH_TYPE_FARGATE],
        execution_role_arn=config.execution_role_arn,
        task_role_arn=config.task_role_arn,
        ephemeral_storage=ephemeral_storage,
        container_definitions=container_definitions)

    event_rule = aws.cloudwatch.EventRule(naming.rule_name(name),
        schedule_expression=config.schedule_expression)

    target = pulumi.Output.all(
        task_definition.arn,
        task_definition.task_role_arn,
        config.execution_role_arn,
        scorer_secret_manager_arn,
    ).apply(
        lambda args: declare_events_target(
            name=name,
            config=config,
            event_rule=event_rule,
            task_definition=task_definition,
            task_definition_arn=args[0],
            task_role_arn=args[1],
            execution_role_arn=args[2],
            secret_arn=args[3]))

    alarm_set = create_alarms(name=name,
        rule_name=event_rule.name,
        log_group_name=log_group.name,
        alert_topic_arn=config.alert_topic_arn,
        alarm_settings=alarm_settings,
        success_message=success_message)

    return ScheduledTaskResources(
        name=name,
        log_group=log_group,
        task_definition=task_definition,
        event_rule=event_rule,
        target=target,
        alarm_set=alarm_set)


def create_scheduled_task(name: str,
        config: ScheduledTaskConfig,
        environment: list[EnvironmentVar],
        secrets: pulumi.Input[list[SecretRef]],
        scorer_secret_manager_arn: pulumi.Input[str],
        alarm_period_seconds: Optional[int] = None,
        enable_invocation_alerts: bool = False) -> pulumi.Output[str]:
    """Returns the id of the task definition created for the scheduled task."""
    resources = provision_scheduled_task(name=name,
        config=config,
        environment=environment,
        secrets=secrets,
        scorer_secret_manager_arn=scorer_secret_manager_arn,
        alarm_period_seconds=alarm_period_seconds,
        enable_invocation_alerts=enable_invocation_alerts)

    return resources.task_definition.id
