"""
Reads the scheduled task definitions of a stack from Pulumi config.

Example stack config:

    config:
      aws:region: us-west-2
      scorer:dockerImage: 123456789012.dkr.ecr.us-west-2.amazonaws.com/scorer:abc123
      scorer:executionRoleArn: arn:aws:iam::123456789012:role/scorer-execution
      scorer:taskRoleArn: arn:aws:iam::123456789012:role/scorer-task
      scorer:clusterArn: arn:aws:ecs:us-west-2:123456789012:cluster/scorer
      scorer:subnets: [subnet-1, subnet-2]
      scorer:securityGroupId: sg-123456
      scorer:alertTopicArn: arn:aws:sns:us-west-2:123456789012:scorer-alerts
      scorer:secretArn: arn:aws:secretsmanager:us-west-2:123456789012:secret:scorer
      scorer:scheduledTaskDefaults:
        alarmPeriodSeconds: 3600
      scorer:scheduledTasks:
        ReScore:
          command: python manage.py rescore
          scheduleExpression: rate(1 hour)
          enableInvocationAlerts: true
"""
from typing import Any, Mapping, Optional

import logging
import re

import pulumi
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .common.aws import normalize_role_arn
from .common.utils import deepmerge, to_camel
from .exception import ConfigurationError
from .settings import ScheduledTaskConfig


CONFIG_NAMESPACE = 'scorer'

CRON_REGEX = re.compile(r"cron\(\s*(\S+(?:\s+\S+){5})\s*\)")
RATE_REGEX = re.compile(r"rate\(\s*(\d+)\s+(minute|hour|day)(s?)\s*\)")

logger = logging.getLogger(__name__)


class CamelCaseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True,
            extra='forbid')


class ServiceSettings(CamelCaseModel):
    docker_image: str
    execution_role_arn: str
    task_role_arn: str
    cluster_arn: str
    subnets: list[str]
    security_group_id: str
    alert_topic_arn: str
    secret_arn: str
    account_id: Optional[str] = None
    region: str

    def model_post_init(self, __context: Any) -> None:
        self.execution_role_arn = normalize_role_arn(self.execution_role_arn,
                aws_account_id=self.account_id)
        self.task_role_arn = normalize_role_arn(self.task_role_arn,
                aws_account_id=self.account_id)


class ScheduledTaskSpec(CamelCaseModel):
    name: str
    command: str
    schedule_expression: str
    cpu: Optional[int] = None
    memory: Optional[int] = None
    ephemeral_storage_size_in_gib: Optional[int] = Field(None,
            alias='ephemeralStorageSizeInGiB')
    alarm_period_seconds: Optional[int] = None
    enable_invocation_alerts: bool = False
    environment: dict[str, str] = {}
    secret_keys: list[str] = []

    @field_validator('schedule_expression')
    @classmethod
    def check_schedule_expression(cls, v: str) -> str:
        v = v.strip()

        if CRON_REGEX.fullmatch(v):
            return v

        m = RATE_REGEX.fullmatch(v)

        if not m:
            raise ValueError(f"Schedule '{v}' is invalid, expected cron(...) with 6 fields or rate(...)")

        value = int(m.group(1))

        if value < 1:
            raise ValueError(f"Schedule '{v}' is invalid, the rate must be positive")

        # EventBridge wants "1 hour" but "2 hours"
        if (value == 1) == bool(m.group(3)):
            expected_unit = m.group(2) if value == 1 else m.group(2) + 's'
            raise ValueError(f"Schedule '{v}' is invalid, expected '{value} {expected_unit}'")

        return v

    def make_task_config(self, service: ServiceSettings) -> ScheduledTaskConfig:
        return ScheduledTaskConfig(
            docker_image=service.docker_image,
            execution_role_arn=service.execution_role_arn,
            task_role_arn=service.task_role_arn,
            cluster_arn=service.cluster_arn,
            subnets=service.subnets,
            security_group_id=service.security_group_id,
            alert_topic_arn=service.alert_topic_arn,
            region=service.region,
            command=self.command,
            schedule_expression=self.schedule_expression,
            ephemeral_storage_size_in_gib=self.ephemeral_storage_size_in_gib,
            cpu=self.cpu,
            memory=self.memory)


def parse_service_settings(raw: Mapping[str, Any]) -> ServiceSettings:
    try:
        return ServiceSettings.model_validate(dict(raw))
    except ValidationError as validation_error:
        raise ConfigurationError(
                f"Invalid '{CONFIG_NAMESPACE}' service configuration: {validation_error}",
                config_key=CONFIG_NAMESPACE, cause=validation_error)


def parse_scheduled_task_specs(raw_tasks: Mapping[str, Mapping[str, Any]],
        defaults: Optional[Mapping[str, Any]] = None) -> list[ScheduledTaskSpec]:
    specs: list[ScheduledTaskSpec] = []

    for name, raw_task in raw_tasks.items():
        merged = deepmerge(defaults, raw_task, {'name': name})

        try:
            specs.append(ScheduledTaskSpec.model_validate(merged))
        except ValidationError as validation_error:
            raise ConfigurationError(
                    f"Invalid scheduled task '{name}': {validation_error}",
                    config_key=f"{CONFIG_NAMESPACE}:scheduledTasks.{name}",
                    cause=validation_error)

        logger.debug(f"Parsed scheduled task '{name}': {specs[-1]}")

    return specs


def load_service_settings(config: Optional[pulumi.Config] = None,
        aws_config: Optional[pulumi.Config] = None) -> ServiceSettings:
    config = config or pulumi.Config(CONFIG_NAMESPACE)
    aws_config = aws_config or pulumi.Config('aws')

    return parse_service_settings({
        'dockerImage': config.require('dockerImage'),
        'executionRoleArn': config.require('executionRoleArn'),
        'taskRoleArn': config.require('taskRoleArn'),
        'clusterArn': config.require('clusterArn'),
        'subnets': config.require_object('subnets'),
        'securityGroupId': config.require('securityGroupId'),
        'alertTopicArn': config.require('alertTopicArn'),
        'secretArn': config.require('secretArn'),
        'accountId': config.get('accountId'),
        'region': aws_config.require('region'),
    })


def load_scheduled_task_specs(config: Optional[pulumi.Config] = None) \
        -> list[ScheduledTaskSpec]:
    config = config or pulumi.Config(CONFIG_NAMESPACE)

    raw_tasks = config.get_object('scheduledTasks') or {}

    if not raw_tasks:
        logger.warning(f"No '{CONFIG_NAMESPACE}:scheduledTasks' configured")

    return parse_scheduled_task_specs(raw_tasks,
            defaults=config.get_object('scheduledTaskDefaults'))
