from typing import Optional, Union

from pulumi import Output
from pydantic import BaseModel, ConfigDict

DEFAULT_CPU_UNITS = 256
DEFAULT_MEMORY_MB = 2048
DEFAULT_LOG_RETENTION_IN_DAYS = 90

StrInput = Union[str, Output[str]]


class ScheduledTaskConfig(BaseModel):
    """
    Everything a scheduled task needs from the service it belongs to, plus
    the command and the schedule it runs on.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    docker_image: StrInput
    execution_role_arn: StrInput
    task_role_arn: StrInput
    cluster_arn: StrInput
    subnets: Union[list[str], Output[list[str]]]
    security_group_id: StrInput
    alert_topic_arn: StrInput
    region: str

    command: str
    schedule_expression: str
    ephemeral_storage_size_in_gib: Optional[int] = None
    cpu: Optional[int] = None
    memory: Optional[int] = None


class ScheduledTaskOptions(BaseModel):
    cpu: int = DEFAULT_CPU_UNITS
    memory: int = DEFAULT_MEMORY_MB
    # Omitted from the task definition unless set
    ephemeral_storage_size_in_gib: Optional[int] = None
    log_retention_in_days: int = DEFAULT_LOG_RETENTION_IN_DAYS

    @staticmethod
    def from_config(config: ScheduledTaskConfig) -> 'ScheduledTaskOptions':
        return ScheduledTaskOptions(
            cpu=config.cpu or DEFAULT_CPU_UNITS,
            memory=config.memory or DEFAULT_MEMORY_MB,
            ephemeral_storage_size_in_gib=config.ephemeral_storage_size_in_gib or None
        )

    def has_ephemeral_storage(self) -> bool:
        return bool(self.ephemeral_storage_size_in_gib)


class AlarmSettings(BaseModel):
    alarm_period_seconds: Optional[int] = None
    enable_invocation_alerts: bool = False

    def should_create_alarms(self) -> bool:
        return bool(self.alarm_period_seconds)

    def should_create_missing_invocations_alarm(self) -> bool:
        return self.should_create_alarms() and self.enable_invocation_alerts
