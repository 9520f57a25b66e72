from .aws_settings import AwsSettings
from .scheduled_task_config import (
    DEFAULT_CPU_UNITS,
    DEFAULT_MEMORY_MB,
    DEFAULT_LOG_RETENTION_IN_DAYS,
    ScheduledTaskConfig,
    ScheduledTaskOptions,
    AlarmSettings
)
