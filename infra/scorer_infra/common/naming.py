"""
Resource names and log markers shared by the provisioner, the alarms and the
status checker. Every derived resource is keyed by the scheduled task name.
"""

SUCCESSFUL_RUN_METRIC_NAMESPACE = '/scheduled-tasks/runs/success'
CRON_JOB_ERROR_METRIC_NAMESPACE = '/scheduled-tasks/runs/errors'
CRON_JOB_ERROR_MARKER = 'CRONJOB ERROR:'

EVENTS_METRIC_NAMESPACE = 'AWS/Events'


def log_group_name(name: str) -> str:
    return f"scheduled-{name}"


def target_name(name: str) -> str:
    return f"scheduled-{name}"


def rule_name(name: str) -> str:
    return f"rule-{name}"


def events_role_name(name: str) -> str:
    return f"{name}-eventsRole"


def container_name(name: str) -> str:
    return f"{name}-container"


def missing_invocations_alarm_name(name: str) -> str:
    return f"MissingInvocations-{name}"


def failed_invocations_alarm_name(name: str) -> str:
    return f"FailedInvocations-{name}"


def unsuccessful_runs_alarm_name(name: str) -> str:
    return f"UnsuccessfulRuns-{name}"


def successful_run_metric_name(name: str) -> str:
    return f"SuccessfulRun-{name}"


def cron_job_error_metric_name(name: str) -> str:
    return f"CronJobErrorMsg-{name}"


def cron_job_error_alarm_name(name: str) -> str:
    return f"CronJobErrorMsgAlarm-{name}"


def all_alarm_names(name: str) -> list[str]:
    return [
        missing_invocations_alarm_name(name),
        failed_invocations_alarm_name(name),
        unsuccessful_runs_alarm_name(name),
        cron_job_error_alarm_name(name),
    ]


def make_success_message(name: str) -> str:
    return f"SUCCESS <{name}>"


def wrap_command(command: str, name: str) -> list[str]:
    """
    Runs the command through bash and echoes the success marker only when it
    exits with status 0.
    """
    return [
        '/bin/bash',
        '-c',
        command + f' && echo "{make_success_message(name)}"',
    ]


def quote_filter_pattern(text: str) -> str:
    return f'"{text}"'
