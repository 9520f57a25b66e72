"""
CloudWatch monitoring for scheduled tasks.

Task health is derived from the EventBridge rule metrics and from two log
metric filters on the task's log group: one counting the success marker
printed after the command exits cleanly, and one counting lines that contain
the cron job error marker.
"""
from typing import Optional

from dataclasses import dataclass, field
import logging

import pulumi
import pulumi_aws as aws

from .common import naming
from .settings import AlarmSettings


logger = logging.getLogger(__name__)


@dataclass
class AlarmSet:
    alarms: list[aws.cloudwatch.MetricAlarm] = field(default_factory=list)
    log_metric_filters: list[aws.cloudwatch.LogMetricFilter] = field(default_factory=list)
    missing_invocations_alarm: Optional[aws.cloudwatch.MetricAlarm] = None
    failed_invocations_alarm: Optional[aws.cloudwatch.MetricAlarm] = None
    unsuccessful_runs_alarm: Optional[aws.cloudwatch.MetricAlarm] = None
    cron_job_error_alarm: Optional[aws.cloudwatch.MetricAlarm] = None


def create_alarms(name: str,
        rule_name: pulumi.Input[str],
        log_group_name: pulumi.Input[str],
        alert_topic_arn: pulumi.Input[str],
        alarm_settings: AlarmSettings,
        success_message: str,
        opts: Optional[pulumi.ResourceOptions] = None) -> AlarmSet:
    alarm_set = AlarmSet()

    if not alarm_settings.should_create_alarms():
        logger.info(f"No alarm period configured for scheduled task '{name}', skipping alarms")
        return alarm_set

    period = alarm_settings.alarm_period_seconds
    actions = [alert_topic_arn]

    if alarm_settings.should_create_missing_invocations_alarm():
        # The rule did not fire at all during the period
        missing_invocations_alarm_name = naming.missing_invocations_alarm_name(name)
        alarm_set.missing_invocations_alarm = aws.cloudwatch.MetricAlarm(
            missing_invocations_alarm_name,
            alarm_actions=actions,
            ok_actions=actions,
            comparison_operator='LessThanThreshold',
            datapoints_to_alarm=1,
            evaluation_periods=1,
            metric_name='Invocations',
            name=missing_invocations_alarm_name,
            namespace=naming.EVENTS_METRIC_NAMESPACE,
            dimensions={
                'RuleName': rule_name,
            },
            period=period,
            statistic='Sum',
            threshold=1,
            treat_missing_data='notBreaching',
            opts=opts)
        alarm_set.alarms.append(alarm_set.missing_invocations_alarm)

    # EventBridge could not start the task
    failed_invocations_alarm_name = naming.failed_invocations_alarm_name(name)
    alarm_set.failed_invocations_alarm = aws.cloudwatch.MetricAlarm(
        failed_invocations_alarm_name,
        alarm_actions=actions,
        ok_actions=actions,
        comparison_operator='GreaterThanThreshold',
        datapoints_to_alarm=1,
        evaluation_periods=1,
        metric_name='FailedInvocations',
        name=failed_invocations_alarm_name,
        namespace=naming.EVENTS_METRIC_NAMESPACE,
        dimensions={
            'RuleName': rule_name,
        },
        period=period,
        statistic='Sum',
        threshold=0,
        treat_missing_data='notBreaching',
        opts=opts)
    alarm_set.alarms.append(alarm_set.failed_invocations_alarm)

    # Runs that never printed the success message
    successful_run_metric_name = naming.successful_run_metric_name(name)

    alarm_set.log_metric_filters.append(aws.cloudwatch.LogMetricFilter(
        successful_run_metric_name,
        log_group_name=log_group_name,
        metric_transformation=aws.cloudwatch.LogMetricFilterMetricTransformationArgs(
            default_value='0',
            name=successful_run_metric_name,
            namespace=naming.SUCCESSFUL_RUN_METRIC_NAMESPACE,
            unit='Count',
            value='1',
        ),
        name=successful_run_metric_name,
        pattern=naming.quote_filter_pattern(success_message),
        opts=opts))

    unsuccessful_runs_alarm_name = naming.unsuccessful_runs_alarm_name(name)
    alarm_set.unsuccessful_runs_alarm = aws.cloudwatch.MetricAlarm(
        unsuccessful_runs_alarm_name,
        alarm_actions=actions,
        ok_actions=actions,
        comparison_operator='GreaterThanThreshold',
        datapoints_to_alarm=1,
        evaluation_periods=1,
        metric_queries=[
            aws.cloudwatch.MetricAlarmMetricQueryArgs(
                id='m1',
                metric=aws.cloudwatch.MetricAlarmMetricQueryMetricArgs(
                    metric_name=successful_run_metric_name,
                    namespace=naming.SUCCESSFUL_RUN_METRIC_NAMESPACE,
                    period=period,
                    stat='Sum',
                ),
            ),
            aws.cloudwatch.MetricAlarmMetricQueryArgs(
                id='m2',
                metric=aws.cloudwatch.MetricAlarmMetricQueryMetricArgs(
                    dimensions={
                        'RuleName': rule_name,
                    },
                    metric_name='Invocations',
                    namespace=naming.EVENTS_METRIC_NAMESPACE,
                    period=period,
                    stat='Sum',
                ),
            ),
            aws.cloudwatch.MetricAlarmMetricQueryArgs(
                expression='m2 - m1',
                id='e1',
                label='UnsuccessfulRuns',
                return_data=True,
            ),
        ],
        threshold=1,
        name=unsuccessful_runs_alarm_name,
        treat_missing_data='notBreaching',
        opts=opts)
    alarm_set.alarms.append(alarm_set.unsuccessful_runs_alarm)

    # Error marker printed by the command itself
    cron_job_error_metric_name = naming.cron_job_error_metric_name(name)

    alarm_set.log_metric_filters.append(aws.cloudwatch.LogMetricFilter(
        cron_job_error_metric_name,
        log_group_name=log_group_name,
        metric_transformation=aws.cloudwatch.LogMetricFilterMetricTransformationArgs(
            default_value='0',
            name=cron_job_error_metric_name,
            namespace=naming.CRON_JOB_ERROR_METRIC_NAMESPACE,
            unit='Count',
            value='1',
        ),
        name=cron_job_error_metric_name,
        pattern=naming.quote_filter_pattern(naming.CRON_JOB_ERROR_MARKER),
        opts=opts))

    cron_job_error_alarm_name = naming.cron_job_error_alarm_name(name)
    alarm_set.cron_job_error_alarm = aws.cloudwatch.MetricAlarm(
        cron_job_error_alarm_name,
        alarm_actions=actions,
        ok_actions=actions,
        comparison_operator='GreaterThanOrEqualToThreshold',
        datapoints_to_alarm=1,
        evaluation_periods=1,
        insufficient_data_actions=[],
        metric_name=cron_job_error_metric_name,
        name=cron_job_error_alarm_name,
        namespace=naming.CRON_JOB_ERROR_METRIC_NAMESPACE,
        period=period,
        statistic='Sum',
        threshold=1,
        treat_missing_data='notBreaching',
        opts=opts)
    alarm_set.alarms.append(alarm_set.cron_job_error_alarm)

    logger.info(f"Declared {len(alarm_set.alarms)} alarms and " +
            f"{len(alarm_set.log_metric_filters)} log metric filters for scheduled task '{name}'")

    return alarm_set
