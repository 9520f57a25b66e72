from typing import Any, Iterable, Optional

import logging
import re

from botocore.exceptions import ClientError

from pydantic import BaseModel

from ..common import naming
from ..common.aws import (
    make_aws_console_alarm_url,
    make_aws_console_event_rule_url
)
from ..settings import AwsSettings


ALARM_STATE_ALARM = 'ALARM'
RULE_STATE_ENABLED = 'ENABLED'

logger = logging.getLogger(__name__)


class ScheduledTaskStatus(BaseModel):
    name: str
    rule_exists: bool = False
    rule_name: Optional[str] = None
    rule_arn: Optional[str] = None
    rule_enabled: bool = False
    schedule_expression: Optional[str] = None
    rule_infrastructure_website_url: Optional[str] = None
    target_count: int = 0
    alarm_states: dict[str, str] = {}
    alarm_infrastructure_website_urls: dict[str, str] = {}
    error: Optional[str] = None

    @property
    def alarms_in_alarm_state(self) -> list[str]:
        return [alarm_name for alarm_name, state in self.alarm_states.items()
                if state == ALARM_STATE_ALARM]

    def is_healthy(self) -> bool:
        return (self.error is None) and self.rule_exists and \
                self.rule_enabled and (self.target_count > 0) and \
                (len(self.alarms_in_alarm_state) == 0)


class ScheduleStatusChecker:
    """
    Looks up the deployed schedule rule, its targets and its alarms for each
    scheduled task. Rule names are auto-named by Pulumi, so rules are found
    by the 'rule-<name>' prefix.
    """

    def __init__(self, aws_settings: AwsSettings,
            events_client: Optional[Any] = None,
            cloudwatch_client: Optional[Any] = None) -> None:
        self.aws_settings = aws_settings
        self.events_client = events_client or aws_settings.make_events_client()
        self.cloudwatch_client = cloudwatch_client or \
                aws_settings.make_cloudwatch_client()

    def check_all(self, names: Iterable[str]) -> list[ScheduledTaskStatus]:
        statuses: list[ScheduledTaskStatus] = []

        for name in names:
            logger.info(f"Checking scheduled task '{name}' ...")
            try:
                statuses.append(self.check(name))
            except Exception as ex:
                logger.exception(f"check_all() failed on scheduled task '{name}'")
                statuses.append(ScheduledTaskStatus(name=name, error=str(ex)))

        return statuses

    def check(self, name: str) -> ScheduledTaskStatus:
        status = ScheduledTaskStatus(name=name)

        rule = self.find_rule(name)

        if rule is None:
            logger.warning(f"No schedule rule found for scheduled task '{name}'")
        else:
            region = self.aws_settings.region
            status.rule_exists = True
            status.rule_name = rule['Name']
            status.rule_arn = rule.get('Arn')
            status.rule_enabled = (rule.get('State') == RULE_STATE_ENABLED)
            status.schedule_expression = rule.get('ScheduleExpression')
            status.rule_infrastructure_website_url = make_aws_console_event_rule_url(
                    status.rule_name, region)
            status.target_count = self.count_targets(status.rule_name)

            if not status.rule_enabled:
                logger.warning(f"Schedule rule {status.rule_name} for '{name}' is {rule.get('State')}")

        status.alarm_states = self.find_alarm_states(name)
        status.alarm_infrastructure_website_urls = {
            alarm_name: url for alarm_name, url in (
                (alarm_name, make_aws_console_alarm_url(alarm_name, self.aws_settings.region))
                for alarm_name in status.alarm_states
            ) if url
        }

        for alarm_name in status.alarms_in_alarm_state:
            logger.warning(f"Alarm {alarm_name} for scheduled task '{name}' is in ALARM state")

        return status

    def find_rule(self, name: str) -> Optional[dict[str, Any]]:
        prefix = naming.rule_name(name)
        # Pulumi appends a dash and 7 hex digits to auto-named resources
        name_pattern = re.compile(re.escape(prefix) + r'(-[0-9a-f]{7})?')

        candidates = [
            rule for rule in self.list_rules(prefix)
            if name_pattern.fullmatch(rule['Name'])
        ]

        if not candidates:
            return None

        if len(candidates) > 1:
            logger.warning(f"Found {len(candidates)} rules with prefix '{prefix}', using the first")

        try:
            return self.events_client.describe_rule(Name=candidates[0]['Name'])
        except ClientError as client_error:
            error_code = client_error.response['Error']['Code']
            # Happens if the rule is deleted between listing and describing it
            if error_code == 'ResourceNotFoundException':
                logger.warning(f"find_rule(): rule {candidates[0]['Name']} not found, exception = {client_error}")
                return None

            raise client_error

    def list_rules(self, prefix: str) -> list[dict[str, Any]]:
        rules: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {
            'NamePrefix': prefix,
        }

        while True:
            response = self.events_client.list_rules(**kwargs)
            rules += response.get('Rules', [])

            next_token = response.get('NextToken')

            if not next_token:
                return rules

            kwargs['NextToken'] = next_token

    def count_targets(self, rule_name: str) -> int:
        response = self.events_client.list_targets_by_rule(Rule=rule_name)
        return len(response.get('Targets', []))

    def find_alarm_states(self, name: str) -> dict[str, str]:
        response = self.cloudwatch_client.describe_alarms(
                AlarmNames=naming.all_alarm_names(name))

        return {
            alarm['AlarmName']: alarm['StateValue']
            for alarm in response.get('MetricAlarms', [])
        }
