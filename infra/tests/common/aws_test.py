from typing import Optional

import pytest

from scorer_infra.common.aws import (
    make_aws_console_alarm_url,
    make_aws_console_event_rule_url,
    normalize_role_arn
)


@pytest.mark.parametrize("""
    role_arn_or_name, aws_account_id, expected_arn
""", [
    ('scorer-task', '123456789012', 'arn:aws:iam::123456789012:role/scorer-task'),
    ('arn:aws:iam::123456789012:role/scorer-task', '999999999999',
     'arn:aws:iam::123456789012:role/scorer-task'),
    ('scorer-task', None, 'scorer-task'),
])
def test_normalize_role_arn(role_arn_or_name: str,
        aws_account_id: Optional[str], expected_arn: str):
    assert normalize_role_arn(role_arn_or_name, aws_account_id) == expected_arn


def test_console_urls():
    assert make_aws_console_event_rule_url('rule-ReScore-abc1234', 'us-west-2') == \
            'https://us-west-2.console.aws.amazon.com/events/home?region=us-west-2' + \
            '#/eventbus/default/rules/rule-ReScore-abc1234'

    assert make_aws_console_alarm_url('UnsuccessfulRuns-ReScore', 'us-west-2') == \
            'https://us-west-2.console.aws.amazon.com/cloudwatch/home?region=us-west-2' + \
            '#alarmsV2:alarm/UnsuccessfulRuns-ReScore'

    assert make_aws_console_alarm_url(None, 'us-west-2') is None
    assert make_aws_console_event_rule_url('rule-ReScore', None) is None
