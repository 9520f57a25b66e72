from typing import Optional

from urllib.parse import quote


AWS_CONSOLE_HOSTNAME = 'console.aws.amazon.com'

CLOUDWATCH_HOME_PATH = 'cloudwatch/home'
EVENTS_HOME_PATH = 'events/home'

IAM_ROLE_ARN_PREFIX = 'arn:aws:iam::'


def normalize_role_arn(role_arn_or_name: str, aws_account_id: Optional[str]) -> str:
    """
    Expand a bare role name into a role ARN in the given account. ARNs, and
    names without a known account, are returned unchanged.
    """
    if aws_account_id and not role_arn_or_name.startswith('arn:'):
        return f"{IAM_ROLE_ARN_PREFIX}{aws_account_id}:role/{role_arn_or_name}"

    return role_arn_or_name


def make_regioned_console_url(region: str, home_path: str, fragment: str) -> str:
    return f"https://{region}.{AWS_CONSOLE_HOSTNAME}/{home_path}" + \
            f"?region={quote(region)}#{fragment}"


def make_aws_console_event_rule_url(rule_name: Optional[str],
        region: Optional[str]) -> Optional[str]:
    if not rule_name or not region:
        return None

    return make_regioned_console_url(region, EVENTS_HOME_PATH,
            '/eventbus/default/rules/' + quote(rule_name))


def make_aws_console_alarm_url(alarm_name: Optional[str],
        region: Optional[str]) -> Optional[str]:
    if not alarm_name or not region:
        return None

    return make_regioned_console_url(region, CLOUDWATCH_HOME_PATH,
            'alarmsV2:alarm/' + quote(alarm_name))
