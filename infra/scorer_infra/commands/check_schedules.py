from typing import Optional, Sequence

import argparse
import json
import logging
import sys

from ..services import ScheduleStatusChecker
from ..settings import AwsSettings

logger = logging.getLogger(__name__)


class Command:
    help = 'Report the rule, target and alarm status of deployed scheduled tasks'

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('names', nargs='+',
                help='Scheduled task names, as passed to create_scheduled_task()')
        parser.add_argument('--region', default=None,
                help='AWS region, defaults to AWS_REGION / AWS_DEFAULT_REGION')
        parser.add_argument('--fail-on-alarm', action='store_true',
                help='Exit with status 1 if any scheduled task is unhealthy')

    def handle(self, *args, **options) -> int:
        aws_settings = AwsSettings.from_environment(region=options.get('region'))
        checker = ScheduleStatusChecker(aws_settings=aws_settings)

        statuses = checker.check_all(options['names'])

        unhealthy_count = 0
        for status in statuses:
            healthy = status.is_healthy()
            if not healthy:
                unhealthy_count += 1

            output = status.model_dump()
            output['healthy'] = healthy
            output['alarms_in_alarm_state'] = status.alarms_in_alarm_state
            print(json.dumps(output, sort_keys=True))

        logger.info(f"Checked {len(statuses)} scheduled tasks, {unhealthy_count} unhealthy")

        if unhealthy_count and options.get('fail_on_alarm'):
            return 1

        return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO,
            format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    command = Command()
    parser = argparse.ArgumentParser(description=command.help)
    command.add_arguments(parser)
    args = parser.parse_args(argv)

    return command.handle(**vars(args))


if __name__ == '__main__':
    sys.exit(main())
