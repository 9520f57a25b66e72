import logging

import pulumi

from scorer_infra.scheduled_tasks import create_scheduled_task
from scorer_infra.secrets_manager import make_environment, make_secret_refs
from scorer_infra.stack_config import load_scheduled_task_specs, load_service_settings


logging.basicConfig(level=logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

logger = logging.getLogger(__name__)

service = load_service_settings()
specs = load_scheduled_task_specs()

pulumi.log.info(f"Provisioning {len(specs)} scheduled tasks on {service.cluster_arn}")

task_definition_ids = {}

for spec in specs:
    logger.info(f"Declaring scheduled task '{spec.name}' on {spec.schedule_expression}")
    task_definition_ids[spec.name] = create_scheduled_task(
        name=spec.name,
        config=spec.make_task_config(service),
        environment=make_environment(spec.environment),
        secrets=make_secret_refs(service.secret_arn, spec.secret_keys),
        scorer_secret_manager_arn=service.secret_arn,
        alarm_period_seconds=spec.alarm_period_seconds,
        enable_invocation_alerts=spec.enable_invocation_alerts)

pulumi.export('scheduledTaskDefinitionIds', task_definition_ids)
