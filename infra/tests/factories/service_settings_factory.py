from scorer_infra.stack_config import ServiceSettings

import factory


class ServiceSettingsFactory(factory.Factory):
    class Meta:
        model = ServiceSettings

    docker_image = '123456789012.dkr.ecr.us-west-2.amazonaws.com/passport-scorer:8f3e2a1'
    execution_role_arn = 'scorer-execution'
    task_role_arn = 'scorer-task'
    account_id = '123456789012'
    cluster_arn = 'arn:aws:ecs:us-west-2:123456789012:cluster/scorer'
    subnets = factory.LazyFunction(lambda: ['subnet-0a1b2c3d'])
    security_group_id = 'sg-0123456789abcdef0'
    alert_topic_arn = 'arn:aws:sns:us-west-2:123456789012:scorer-alerts'
    secret_arn = 'arn:aws:secretsmanager:us-west-2:123456789012:secret:scorer-secrets'
    region = 'us-west-2'
