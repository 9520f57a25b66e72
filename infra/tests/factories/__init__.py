from .scheduled_task_config_factory import ScheduledTaskConfigFactory
from .service_settings_factory import ServiceSettingsFactory
