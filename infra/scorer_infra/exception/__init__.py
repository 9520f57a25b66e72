from .configuration_error import ConfigurationError
