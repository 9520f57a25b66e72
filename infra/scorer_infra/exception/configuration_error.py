from typing import Optional


class ConfigurationError(Exception):
    """
    Raised when stack configuration or AWS settings are missing or invalid.
    config_key names the Pulumi config key that was being read, if known.
    """

    def __init__(self, message: str, config_key: Optional[str] = None,
            cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.config_key = config_key
        self.__cause__ = cause

    @property
    def cause(self) -> Optional[BaseException]:
        return self.__cause__

    def __str__(self):
        if self.config_key:
            return f"{self.config_key}: {self.message}"

        return self.message
