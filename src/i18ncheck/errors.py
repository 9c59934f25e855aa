class I18nCheckError(Exception):
    """Base class for errors that abort a run before a report is produced."""


class ConfigError(I18nCheckError):
    pass


class ProjectNotFoundError(I18nCheckError):
    pass
