"""Exception types shared by the store, the services and the HTTP layer."""


class DashboardError(Exception):
    """Base class for all application errors."""


class ConfigurationMissing(DashboardError):
    """A required configuration value (e.g. DATABASE_URL) is not set."""

    def __init__(self, variable):
        self.variable = variable
        super().__init__(f'{variable} nie jest ustawiona')


class StoreUnavailable(DashboardError):
    """The relational store could not be reached or a query failed."""

    def __init__(self, message, cause=None):
        self.cause = cause
        super().__init__(message)


class FilterValueInvalid(DashboardError):
    """A query-string filter could not be parsed."""

    def __init__(self, field, value):
        self.field = field
        self.value = value
        super().__init__(f'Nieprawidłowa wartość parametru {field}: {value!r}')
