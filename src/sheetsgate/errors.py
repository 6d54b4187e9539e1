"""Error taxonomy shared by the HTTP and MCP surfaces."""

from typing import Optional


class GatewayError(Exception):
    """Base class for every failure reported to a caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingParameterError(GatewayError):
    """A required request parameter was absent or blank."""

    status_code = 400

    def __init__(self, parameter: str):
        super().__init__(f"Missing required parameter: {parameter}")
        self.parameter = parameter


class InvalidValuesEncodingError(GatewayError):
    """`values` arrived as a string that is not valid JSON."""

    status_code = 400


class InvalidValuesShapeError(GatewayError):
    """`values` is not a rectangular list of rows of scalar cells."""

    status_code = 400


class UnknownOperationError(GatewayError):
    status_code = 404

    def __init__(self, name: str):
        super().__init__(f"Unknown operation: {name}")
        self.name = name


class ConfigurationError(GatewayError):
    """The service account credential is missing or unusable."""


class UpstreamError(GatewayError):
    """The Google API call failed or reported an error status."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = status
