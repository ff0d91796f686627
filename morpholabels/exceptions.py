class MorpholabelsException(Exception):
    """
    Base class for exceptions in this package.
    """
    pass


class TransportFailure(MorpholabelsException):
    """
    Exception raised when the server could not be reached at all.
    """

    def __init__(self, message: str = 'Network error, check server'):
        super().__init__(message)


class ServerResponseError(MorpholabelsException):
    """
    Exception raised when the server answers with a non-2xx status.

    The message is the ``message``/``error`` field of the JSON body when there is one,
    otherwise the HTTP reason phrase.
    """

    def __init__(self,
                 status_code: int,
                 message: str,
                 response_text: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.response_text = response_text

    def __str__(self):
        return f"{self.status_code} {self.message}"


class ResourceNotFoundError(ServerResponseError):
    """
    Exception raised when the server answers 404 for the requested endpoint.
    For instance, when the media id does not exist in the project.
    """

    def __init__(self,
                 resource_type: str,
                 params: dict,
                 message: str | None = None,
                 response_text: str | None = None):
        """ Constructor.

        Args:
            resource_type (str): A resource type.
            params (dict): Dict of params identifying the sought resource.
            message (str): Message reported by the server, if any.
            response_text (str): Raw body of the 404 response, if any.
        """
        super().__init__(404, message or f"Resource '{resource_type}' not found", response_text)
        self.resource_type = resource_type
        self.params = params

    def __str__(self):
        return f"Resource '{self.resource_type}' not found for parameters: {self.params}"


class MalformedResponse(MorpholabelsException):
    """
    Exception raised when a response that should be JSON cannot be decoded.
    """

    def __init__(self, message: str = 'Server returned non-JSON content'):
        super().__init__(message)


class AnnotationFetchError(MorpholabelsException):
    """
    Exception raised when loading annotations fails.
    Carries the response status and text when the server did answer.
    """

    def __init__(self,
                 message: str,
                 status_code: int | None = None,
                 response_text: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class AnnotationOperationError(MorpholabelsException):
    """
    Exception raised when saving, deleting or exporting annotations fails.
    ``detail`` holds the message of the underlying failure.
    """

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.detail = detail
