class DoesNotExist(Exception):  # noqa: N818
    """Exception raised when a resource does not exist."""

    def __init__(self, resource_type: str, resource_id: int | str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f'{resource_type} with ID "{resource_id!s}" does not exist')


class UnsupportedFileType(Exception):  # noqa: N818
    """Exception raised when an upload has an extension we cannot ingest."""

    def __init__(self, filename: str, accepted: tuple[str, ...]):
        self.filename = filename
        self.accepted = accepted
        super().__init__(
            f'Unsupported file type for "{filename}"; accepted: {", ".join(accepted)}'
        )


class FileTooLarge(Exception):  # noqa: N818
    """Exception raised when an upload exceeds the maximum size."""

    def __init__(self, filename: str, size: int, limit: int):
        self.filename = filename
        self.size = size
        self.limit = limit
        super().__init__(
            f'File "{filename}" is {size} bytes; the limit is {limit} bytes'
        )


class UnknownExportFormat(Exception):  # noqa: N818
    """Exception raised when an export format or content mode is not supported."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f'Unknown export option "{value}"')
