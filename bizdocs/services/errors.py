class DocumentError(Exception):
    status_code = 400

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or [message]


class DocumentNotFound(DocumentError):
    status_code = 404


class DocumentValidationError(DocumentError):
    status_code = 400

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors), errors)


class DocumentConflict(DocumentError):
    status_code = 409
