# noteshub/core/errors.py
"""Failures the UI layer turns into a one-shot notification."""


class NotesHubError(Exception):
    message = "Something went wrong"

    def __init__(self, message=None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class ValidationFailed(NotesHubError):
    message = "Please fill all fields"

    def __init__(self, failures):
        self.failures = list(failures)
        super().__init__("; ".join(self.failures) or self.message)


class DuplicateAccount(NotesHubError):
    message = "Email or username already exists"


class InvalidCredentials(NotesHubError):
    message = "Invalid email or password"


class TransferFailed(NotesHubError):
    message = "Upload failed, please try again"


class UploadNotFound(NotesHubError):
    message = "Upload not found"
