class IncompleteSubmission(Exception):
    """Raised when a quiz submission leaves one or more questions unanswered."""

    user_message = "Please answer all questions before submitting."

    def __init__(self, missing_question_ids):
        self.missing_question_ids = list(missing_question_ids)
        super().__init__(f"Missing answers for questions: {self.missing_question_ids}")


class CertificateError(Exception):
    """Base class for certificate pipeline failures."""

    user_message = "Could not produce certificate, please retry."


class TemplateUnavailable(CertificateError):
    pass


class StorageUploadFailed(CertificateError):
    pass


class RecordPersistFailed(CertificateError):
    pass
