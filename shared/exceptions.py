"""RFC 9457 Problem Details exception hierarchy.

All API errors extend ProblemDetailError and are converted to
application/problem+json responses by the exception handler middleware.
"""

PROBLEM_BASE_URI = "https://api.optistack.app/problems"


class ProblemDetailError(Exception):
    def __init__(
        self,
        type_uri: str,
        title: str,
        status: int,
        detail: str,
        violations: list[dict] | None = None,
    ):
        self.type_uri = type_uri
        self.title = title
        self.status = status
        self.detail = detail
        self.violations = violations
        super().__init__(detail)


class ValidationError(ProblemDetailError):
    def __init__(self, violations: list[dict]):
        super().__init__(
            type_uri=f"{PROBLEM_BASE_URI}/validation-error",
            title="Validation Error",
            status=422,
            detail=f"Request body contains {len(violations)} validation error(s)",
            violations=violations,
        )


class NotFoundError(ProblemDetailError):
    def __init__(self, detail: str):
        super().__init__(
            type_uri=f"{PROBLEM_BASE_URI}/not-found",
            title="Not Found",
            status=404,
            detail=detail,
        )


class SupplementNotFoundError(NotFoundError):
    def __init__(self, supplement_id: str):
        super().__init__(f"Supplement '{supplement_id}' was not found for this user.")


class InvalidWakeTimeError(ProblemDetailError):
    def __init__(self, value: str):
        super().__init__(
            type_uri=f"{PROBLEM_BASE_URI}/invalid-wake-time",
            title="Invalid Wake Time",
            status=422,
            detail=f"Wake time '{value}' must be in 24-hour HH:MM format (e.g. 06:30).",
        )


class StoredRecordInvalidError(ProblemDetailError):
    def __init__(self, supplement_id: str, reasons: list[str]):
        super().__init__(
            type_uri=f"{PROBLEM_BASE_URI}/stored-record-invalid",
            title="Stored Record Invalid",
            status=409,
            detail=(
                f"Supplement '{supplement_id}' is stored in a shape that no longer validates "
                f"({', '.join(reasons)}). Replace it with PUT to repair it."
            ),
        )
