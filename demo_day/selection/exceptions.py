class SubmissionRejected(Exception):
    """The booking form is not ready to submit."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


class IncorrectPasscode(Exception):
    """The admin passcode did not match."""
