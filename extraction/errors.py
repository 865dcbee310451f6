class RetrievalError(RuntimeError):
    """A single API call or a whole per-descriptor retrieval failed."""


class RetryLimitExceededError(RetrievalError):
    pass


class UnsupportedItemError(RetrievalError):
    """Payload shape we detect but do not handle (episodes in playlists, unknown types)."""


class UnknownInputTypeError(RetrievalError):
    pass


class BatchRetrievalError(RuntimeError):
    """
    Raised by the batch runner when at least one descriptor failed.
    `errors` keeps the individual messages in input order.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class InputError(ValueError):
    pass
