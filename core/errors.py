class GenerationError(RuntimeError):
    """The provider call failed: transport error, non-2xx status or an unexpected envelope."""


class PlanParseError(ValueError):
    """The provider reply did not contain a usable plan object."""


class UserNotFoundError(LookupError):
    pass


class PlanNotFoundError(LookupError):
    pass


class DuplicatePlanError(ValueError):
    pass
