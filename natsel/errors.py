"""Structured error hierarchy for natsel."""


class NatselError(Exception):
    """Base for all natsel errors."""

    pass


class ValidationError(NatselError):
    """Input validation at boundary failed."""

    pass


class PopulationParseError(ValidationError):
    """Failed to parse an initial-population description."""

    def __init__(self, parameter: str, value: object, reason: str):
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(f"{parameter}={value!r}: {reason}")


class GeneticsError(NatselError):
    """Genetic model used inconsistently."""

    pass


class MutationError(GeneticsError):
    """Mutation requested or cancelled in an invalid state."""

    pass


class InvariantError(NatselError):
    """Population bookkeeping or lifecycle precondition violated."""

    pass


class EngineStateError(NatselError):
    """Engine in invalid state for requested operation."""

    pass
