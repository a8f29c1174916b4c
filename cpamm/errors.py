"""Error taxonomy for pool operations.

Every failure terminates the invocation. Callers match on the top-level
kinds below; the subclasses only refine diagnostics.
"""


class AmmError(Exception):
    """Base error for pool operations."""

    kind = "AmmError"


class ConfigError(AmmError):
    """Invalid pool configuration (fee out of range, duplicate pool)."""

    kind = "ConfigError"


class AccountAlreadyInitialized(ConfigError):
    """The record being created already exists."""

    pass


class AddressMismatch(AmmError):
    """A supplied address does not match its deterministic derivation."""

    kind = "AddressMismatch"


class Unauthorized(AmmError):
    """The caller is not allowed to perform the operation."""

    kind = "Unauthorized"


class MissingSignature(Unauthorized):
    """A required signer did not sign the invocation."""

    pass


class IllegalOwner(Unauthorized):
    """The pool record is not owned by this program."""

    pass


class PoolLocked(AmmError):
    """Trading is disabled on this pool."""

    kind = "PoolLocked"


class AlreadyRevoked(AmmError):
    """The pool lock state was revoked and can no longer change."""

    kind = "AlreadyRevoked"


class ExpiredRequest(AmmError):
    """The request deadline has passed."""

    kind = "ExpiredRequest"


class SlippageExceeded(AmmError):
    """Executed amounts are worse than the caller's declared bounds."""

    kind = "SlippageExceeded"


class ArithmeticOverflow(AmmError, ArithmeticError):
    """Overflow, underflow, or division by zero in checked arithmetic."""

    kind = "ArithmeticOverflow"


class Overflow(ArithmeticOverflow):
    """Value exceeds the width it must fit in."""

    pass


class Underflow(ArithmeticOverflow):
    """Subtraction would produce a negative result."""

    pass


class DivisionByZero(ArithmeticOverflow):
    """Division by zero."""

    pass


class MalformedPayload(AmmError):
    """Instruction data, account list, or record bytes could not be decoded."""

    kind = "MalformedPayload"


class InvalidRecord(MalformedPayload):
    """Pool record bytes have the wrong size or out-of-range fields."""

    pass


class NotEnoughAccounts(MalformedPayload):
    """Fewer accounts were supplied than the instruction requires."""

    pass


class InvalidLockState(MalformedPayload):
    """Requested lock state is neither Unlocked nor Locked."""

    pass


class IncorrectProgramId(AmmError):
    """Invocation targets a different program or token service."""

    kind = "IncorrectProgramId"


class CustodianError(AmmError):
    """The custodian refused a balance operation."""

    kind = "CustodianError"
