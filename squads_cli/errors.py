"""Exception types raised by the Squads multisig CLI."""

from typing import Optional


class SquadsCliError(Exception):
    """Base class for every error the CLI reports to the user."""


class ConfigError(SquadsCliError):
    """Invalid endpoint, program id or other command configuration."""


class MemberParseError(SquadsCliError, ValueError):
    """A `<address>,<permission-mask>` entry could not be parsed."""

    reason = "invalid member entry"

    def __init__(self, entry: str, index: Optional[int] = None, detail: Optional[str] = None):
        self.entry = entry
        self.index = index
        self.detail = detail
        message = f"{self.reason}: {entry!r}"
        if index is not None:
            message = f"member #{index + 1}: {message}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class MalformedEntry(MemberParseError):
    reason = "entry must be in the format <public_key>,<permission>"


class InvalidAddress(MemberParseError):
    reason = "invalid public key"


class InvalidPermissionMask(MemberParseError):
    reason = "invalid permission mask, expected an integer between 0 and 255"


class KeypairLoadError(SquadsCliError):
    """Keypair file is missing, unreadable or not a valid wallet file."""

    def __init__(self, path: str, detail: str):
        self.path = path
        super().__init__(f"Error loading keypair {path}: {detail}")


class DerivationError(SquadsCliError):
    """No valid program-derived address exists for the given seeds."""


class AccountFetchError(SquadsCliError):
    """An account required to build the transaction is missing or undecodable."""

    def __init__(self, address: str, detail: str):
        self.address = address
        super().__init__(f"Account {address}: {detail}")


class RpcError(SquadsCliError):
    """JSON-RPC transport failure or error response."""

    def __init__(self, method: str, detail, data=None):
        self.method = method
        self.detail = detail
        self.data = data
        super().__init__(f"RPC error in {method}: {detail}")


class SubmissionError(SquadsCliError):
    """The transaction was rejected, failed on chain or could not be confirmed."""

    def __init__(self, message: str, signature: Optional[str] = None, logs: Optional[list] = None):
        self.signature = signature
        self.logs = logs or []
        super().__init__(message)
