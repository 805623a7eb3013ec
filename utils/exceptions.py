from typing import Optional


class RpcCallError(Exception):
    """
    A single JSON-RPC round-trip failed (transport, node or decoding error).
    Raised by the RPC connection only; services translate it at their boundary.
    """

    def __init__(self, call: str, cause: Optional[BaseException] = None):
        self.call = call
        self.cause = cause
        message = f"RPC call {call} failed"
        if cause is not None:
            message += f": {type(cause).__name__}: {cause}"
        super().__init__(message)


class DaoReaderError(Exception):
    """Base class of every error surfaced to a consumer of the reader."""

    kind = "DaoReaderError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidAddressError(DaoReaderError):
    """Malformed address, detected before any network call."""

    kind = "InvalidAddress"


class UpstreamResolutionError(DaoReaderError):
    """Governor-to-token address resolution failed or returned invalid data."""

    kind = "UpstreamResolutionError"


class MembershipFetchError(DaoReaderError):
    kind = "MembershipFetchError"


class ProposalFetchError(DaoReaderError):
    kind = "ProposalFetchError"


class DaoNotFoundError(DaoReaderError):
    kind = "NotFound"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"DAO '{name}' is not configured")


class NetworkNotConfiguredError(DaoReaderError):
    """None of the DAO's networks has an RPC endpoint configured."""

    kind = "NetworkNotConfigured"


class RegistryConfigError(DaoReaderError):
    kind = "RegistryConfigError"
