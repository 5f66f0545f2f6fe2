"""
Exceptions for the EthExplorer SDK.
"""
from typing import Any, Iterable, Optional


class ExplorerError(Exception):
    """Base exception for all SDK errors."""
    pass


class AuthorizationDenied(ExplorerError):
    """Raised when the wallet provider refuses account access."""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class NotConnected(ExplorerError):
    """Raised when a chain operation is attempted before connecting."""
    pass


class NetworkMismatch(ExplorerError):
    """Raised when an artifact has no deployment for the current network."""

    def __init__(self, network_id: Any, available: Iterable[str] = ()):
        self.network_id = network_id
        self.available = sorted(available)
        super().__init__(
            "The network ID does not exist in the contract artifact. "
            f"Probably you have to change network. Current network: {network_id} "
            f"(artifact deployed on: {', '.join(self.available) or 'none'})"
        )


class ContractNotRegistered(ExplorerError):
    """Raised when an operation references an unknown contract name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Contract '{name}' has not been registered")


class ContractRegistrationError(ExplorerError):
    """Raised when web3 rejects a contract's address or ABI."""
    pass


class ContractCallError(ExplorerError):
    """Raised when a read-only contract call fails."""
    pass


class TransactionError(ExplorerError):
    """Raised (or emitted on the error channel) when a transaction fails."""

    def __init__(self, message: str, receipt: Optional[Any] = None):
        self.receipt = receipt
        super().__init__(message)


class ArtifactError(ExplorerError):
    """Raised when a compiled contract artifact cannot be loaded."""
    pass
