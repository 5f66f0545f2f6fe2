"""
EthExplorer SDK - a thin convenience layer over web3.py for working with
smart contracts: connecting, registering contracts, calling methods,
sending transactions and reading chain metadata.
"""
from .client import ExplorerClient, ChainSession, DEFAULT_CONTRACT
from .abi import StateMutability
from .artifacts import load_artifact
from .config import NetworkConfig
from .events import CallbackTable, EventEmitter, TransactionEvent
from .exceptions import (
    ExplorerError, AuthorizationDenied, NotConnected, NetworkMismatch,
    ContractNotRegistered, ContractRegistrationError, ContractCallError,
    TransactionError, ArtifactError
)
from .models import (
    ContractRegistration, DefaultOptions, TransactionOptions,
    CompiledArtifact, NetworkDeployment
)
from .params import NoArgs, PositionalArgs, SingleArg
from .transaction import PendingTransaction
from .version import __version__

__all__ = [
    "ExplorerClient",
    "ChainSession",
    "DEFAULT_CONTRACT",
    "PendingTransaction",
    "StateMutability",
    "load_artifact",
    "NetworkConfig",
    "CallbackTable",
    "EventEmitter",
    "TransactionEvent",
    "NoArgs",
    "PositionalArgs",
    "SingleArg",
    "ContractRegistration",
    "DefaultOptions",
    "TransactionOptions",
    "CompiledArtifact",
    "NetworkDeployment",
    "ExplorerError",
    "AuthorizationDenied",
    "NotConnected",
    "NetworkMismatch",
    "ContractNotRegistered",
    "ContractRegistrationError",
    "ContractCallError",
    "TransactionError",
    "ArtifactError",
    "__version__",
]
