"""
ExplorerClient - Main client for the EthExplorer SDK.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional, List, Union, Callable

from eth_account import Account
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import BlockNotFound
from web3.providers import BaseProvider

from .abi import StateMutability, has_mutability
from .artifacts import ArtifactSource, load_artifact
from .config import NetworkConfig
from .events import CallbackTable, TransactionEvent
from .exceptions import (
    ContractCallError, ContractNotRegistered, ContractRegistrationError,
    ExplorerError, NetworkMismatch, NotConnected, TransactionError
)
from .models import ContractRegistration, DefaultOptions, TransactionOptions
from .params import CallParams, to_call_params
from .provider import bootstrap_web3
from .transaction import PendingTransaction

DEFAULT_CONTRACT = "default"


def _normalize_address(address: str) -> str:
    # web3 rejects non-checksummed addresses; invalid ones are left for it to report
    return Web3.to_checksum_address(address) if Web3.is_address(address) else address


@dataclass
class ChainSession:
    """Connection state owned by a single client."""
    w3: Optional[Web3] = None
    user_account: Optional[str] = None


class ExplorerClient:
    """
    Client that simplifies interaction with Ethereum smart contracts.

    This client handles:
    1. Connecting to a node through a wallet provider or a local endpoint
    2. Registering contracts by address and ABI, or from compiled artifacts
    3. Read-only calls and transactions (locally signed or wallet-signed)
    4. Chain metadata: network id, gas price, gas limit, blocks, account

    Contracts are registered under a name ("default" unless given), so one
    client can work with several contracts at once.
    """

    def __init__(
        self,
        w3: Optional[Web3] = None,
        receipt_timeout: float = 120,
        poll_latency: float = 0.1,
        fallback_network: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the ExplorerClient

        Args:
            w3: Already connected Web3 instance (optional, see connect())
            receipt_timeout: Seconds to wait for a transaction receipt
            poll_latency: Seconds between receipt polls
            fallback_network: Network used by connect() when no provider is given
            logger: Optional logger instance to use for debug/info logging
        """
        self.session = ChainSession(w3=w3)
        self.contracts: Dict[str, Contract] = {}
        self.registrations: Dict[str, ContractRegistration] = {}
        self.defaults = DefaultOptions()
        self.callbacks = CallbackTable()
        self.receipt_timeout = receipt_timeout
        self.poll_latency = poll_latency
        self.fallback_network = fallback_network
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_network(cls, network: str, rpc_url: Optional[str] = None, **kwargs) -> "ExplorerClient":
        """
        Create a client connected to a configured network.

        Args:
            network: Network name from the bundled network table
            rpc_url: Optional RPC URL override
            **kwargs: Extra ExplorerClient arguments

        Returns:
            Connected client
        """
        url = NetworkConfig.get_rpc_url(network, override=rpc_url)
        client = cls(w3=Web3(Web3.HTTPProvider(url)), **kwargs)
        client.logger.info(
            f"Using network '{network}' (chain id {NetworkConfig.get_chain_id(network)}, "
            f"network id {NetworkConfig.get_network_id(network)}) at {url}"
        )
        return client

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    @property
    def w3(self) -> Optional[Web3]:
        return self.session.w3

    @w3.setter
    def w3(self, value: Optional[Web3]) -> None:
        self.session.w3 = value

    @property
    def connected(self) -> bool:
        return self.session.w3 is not None

    def connect(
        self,
        injected_provider: Optional[BaseProvider] = None,
        legacy_provider: Optional[BaseProvider] = None,
        fallback_url: Optional[str] = None
    ) -> "ExplorerClient":
        """
        Connect to a node.

        An injected wallet provider is preferred (account access is requested
        first), then a legacy provider, then the local fallback endpoint.

        Returns:
            This client

        Raises:
            AuthorizationDenied: If the wallet refuses account access
        """
        self.session = ChainSession(
            w3=bootstrap_web3(
                injected_provider=injected_provider,
                legacy_provider=legacy_provider,
                fallback_url=fallback_url,
                fallback_network=self.fallback_network
            )
        )
        return self

    def attach(self, w3: Web3) -> "ExplorerClient":
        """Use an existing Web3 instance, resetting the cached account."""
        self.session = ChainSession(w3=w3)
        return self

    def _require_w3(self) -> Web3:
        if self.session.w3 is None:
            raise NotConnected("Not connected to a node, call connect() first")
        return self.session.w3

    # ------------------------------------------------------------------
    # Contract registration
    # ------------------------------------------------------------------

    def register_from_artifact(self, artifact: ArtifactSource, name: str = DEFAULT_CONTRACT) -> Contract:
        """
        Register a contract from its compiled artifact.

        The deployment address is picked from the artifact's networks map
        using the id of the network we are connected to.

        Args:
            artifact: Artifact model, dict, file path or URL
            name: Name to register the contract under

        Returns:
            The callable contract

        Raises:
            NetworkMismatch: If the artifact is not deployed on the current network
            ArtifactError: If the artifact cannot be loaded
        """
        compiled = load_artifact(artifact)
        network_id = self.resolve_network_id()
        address = compiled.address_for(network_id)
        if address is None:
            raise NetworkMismatch(network_id, compiled.networks.keys())
        return self.register(address, compiled.abi, name)

    def register(self, address: str, abi: List[Dict[str, Any]], name: str = DEFAULT_CONTRACT) -> Contract:
        """
        Register a contract, replacing any contract with the same name.

        Args:
            address: Contract address
            abi: Contract ABI
            name: Name to register the contract under

        Returns:
            The callable contract

        Raises:
            NotConnected: If the client is not connected
            ContractRegistrationError: If web3 rejects the address or ABI
                (e.g. an address that is not 20 bytes of hex)
        """
        w3 = self._require_w3()
        registration = ContractRegistration(name=name, address=address, abi=abi)
        try:
            contract = w3.eth.contract(address=_normalize_address(address), abi=abi)
        except Exception as e:
            self.logger.error(f"Cannot register contract '{name}' at {address}: {e}")
            raise ContractRegistrationError(f"Cannot register contract '{name}' at {address}: {str(e)}") from e

        if name in self.registrations:
            self.logger.debug(f"Replacing contract '{name}'")
        self.registrations[name] = registration
        self.contracts[name] = contract
        self.logger.info(f"Registered contract '{name}' at {address}")
        return contract

    def get_callable(self, name: str = DEFAULT_CONTRACT) -> Optional[Contract]:
        return self.contracts.get(name)

    def get_registration(self, name: str = DEFAULT_CONTRACT) -> Optional[ContractRegistration]:
        return self.registrations.get(name)

    def registered_names(self) -> List[str]:
        return list(self.registrations)

    def _require_contract(self, name: str) -> Contract:
        if name not in self.contracts:
            raise ContractNotRegistered(name)
        return self.contracts[name]

    # ------------------------------------------------------------------
    # Method introspection
    # ------------------------------------------------------------------

    def method_has_mutability(
        self,
        kind: Union[str, StateMutability],
        method: str,
        name: str = DEFAULT_CONTRACT
    ) -> Optional[bool]:
        """
        Check whether a contract method is pure, view, payable or nonpayable.

        Returns:
            None if the contract or its ABI is unknown, False if the method
            is not in the ABI, otherwise whether it has the given mutability
        """
        registration = self.get_registration(name)
        if registration is None:
            return None
        return has_mutability(registration.abi, kind, method)

    def method_is_read_only(self, method: str, name: str = DEFAULT_CONTRACT) -> Optional[bool]:
        is_view = self.method_has_mutability(StateMutability.VIEW, method, name)
        if is_view is None or is_view:
            return is_view
        return self.method_has_mutability(StateMutability.PURE, method, name)

    def method_is_payable(self, method: str, name: str = DEFAULT_CONTRACT) -> Optional[bool]:
        return self.method_has_mutability(StateMutability.PAYABLE, method, name)

    def method_is_non_payable(self, method: str, name: str = DEFAULT_CONTRACT) -> Optional[bool]:
        return self.method_has_mutability(StateMutability.NONPAYABLE, method, name)

    # ------------------------------------------------------------------
    # Calls and transactions
    # ------------------------------------------------------------------

    def call(
        self,
        method: str,
        params: Union[CallParams, Any] = None,
        name: str = DEFAULT_CONTRACT,
        options: Optional[Dict[str, Any]] = None,
        block_identifier: Optional[Union[str, int]] = None
    ) -> Any:
        """
        Call a read-only contract method.

        Args:
            method: Contract function name
            params: NoArgs/PositionalArgs/SingleArg, or a raw value: None for
                no arguments, a list or tuple to spread, anything else as the
                only argument
            name: Registered contract name
            options: Call transaction fields (e.g. {"from": ...})
            block_identifier: Block to run the call against (default latest)

        Returns:
            Decoded return value(s)

        Raises:
            ContractNotRegistered: If the contract name is unknown
            ContractCallError: If the call fails or reverts
        """
        contract = self._require_contract(name)
        args = to_call_params(params).as_args()
        self.logger.debug(f"Calling {name}.{method} with {len(args)} argument(s)")

        try:
            function = getattr(contract.functions, method)
            return function(*args).call(options or None, block_identifier=block_identifier)
        except ExplorerError:
            raise
        except Exception as e:
            self.logger.error(f"Call to {name}.{method} failed: {e}")
            raise ContractCallError(f"Call to {name}.{method} failed: {str(e)}") from e

    def build_transaction_fields(
        self,
        from_address: str,
        to_address: str,
        options: Optional[Union[TransactionOptions, Dict[str, Any]]] = None,
        use_cache: bool = True
    ) -> Dict[str, Any]:
        """
        Build the base fields of a transaction.

        Nonce, gas price and gas limit come from ``options`` when given,
        otherwise from the chain (gas values through the default cache).

        Returns:
            Transaction dict with from, to, nonce, gasPrice and gas

        Raises:
            NotConnected: If the client is not connected
            TransactionError: If there is no sender or the chain lookups fail
        """
        opts = self._transaction_options(options)
        w3 = self._require_w3()
        if not from_address:
            raise TransactionError("No sender address: pass from_address or a private key")
        from_address = _normalize_address(from_address)

        try:
            nonce = opts.nonce
            if nonce is None:
                nonce = w3.eth.get_transaction_count(from_address, "pending")

            gas_price = opts.gas_price if opts.gas_price is not None else self.resolve_gas_price(use_cache)
            gas_limit = opts.gas_limit if opts.gas_limit is not None else self.resolve_gas_limit(use_cache)
        except ExplorerError:
            raise
        except Exception as e:
            self.logger.error(f"Building transaction from {from_address} failed: {e}")
            raise TransactionError(f"Failed to build transaction: {str(e)}") from e

        tx = {
            "from": from_address,
            "to": to_address,
            "nonce": nonce,
            "gasPrice": gas_price,
            "gas": gas_limit,
        }
        if opts.value:
            tx["value"] = opts.value
        return tx

    def prepare_transaction(
        self,
        from_address: Optional[str],
        private_key: Optional[str],
        method: str,
        args: Optional[List[Any]] = None,
        options: Optional[Union[TransactionOptions, Dict[str, Any]]] = None,
        name: str = DEFAULT_CONTRACT,
        use_cache: bool = True
    ) -> PendingTransaction:
        """
        Prepare a contract transaction without sending it.

        With a private key the transaction is encoded and signed here and
        broadcast raw on send(); without one the connected provider signs
        and broadcasts it on send().

        Listeners registered on this client with on() are attached to the
        returned handle; more can be added to the handle before send().

        Args:
            from_address: Sender address (defaults to the key's address, then
                to the provider's first account)
            private_key: Key used to sign locally, or None for provider signing
            method: Contract function name
            args: Positional arguments for the function
            options: value/nonce/gasPrice/gasLimit overrides
            name: Registered contract name
            use_cache: Use cached gas defaults when available

        Returns:
            Unsent transaction handle

        Raises:
            ContractNotRegistered: If the contract name is unknown
            NotConnected: If the client is not connected
            TransactionError: If no sender can be resolved, or encoding or
                signing fails
        """
        if name not in self.registrations:
            raise ContractNotRegistered(name)
        contract = self.contracts[name]
        w3 = self._require_w3()
        args = list(args or [])

        if from_address is None:
            from_address = self._default_sender(private_key)

        tx = self.build_transaction_fields(
            from_address,
            _normalize_address(self.registrations[name].address),
            options,
            use_cache=use_cache
        )
        description = f"{name}.{method}"

        if private_key:
            try:
                data = contract.encode_abi(method, args=args)
                if data:
                    tx["data"] = data
                tx["chainId"] = w3.eth.chain_id
                signed = w3.eth.account.sign_transaction(tx, private_key)
            except Exception as e:
                self.logger.error(f"Transaction signing failed: {e}")
                raise TransactionError(f"Failed to sign transaction: {str(e)}") from e

            def broadcast():
                return w3.eth.send_raw_transaction(signed.raw_transaction)
        else:
            def broadcast():
                return getattr(contract.functions, method)(*args).transact(tx)

        pending = PendingTransaction(
            w3,
            broadcast,
            description=description,
            receipt_timeout=self.receipt_timeout,
            poll_latency=self.poll_latency,
            logger=self.logger
        )
        for event in TransactionEvent:
            pending.on(event, self._forwarder(event))
        return pending

    def submit_transaction(
        self,
        from_address: Optional[str],
        private_key: Optional[str],
        method: str,
        args: Optional[List[Any]] = None,
        options: Optional[Union[TransactionOptions, Dict[str, Any]]] = None,
        name: str = DEFAULT_CONTRACT,
        use_cache: bool = True,
        wait_for_receipt: bool = True
    ) -> PendingTransaction:
        """
        Prepare and send a contract transaction.

        transactionHash, receipt and error events go to the callbacks
        registered with on(). Broadcast-time failures are reported on the
        error event, not raised.

        Returns:
            The sent transaction handle

        Raises:
            ContractNotRegistered: If the contract name is unknown
            NotConnected: If the client is not connected
            TransactionError: If encoding or signing fails
        """
        pending = self.prepare_transaction(
            from_address, private_key, method, args, options, name, use_cache
        )
        return pending.send(wait_for_receipt=wait_for_receipt)

    def _default_sender(self, private_key: Optional[str]) -> Optional[str]:
        if not private_key:
            try:
                return self.resolve_user_account()
            except ExplorerError:
                raise
            except Exception as e:
                raise TransactionError(f"Failed to resolve sender account: {str(e)}") from e

        try:
            return Account.from_key(private_key).address
        except Exception as e:
            self.logger.error(f"Invalid private key: {e}")
            raise TransactionError(f"Failed to sign transaction: invalid private key ({str(e)})") from e

    def _forwarder(self, event: TransactionEvent) -> Callable[[Any], Any]:
        def forward(data):
            return self.emit(event, data)
        return forward

    @staticmethod
    def _transaction_options(options: Optional[Union[TransactionOptions, Dict[str, Any]]]) -> TransactionOptions:
        if isinstance(options, TransactionOptions):
            return options
        return TransactionOptions.model_validate(options or {})

    # ------------------------------------------------------------------
    # Chain metadata
    # ------------------------------------------------------------------

    def resolve_network_id(self) -> int:
        """Get the id of the network we are connected to."""
        return int(self._require_w3().net.version)

    def resolve_chain_id(self) -> int:
        return self._require_w3().eth.chain_id

    def resolve_gas_limit(self, use_cache: bool = True) -> Optional[int]:
        """
        Get the gas limit of the latest block.

        Args:
            use_cache: Return the cached value when there is one

        Returns:
            Gas limit, or None if the latest block cannot be retrieved
        """
        if use_cache and self.defaults.gas_limit is not None:
            return self.defaults.gas_limit

        block = self.get_block("latest")
        if block:
            self.defaults.gas_limit = block["gasLimit"]
            return self.defaults.gas_limit
        return None

    def resolve_gas_price(self, use_cache: bool = True) -> Optional[int]:
        """
        Get the current gas price.

        Args:
            use_cache: Return the cached value when there is one

        Returns:
            Gas price in wei, or None if the node returned nothing
        """
        if use_cache and self.defaults.gas_price is not None:
            return self.defaults.gas_price

        gas_price = self._require_w3().eth.gas_price
        if gas_price is not None:
            self.defaults.gas_price = gas_price
            return gas_price
        return None

    def clear_defaults(self) -> None:
        """Forget the cached gas values."""
        self.defaults = DefaultOptions()

    def get_block(self, block_identifier: Union[str, int] = "latest", full_transactions: bool = False) -> Optional[Any]:
        """
        Get a block by number, hash or tag.

        Returns:
            The block, or None if the node does not know it
        """
        try:
            return self._require_w3().eth.get_block(block_identifier, full_transactions)
        except BlockNotFound:
            self.logger.warning(f"Block {block_identifier} not found")
            return None

    def get_block_number(self) -> int:
        return self._require_w3().eth.block_number

    def resolve_user_account(self, use_cache: bool = True) -> Optional[str]:
        """
        Get the first account exposed by the provider.

        Returns:
            The account address, or None if the provider exposes none
        """
        if use_cache and self.session.user_account:
            return self.session.user_account

        accounts = self._require_w3().eth.accounts
        if not accounts:
            self.logger.warning("Provider exposes no accounts")
            return None

        self.session.user_account = accounts[0]
        return self.session.user_account

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event: Union[str, TransactionEvent], callback: Callable[[Any], Any]) -> "ExplorerClient":
        """
        Register a callback for a transaction event.

        Only the first callback registered for an event is kept.

        Returns:
            This client, for chaining
        """
        self.callbacks.on(event, callback)
        return self

    def emit(self, event: Union[str, TransactionEvent], data: Any = None) -> Any:
        """Invoke the callback registered for an event, if any."""
        return self.callbacks.emit(event, data)
