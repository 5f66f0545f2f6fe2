"""
PendingTransaction - handle for a contract transaction.

The handle exists before anything is broadcast, so listeners can be attached
first and no lifecycle event is missed:

    tx = client.prepare_transaction(addr, None, "updateUser", ["John"], name="Users")
    tx.on("transactionHash", print).on("receipt", handle_receipt)
    tx.send()

Failures after the handle is created (broadcast errors, receipt timeouts,
reverted transactions) are delivered on the ``error`` event as
``TransactionError`` and stored in ``tx.error``; they are not raised.
"""
import logging
from typing import Any, Callable, Optional, Union

from web3 import Web3

from .events import EventEmitter, TransactionEvent
from .exceptions import TransactionError

logger = logging.getLogger(__name__)


class PendingTransaction:
    """Subscribable handle for one transaction."""

    def __init__(
        self,
        w3: Web3,
        broadcast: Callable[[], Any],
        description: str = "transaction",
        receipt_timeout: float = 120,
        poll_latency: float = 0.1,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            w3: Web3 instance used to wait for the receipt
            broadcast: Sends the transaction and returns its hash
            description: Label used in log messages
            receipt_timeout: Seconds to wait for the receipt
            poll_latency: Seconds between receipt polls
            logger: Optional logger instance
        """
        self.w3 = w3
        self._broadcast = broadcast
        self.description = description
        self.receipt_timeout = receipt_timeout
        self.poll_latency = poll_latency
        self.logger = logger or logging.getLogger(__name__)
        self._events = EventEmitter()

        self.sent = False
        self.tx_hash: Optional[str] = None
        self.receipt: Optional[Any] = None
        self.error: Optional[TransactionError] = None

    def on(self, event: Union[str, TransactionEvent], callback: Callable[[Any], Any]) -> "PendingTransaction":
        """Attach a listener; several listeners per event are allowed."""
        self._events.on(event, callback)
        return self

    def send(self, wait_for_receipt: bool = True) -> "PendingTransaction":
        """
        Broadcast the transaction.

        Args:
            wait_for_receipt: Block until the receipt arrives (or fails)

        Returns:
            This handle

        Raises:
            TransactionError: If the transaction was already sent
        """
        if self.sent:
            raise TransactionError(f"{self.description} has already been sent")
        self.sent = True

        try:
            tx_hash = self._broadcast()
        except Exception as e:
            self._fail(e if isinstance(e, TransactionError) else TransactionError(f"Failed to send transaction: {str(e)}"), e)
            return self

        self.tx_hash = tx_hash if isinstance(tx_hash, str) else Web3.to_hex(tx_hash)
        self.logger.info(f"Transaction sent: {self.tx_hash} ({self.description})")
        self._events.emit(TransactionEvent.TRANSACTION_HASH, self.tx_hash)

        if wait_for_receipt:
            self.wait()
        return self

    def wait(self, timeout: Optional[float] = None) -> Optional[Any]:
        """
        Wait for the receipt of a sent transaction.

        Returns:
            The receipt, or None if waiting failed or the transaction reverted
        """
        if self.tx_hash is None:
            return None
        if self.receipt is not None or self.error is not None:
            return self.receipt

        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                self.tx_hash,
                timeout=timeout or self.receipt_timeout,
                poll_latency=self.poll_latency
            )
        except Exception as e:
            self._fail(TransactionError(f"Failed to get receipt for {self.tx_hash}: {str(e)}"), e)
            return None

        if receipt.get("status") == 0:
            self._fail(TransactionError(f"Transaction {self.tx_hash} reverted", receipt=receipt))
            return None

        self.receipt = receipt
        self.logger.debug(f"Receipt for {self.tx_hash} in block {receipt.get('blockNumber')}")
        self._events.emit(TransactionEvent.RECEIPT, receipt)
        return receipt

    def _fail(self, error: TransactionError, cause: Optional[BaseException] = None) -> None:
        if cause is not None and error is not cause:
            error.__cause__ = cause
        self.error = error
        self.logger.error(f"{self.description} failed: {error}")
        self._events.emit(TransactionEvent.ERROR, error)
