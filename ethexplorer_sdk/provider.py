"""
Transport bootstrap.

Chooses how the SDK talks to a node, in order of preference:

1. an injected wallet provider, which is asked for account access first
2. a legacy provider, used as is
3. an HTTP provider on the local fallback endpoint (Ganache by default)
"""
import logging
from typing import Optional

from web3 import Web3
from web3.providers import BaseProvider

from .config import NetworkConfig
from .exceptions import AuthorizationDenied, ExplorerError

logger = logging.getLogger(__name__)

REQUEST_ACCOUNTS = "eth_requestAccounts"


def request_account_access(provider: BaseProvider) -> None:
    """
    Ask a wallet provider for permission to use its accounts.

    Raises:
        AuthorizationDenied: If the user or the provider rejects the request
    """
    try:
        response = provider.make_request(REQUEST_ACCOUNTS, [])
    except Exception as e:
        raise AuthorizationDenied(f"Account access request failed: {str(e)}") from e

    error = response.get("error") if isinstance(response, dict) else None
    if error:
        code = error.get("code") if isinstance(error, dict) else None
        message = error.get("message", error) if isinstance(error, dict) else error
        raise AuthorizationDenied(f"Account access denied: {message}", code=code)


def bootstrap_web3(
    injected_provider: Optional[BaseProvider] = None,
    legacy_provider: Optional[BaseProvider] = None,
    fallback_url: Optional[str] = None,
    fallback_network: Optional[str] = None,
) -> Web3:
    """
    Build a Web3 instance from the best available provider.

    Args:
        injected_provider: Wallet provider that needs account authorization
        legacy_provider: Provider used without authorization
        fallback_url: Endpoint used when no provider is given
        fallback_network: Network whose RPC URL is the fallback endpoint

    Returns:
        Web3 instance bound to the chosen provider

    Raises:
        AuthorizationDenied: If the injected provider refuses account access
    """
    if injected_provider is not None:
        request_account_access(injected_provider)
        logger.info("Using injected wallet provider")
        provider = injected_provider
    elif legacy_provider is not None:
        logger.info("Using legacy provider")
        provider = legacy_provider
    else:
        network = fallback_network or NetworkConfig.get_fallback_network()
        try:
            url = NetworkConfig.get_rpc_url(network, override=fallback_url)
        except ValueError as e:
            raise ExplorerError(str(e)) from e
        logger.info(f"No provider supplied, falling back to {url}")
        provider = Web3.HTTPProvider(url)

    return Web3(provider)
