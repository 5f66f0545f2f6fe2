"""
Loading of compiled contract artifacts.

An artifact is the JSON file a Truffle or Hardhat build writes for each
contract: the ABI plus a ``networks`` map from network id to deployment
address. Artifacts can be given as a dict, a path on disk or an http(s) URL.
"""
import json
import logging
import urllib.parse
from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import ArtifactError
from .models import CompiledArtifact

logger = logging.getLogger(__name__)

ArtifactSource = Union[CompiledArtifact, Dict[str, Any], str, Path]


def create_session(retry_count: int = 3) -> requests.Session:
    """
    Create an HTTP session that retries server errors and connection failures.

    Args:
        retry_count: Number of retries for each request

    Returns:
        Configured requests session
    """
    session = requests.Session()
    retries = Retry(
        total=retry_count,
        backoff_factor=0.5,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
        connect=retry_count,
        read=retry_count,
        other=retry_count
    )
    session.mount("http://", HTTPAdapter(max_retries=retries))
    session.mount("https://", HTTPAdapter(max_retries=retries))
    return session


def _is_url(source: str) -> bool:
    return urllib.parse.urlparse(source).scheme in ("http", "https")


def _fetch(url: str, session: Optional[requests.Session], timeout: int) -> Dict[str, Any]:
    session = session or create_session()
    logger.debug(f"Fetching contract artifact from {url}")
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise ArtifactError(f"Failed to download artifact from {url}: {str(e)}") from e

    try:
        return response.json()
    except ValueError as e:
        raise ArtifactError(f"Invalid JSON in artifact at {url}: {str(e)}") from e


def _read(path: Path) -> Dict[str, Any]:
    logger.debug(f"Reading contract artifact from {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ArtifactError(f"Artifact not found: {path}") from e
    except ValueError as e:
        raise ArtifactError(f"Invalid JSON in artifact {path}: {str(e)}") from e


def load_artifact(
    source: ArtifactSource,
    session: Optional[requests.Session] = None,
    timeout: int = 30,
) -> CompiledArtifact:
    """
    Load a compiled contract artifact.

    Args:
        source: Artifact model, raw dict, file path or http(s) URL
        session: HTTP session used for URLs (a retrying one is created if None)
        timeout: HTTP timeout in seconds

    Returns:
        Parsed artifact

    Raises:
        ArtifactError: If the artifact cannot be read or lacks an ABI
    """
    if isinstance(source, CompiledArtifact):
        return source

    if isinstance(source, dict):
        data = source
    elif isinstance(source, str) and _is_url(source):
        data = _fetch(source, session, timeout)
    elif isinstance(source, (str, Path)):
        data = _read(Path(source))
    else:
        raise ArtifactError(f"Unsupported artifact source type: {type(source).__name__}")

    try:
        return CompiledArtifact.model_validate(data)
    except ValidationError as e:
        raise ArtifactError(f"Malformed contract artifact: {str(e)}") from e
