"""
ABI helpers: entry lookup and state-mutability introspection.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class StateMutability(str, Enum):
    """Declared execution category of a contract function."""
    PURE = "pure"
    VIEW = "view"
    NONPAYABLE = "nonpayable"
    PAYABLE = "payable"


READ_ONLY = (StateMutability.VIEW, StateMutability.PURE)


def find_abi_entry(abi: List[Dict[str, Any]], name: str) -> Optional[Dict[str, Any]]:
    """
    Return the first ABI entry whose name matches.

    Overloaded functions share a name; only the first one is returned.
    """
    for entry in abi:
        if entry.get("name") == name:
            return entry
    return None


def entry_mutability(entry: Dict[str, Any]) -> Optional[str]:
    """
    Get the state mutability of an ABI entry.

    ABIs emitted by solc < 0.5 carry ``constant``/``payable`` flags instead
    of ``stateMutability``; those are mapped onto the modern values.
    """
    if entry.get("stateMutability"):
        return entry["stateMutability"]
    if entry.get("type", "function") != "function":
        return None
    if entry.get("constant"):
        return StateMutability.VIEW.value
    if entry.get("payable"):
        return StateMutability.PAYABLE.value
    if "constant" in entry or "payable" in entry:
        return StateMutability.NONPAYABLE.value
    return None


def has_mutability(
    abi: Optional[List[Dict[str, Any]]],
    kind: Union[str, StateMutability],
    method: str,
) -> Optional[bool]:
    """
    Check the declared mutability of a method.

    Returns:
        None if there is no ABI, False if the method is not in it, otherwise
        whether the method's mutability equals ``kind``
    """
    if abi is None:
        return None
    entry = find_abi_entry(abi, method)
    if entry is None:
        return False
    expected = kind.value if isinstance(kind, StateMutability) else kind
    return entry_mutability(entry) == expected
