"""
Contract instance creation utilities.
"""

import functools
import json
from typing import Any, Dict, List, Optional

from web3 import Web3
from web3.contract import Contract


@functools.lru_cache(maxsize=None)
def _read_abi(abi_path: str) -> str:
    with open(abi_path, "r", encoding="utf-8") as file:
        return file.read()


def load_abi(abi_path: str) -> List[Dict[str, Any]]:
    """
    Load the `abi` list from a JSON artifact.

    Args:
        abi_path: Path to the ABI JSON file.

    Returns:
        The ABI as a list of entries.
    """
    interface = json.loads(_read_abi(abi_path))
    return interface["abi"]


def create_contract_instance(address: Optional[str], abi_path: str, w3: Web3) -> Contract:
    """
    Create and return a Web3 contract instance.

    Args:
        address: The address of the contract, or None for an unbound interface
            used only to encode and decode calls.
        abi_path: Path to the ABI JSON file.
        w3: Web3 instance the contract is bound to.

    Returns:
        Web3 contract instance.
    """
    abi = load_abi(abi_path)
    if address is None:
        return w3.eth.contract(abi=abi)
    return w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
