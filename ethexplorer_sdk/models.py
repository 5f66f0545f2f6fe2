"""
Data models for the EthExplorer SDK.
"""
from typing import Dict, Any, Optional, List
from pydantic import BaseModel, Field


class ContractRegistration(BaseModel):
    """Address and ABI stored under a contract name"""
    name: str = "default"
    address: str
    abi: List[Dict[str, Any]]

    class Config:
        frozen = True


class DefaultOptions(BaseModel):
    """Gas values cached from the chain"""
    gas_limit: Optional[int] = None
    gas_price: Optional[int] = None


class TransactionOptions(BaseModel):
    """Caller overrides for a contract transaction"""
    value: Optional[int] = None
    nonce: Optional[int] = None
    gas_price: Optional[int] = Field(None, alias="gasPrice")
    gas_limit: Optional[int] = Field(None, alias="gasLimit")

    class Config:
        populate_by_name = True


class NetworkDeployment(BaseModel):
    """Deployment of a contract on a single network"""
    address: str
    transaction_hash: Optional[str] = Field(None, alias="transactionHash")

    class Config:
        populate_by_name = True


class CompiledArtifact(BaseModel):
    """Compiled contract JSON as written by Truffle or Hardhat"""
    contract_name: Optional[str] = Field(None, alias="contractName")
    abi: List[Dict[str, Any]]
    networks: Dict[str, NetworkDeployment] = Field(default_factory=dict)

    class Config:
        populate_by_name = True

    def address_for(self, network_id: Any) -> Optional[str]:
        deployment = self.networks.get(str(network_id))
        return deployment.address if deployment else None
