"""Service layer: contract binding, contract logic, and white-label registration."""

from .contract_logic import MappedContractLogic
from .mapping import ContractMapping
from .resolver import ContractLogicResolver
from .white_label import WhiteLabelManager

__all__ = [
    "ContractLogicResolver",
    "ContractMapping",
    "MappedContractLogic",
    "WhiteLabelManager",
]
