from .structure_vm import (
    BranchingOptionVM,
    StructureListItemVM,
    StructureVM,
)

__all__ = [
    "BranchingOptionVM",
    "StructureListItemVM",
    "StructureVM",
]
