"""Non-fatal diagnostics raised while building or evaluating a module tree.

Warnings are created through a factory per code (``new_missing_vars_warning``)
so that ``friendly_message`` is always derived from ``data``.
"""

import json
from enum import IntEnum
from typing import Iterable, Literal, Tuple
from pydantic import BaseModel, Field, model_validator


class WarningCode(IntEnum):
    """Warning codes used across modtree."""
    MISSING_VARS = 1


class MissingVarsData(BaseModel):
    """Payload for MISSING_VARS: the Terraform variables that had no value."""
    code: Literal[WarningCode.MISSING_VARS] = WarningCode.MISSING_VARS
    vars: Tuple[str, ...] = Field(default=(), description="Unresolved variable names, in the order reported")

    class Config:
        """Pydantic config."""
        frozen = True


# One payload model per WarningCode; widen to a Union discriminated on
# `code` when a second code is added.
WarningData = MissingVarsData


class ModuleWarning(BaseModel):
    """Information about a non-critical problem found during module evaluation."""
    code: WarningCode = Field(..., description="Stable warning code")
    title: str = Field(..., description="Short machine-stable label")
    data: WarningData = Field(..., description="Code-specific payload")
    friendly_message: str = Field(..., description="Readable message to show the CLI user")

    class Config:
        """Pydantic config."""
        frozen = True

    @model_validator(mode="after")
    def _check_payload_code(self) -> "ModuleWarning":
        if self.data.code != self.code:
            raise ValueError(f"Warning payload is for {self.data.code.name}, not {self.code.name}")
        return self


def join_quotes(elems: Iterable[str]) -> str:
    """Double-quote each element and join them with ", "."""
    return ", ".join(json.dumps(elem, ensure_ascii=False) for elem in elems)


def new_missing_vars_warning(vars: Iterable[str]) -> ModuleWarning:
    """
    Build a MISSING_VARS warning.
    
    Args:
        vars: Terraform variables that cannot be found in the evaluation context.
            Order is kept and duplicates are not removed.
    
    Returns:
        ModuleWarning with the names, as a tuple, as its payload
    """
    vars = tuple(vars)
    return ModuleWarning(
        code=WarningCode.MISSING_VARS,
        title="Missing Terraform vars",
        data=MissingVarsData(vars=vars),
        friendly_message=(
            f"Input values were not provided for following Terraform variables: {join_quotes(vars)}. "
            "Use --terraform-var-file or --terraform-var to specify them."
        ),
    )
