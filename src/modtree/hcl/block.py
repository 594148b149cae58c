"""Opaque syntax blocks held by a Module."""

import copy
from typing import Any, Dict, List
from pydantic import BaseModel, Field


class Block(BaseModel):
    """A single configuration block (variable, resource, module call, ...).

    The module tree keeps references to blocks but never looks inside
    ``attributes``.
    """
    type: str = Field(..., description="Block type, e.g. 'resource', 'variable', 'module'")
    labels: List[str] = Field(default_factory=list, description="Block labels, e.g. ['aws_vpc', 'main']")
    attributes: Dict[str, Any] = Field(default_factory=dict, description="Raw block body")
    context: Dict[str, Any] = Field(default_factory=dict, description="Instance bindings such as count.index")

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def name(self) -> str:
        """Last label, or the block type for unlabelled blocks."""
        return self.labels[-1] if self.labels else self.type

    def bind(self, context: Dict[str, Any]) -> "Block":
        """Return a deep copy of this block bound to an instance context."""
        return self.model_copy(update={"context": copy.deepcopy(dict(context))}, deep=True)
