"""Pydantic models for the JSON view of a module tree (versioned, stable)."""

from typing import Any, List, Optional
from pydantic import BaseModel, Field
from ..hcl.module import Module
from ..hcl.warnings import ModuleWarning


class WarningOutput(BaseModel):
    """A warning as reported in JSON output."""
    code: int = Field(..., description="Warning code")
    title: str = Field(..., description="Short machine-stable label")
    data: Any = Field(default=None, description="Code-specific payload")
    friendly_message: str = Field(..., description="Readable message")


class ModuleNode(BaseModel):
    """One module instance and its children."""
    name: str = Field(..., description="Instance name, e.g. 'vpc[0]'")
    address: str = Field(..., description="Terraform address; empty for the root")
    source: str = Field(default="", description="Declared module source")
    source_url: Optional[str] = Field(default=None, description="Remote origin for remote sources")
    module_path: str = Field(default="", description="Directory of the module")
    index: Optional[int] = Field(default=None, description="count index")
    key: Optional[str] = Field(default=None, description="for_each key")
    has_changes: bool = Field(default=False, description="Module has resources with pending changes")
    block_count: int = Field(default=0, ge=0, description="Number of blocks in the module")
    warnings: List[WarningOutput] = Field(default_factory=list)
    modules: List["ModuleNode"] = Field(default_factory=list)


ModuleNode.model_rebuild()


class TreeOutput(BaseModel):
    """Tree output contract."""
    version: str = Field(default="1.0.0", description="Output contract version")
    project_name: str = Field(..., description="Root project name including any module suffix")
    root_path: str = Field(..., description="Root module directory")
    terraform_vars_paths: List[str] = Field(default_factory=list)
    module_count: int = Field(..., ge=1, description="Number of modules including the root")
    warning_count: int = Field(default=0, ge=0, description="Warnings across every module")
    root: ModuleNode


def _warning_output(warning: ModuleWarning) -> WarningOutput:
    return WarningOutput(
        code=int(warning.code),
        title=warning.title,
        data=warning.data.model_dump(exclude={"code"}),
        friendly_message=warning.friendly_message,
    )


def _module_node(module: Module) -> ModuleNode:
    return ModuleNode(
        name=module.name,
        address=module.address,
        source=module.source,
        source_url=module.source_url,
        module_path=module.module_path,
        index=module.index(),
        key=module.key(),
        has_changes=module.has_changes,
        block_count=len(module.blocks),
        warnings=[_warning_output(w) for w in module.warnings],
        modules=[_module_node(child) for child in module.modules],
    )


def build_tree_output(root: Module) -> TreeOutput:
    """Build the JSON contract for a module tree."""
    modules = list(root.walk())
    return TreeOutput(
        project_name=root.project_name(),
        root_path=root.root_path,
        terraform_vars_paths=list(root.terraform_vars_paths),
        module_count=len(modules),
        warning_count=sum(len(m.warnings) for m in modules),
        root=_module_node(root),
    )
