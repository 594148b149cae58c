"""Module tree: modules, the calls between them and their warnings."""

import weakref
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
from .block import Block
from .identity import parse_index, parse_key
from .warnings import ModuleWarning
from ..utils.errors import TreeError


@dataclass(eq=False)
class ModuleCall:
    """A call to a module definition made by a parent module."""
    # Name of the module as written at the point of definition.
    name: str
    # Local directory holding the module's configuration.
    path: str
    # The block in the parent module where the call is declared.
    definition: Block
    # The module this call resolved to; None until resolution completes.
    module: Optional["Module"] = None

    @property
    def is_resolved(self) -> bool:
        return self.module is not None

    def index(self) -> Optional[int]:
        """Count index of the resolved module instance."""
        return self.module.index() if self.module is not None else None

    def key(self) -> Optional[str]:
        """for_each key of the resolved module instance."""
        return self.module.key() if self.module is not None else None


class Module:
    """All the blocks that make up one module instance in a Terraform project.

    Children are owned through ``modules``. ``parent`` is held as a weak
    reference so it never keeps an ancestor alive.
    """

    def __init__(
        self,
        name: str,
        source: str = "",
        raw_blocks: Iterable[Block] = (),
        root_path: str = "",
        module_path: str = "",
        parent: Optional["Module"] = None,
        source_url: Optional[str] = None,
        module_suffix: Optional[str] = None,
        terraform_vars_paths: Optional[List[str]] = None,
    ):
        self.name = name
        self.source = source
        # Remote origin of the module; only set for remote sources.
        self.source_url = source_url
        # Optional disambiguator appended to a root module's project name.
        self.module_suffix = module_suffix

        self._raw_blocks: Tuple[Block, ...] = tuple(raw_blocks)
        self.blocks: List[Block] = [block.model_copy(deep=True) for block in self._raw_blocks]

        self.root_path = root_path
        self.module_path = module_path

        self.modules: List["Module"] = []
        self.module_calls: List[ModuleCall] = []
        self._parent_ref: Optional["weakref.ReferenceType[Module]"] = None
        self.warnings: List[ModuleWarning] = []

        self.has_changes = False
        self.terraform_vars_paths: List[str] = list(terraform_vars_paths or [])

        if parent is not None:
            parent.add_child(self)

    def __repr__(self) -> str:
        return f"Module(name={self.name!r}, source={self.source!r}, modules={len(self.modules)})"

    @property
    def raw_blocks(self) -> Tuple[Block, ...]:
        """Blocks as loaded, before any instance expansion.

        These are safe to hand to every instance built from the same
        definition.
        """
        return self._raw_blocks

    @raw_blocks.setter
    def raw_blocks(self, value: Any) -> None:
        raise TreeError(f"raw_blocks of module '{self.name}' cannot be replaced once set")

    @property
    def parent(self) -> Optional["Module"]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def index(self) -> Optional[int]:
        """Count index of this module, or None if it was not created by count."""
        return parse_index(self.name)

    def key(self) -> Optional[str]:
        """for_each key of this module, or None if it was not created by for_each."""
        return parse_key(self.name)

    @property
    def address(self) -> str:
        """Terraform address, e.g. ``module.vpc[0].module.subnets``; empty for a root."""
        parts = []
        node: Optional[Module] = self
        while node is not None and node.parent is not None:
            parts.append(f"module.{node.name}")
            node = node.parent
        return ".".join(reversed(parts))

    def add_child(self, child: "Module", call: Optional[ModuleCall] = None) -> None:
        """
        Attach ``child`` under this module.
        
        Args:
            child: Module to attach
            call: The call that resolved to ``child``; its ``module`` is set
        
        Raises:
            TreeError: If the child already has a parent, a sibling has the same
                name, or the child is this module or one of its ancestors
        """
        if child.parent is not None:
            raise TreeError(f"Module '{child.name}' is already attached to '{child.parent.name}'")

        node: Optional[Module] = self
        while node is not None:
            if node is child:
                raise TreeError(f"Module '{child.name}' cannot be attached under itself")
            node = node.parent

        if any(sibling.name == child.name for sibling in self.modules):
            raise TreeError(f"Module '{self.name}' already has a child named '{child.name}'")

        child._parent_ref = weakref.ref(self)
        self.modules.append(child)

        if call is not None:
            call.module = child
            self.module_calls.append(call)

    def add_warning(self, warning: ModuleWarning) -> None:
        """Record a warning raised while resolving this module."""
        self.warnings.append(warning)

    def expand_blocks(self, context: Dict[str, Any]) -> None:
        """Replace ``blocks`` with the raw blocks bound to an instance context."""
        self.blocks = [block.bind(context) for block in self._raw_blocks]

    def project_name(self) -> str:
        """Project name for a root module: its directory name plus the suffix."""
        if not self.is_root:
            raise TreeError(f"Module '{self.name}' is not a root module")
        base = Path(self.root_path or self.module_path).name or self.name
        if self.module_suffix:
            return f"{base}-{self.module_suffix}"
        return base

    def walk(self) -> Iterator["Module"]:
        """Yield this module and every descendant, depth first."""
        yield self
        for child in self.modules:
            yield from child.walk()

    def find(self, address: str) -> Optional["Module"]:
        """Find a module in this subtree by its Terraform address."""
        for module in self.walk():
            if module.address == address:
                return module
        return None
