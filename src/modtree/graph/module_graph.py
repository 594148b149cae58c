"""Directed graph over a module tree: nodes=module addresses, edges=parent->child."""

import networkx as nx
from typing import Dict, List, Optional, Set
from ..hcl.identity import strip_instance
from ..hcl.module import Module
from ..utils.errors import TreeError
from ..utils.logging import get_logger

logger = get_logger("graph.module_graph")

ROOT_NODE = "root"


def node_id(module: Module) -> str:
    """Graph node ID for a module: its address, or 'root'."""
    return module.address or ROOT_NODE


class ModuleGraph:
    """Read-only graph view of a built module tree."""
    
    def __init__(self):
        self.graph = nx.DiGraph()
        self._module_map: Dict[str, Module] = {}
    
    def build_from_tree(self, root: Module) -> None:
        """Add every module in the tree under ``root`` to the graph."""
        for module in root.walk():
            module_node = node_id(module)
            if module_node in self._module_map and self._module_map[module_node] is not module:
                raise TreeError(f"Two modules share the address '{module_node}'")
            self.graph.add_node(module_node, module=module)
            self._module_map[module_node] = module
            for child in module.modules:
                self.graph.add_edge(module_node, node_id(child))
        
        logger.debug(
            f"Built module graph with {self.graph.number_of_nodes()} nodes "
            f"and {self.graph.number_of_edges()} edges"
        )
    
    def get_module(self, address: str) -> Optional[Module]:
        """Get a module by address ('root' or '' for the root)."""
        return self._module_map.get(address or ROOT_NODE)
    
    def descendants(self, address: str) -> Set[str]:
        """Addresses of every module nested below ``address``."""
        address = address or ROOT_NODE
        if address not in self.graph:
            return set()
        return nx.descendants(self.graph, address)
    
    def ancestors(self, address: str) -> List[str]:
        """Addresses of the containing modules, nearest first."""
        address = address or ROOT_NODE
        if address not in self.graph:
            return []
        chain = []
        parents = list(self.graph.predecessors(address))
        while parents:
            chain.append(parents[0])
            parents = list(self.graph.predecessors(parents[0]))
        return chain
    
    def depth(self, address: str) -> int:
        """Nesting depth; 0 for the root."""
        return len(self.ancestors(address))
    
    def instances_of(self, call_address: str) -> List[str]:
        """Addresses of every instance of a module call, e.g. all of module.vpc[*]."""
        return sorted(
            node for node in self.graph
            if node != ROOT_NODE and strip_instance(node) == call_address
        )


def verify_tree(root: Module) -> ModuleGraph:
    """
    Check the structural invariants of a built tree.
    
    Args:
        root: Root module
        
    Returns:
        ModuleGraph built from the tree
        
    Raises:
        TreeError: If a child does not point back at its parent, siblings share
            a name, or the modules do not form a single tree rooted at ``root``
    """
    if root.parent is not None:
        raise TreeError(f"Module '{root.name}' is not a root module")
    
    for module in root.walk():
        names = set()
        for child in module.modules:
            if child.parent is not module:
                raise TreeError(f"Module '{child.name}' does not point back to its parent '{module.name}'")
            if child.name in names:
                raise TreeError(f"Module '{module.name}' has more than one child named '{child.name}'")
            names.add(child.name)
    
    module_graph = ModuleGraph()
    module_graph.build_from_tree(root)
    if not nx.is_arborescence(module_graph.graph):
        raise TreeError("Module tree is not a single tree rooted at the root module")
    
    return module_graph
