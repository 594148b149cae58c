"""Build a Module tree from the module configuration in Terraform plan JSON."""

import os
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple
from .sources import DEFAULT_REGISTRY_URL, is_local_source, resolve_source_url
from ..hcl.block import Block
from ..hcl.identity import format_instance_name, instance_suffix, parse_index, parse_key
from ..hcl.module import Module, ModuleCall
from ..hcl.warnings import new_missing_vars_warning
from ..ingest.plan_loader import load_plan_json
from ..ingest.var_files import load_var_files, parse_var_assignment
from ..utils.logging import get_logger

logger = get_logger("tree.loader")

DEFAULT_MODULES_DIR = os.path.join(".terraform", "modules")
NO_CHANGE_ACTIONS = ({"no-op"}, {"read"})

# (instance name, instance context)
Instance = Tuple[str, Dict[str, Any]]


def _config_blocks(module_config: Dict[str, Any]) -> List[Block]:
    """Turn one configuration module into its blocks, in a stable order."""
    blocks = []
    for name, var in module_config.get("variables", {}).items():
        blocks.append(Block(type="variable", labels=[name], attributes=var or {}))
    for resource in module_config.get("resources", []):
        block_type = "data" if resource.get("mode") == "data" else "resource"
        blocks.append(Block(
            type=block_type,
            labels=[resource.get("type", ""), resource.get("name", "")],
            attributes={k: v for k, v in resource.items() if k not in ("mode", "type", "name")},
        ))
    for name, call in module_config.get("module_calls", {}).items():
        blocks.append(Block(
            type="module",
            labels=[name],
            attributes={k: v for k, v in call.items() if k != "module"},
        ))
    for name, output in module_config.get("outputs", {}).items():
        blocks.append(Block(type="output", labels=[name], attributes=output or {}))
    return blocks


def _planned_module_addresses(plan_data: Dict[str, Any]) -> Set[str]:
    """Collect every module instance address present in planned_values."""
    addresses: Set[str] = set()

    def visit(module: Dict[str, Any]) -> None:
        for child in module.get("child_modules", []):
            address = child.get("address")
            if address:
                addresses.add(address)
                # Intermediate modules without resources are implied by their children.
                parts = address.split(".module.")
                for i in range(1, len(parts)):
                    addresses.add(".module.".join(parts[:i]))
            visit(child)

    visit(plan_data.get("planned_values", {}).get("root_module", {}))
    return addresses


def _missing_vars(declared: Dict[str, Any], provided: Iterable[str]) -> List[str]:
    """Variables with no default that were not given a value."""
    provided = set(provided)
    return [
        name for name, var in declared.items()
        if "default" not in (var or {}) and name not in provided
    ]


class ModuleLoader:
    """Walks the module calls of a Terraform configuration and builds the tree."""

    def __init__(
        self,
        root_path: str = ".",
        var_files: Iterable[str] = (),
        vars: Optional[Iterable[str]] = None,
        module_suffix: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            root_path: Directory of the root module
            var_files: JSON var files supplying root variable values
            vars: ``name=value`` assignments supplying root variable values
            module_suffix: Optional suffix for the root module's project name
            settings: ``loader`` section of the configuration
        """
        settings = settings or {}
        self.root_path = os.path.abspath(root_path)
        self.var_files = list(var_files)
        self.vars = dict(parse_var_assignment(a) for a in (vars or []))
        self.module_suffix = module_suffix
        self.modules_dir = settings.get("modules_dir") or DEFAULT_MODULES_DIR
        self.registry_url = settings.get("registry_url") or DEFAULT_REGISTRY_URL

    def load(self, plan_data: Dict[str, Any]) -> Module:
        """
        Build the module tree for a validated plan.

        Args:
            plan_data: Output of load_plan_json

        Returns:
            Root Module

        Raises:
            VarFileError: If a var file or assignment cannot be read
        """
        root_config = plan_data.get("configuration", {}).get("root_module", {})
        var_file_values = load_var_files(self.var_files)

        root = Module(
            name="root",
            source=self.root_path,
            raw_blocks=_config_blocks(root_config),
            root_path=self.root_path,
            module_path=self.root_path,
            module_suffix=self.module_suffix,
            terraform_vars_paths=self.var_files,
        )

        provided = set(plan_data.get("variables", {})) | set(var_file_values) | set(self.vars)
        missing = _missing_vars(root_config.get("variables", {}), provided)
        if missing:
            logger.info(f"Root module is missing values for {len(missing)} variables")
            root.add_warning(new_missing_vars_warning(missing))

        planned = _planned_module_addresses(plan_data)
        self._load_calls(root, root_config, "", planned)
        self._mark_changes(root, plan_data.get("resource_changes", []))

        logger.info(f"Built module tree with {sum(1 for _ in root.walk())} modules")
        return root

    def _load_calls(self, parent: Module, parent_config: Dict[str, Any], parent_key: str, planned: Set[str]) -> None:
        for call_name, call_config in parent_config.get("module_calls", {}).items():
            definition = next(
                (b for b in parent.raw_blocks if b.type == "module" and b.labels == [call_name]),
                None,
            )
            child_config = call_config.get("module", {})
            raw_blocks = _config_blocks(child_config)
            source = call_config.get("source", "")
            key = f"{parent_key}.{call_name}" if parent_key else call_name
            module_path = self._module_path(parent, source, key)
            source_url = resolve_source_url(source, call_config.get("version_constraint"), self.registry_url)

            for instance_name, context in self._instances(parent, call_name, call_config, planned):
                child = Module(
                    name=instance_name,
                    source=source,
                    raw_blocks=raw_blocks,
                    root_path=self.root_path,
                    module_path=module_path,
                    source_url=source_url,
                )
                if context:
                    child.expand_blocks(context)
                parent.add_child(child, ModuleCall(name=call_name, path=module_path, definition=definition))

                missing = _missing_vars(child_config.get("variables", {}), call_config.get("expressions", {}))
                if missing:
                    logger.debug(f"Module {child.address} is missing values for: {', '.join(missing)}")
                    child.add_warning(new_missing_vars_warning(missing))

                self._load_calls(child, child_config, key, planned)

    def _instances(
        self,
        parent: Module,
        call_name: str,
        call_config: Dict[str, Any],
        planned: Set[str],
    ) -> List[Instance]:
        """Work out the instances a module call expands to."""
        prefix = f"{parent.address}.module.{call_name}" if parent.address else f"module.{call_name}"
        from_plan = []
        for address in planned:
            if not address.startswith(prefix):
                continue
            suffix = address[len(prefix):]
            if suffix == "" or instance_suffix(suffix) == suffix:
                from_plan.append(call_name + suffix)

        count_expr = call_config.get("count_expression")
        for_each_expr = call_config.get("for_each_expression")

        if from_plan:
            return [
                (name, self._context_from_name(name, for_each_expr))
                for name in sorted(from_plan, key=_instance_sort_key)
            ]

        if count_expr is not None and "constant_value" in count_expr:
            count = count_expr["constant_value"]
            if isinstance(count, int) and count >= 0:
                return [(format_instance_name(call_name, index=i), {"count.index": i}) for i in range(count)]

        if for_each_expr is not None and "constant_value" in for_each_expr:
            value = for_each_expr["constant_value"]
            if isinstance(value, dict):
                items = sorted(value.items())
            elif isinstance(value, list):
                items = [(str(v), v) for v in sorted(set(map(str, value)))]
            else:
                items = None
            if items is not None:
                return [
                    (format_instance_name(call_name, key=str(k)), {"each.key": str(k), "each.value": v})
                    for k, v in items
                ]

        if count_expr is not None or for_each_expr is not None:
            logger.warning(
                f"Cannot determine instances of module '{call_name}' under '{parent.name}'; "
                "treating it as a single instance"
            )
        return [(call_name, {})]

    @staticmethod
    def _context_from_name(name: str, for_each_expr: Any) -> Dict[str, Any]:
        index = parse_index(name)
        if index is not None:
            return {"count.index": index}
        key = parse_key(name)
        if key is not None:
            context: Dict[str, Any] = {"each.key": key}
            value = (for_each_expr or {}).get("constant_value")
            if isinstance(value, dict) and key in value:
                context["each.value"] = value[key]
            return context
        return {}

    def _module_path(self, parent: Module, source: str, key: str) -> str:
        if is_local_source(source):
            return os.path.normpath(os.path.join(parent.module_path, source))
        return os.path.join(self.root_path, self.modules_dir, key)

    @staticmethod
    def _mark_changes(root: Module, resource_changes: List[Dict[str, Any]]) -> None:
        """Flag modules that own at least one resource with a pending change."""
        changed: Set[str] = set()
        for resource_change in resource_changes:
            actions = set(resource_change.get("change", {}).get("actions", []))
            if not actions or actions in NO_CHANGE_ACTIONS:
                continue
            changed.add(resource_change.get("module_address", ""))

        for module in root.walk():
            if module.address in changed:
                module.has_changes = True


def _instance_sort_key(name: str) -> Tuple[int, int, str]:
    index = parse_index(name)
    if index is not None:
        return (0, index, "")
    return (1, 0, name)


def load_module_tree(plan_path: str, root_path: Optional[str] = None, **kwargs: Any) -> Module:
    """
    Load a plan file and build its module tree.

    Args:
        plan_path: Path to 'terraform show -json' output
        root_path: Root module directory (defaults to the plan file's directory)
        **kwargs: Passed to ModuleLoader

    Returns:
        Root Module
    """
    plan_data = load_plan_json(plan_path)
    if root_path is None:
        root_path = os.path.dirname(os.path.abspath(plan_path))
    return ModuleLoader(root_path=root_path, **kwargs).load(plan_data)
