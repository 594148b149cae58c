"""Tests for building the module tree from plan JSON."""

import json
import os
import pytest
from modtree.hcl.warnings import WarningCode
from modtree.tree.loader import ModuleLoader, load_module_tree
from modtree.utils.errors import VarFileError


@pytest.fixture
def loader(tmp_path):
    return ModuleLoader(root_path=str(tmp_path))


def _children(module):
    return [child.name for child in module.modules]


class TestModuleLoader:
    """Test tree construction."""
    
    def test_root_module(self, loader, sample_plan, tmp_path):
        root = loader.load(sample_plan)
        
        assert root.name == "root"
        assert root.parent is None
        assert root.root_path == str(tmp_path)
        assert root.module_path == str(tmp_path)
        assert [b.type for b in root.raw_blocks] == ["variable", "variable", "resource", "module", "module"]
    
    def test_count_instances(self, loader, sample_plan):
        root = loader.load(sample_plan)
        vpcs = [m for m in root.modules if m.name.startswith("vpc")]
        
        assert [m.name for m in vpcs] == ["vpc[0]", "vpc[1]"]
        assert [m.index() for m in vpcs] == [0, 1]
        assert all(m.key() is None for m in vpcs)
    
    def test_for_each_instances(self, loader, sample_plan):
        root = loader.load(sample_plan)
        buckets = [m for m in root.modules if m.name.startswith("buckets")]
        
        assert [m.name for m in buckets] == ['buckets["a"]', 'buckets["b"]']
        assert [m.key() for m in buckets] == ["a", "b"]
        assert all(m.index() is None for m in buckets)
        assert buckets[0].blocks[0].context == {"each.key": "a"}
    
    def test_children_point_back(self, loader, sample_plan):
        root = loader.load(sample_plan)
        for module in root.walk():
            for child in module.modules:
                assert child.parent is module
        assert sum(1 for _ in root.walk()) == 7
    
    def test_siblings_share_raw_blocks_not_blocks(self, loader, sample_plan):
        root = loader.load(sample_plan)
        first, second = root.modules[0], root.modules[1]
        
        assert first.raw_blocks == second.raw_blocks
        assert all(b.context == {} for b in first.raw_blocks)
        assert first.blocks is not second.blocks
        assert [b.context["count.index"] for b in first.blocks] == [0] * len(first.blocks)
        assert [b.context["count.index"] for b in second.blocks] == [1] * len(second.blocks)
    
    def test_module_calls(self, loader, sample_plan):
        root = loader.load(sample_plan)
        
        assert [c.name for c in root.module_calls] == ["vpc", "vpc", "buckets", "buckets"]
        assert [c.module for c in root.module_calls] == root.modules
        definition = root.module_calls[0].definition
        assert definition.type == "module"
        assert definition.labels == ["vpc"]
        assert definition in root.raw_blocks
        assert root.module_calls[1].definition is definition
    
    def test_nested_modules(self, loader, sample_plan, tmp_path):
        root = loader.load(sample_plan)
        vpc0 = root.modules[0]
        
        assert _children(vpc0) == ["subnets"]
        subnets = vpc0.modules[0]
        assert subnets.address == "module.vpc[0].module.subnets"
        assert subnets.module_path == os.path.join(str(tmp_path), ".terraform", "modules", "vpc.subnets")
        assert subnets.source_url == "https://registry.terraform.io/modules/terraform-aws-modules/subnets/aws/1.2.0"
        assert subnets.warnings == []
    
    def test_paths_and_source_urls(self, loader, sample_plan, tmp_path):
        root = loader.load(sample_plan)
        vpc0 = root.modules[0]
        bucket = root.modules[2]
        
        assert vpc0.module_path == os.path.join(str(tmp_path), "modules", "vpc")
        assert vpc0.source_url is None
        assert bucket.source_url == "https://github.com/acme/buckets.git?ref=v1"
        assert root.module_calls[0].path == vpc0.module_path
    
    def test_missing_vars_warnings(self, loader, sample_plan):
        root = loader.load(sample_plan)
        
        assert len(root.warnings) == 1
        assert root.warnings[0].code == WarningCode.MISSING_VARS
        assert root.warnings[0].data.vars == ("env",)
        for vpc in root.modules[:2]:
            assert [w.data.vars for w in vpc.warnings] == [("name",)]
        for bucket in root.modules[2:]:
            assert bucket.warnings == []
    
    def test_var_sources_clear_root_warning(self, sample_plan, tmp_path):
        var_file = tmp_path / "prod.tfvars.json"
        var_file.write_text(json.dumps({"env": "prod"}), encoding="utf-8")
        
        root = ModuleLoader(root_path=str(tmp_path), var_files=[str(var_file)]).load(sample_plan)
        assert root.warnings == []
        assert root.terraform_vars_paths == [str(var_file)]
        
        root = ModuleLoader(root_path=str(tmp_path), vars=["env=dev"]).load(sample_plan)
        assert root.warnings == []
    
    def test_missing_var_file(self, sample_plan, tmp_path):
        loader = ModuleLoader(root_path=str(tmp_path), var_files=[str(tmp_path / "nope.tfvars.json")])
        with pytest.raises(VarFileError):
            loader.load(sample_plan)
    
    def test_has_changes(self, loader, sample_plan):
        root = loader.load(sample_plan)
        changed = [m.address for m in root.walk() if m.has_changes]
        assert changed == ["module.vpc[0]"]
    
    def test_constant_count_without_planned_values(self, loader, sample_plan):
        del sample_plan["planned_values"]
        sample_plan["configuration"]["root_module"]["module_calls"]["vpc"]["count_expression"] = {"constant_value": 3}
        root = loader.load(sample_plan)
        
        assert [m.name for m in root.modules][:3] == ["vpc[0]", "vpc[1]", "vpc[2]"]
    
    def test_constant_zero_count(self, loader, sample_plan):
        del sample_plan["planned_values"]
        sample_plan["configuration"]["root_module"]["module_calls"]["vpc"]["count_expression"] = {"constant_value": 0}
        root = loader.load(sample_plan)
        
        assert not any(m.name.startswith("vpc") for m in root.modules)
    
    def test_constant_for_each_map(self, loader, sample_plan):
        del sample_plan["planned_values"]
        call = sample_plan["configuration"]["root_module"]["module_calls"]["buckets"]
        call["for_each_expression"] = {"constant_value": {"logs": "x", "data": "y"}}
        root = loader.load(sample_plan)
        buckets = [m for m in root.modules if m.name.startswith("buckets")]
        
        assert [m.key() for m in buckets] == ["data", "logs"]
        assert buckets[0].blocks[0].context == {"each.key": "data", "each.value": "y"}
    
    def test_constant_for_each_key_with_quote(self, loader, sample_plan):
        del sample_plan["planned_values"]
        call = sample_plan["configuration"]["root_module"]["module_calls"]["buckets"]
        call["for_each_expression"] = {"constant_value": {'a"b': 1}}
        root = loader.load(sample_plan)
        buckets = [m for m in root.modules if m.name.startswith("buckets")]
        
        assert [m.name for m in buckets] == ['buckets["a\\"b"]']
        assert buckets[0].key() == 'a"b'
        assert buckets[0].blocks[0].context == {"each.key": 'a"b', "each.value": 1}
        assert root.find('module.buckets["a\\"b"]') is buckets[0]
    
    def test_planned_key_with_quote(self, loader, sample_plan):
        sample_plan["planned_values"]["root_module"]["child_modules"].append(
            {"address": 'module.buckets["a\\"b"]', "resources": []}
        )
        root = loader.load(sample_plan)
        keys = [m.key() for m in root.modules if m.name.startswith("buckets")]
        
        assert 'a"b' in keys
    
    def test_unknown_repetition_falls_back_to_single_instance(self, loader, sample_plan):
        del sample_plan["planned_values"]
        root = loader.load(sample_plan)
        buckets = [m for m in root.modules if m.name.startswith("buckets")]
        
        assert [m.name for m in buckets] == ["buckets"]
        assert buckets[0].index() is None
        assert buckets[0].key() is None
    
    def test_module_suffix(self, sample_plan, tmp_path):
        root = ModuleLoader(root_path=str(tmp_path), module_suffix="eu").load(sample_plan)
        assert root.module_suffix == "eu"
        assert root.project_name() == f"{tmp_path.name}-eu"


class TestLoadModuleTree:
    """Test the file-based entry point."""
    
    def test_root_path_defaults_to_plan_directory(self, sample_plan_file):
        root = load_module_tree(sample_plan_file)
        assert root.root_path == os.path.dirname(os.path.abspath(sample_plan_file))
        assert len(root.modules) == 4
