"""Tests for warnings CLI command."""

import json
import pytest
from click.testing import CliRunner
from modtree.cli.main import cli


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))


class TestWarningsCommand:
    """Test warnings CLI command."""
    
    def test_lists_warnings(self, sample_plan_file):
        result = CliRunner().invoke(cli, ['warnings', sample_plan_file])
        
        assert result.exit_code == 0
        assert "root:" in result.output
        assert "module.vpc[1]:" in result.output
        assert "--terraform-var-file" in result.output
    
    def test_strict_fails_on_warnings(self, sample_plan_file):
        result = CliRunner().invoke(cli, ['warnings', sample_plan_file, '--strict'])
        assert result.exit_code == 2
    
    def test_strict_passes_without_warnings(self, sample_plan, tmp_path):
        for call in sample_plan["configuration"]["root_module"]["module_calls"].values():
            call["module"]["variables"] = {}
        path = tmp_path / "clean.json"
        path.write_text(json.dumps(sample_plan), encoding="utf-8")
        
        result = CliRunner().invoke(cli, ['warnings', str(path), '--strict', '--terraform-var', 'env=prod'])
        
        assert result.exit_code == 0
        assert "No warnings." in result.output
    
    def test_invalid_plan(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("{}", encoding="utf-8")
        result = CliRunner().invoke(cli, ['warnings', str(path)])
        
        assert result.exit_code == 1
        assert "format_version" in result.output
