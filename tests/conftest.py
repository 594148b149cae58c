"""Shared fixtures: a small Terraform plan with count and for_each modules."""

import json
import pytest


@pytest.fixture
def sample_plan():
    """Plan JSON with vpc (count = 2, nested registry module) and buckets (for_each)."""
    return {
        "format_version": "1.2",
        "terraform_version": "1.6.0",
        "variables": {"region": {"value": "eu-west-1"}},
        "planned_values": {
            "root_module": {
                "resources": [],
                "child_modules": [
                    {"address": "module.buckets[\"a\"]", "resources": []},
                    {"address": "module.buckets[\"b\"]", "resources": []},
                    {"address": "module.vpc[1]", "resources": []},
                    {"address": "module.vpc[0]", "resources": []},
                ],
            }
        },
        "resource_changes": [
            {
                "address": "module.vpc[0].aws_vpc.main",
                "module_address": "module.vpc[0]",
                "change": {"actions": ["create"]},
            },
            {
                "address": "aws_s3_bucket.logs",
                "change": {"actions": ["no-op"]},
            },
        ],
        "configuration": {
            "root_module": {
                "variables": {
                    "region": {"default": "eu-west-1"},
                    "env": {"description": "Deployment environment"},
                },
                "resources": [
                    {
                        "address": "aws_s3_bucket.logs",
                        "mode": "managed",
                        "type": "aws_s3_bucket",
                        "name": "logs",
                        "expressions": {},
                    }
                ],
                "module_calls": {
                    "vpc": {
                        "source": "./modules/vpc",
                        "count_expression": {"constant_value": 2},
                        "expressions": {"cidr": {"constant_value": "10.0.0.0/16"}},
                        "module": {
                            "variables": {"cidr": {}, "name": {}},
                            "resources": [
                                {
                                    "address": "aws_vpc.main",
                                    "mode": "managed",
                                    "type": "aws_vpc",
                                    "name": "main",
                                    "expressions": {"cidr_block": {"references": ["var.cidr"]}},
                                }
                            ],
                            "module_calls": {
                                "subnets": {
                                    "source": "terraform-aws-modules/subnets/aws",
                                    "version_constraint": "1.2.0",
                                    "expressions": {},
                                    "module": {"variables": {"az": {"default": "a"}}},
                                }
                            },
                        },
                    },
                    "buckets": {
                        "source": "git::https://github.com/acme/buckets.git//mod?ref=v1",
                        "for_each_expression": {"references": ["var.names"]},
                        "expressions": {"name": {"references": ["each.key"]}},
                        "module": {
                            "variables": {"name": {}},
                            "outputs": {"arn": {"expression": {"references": ["aws_s3_bucket.this"]}}},
                        },
                    },
                },
            }
        },
    }


@pytest.fixture
def sample_plan_file(tmp_path, sample_plan):
    """Write the sample plan to plan.json and return its path."""
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(sample_plan), encoding="utf-8")
    return str(path)
