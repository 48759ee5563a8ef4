import importlib.util
import sys
from pathlib import Path

import pytest

import explore

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "generate_cli_examples.py"


def _load_examples():
    spec = importlib.util.spec_from_file_location("generate_cli_examples", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module.EXAMPLES


@pytest.mark.parametrize("example", _load_examples(), ids=lambda example: example.name)
def test_example_arguments_are_valid(example):
    parser = explore.build_parser()
    opt = parser.parse_args(example.args)
    config = explore.resolve_output_config(opt, parser)
    explore.validate_options(opt, parser)

    produced = {path for path in (config.gif_path, config.image_path) if path is not None}
    for expected in example.expected:
        if not expected.is_dir:
            assert expected.path.resolve() in produced
