#!/usr/bin/env python3
"""Generate Python source from a block-graph IR file.

Writes <ir>.py (or --out) and <ir>.map.json with the line ranges of every
top-level block in the generated text.

Exit codes: 0 ok, 1 unreadable IR, 2 invalid block graph or bad arguments.
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Import local modules
sys.path.append(str(Path(__file__).resolve().parents[1] / 'compiler'))
from block_model import workspace_from_ir
from gen_context import EmitterOptions
from py_emitter import PyEmitter
from validator import ValidationError


def setup_logging(debug_mode=False):
    """Configure logging with a level-prefixed formatter."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    root_logger.handlers = [console_handler]


def load_json(p):
    with open(p) as f:
        return json.load(f)


def write_mapping(mapping, out_map_path):
    with open(out_map_path, 'w') as f:
        json.dump({'mappings': mapping}, f, indent=2)


def env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default) == '1'


def emit_file(ir_path, out_path=None, one_based=None, statement_prefix=None) -> int:
    try:
        ir = load_json(ir_path)
    except (OSError, json.JSONDecodeError) as e:
        logging.error(f"Could not read IR {ir_path}: {e}")
        return 1

    try:
        workspace = workspace_from_ir(ir)
        options = EmitterOptions(one_based_index=one_based, statement_prefix=statement_prefix)
        emitter = PyEmitter(workspace, options)
        code = emitter.emit()
    except ValidationError as e:
        logging.error(f"Generation failed: {e} details: {e.details}")
        return 2

    out_py = Path(out_path) if out_path else Path(ir_path).with_suffix('.py')
    map_path = Path(ir_path).with_suffix('.map.json')
    with open(out_py, 'w') as f:
        f.write(code)
    write_mapping(emitter.mapping, map_path)
    logging.info(f"Wrote Python to: {out_py}")
    logging.debug(f"Wrote mapping to: {map_path}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Generate Python from a block-graph IR file')
    parser.add_argument('ir', help='path to the IR json file')
    parser.add_argument('--out', help='output .py path (default: next to the IR)')
    index = parser.add_mutually_exclusive_group()
    index.add_argument('--one-based', dest='one_based', action='store_const', const=True,
                       help='treat user indices as one-based')
    index.add_argument('--zero-based', dest='one_based', action='store_const', const=False,
                       help='treat user indices as zero-based')
    parser.add_argument('--statement-prefix', default=os.environ.get('STATEMENT_PREFIX'),
                        help="line emitted before procedure bodies, %%1 is the block id")
    parser.add_argument('--debug', action='store_true', help='verbose logging')
    args = parser.parse_args(argv)

    setup_logging(args.debug)
    one_based = args.one_based
    if one_based is None and 'ONE_BASED_INDEX' in os.environ:
        one_based = env_flag('ONE_BASED_INDEX', '1')
    return emit_file(args.ir, args.out, one_based, args.statement_prefix)


if __name__ == '__main__':
    sys.exit(main())
