#!/usr/bin/env python3
"""
HTTP front end for the block-to-Python generator.

POST /generate
  JSON body: { "ir": {...}, "oneBasedIndex": <bool (optional)> }

Response: { "success": true, "code": "...", "mapping": [...] } or
{ "success": false, "error": "<kind>", "message": "...", "details": {...} } with status 400.

GET /kinds
  Response: { "kinds": [...] } - every block kind the generator understands.

Configuration (environment):
- SERVICE_HOST (default 127.0.0.1), SERVICE_PORT (default 5001), SERVICE_DEBUG=1 for Flask debug mode.
- ONE_BASED_INDEX: default index convention when neither the request nor the IR sets one.
- STATEMENT_PREFIX: instrumentation line emitted at the top of procedure bodies (%1 = block id).
"""
import logging
import os
import sys
from pathlib import Path
from flask import Flask, request, jsonify

# Local modules
sys.path.append(str(Path(__file__).resolve().parents[1] / 'compiler'))
from block_model import workspace_from_ir
from gen_context import EmitterOptions
from py_emitter import PyEmitter, GENERATORS
from validator import ValidationError, MalformedGraphError, CyclicGraphError, validate_kinds

logger = logging.getLogger(__name__)

app = Flask(__name__)

SERVICE_HOST = os.environ.get('SERVICE_HOST', '127.0.0.1')
SERVICE_PORT = int(os.environ.get('SERVICE_PORT', '5001'))
SERVICE_DEBUG = os.environ.get('SERVICE_DEBUG', '0') == '1'
ONE_BASED_INDEX = os.environ.get('ONE_BASED_INDEX')
STATEMENT_PREFIX = os.environ.get('STATEMENT_PREFIX')


def _error_kind(e: ValidationError) -> str:
    if isinstance(e, CyclicGraphError):
        return 'cyclic_graph'
    if isinstance(e, MalformedGraphError):
        return 'malformed_graph'
    return 'validation'


def generate_in_process(ir: dict, one_based=None) -> dict:
    nodes = ir.get('nodes', []) or []
    try:
        # reject unknown kinds before linking the graph
        validate_kinds(nodes, GENERATORS)
        workspace = workspace_from_ir(ir)
        if one_based is None and 'oneBasedIndex' not in (ir.get('options') or {}) and ONE_BASED_INDEX is not None:
            one_based = ONE_BASED_INDEX == '1'
        emitter = PyEmitter(workspace, EmitterOptions(one_based_index=one_based, statement_prefix=STATEMENT_PREFIX))
        code = emitter.emit()
    except ValidationError as e:
        logger.error("generation rejected: %s", e)
        return {'success': False, 'error': _error_kind(e), 'message': str(e), 'details': e.details}
    return {'success': True, 'code': code, 'mapping': emitter.mapping}


@app.route('/generate', methods=['POST'])
def generate_endpoint():
    payload = request.get_json(silent=True)
    if not payload:
        return jsonify({'success': False, 'error': 'no_json'}), 400
    ir = payload.get('ir')
    if not ir:
        return jsonify({'success': False, 'error': 'no_ir'}), 400
    one_based = payload.get('oneBasedIndex')
    if one_based is not None and not isinstance(one_based, bool):
        return jsonify({'success': False, 'error': 'bad_option', 'message': 'oneBasedIndex must be a boolean'}), 400

    result = generate_in_process(ir, one_based)
    status = 200 if result.get('success') else 400
    return jsonify(result), status


@app.route('/kinds', methods=['GET'])
def kinds_endpoint():
    return jsonify({'kinds': sorted(GENERATORS)})


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG if SERVICE_DEBUG else logging.INFO, format='[%(levelname)s] %(message)s')
    logger.info('Generator service listening on %s:%d', SERVICE_HOST, SERVICE_PORT)
    app.run(host=SERVICE_HOST, port=SERVICE_PORT, debug=SERVICE_DEBUG)
