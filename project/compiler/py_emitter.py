import json
import logging
import re
import sys
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple, Union

from block_model import Block, Workspace, workspace_from_ir
from gen_context import EmitterOptions, GenerationContext, HelperTemplate, INDENT
from name_db import NameDB, VARIABLE, PROCEDURE, DEVELOPER_VARIABLE
from precedence import Order, wrap
from validator import MalformedGraphError, CyclicGraphError

import gen_core
import gen_lists
import gen_procedures
import gen_text

logger = logging.getLogger(__name__)

Expression = Tuple[str, int]
Result = Union[Expression, str, None]
Generator = Callable[['PyEmitter', Block], Result]

# kind -> generator, assembled once at import
GENERATORS: Dict[str, Generator] = {}
for _module in (gen_core, gen_lists, gen_text, gen_procedures):
    GENERATORS.update(_module.GENERATORS)

_NUMBER = re.compile(r'^-?\d+(\.\d+)?([eE][+-]?\d+)?$')

_ESCAPES = {'\\': '\\\\', '\n': '\\n', '\r': '\\r', '\t': '\\t', "'": "\\'"}


def is_number(code: str) -> bool:
    return bool(_NUMBER.match(code))


class Index(NamedTuple):
    code: str
    constant: Optional[int]


class PyEmitter:
    def __init__(self, workspace: Workspace, options: Optional[EmitterOptions] = None):
        self.workspace = workspace
        self.options = options or EmitterOptions()
        self.ctx: Optional[GenerationContext] = None
        self.mapping: List[Dict[str, Any]] = []  # {block_id, kind, start_line, end_line}

    # names

    def variable_name(self, name: str) -> str:
        return self.ctx.names.get_name(name, VARIABLE)

    def procedure_name(self, name: str) -> str:
        return self.ctx.names.get_name(name, PROCEDURE)

    def distinct_variable(self, desired: str) -> str:
        return self.ctx.names.get_distinct_name(desired, VARIABLE)

    def temporary(self, desired: str) -> str:
        return self.ctx.new_temporary(desired)

    def provide_function(self, key: str, template: HelperTemplate) -> str:
        return self.ctx.provide_function(key, template)

    def declare_import(self, key: str, statement: str):
        self.ctx.declare_import(key, statement)

    @property
    def one_based(self) -> bool:
        if self.options.one_based_index is None:
            return self.workspace.one_based_index
        return self.options.one_based_index

    # literals

    @staticmethod
    def quote(text: Any) -> str:
        out = []
        for ch in str(text):
            if ch in _ESCAPES:
                out.append(_ESCAPES[ch])
            elif ord(ch) < 0x20 or ord(ch) == 0x7f:
                # raw control characters (NUL above all) break the generated file
                out.append('\\x%02x' % ord(ch))
            else:
                out.append(ch)
        return "'" + ''.join(out) + "'"

    @staticmethod
    def prefix_lines(text: str, prefix: str) -> str:
        if not text:
            return ''
        return ''.join(prefix + line + '\n' for line in text.rstrip('\n').split('\n'))

    def instrument(self, template: Optional[str], block: Block) -> str:
        if not template:
            return ''
        return template.replace('%1', self.quote(block.id))

    # dispatch

    def block_to_code(self, block: Block) -> Result:
        gen = GENERATORS.get(block.kind)
        if gen is None:
            raise MalformedGraphError(f"Unknown block kind: {block.kind}", {'block': block.id, 'kind': block.kind})
        key = id(block)
        if key in self.ctx.active:
            raise CyclicGraphError(f"Block '{block.id}' ({block.kind}) contains itself", {'block': block.id, 'kind': block.kind})
        self.ctx.active.add(key)
        try:
            return gen(self, block)
        finally:
            self.ctx.active.discard(key)

    def child_expression(self, block: Block, name: str) -> Optional[Expression]:
        child = block.input(name)
        if child is None:
            return None
        result = self.block_to_code(child)
        if not isinstance(result, tuple):
            raise MalformedGraphError(
                f"Block '{child.id}' ({child.kind}) cannot be used as a value for '{name}'",
                {'block': child.id, 'kind': child.kind, 'parent': block.id, 'socket': name}
            )
        return result

    def value_to_code(self, block: Block, name: str, order: int, default: str = '') -> str:
        """Code for the value plugged into socket `name`, parenthesised for `order`."""
        result = self.child_expression(block, name)
        if result is None:
            return default
        code, child_order = result
        return wrap(code, child_order, order)

    def statement_code(self, block: Block) -> str:
        # one statement; a value block in statement position becomes a naked expression line
        result = self.block_to_code(block)
        if result is None:
            return ''
        if isinstance(result, tuple):
            return result[0] + '\n'
        return result

    def chain_to_code(self, first: Optional[Block]) -> str:
        code = []
        seen = set()
        block = first
        while block is not None:
            if id(block) in seen:
                raise CyclicGraphError(f"Statement chain loops back to block '{block.id}'", {'block': block.id, 'kind': block.kind})
            seen.add(id(block))
            code.append(self.statement_code(block))
            block = block.next
        return ''.join(code)

    def statement_to_code(self, block: Block, name: str) -> str:
        """Indented code for the statement chain connected to socket `name`."""
        return self.prefix_lines(self.chain_to_code(block.input(name)), INDENT)

    def loop_body(self, block: Block, name: str) -> str:
        branch = self.statement_to_code(block, name)
        trap = self.instrument(self.options.infinite_loop_trap, block)
        if trap:
            branch = self.prefix_lines(trap, INDENT) + branch
        return branch or INDENT + 'pass\n'

    # indices

    def adjusted_index(self, block: Block, name: str, delta: int = 0, negate: bool = False) -> Index:
        """Zero-based Python offset for the user index in socket `name`.

        `delta` shifts the result and `negate` turns it into a from-end
        offset; literal indices are folded here, anything else is wrapped in
        int() at run time.
        """
        if self.one_based:
            delta -= 1
        default = '1' if self.one_based else '0'
        order = Order.ADDITIVE if delta else Order.NONE
        at = self.value_to_code(block, name, order, default)
        if is_number(at):
            value = int(float(at)) + delta
            if negate:
                value = -value
            return Index(str(value), value)
        if delta > 0:
            at = 'int(%s + %d)' % (at, delta)
        elif delta < 0:
            at = 'int(%s - %d)' % (at, -delta)
        else:
            at = 'int(%s)' % at
        if negate:
            at = '-' + at
        return Index(at, None)

    # driver

    def begin_pass(self) -> GenerationContext:
        """Start a generation pass with fresh helper, import and name tables."""
        self.ctx = GenerationContext(NameDB())
        self.mapping = []
        return self.ctx

    def emit(self) -> str:
        self.begin_pass()
        logger.debug("generation pass started: %d top-level block(s)", len(self.workspace.blocks))
        # reserve user names first so helpers and temporaries never take them
        variables = [self.variable_name(v) for v in self.workspace.all_used_variables()]
        developer = [self.ctx.names.get_name(v, DEVELOPER_VARIABLE) for v in self.workspace.developer_variables]

        body_parts: List[Tuple[Block, str]] = []
        for top in self.workspace.blocks:
            if top.kind in gen_procedures.DEFINITION_KINDS:
                self.block_to_code(top)
                continue
            body_parts.append((top, self.chain_to_code(top)))

        # (section text, block or None)
        sections: List[Tuple[str, Optional[Block]]] = []
        if self.ctx.imports:
            sections.append(('\n'.join(self.ctx.imports.values()) + '\n', None))
        if variables or developer:
            sections.append((''.join(v + ' = None\n' for v in variables + developer), None))
        for helper in self.ctx.helpers.values():
            sections.append((helper + '\n', None))
        developer_globals = developer + [t for t in self.ctx.temporaries if t not in developer]
        for proc in self.ctx.procedures.values():
            sections.append((proc.render(developer_globals), proc.block))
        body = ''.join(code for _, code in body_parts)
        if body:
            sections.append((body, None))

        self._record_mapping(sections, body_parts if body else [])
        source = '\n'.join(text for text, _ in sections)
        logger.debug("generation pass finished: %d line(s), %d helper(s), %d import(s)",
                     source.count('\n'), len(self.ctx.helpers), len(self.ctx.imports))
        return source

    def _record_mapping(self, sections: List[Tuple[str, Optional[Block]]], body_parts: List[Tuple[Block, str]]):
        line = 1
        for text, block in sections:
            if block is not None:
                self.mapping.append({
                    'block_id': block.id,
                    'kind': block.kind,
                    'start_line': line,
                    'end_line': line + text.count('\n') - 1,
                })
            last_start = line
            # one blank separator line between sections
            line += text.count('\n') + 1
        if not body_parts:
            return
        line = last_start
        for top, code in body_parts:
            count = code.count('\n')
            self.mapping.append({
                'block_id': top.id,
                'kind': top.kind,
                'start_line': line,
                'end_line': line + max(count, 1) - 1,
            })
            line += count


def generate(workspace: Workspace, options: Optional[EmitterOptions] = None) -> str:
    return PyEmitter(workspace, options).emit()


def generate_from_ir(ir: Dict[str, Any], options: Optional[EmitterOptions] = None) -> str:
    return generate(workspace_from_ir(ir), options)


if __name__ == '__main__':
    if len(sys.argv) < 2:
        print("Usage: py_emitter.py ir.json")
        sys.exit(1)
    with open(sys.argv[1]) as f:
        ir = json.load(f)
    print(generate_from_ir(ir), end='')
