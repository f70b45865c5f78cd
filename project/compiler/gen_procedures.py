"""Generators for procedure definitions, calls and early returns."""
from gen_context import INDENT, ProcedureSource
from precedence import Order

DEFINITION_KINDS = ('procedures_defreturn', 'procedures_defnoreturn')


def procedures_defreturn(emitter, block):
    # Both definition kinds land here. The definition is registered with the
    # pass and rendered at the end, once every engine temporary is known, so
    # the block itself produces no inline code.
    params = block.arguments
    user_globals = [emitter.variable_name(v) for v in emitter.workspace.all_used_variables()
                    if v not in params]
    name = emitter.procedure_name(block.field_value('NAME'))
    branch = emitter.statement_to_code(block, 'STACK')
    prefix = emitter.instrument(emitter.options.statement_prefix, block)
    if prefix:
        branch = emitter.prefix_lines(prefix, INDENT) + branch
    trap = emitter.instrument(emitter.options.infinite_loop_trap, block)
    if trap:
        branch = emitter.prefix_lines(trap, INDENT) + branch
    value = emitter.value_to_code(block, 'RETURN', Order.NONE)
    return_line = ''
    if value:
        return_line = INDENT + 'return ' + value + '\n'
    elif not branch:
        branch = INDENT + 'pass\n'
    emitter.ctx.add_procedure(ProcedureSource(
        name=name,
        params=[emitter.variable_name(p) for p in params],
        user_globals=user_globals,
        body=branch,
        return_line=return_line,
        block=block,
    ))
    return None


def call_arguments(emitter, block):
    return [emitter.value_to_code(block, 'ARG%d' % i, Order.NONE, 'None')
            for i in range(len(block.arguments))]


def procedures_callreturn(emitter, block):
    name = emitter.procedure_name(block.field_value('NAME'))
    return name + '(' + ', '.join(call_arguments(emitter, block)) + ')', Order.FUNCTION_CALL


def procedures_callnoreturn(emitter, block):
    name = emitter.procedure_name(block.field_value('NAME'))
    return name + '(' + ', '.join(call_arguments(emitter, block)) + ')\n'


def procedures_ifreturn(emitter, block):
    condition = emitter.value_to_code(block, 'CONDITION', Order.NONE, 'False')
    code = 'if ' + condition + ':\n'
    if block.mutation.get('value'):
        value = emitter.value_to_code(block, 'VALUE', Order.NONE, 'None')
        return code + INDENT + 'return ' + value + '\n'
    return code + INDENT + 'return\n'


GENERATORS = {
    'procedures_defreturn': procedures_defreturn,
    'procedures_defnoreturn': procedures_defreturn,
    'procedures_callreturn': procedures_callreturn,
    'procedures_callnoreturn': procedures_callnoreturn,
    'procedures_ifreturn': procedures_ifreturn,
}
