"""Generators for numbers, logic, variables and control flow."""
import math

from gen_context import INDENT
from precedence import Order, tighter
from validator import unhandled

PASS = INDENT + 'pass\n'

ARITHMETIC = {
    'ADD': (' + ', Order.ADDITIVE),
    'MINUS': (' - ', Order.ADDITIVE),
    'MULTIPLY': (' * ', Order.MULTIPLICATIVE),
    'DIVIDE': (' / ', Order.MULTIPLICATIVE),
    'POWER': (' ** ', Order.EXPONENTIATION),
}

COMPARISONS = {
    'EQ': '==',
    'NEQ': '!=',
    'LT': '<',
    'LTE': '<=',
    'GT': '>',
    'GTE': '>=',
}


def math_number(emitter, block):
    try:
        value = float(block.field_value('NUM', 0))
    except (TypeError, ValueError):
        raise unhandled(block.kind, block.id, NUM=block.field_value('NUM'))
    if math.isinf(value):
        code = 'float("inf")'
        if value < 0:
            return '-' + code, Order.UNARY_SIGN
        return code, Order.FUNCTION_CALL
    if math.isnan(value):
        return 'float("nan")', Order.FUNCTION_CALL
    code = str(int(value)) if value.is_integer() else repr(value)
    return code, Order.UNARY_SIGN if value < 0 else Order.ATOMIC


def math_arithmetic(emitter, block):
    op = block.field_value('OP')
    if op not in ARITHMETIC:
        raise unhandled(block.kind, block.id, OP=op)
    operator, order = ARITHMETIC[op]
    if op in ('ADD', 'MULTIPLY'):
        left_order, right_order = order, order
    elif op == 'POWER':
        # right-associative
        left_order, right_order = tighter(order), order
    else:
        left_order, right_order = order, tighter(order)
    a = emitter.value_to_code(block, 'A', left_order, '0')
    b = emitter.value_to_code(block, 'B', right_order, '0')
    return a + operator + b, order


def logic_compare(emitter, block):
    op = block.field_value('OP')
    if op not in COMPARISONS:
        raise unhandled(block.kind, block.id, OP=op)
    # comparisons chain in Python, so neither side may be a bare comparison
    a = emitter.value_to_code(block, 'A', tighter(Order.RELATIONAL), '0')
    b = emitter.value_to_code(block, 'B', tighter(Order.RELATIONAL), '0')
    return '%s %s %s' % (a, COMPARISONS[op], b), Order.RELATIONAL


def logic_operation(emitter, block):
    op = block.field_value('OP')
    if op == 'AND':
        operator, order = 'and', Order.LOGICAL_AND
    elif op == 'OR':
        operator, order = 'or', Order.LOGICAL_OR
    else:
        raise unhandled(block.kind, block.id, OP=op)
    a = emitter.value_to_code(block, 'A', order)
    b = emitter.value_to_code(block, 'B', order)
    if not a and not b:
        a = b = 'False'
    else:
        default = 'True' if op == 'AND' else 'False'
        a = a or default
        b = b or default
    return '%s %s %s' % (a, operator, b), order


def logic_negate(emitter, block):
    value = emitter.value_to_code(block, 'BOOL', Order.LOGICAL_NOT, 'True')
    return 'not ' + value, Order.LOGICAL_NOT


def logic_boolean(emitter, block):
    return ('True' if block.field_value('BOOL') in ('TRUE', True) else 'False'), Order.ATOMIC


def logic_null(emitter, block):
    return 'None', Order.ATOMIC


def variables_get(emitter, block):
    return emitter.variable_name(block.field_value('VAR')), Order.ATOMIC


def variables_set(emitter, block):
    value = emitter.value_to_code(block, 'VALUE', Order.NONE, '0')
    return emitter.variable_name(block.field_value('VAR')) + ' = ' + value + '\n'


def controls_if(emitter, block):
    branches = int(block.mutation.get('elseif', 0)) + 1
    code = ''
    for n in range(branches):
        condition = emitter.value_to_code(block, 'IF%d' % n, Order.NONE, 'False')
        branch = emitter.statement_to_code(block, 'DO%d' % n) or PASS
        code += ('if ' if n == 0 else 'elif ') + condition + ':\n' + branch
    if block.mutation.get('else'):
        code += 'else:\n' + (emitter.statement_to_code(block, 'ELSE') or PASS)
    return code


def controls_whileUntil(emitter, block):
    mode = block.field_value('MODE', 'WHILE')
    if mode == 'WHILE':
        condition = emitter.value_to_code(block, 'BOOL', Order.NONE, 'False')
    elif mode == 'UNTIL':
        condition = 'not ' + emitter.value_to_code(block, 'BOOL', Order.LOGICAL_NOT, 'False')
    else:
        raise unhandled(block.kind, block.id, MODE=mode)
    return 'while ' + condition + ':\n' + emitter.loop_body(block, 'DO')


def controls_repeat_ext(emitter, block):
    if 'TIMES' in block.fields:
        try:
            repeats = str(int(float(block.field_value('TIMES'))))
        except (TypeError, ValueError, OverflowError):
            raise unhandled(block.kind, block.id, TIMES=block.field_value('TIMES'))
    else:
        repeats = emitter.value_to_code(block, 'TIMES', Order.NONE, '0')
    if not repeats.lstrip('-').isdigit():
        repeats = 'int(' + repeats + ')'
    counter = emitter.distinct_variable('count')
    return 'for %s in range(%s):\n' % (counter, repeats) + emitter.loop_body(block, 'DO')


def controls_forEach(emitter, block):
    var = emitter.variable_name(block.field_value('VAR'))
    items = emitter.value_to_code(block, 'LIST', Order.RELATIONAL, '[]')
    return 'for %s in %s:\n' % (var, items) + emitter.loop_body(block, 'DO')


GENERATORS = {
    'math_number': math_number,
    'math_arithmetic': math_arithmetic,
    'logic_compare': logic_compare,
    'logic_operation': logic_operation,
    'logic_negate': logic_negate,
    'logic_boolean': logic_boolean,
    'logic_null': logic_null,
    'variables_get': variables_get,
    'variables_set': variables_set,
    'controls_if': controls_if,
    'controls_whileUntil': controls_whileUntil,
    'controls_repeat_ext': controls_repeat_ext,
    'controls_forEach': controls_forEach,
}
