"""Generators for text blocks."""
from gen_context import HelperTemplate
from gen_lists import import_random, slice_bounds
from precedence import Order
from validator import unhandled

RANDOM_LETTER = HelperTemplate(
    'def $function_name(text):',
    '    x = int(random.random() * len(text))',
    '    return text[x]',
)

CASE_METHODS = {
    'UPPERCASE': '.upper()',
    'LOWERCASE': '.lower()',
    'TITLECASE': '.title()',
}

TRIM_METHODS = {
    'LEFT': '.lstrip()',
    'RIGHT': '.rstrip()',
    'BOTH': '.strip()',
}

EMPTY = "''"


def text(emitter, block):
    return emitter.quote(block.field_value('TEXT', '')), Order.ATOMIC


def text_join(emitter, block):
    count = block.item_count
    if count == 0:
        return EMPTY, Order.ATOMIC
    if count == 1:
        element = emitter.value_to_code(block, 'ADD0', Order.NONE, EMPTY)
        return 'str(' + element + ')', Order.FUNCTION_CALL
    if count == 2:
        first = emitter.value_to_code(block, 'ADD0', Order.NONE, EMPTY)
        second = emitter.value_to_code(block, 'ADD1', Order.NONE, EMPTY)
        return 'str(' + first + ') + str(' + second + ')', Order.ADDITIVE
    elements = [emitter.value_to_code(block, 'ADD%d' % i, Order.NONE, EMPTY) for i in range(count)]
    x = emitter.distinct_variable('x')
    code = "''.join([str(%s) for %s in [%s]])" % (x, x, ', '.join(elements))
    return code, Order.FUNCTION_CALL


def text_append(emitter, block):
    var = emitter.variable_name(block.field_value('VAR'))
    value = emitter.value_to_code(block, 'TEXT', Order.NONE, EMPTY)
    return var + ' = str(' + var + ') + str(' + value + ')\n'


def text_length(emitter, block):
    value = emitter.value_to_code(block, 'VALUE', Order.NONE, EMPTY)
    return 'len(' + value + ')', Order.FUNCTION_CALL


def text_isEmpty(emitter, block):
    value = emitter.value_to_code(block, 'VALUE', Order.NONE, EMPTY)
    return 'not len(' + value + ')', Order.LOGICAL_NOT


def text_indexOf(emitter, block):
    end = block.field_value('END', 'FIRST')
    if end == 'FIRST':
        method = 'find'
    elif end == 'LAST':
        method = 'rfind'
    else:
        raise unhandled(block.kind, block.id, END=end)
    substring = emitter.value_to_code(block, 'FIND', Order.NONE, EMPTY)
    value = emitter.value_to_code(block, 'VALUE', Order.MEMBER, EMPTY)
    code = '%s.%s(%s)' % (value, method, substring)
    if emitter.one_based:
        return code + ' + 1', Order.ADDITIVE
    return code, Order.FUNCTION_CALL


def text_charAt(emitter, block):
    where = block.field_value('WHERE', 'FROM_START')
    if where == 'RANDOM':
        value = emitter.value_to_code(block, 'VALUE', Order.NONE, EMPTY)
        import_random(emitter)
        name = emitter.provide_function('text_random_letter', RANDOM_LETTER)
        return name + '(' + value + ')', Order.FUNCTION_CALL
    value = emitter.value_to_code(block, 'VALUE', Order.MEMBER, EMPTY)
    if where == 'FIRST':
        at = '0'
    elif where == 'LAST':
        at = '-1'
    elif where == 'FROM_START':
        at = emitter.adjusted_index(block, 'AT').code
    elif where == 'FROM_END':
        at = emitter.adjusted_index(block, 'AT', 1, True).code
    else:
        raise unhandled(block.kind, block.id, WHERE=where)
    return value + '[' + at + ']', Order.MEMBER


def text_getSubstring(emitter, block):
    value = emitter.value_to_code(block, 'STRING', Order.MEMBER, EMPTY)
    at1, at2 = slice_bounds(emitter, block)
    return value + '[' + at1 + ' : ' + at2 + ']', Order.MEMBER


def text_changeCase(emitter, block):
    case = block.field_value('CASE')
    if case not in CASE_METHODS:
        raise unhandled(block.kind, block.id, CASE=case)
    value = emitter.value_to_code(block, 'TEXT', Order.MEMBER, EMPTY)
    return value + CASE_METHODS[case], Order.FUNCTION_CALL


def text_trim(emitter, block):
    mode = block.field_value('MODE')
    if mode not in TRIM_METHODS:
        raise unhandled(block.kind, block.id, MODE=mode)
    value = emitter.value_to_code(block, 'TEXT', Order.MEMBER, EMPTY)
    return value + TRIM_METHODS[mode], Order.FUNCTION_CALL


def text_print(emitter, block):
    msg = emitter.value_to_code(block, 'TEXT', Order.NONE, EMPTY)
    return 'print(' + msg + ')\n'


def text_prompt_ext(emitter, block):
    if 'TEXT' in block.fields:
        msg = emitter.quote(block.field_value('TEXT', ''))
    else:
        msg = emitter.value_to_code(block, 'TEXT', Order.NONE, EMPTY)
    code = 'input(' + msg + ')'
    if block.field_value('TYPE') == 'NUMBER':
        code = 'float(' + code + ')'
    return code, Order.FUNCTION_CALL


def text_count(emitter, block):
    value = emitter.value_to_code(block, 'TEXT', Order.MEMBER, EMPTY)
    sub = emitter.value_to_code(block, 'SUB', Order.NONE, EMPTY)
    return value + '.count(' + sub + ')', Order.FUNCTION_CALL


def text_replace(emitter, block):
    value = emitter.value_to_code(block, 'TEXT', Order.MEMBER, EMPTY)
    old = emitter.value_to_code(block, 'FROM', Order.NONE, EMPTY)
    new = emitter.value_to_code(block, 'TO', Order.NONE, EMPTY)
    return '%s.replace(%s, %s)' % (value, old, new), Order.FUNCTION_CALL


def text_reverse(emitter, block):
    value = emitter.value_to_code(block, 'TEXT', Order.MEMBER, EMPTY)
    return value + '[::-1]', Order.MEMBER


GENERATORS = {
    'text': text,
    'text_join': text_join,
    'text_append': text_append,
    'text_length': text_length,
    'text_isEmpty': text_isEmpty,
    'text_indexOf': text_indexOf,
    'text_charAt': text_charAt,
    'text_getSubstring': text_getSubstring,
    'text_changeCase': text_changeCase,
    'text_trim': text_trim,
    'text_print': text_print,
    'text_prompt_ext': text_prompt_ext,
    'text_prompt': text_prompt_ext,
    'text_count': text_count,
    'text_replace': text_replace,
    'text_reverse': text_reverse,
}
