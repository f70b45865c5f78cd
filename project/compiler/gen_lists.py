"""Generators for list blocks."""
from gen_context import HelperTemplate
from precedence import Order, is_bare_name, tighter
from validator import unhandled, MalformedGraphError

FIRST_INDEX = {
    # keyed by one-based indexing
    True: HelperTemplate(
        'def $function_name(my_list, elem):',
        '    try:',
        '        index = my_list.index(elem) + 1',
        '    except ValueError:',
        '        index = 0',
        '    return index',
    ),
    False: HelperTemplate(
        'def $function_name(my_list, elem):',
        '    try:',
        '        index = my_list.index(elem)',
        '    except ValueError:',
        '        index = -1',
        '    return index',
    ),
}

LAST_INDEX = {
    True: HelperTemplate(
        'def $function_name(my_list, elem):',
        '    try:',
        '        index = len(my_list) - my_list[::-1].index(elem)',
        '    except ValueError:',
        '        index = 0',
        '    return index',
    ),
    False: HelperTemplate(
        'def $function_name(my_list, elem):',
        '    try:',
        '        index = len(my_list) - my_list[::-1].index(elem) - 1',
        '    except ValueError:',
        '        index = -1',
        '    return index',
    ),
}

REMOVE_RANDOM_ITEM = HelperTemplate(
    'def $function_name(my_list):',
    '    x = int(random.random() * len(my_list))',
    '    return my_list.pop(x)',
)

SORT = HelperTemplate(
    'def $function_name(my_list, type, reverse):',
    '    def try_float(s):',
    '        try:',
    '            return float(s)',
    '        except (TypeError, ValueError):',
    '            return 0',
    '    key_funcs = {',
    '        "NUMERIC": try_float,',
    '        "TEXT": str,',
    '        "IGNORE_CASE": lambda s: str(s).lower()',
    '    }',
    '    key_func = key_funcs[type]',
    '    list_cpy = list(my_list)',
    '    return sorted(list_cpy, key=key_func, reverse=reverse)',
)

SORT_TYPES = {
    'NUMERIC': 'NUMERIC',
    'TEXT': 'TEXT',
    'IGNORE_CASE': 'IGNORE_CASE',
    'CASE_INSENSITIVE': 'IGNORE_CASE',
}


def import_random(emitter):
    emitter.declare_import('import_random', 'import random')


def lists_create_empty(emitter, block):
    return '[]', Order.ATOMIC


def lists_create_with(emitter, block):
    elements = [emitter.value_to_code(block, 'ADD%d' % i, Order.NONE, 'None')
                for i in range(block.item_count)]
    return '[' + ', '.join(elements) + ']', Order.ATOMIC


def lists_repeat(emitter, block):
    item = emitter.value_to_code(block, 'ITEM', Order.NONE, 'None')
    times = emitter.value_to_code(block, 'NUM', tighter(Order.MULTIPLICATIVE), '0')
    return '[' + item + '] * ' + times, Order.MULTIPLICATIVE


def lists_length(emitter, block):
    items = emitter.value_to_code(block, 'VALUE', Order.NONE, '[]')
    return 'len(' + items + ')', Order.FUNCTION_CALL


def lists_isEmpty(emitter, block):
    items = emitter.value_to_code(block, 'VALUE', Order.NONE, '[]')
    return 'not len(' + items + ')', Order.LOGICAL_NOT


def lists_indexOf(emitter, block):
    item = emitter.value_to_code(block, 'FIND', Order.NONE, 'None')
    items = emitter.value_to_code(block, 'VALUE', Order.NONE, '[]')
    end = block.field_value('END', 'FIRST')
    if end == 'FIRST':
        name = emitter.provide_function('first_index', FIRST_INDEX[emitter.one_based])
    elif end == 'LAST':
        name = emitter.provide_function('last_index', LAST_INDEX[emitter.one_based])
    else:
        raise unhandled(block.kind, block.id, END=end)
    return '%s(%s, %s)' % (name, items, item), Order.FUNCTION_CALL


def lists_getIndex(emitter, block):
    # REMOVE gives a statement, GET and GET_REMOVE give expressions
    mode = block.field_value('MODE', 'GET')
    where = block.field_value('WHERE', 'FROM_START')
    list_order = Order.NONE if where == 'RANDOM' else Order.MEMBER
    items = emitter.value_to_code(block, 'VALUE', list_order, '[]')

    if where in ('FIRST', 'LAST', 'FROM_START', 'FROM_END'):
        if where == 'FIRST':
            at = '0'
        elif where == 'LAST':
            at = '-1'
        elif where == 'FROM_START':
            at = emitter.adjusted_index(block, 'AT').code
        else:
            at = emitter.adjusted_index(block, 'AT', 1, True).code
        if mode == 'GET':
            return items + '[' + at + ']', Order.MEMBER
        # pop() with no argument already takes the last element
        pop = items + ('.pop()' if where == 'LAST' else '.pop(' + at + ')')
        if mode == 'GET_REMOVE':
            return pop, Order.FUNCTION_CALL
        if mode == 'REMOVE':
            return pop + '\n'
    elif where == 'RANDOM':
        import_random(emitter)
        if mode == 'GET':
            return 'random.choice(' + items + ')', Order.FUNCTION_CALL
        name = emitter.provide_function('lists_remove_random_item', REMOVE_RANDOM_ITEM)
        code = name + '(' + items + ')'
        if mode == 'GET_REMOVE':
            return code, Order.FUNCTION_CALL
        if mode == 'REMOVE':
            return code + '\n'
    raise unhandled(block.kind, block.id, MODE=mode, WHERE=where)


def lists_setIndex(emitter, block):
    mode = block.field_value('MODE', 'SET')
    where = block.field_value('WHERE', 'FROM_START')
    value = emitter.value_to_code(block, 'TO', Order.NONE, 'None')
    if mode not in ('SET', 'INSERT'):
        raise unhandled(block.kind, block.id, MODE=mode, WHERE=where)

    if where == 'RANDOM':
        import_random(emitter)
        code = ''
        resolved = emitter.child_expression(block, 'LIST')
        if resolved is None:
            items = '[]'
        elif is_bare_name(*resolved):
            items = resolved[0]
        else:
            # evaluated twice below, so cache anything that is not a bare name
            items = emitter.temporary('tmp_list')
            code += items + ' = ' + resolved[0] + '\n'
        x = emitter.temporary('tmp_x')
        code += x + ' = int(random.random() * len(' + items + '))\n'
        if mode == 'SET':
            return code + items + '[' + x + '] = ' + value + '\n'
        return code + items + '.insert(' + x + ', ' + value + ')\n'

    items = emitter.value_to_code(block, 'LIST', Order.MEMBER, '[]')
    if where == 'FIRST':
        if mode == 'SET':
            return items + '[0] = ' + value + '\n'
        return items + '.insert(0, ' + value + ')\n'
    if where == 'LAST':
        if mode == 'SET':
            return items + '[-1] = ' + value + '\n'
        return items + '.append(' + value + ')\n'
    if where == 'FROM_START':
        at = emitter.adjusted_index(block, 'AT').code
    elif where == 'FROM_END':
        at = emitter.adjusted_index(block, 'AT', 1, True).code
    else:
        raise unhandled(block.kind, block.id, MODE=mode, WHERE=where)
    if mode == 'SET':
        return items + '[' + at + '] = ' + value + '\n'
    return items + '.insert(' + at + ', ' + value + ')\n'


def slice_bounds(emitter, block):
    """Start and end of a `[a : b]` slice for the WHERE1/AT1, WHERE2/AT2 fields.

    Shared by sublist and substring blocks; an empty bound means "from the
    beginning" or "to the end".
    """
    where1 = block.field_value('WHERE1')
    where2 = block.field_value('WHERE2')
    if where1 == 'FROM_START':
        start = emitter.adjusted_index(block, 'AT1')
        at1 = '' if start.constant == 0 else start.code
    elif where1 == 'FROM_END':
        at1 = emitter.adjusted_index(block, 'AT1', 1, True).code
    elif where1 == 'FIRST':
        at1 = ''
    else:
        raise unhandled(block.kind, block.id, WHERE1=where1, WHERE2=where2)

    if where2 == 'FROM_START':
        at2 = emitter.adjusted_index(block, 'AT2', 1).code
    elif where2 == 'FROM_END':
        end = emitter.adjusted_index(block, 'AT2', 0, True)
        # an end offset of zero from the end must mean "through the end"
        if end.constant is None:
            emitter.declare_import('import_sys', 'import sys')
            at2 = end.code + ' or sys.maxsize'
        elif end.constant == 0:
            at2 = ''
        else:
            at2 = end.code
    elif where2 == 'LAST':
        at2 = ''
    else:
        raise unhandled(block.kind, block.id, WHERE1=where1, WHERE2=where2)
    return at1, at2


def lists_getSublist(emitter, block):
    items = emitter.value_to_code(block, 'LIST', Order.MEMBER, '[]')
    at1, at2 = slice_bounds(emitter, block)
    return items + '[' + at1 + ' : ' + at2 + ']', Order.MEMBER


def lists_sort(emitter, block):
    items = emitter.value_to_code(block, 'LIST', Order.NONE, '[]')
    sort_type = SORT_TYPES.get(block.field_value('TYPE', 'NUMERIC'))
    if sort_type is None:
        raise unhandled(block.kind, block.id, TYPE=block.field_value('TYPE'))
    reverse = 'False' if str(block.field_value('DIRECTION', '1')) == '1' else 'True'
    name = emitter.provide_function('lists_sort', SORT)
    return '%s(%s, "%s", %s)' % (name, items, sort_type, reverse), Order.FUNCTION_CALL


def lists_split(emitter, block):
    mode = block.field_value('MODE')
    if mode == 'SPLIT':
        text = emitter.value_to_code(block, 'INPUT', Order.MEMBER, "''")
        # no delimiter splits on runs of whitespace
        delim = emitter.value_to_code(block, 'DELIM', Order.NONE)
        code = text + '.split(' + delim + ')'
    elif mode == 'JOIN':
        items = emitter.value_to_code(block, 'INPUT', Order.NONE, '[]')
        delim = emitter.value_to_code(block, 'DELIM', Order.MEMBER, "''")
        code = delim + '.join(' + items + ')'
    else:
        raise MalformedGraphError(f"Unknown mode: {mode}", {'block': block.id, 'kind': block.kind, 'MODE': mode})
    return code, Order.FUNCTION_CALL


def lists_reverse(emitter, block):
    items = emitter.value_to_code(block, 'LIST', Order.NONE, '[]')
    return 'list(reversed(' + items + '))', Order.FUNCTION_CALL


GENERATORS = {
    'lists_create_empty': lists_create_empty,
    'lists_create_with': lists_create_with,
    'lists_repeat': lists_repeat,
    'lists_length': lists_length,
    'lists_isEmpty': lists_isEmpty,
    'lists_indexOf': lists_indexOf,
    'lists_getIndex': lists_getIndex,
    'lists_setIndex': lists_setIndex,
    'lists_getSublist': lists_getSublist,
    'lists_sort': lists_sort,
    'lists_split': lists_split,
    'lists_reverse': lists_reverse,
}
