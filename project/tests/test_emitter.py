import json
import pytest
from pathlib import Path
import sys

sys_path = Path(__file__).resolve().parents[1] / 'compiler'
sys.path.insert(0, str(sys_path))

from block_model import Block, Workspace, workspace_from_ir
from gen_context import EmitterOptions
from gen_lists import SORT
from py_emitter import PyEmitter, generate, generate_from_ir, is_number
from validator import MalformedGraphError, CyclicGraphError

EXAMPLES = Path(__file__).resolve().parents[1] / 'examples'


def load_example(name):
    return json.loads((EXAMPLES / name).read_text())


def var(name):
    return Block('variables_get', fields={'VAR': name})


def num(value):
    return Block('math_number', fields={'NUM': value})


def set_var(name, value):
    return Block('variables_set', fields={'VAR': name}, inputs={'VALUE': value})


def compare(op, a, b):
    return Block('logic_compare', fields={'OP': op}, inputs={'A': a, 'B': b})


def add(a, b):
    return Block('math_arithmetic', fields={'OP': 'ADD'}, inputs={'A': a, 'B': b})


def chain(*statements):
    for a, b in zip(statements, statements[1:]):
        a.next = b
    return statements[0]


def run(source):
    ns = {}
    exec(source, ns)
    return ns


def test_sort_example_output(capsys):
    emitter = PyEmitter(workspace_from_ir(load_example('sort_numbers.json')))
    source = emitter.emit()
    assert source == (
        'numbers = None\n'
        'sorted_numbers = None\n'
        '\n'
        + SORT.render('lists_sort') + '\n'
        '\n'
        'numbers = [3, 1, 2]\n'
        'sorted_numbers = lists_sort(numbers, "NUMERIC", False)\n'
        'print(sorted_numbers[0])\n'
    )
    body_start = source.split('\n').index('numbers = [3, 1, 2]') + 1
    assert emitter.mapping == [
        {'block_id': 'set_numbers', 'kind': 'variables_set', 'start_line': body_start, 'end_line': body_start + 2},
    ]
    ns = run(source)
    assert ns['numbers'] == [3, 1, 2]
    assert capsys.readouterr().out == '1\n'


@pytest.mark.parametrize('name', ['sort_numbers.json', 'procedures.json'])
def test_examples_compile(name):
    compile(generate_from_ir(load_example(name)), name, 'exec')


def test_sections_are_ordered():
    remove = Block('lists_getIndex', fields={'MODE': 'REMOVE', 'WHERE': 'RANDOM'}, inputs={'VALUE': var('x')})
    proc = Block('procedures_defnoreturn', id='def_f', fields={'NAME': 'f'}, inputs={'STACK': remove})
    top = chain(set_var('x', Block('lists_create_with', mutation={'items': 2},
                                   inputs={'ADD0': num(1), 'ADD1': num(2)})),
                Block('procedures_callnoreturn', fields={'NAME': 'f'}))
    source = generate(Workspace(blocks=[top, proc]))
    positions = [source.index(s) for s in ('import random\n', 'x = None\n', 'def lists_remove_random_item(',
                                           'def f():\n', 'x = [1, 2]\n')]
    assert positions == sorted(positions)
    assert len(run(source)['x']) == 1


def test_each_pass_starts_fresh():
    pick = Block('lists_getIndex', fields={'MODE': 'GET', 'WHERE': 'RANDOM'}, inputs={'VALUE': var('x')})
    emitter = PyEmitter(Workspace(blocks=[set_var('r', pick)]))
    first = emitter.emit()
    assert emitter.emit() == first
    assert first.count('import random') == 1
    plain = generate(Workspace(blocks=[set_var('r', num(1))]))
    assert 'import' not in plain
    assert plain == 'r = None\n\nr = 1\n'


def test_empty_workspace():
    assert generate(Workspace()) == ''


def test_unknown_kind_is_rejected():
    with pytest.raises(MalformedGraphError) as exc:
        generate(Workspace(blocks=[Block('robot_dance', id='r1')]))
    assert exc.value.details == {'block': 'r1', 'kind': 'robot_dance'}


def test_block_inside_itself_is_rejected():
    negate = Block('logic_negate', id='n1')
    negate.inputs['BOOL'] = negate
    with pytest.raises(CyclicGraphError):
        generate(Workspace(blocks=[Block('text_print', inputs={'TEXT': negate})]))


def test_looping_statement_chain_is_rejected():
    first = set_var('a', num(1))
    second = set_var('b', num(2))
    chain(first, second)
    second.next = first
    with pytest.raises(CyclicGraphError):
        generate(Workspace(blocks=[first]))


def test_value_block_as_statement_is_a_naked_line():
    assert generate(Workspace(blocks=[add(var('a'), num(1))])) == 'a = None\n\na + 1\n'


def test_statement_block_as_value_is_rejected():
    with pytest.raises(MalformedGraphError) as exc:
        generate(Workspace(blocks=[Block('text_print', inputs={'TEXT': set_var('a', num(1))})]))
    assert exc.value.details['socket'] == 'TEXT'


def test_index_option_overrides_workspace():
    get = Block('lists_getIndex', fields={'MODE': 'GET', 'WHERE': 'FROM_START'},
                inputs={'VALUE': var('x'), 'AT': num(1)})
    ws = Workspace(blocks=[set_var('r', get)], one_based_index=True)
    assert 'r = x[0]\n' in generate(ws)
    assert 'r = x[1]\n' in generate(ws, EmitterOptions(one_based_index=False))


def test_mapping_covers_every_top_level_chain():
    one = chain(set_var('a', num(1)), set_var('b', num(2)))
    two = set_var('c', num(3))
    emitter = PyEmitter(Workspace(blocks=[one, two]))
    source = emitter.emit()
    assert source.split('\n')[4:7] == ['a = 1', 'b = 2', 'c = 3']
    assert emitter.mapping == [
        {'block_id': '', 'kind': 'variables_set', 'start_line': 5, 'end_line': 6},
        {'block_id': '', 'kind': 'variables_set', 'start_line': 7, 'end_line': 7},
    ]


def test_if_elseif_else():
    cond = Block('controls_if', mutation={'elseif': 1, 'else': True}, inputs={
        'IF0': compare('LT', var('x'), num(3)), 'DO0': set_var('r', Block('text', fields={'TEXT': 'small'})),
        'IF1': compare('LT', var('x'), num(10)), 'DO1': set_var('r', Block('text', fields={'TEXT': 'mid'})),
        'ELSE': set_var('r', Block('text', fields={'TEXT': 'big'})),
    })
    source = generate(Workspace(blocks=[chain(set_var('x', num(5)), cond)]))
    assert "if x < 3:\n    r = 'small'\nelif x < 10:\n    r = 'mid'\nelse:\n    r = 'big'\n" in source
    assert run(source)['r'] == 'mid'


def test_empty_branches_get_pass():
    assert generate(Workspace(blocks=[Block('controls_if')])) == 'if False:\n    pass\n'


def test_loops_run():
    repeat = Block('controls_repeat_ext', fields={'TIMES': 3}, inputs={'DO': set_var('n', add(var('n'), num(1)))})
    until = Block('controls_whileUntil', fields={'MODE': 'UNTIL'}, inputs={
        'BOOL': compare('GTE', var('m'), num(5)), 'DO': set_var('m', add(var('m'), num(1)))})
    each = Block('controls_forEach', fields={'VAR': 'item'}, inputs={
        'LIST': Block('lists_create_with', mutation={'items': 3}, inputs={'ADD0': num(1), 'ADD1': num(2), 'ADD2': num(3)}),
        'DO': set_var('total', add(var('total'), var('item')))})
    source = generate(Workspace(blocks=[chain(
        set_var('n', num(0)), repeat, set_var('m', num(0)), until, set_var('total', num(0)), each)]))
    assert 'for count in range(3):\n' in source
    assert 'while not m >= 5:\n' in source
    assert 'for item in [1, 2, 3]:\n' in source
    ns = run(source)
    assert (ns['n'], ns['m'], ns['total']) == (3, 5, 6)


def test_repeat_with_computed_count():
    repeat = Block('controls_repeat_ext', inputs={'TIMES': var('k')})
    assert 'for count in range(int(k)):\n    pass\n' in generate(Workspace(blocks=[repeat]))


@pytest.mark.parametrize('times', ['abc', 'inf', 'nan'])
def test_repeat_with_bad_count_field(times):
    repeat = Block('controls_repeat_ext', id='r1', fields={'TIMES': times})
    with pytest.raises(MalformedGraphError) as exc:
        generate(Workspace(blocks=[repeat]))
    assert 'controls_repeat_ext' in str(exc.value)
    assert exc.value.details == {'block': 'r1', 'kind': 'controls_repeat_ext', 'TIMES': times}


def test_loop_trap_is_instrumented():
    loop = Block('controls_whileUntil', id='w1', fields={'MODE': 'WHILE'},
                 inputs={'BOOL': Block('logic_boolean', fields={'BOOL': 'TRUE'})})
    source = generate(Workspace(blocks=[loop]), EmitterOptions(infinite_loop_trap='trap(%1)\n'))
    assert source == "while True:\n    trap('w1')\n"


def test_is_number():
    assert is_number('12')
    assert is_number('-3.5')
    assert is_number('1e10')
    assert not is_number('x')
    assert not is_number('int(i)')


if __name__ == '__main__':
    pytest.main([str(Path(__file__))])
