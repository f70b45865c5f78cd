import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'compiler'))

from gen_context import GenerationContext, HelperTemplate, ProcedureSource
from name_db import VARIABLE

GREET = HelperTemplate(
    'def $function_name(name):',
    '    return "hi " + name',
)


def new_context():
    return GenerationContext()


def test_template_has_one_named_slot():
    assert GREET.render('greet') == 'def greet(name):\n    return "hi " + name'
    braces = HelperTemplate('def $function_name():', '    return {"a": 1}')
    assert braces.render('f') == 'def f():\n    return {"a": 1}'


def test_provide_function_is_idempotent():
    ctx = new_context()
    first = ctx.provide_function('greet', GREET)
    second = ctx.provide_function('greet', GREET)
    assert first == second == 'greet'
    assert list(ctx.helpers) == ['greet']
    assert '$function_name' not in ctx.helpers['greet']


def test_helper_name_avoids_user_names():
    ctx = new_context()
    assert ctx.names.get_name('greet', VARIABLE) == 'greet'
    name = ctx.provide_function('greet', GREET)
    assert name == 'greet2'
    assert ctx.helpers['greet'].startswith('def greet2(name):')


def test_imports_accumulate_once_in_order():
    ctx = new_context()
    ctx.declare_import('import_sys', 'import sys')
    ctx.declare_import('import_random', 'import random')
    ctx.declare_import('import_sys', 'import sys')
    assert list(ctx.imports.values()) == ['import sys', 'import random']


def test_temporaries_are_recorded():
    ctx = new_context()
    assert ctx.new_temporary('tmp_list') == 'tmp_list'
    assert ctx.new_temporary('tmp_list') == 'tmp_list2'
    assert ctx.temporaries == ['tmp_list', 'tmp_list2']


def test_contexts_do_not_share_state():
    one = new_context()
    two = new_context()
    one.provide_function('greet', GREET)
    one.declare_import('import_random', 'import random')
    assert two.helpers == {}
    assert two.imports == {}
    assert two.provide_function('greet', GREET) == 'greet'


def test_procedure_render_globals():
    proc = ProcedureSource(name='f', params=['a'], user_globals=['a', 'total'], body='    total = a\n')
    assert proc.render(['tmp_x']) == 'def f(a):\n    global total, tmp_x\n    total = a\n'
    lonely = ProcedureSource(name='g', params=[], user_globals=[], body='    pass\n')
    assert lonely.render([]) == 'def g():\n    pass\n'


if __name__ == '__main__':
    pytest.main([str(Path(__file__))])
