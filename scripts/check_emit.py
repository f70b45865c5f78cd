#!/usr/bin/env python3
import sys
import subprocess
import os

if len(sys.argv) < 2:
    print('Usage: python3 check_emit.py <ir.json>')
    sys.exit(2)

ir = sys.argv[1]
if not os.path.exists(ir):
    print('IR file not found:', ir)
    sys.exit(2)

here = os.path.dirname(os.path.abspath(__file__))
emitter = os.path.join(here, '..', 'project', 'scripts', 'emit_python.py')

# emit Python
print('Emitting Python...')
out_py = 'out_check.py'
res = subprocess.run([sys.executable, emitter, ir, '--out', out_py], capture_output=True, text=True)
if res.returncode != 0:
    print('Emitter failed:', res.stderr)
    sys.exit(res.returncode)

with open(out_py) as f:
    source = f.read()
print('Generated Python:\n')
print(source)

# syntax check only; the generated program is never run here
print('Checking syntax...')
try:
    compile(source, out_py, 'exec')
except SyntaxError as e:
    print('Syntax error:', e)
    sys.exit(1)

print('OK')
sys.exit(0)
