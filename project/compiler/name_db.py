import builtins
import keyword
import logging
import re
from typing import Dict, Iterable, Set, Tuple

logger = logging.getLogger(__name__)

# namespaces; all of them share one pool of output identifiers
VARIABLE = 'VARIABLE'
PROCEDURE = 'PROCEDURE'
DEVELOPER_VARIABLE = 'DEVELOPER_VARIABLE'

# module names the generated code may import
_MODULE_NAMES = ('random', 'sys', 'math', 'time', 'machine', 'micropython')

RESERVED_WORDS = frozenset(
    list(keyword.kwlist) + list(getattr(keyword, 'softkwlist', []))
    + [n for n in dir(builtins) if not n.startswith('_')]
    + list(_MODULE_NAMES)
)


def sanitize(name: str) -> str:
    # Replace invalid identifier characters with '_', ensure doesn't start with digit
    if not name:
        return 'unnamed'
    s = re.sub(r'[^0-9a-zA-Z_]', '_', name.replace(' ', '_'))
    if re.match(r'^[0-9]', s):
        s = 'my_' + s
    return s


class NameDB:
    """Maps logical names to legal, collision-free Python identifiers for one pass."""

    def __init__(self, reserved: Iterable[str] = RESERVED_WORDS):
        self.reserved: Set[str] = set(reserved)
        self._db: Dict[Tuple[str, str], str] = {}
        self._used: Set[str] = set()

    def get_name(self, name: str, namespace: str) -> str:
        """Stable mapping: the same (name, namespace) always gives the same identifier."""
        key = (namespace, name)
        if key in self._db:
            return self._db[key]
        safe = self.get_distinct_name(name, namespace)
        self._db[key] = safe
        return safe

    def get_distinct_name(self, name: str, namespace: str) -> str:
        """A fresh identifier never handed out before in this pass."""
        base = sanitize(name)
        suffix = ''
        while (base + suffix) in self._used or (base + suffix) in self.reserved:
            suffix = str(int(suffix) + 1) if suffix else '2'
        safe = base + suffix
        self._used.add(safe)
        if safe != name:
            logger.debug("mangled %s name %r -> %r", namespace.lower(), name, safe)
        return safe
