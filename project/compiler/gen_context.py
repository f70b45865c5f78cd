import logging
from dataclasses import dataclass
from string import Template
from typing import Any, Dict, List, Optional, Set

from name_db import NameDB, PROCEDURE, DEVELOPER_VARIABLE

logger = logging.getLogger(__name__)

INDENT = '    '


@dataclass
class EmitterOptions:
    # None defers to the workspace setting
    one_based_index: Optional[bool] = None
    # instrumentation templates; %1 is replaced by the quoted block id
    statement_prefix: Optional[str] = None
    infinite_loop_trap: Optional[str] = None


class HelperTemplate:
    """Source of a shared helper with a single `$function_name` slot."""

    SLOT = 'function_name'

    def __init__(self, *lines: str):
        self.lines = list(lines)
        self._template = Template('\n'.join(self.lines))

    def render(self, function_name: str) -> str:
        return self._template.substitute({self.SLOT: function_name})


@dataclass
class ProcedureSource:
    # parts of a user procedure; the global line is filled in when the pass finishes
    name: str
    params: List[str]
    user_globals: List[str]
    body: str
    return_line: str = ''
    block: Optional[Any] = None

    def render(self, developer_globals: List[str]) -> str:
        names = [n for n in self.user_globals + developer_globals if n not in self.params]
        # keep first occurrence only
        names = list(dict.fromkeys(names))
        globals_line = INDENT + 'global ' + ', '.join(names) + '\n' if names else ''
        return 'def %s(%s):\n%s%s%s' % (self.name, ', '.join(self.params), globals_line, self.body, self.return_line)


class GenerationContext:
    """Everything one generation pass accumulates. Never shared between passes."""

    def __init__(self, names: Optional[NameDB] = None):
        self.names = names or NameDB()
        self.imports: Dict[str, str] = {}
        self.helpers: Dict[str, str] = {}
        self.function_names: Dict[str, str] = {}
        self.procedures: Dict[str, ProcedureSource] = {}
        self.temporaries: List[str] = []
        # blocks whose generator is currently running, for cycle detection
        self.active: Set[int] = set()

    def provide_function(self, key: str, template: HelperTemplate) -> str:
        if key in self.function_names:
            return self.function_names[key]
        name = self.names.get_distinct_name(key, PROCEDURE)
        self.function_names[key] = name
        self.helpers[key] = template.render(name)
        logger.debug("registered helper %r as %s", key, name)
        return name

    def declare_import(self, key: str, statement: str):
        if key not in self.imports:
            self.imports[key] = statement
            logger.debug("declared import %r", statement)

    def new_temporary(self, desired: str) -> str:
        name = self.names.get_distinct_name(desired, DEVELOPER_VARIABLE)
        self.temporaries.append(name)
        return name

    def add_procedure(self, procedure: ProcedureSource):
        self.procedures[procedure.name] = procedure
        logger.debug("registered procedure %s(%s)", procedure.name, ', '.join(procedure.params))
