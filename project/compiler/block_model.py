from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from validator import check_graph, collect_links, NEXT_PORT


@dataclass(eq=False)
class Block:
    kind: str
    id: str = ''
    fields: Dict[str, Any] = field(default_factory=dict)
    inputs: Dict[str, Optional['Block']] = field(default_factory=dict)
    next: Optional['Block'] = None
    mutation: Dict[str, Any] = field(default_factory=dict)

    def field_value(self, name: str, default: Any = None) -> Any:
        value = self.fields.get(name)
        return default if value is None else value

    def input(self, name: str) -> Optional['Block']:
        return self.inputs.get(name)

    @property
    def item_count(self) -> int:
        return int(self.mutation.get('items', 0))

    @property
    def arguments(self) -> List[str]:
        return list(self.mutation.get('arguments', []))

    def descendants(self) -> Iterator['Block']:
        """This block and every block under its sockets and next links, depth first."""
        stack = [self]
        seen = set()
        while stack:
            b = stack.pop()
            if id(b) in seen:
                continue
            seen.add(id(b))
            yield b
            if b.next is not None:
                stack.append(b.next)
            for child in reversed(list(b.inputs.values())):
                if child is not None:
                    stack.append(child)


@dataclass
class Workspace:
    blocks: List[Block] = field(default_factory=list)
    variables: List[str] = field(default_factory=list)
    developer_variables: List[str] = field(default_factory=list)
    one_based_index: bool = True

    def all_blocks(self) -> Iterator[Block]:
        for top in self.blocks:
            yield from top.descendants()

    def all_used_variables(self) -> List[str]:
        names = list(self.variables)
        for b in self.all_blocks():
            var = b.fields.get('VAR')
            if var is not None and var not in names:
                names.append(var)
        return names


def workspace_from_ir(ir: Dict[str, Any]) -> Workspace:
    """Build a linked Workspace from the JSON IR after validating its structure."""
    nodes = ir.get('nodes', []) or []
    edges = ir.get('edges', []) or []
    roots = check_graph(nodes, edges)
    by_id = {}
    for n in nodes:
        by_id[n['id']] = Block(
            kind=n.get('type'),
            id=n['id'],
            fields=dict(n.get('fields') or {}),
            mutation=dict(n.get('mutation') or {}),
        )
    for parent, port, child in collect_links(nodes, edges):
        if port == NEXT_PORT:
            by_id[parent].next = by_id[child]
        else:
            by_id[parent].inputs[port] = by_id[child]
    options = ir.get('options', {}) or {}
    return Workspace(
        blocks=[by_id[r] for r in roots],
        variables=list(ir.get('variables', []) or []),
        developer_variables=list(ir.get('developerVariables', []) or []),
        one_based_index=bool(options.get('oneBasedIndex', True)),
    )
