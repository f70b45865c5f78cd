from typing import List, Dict, Any, Tuple, Iterable, Optional


class ValidationError(Exception):
    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message)
        self.details = details or {}


class MalformedGraphError(ValidationError):
    """A block the generator cannot translate: unknown kind or option combination."""


class CyclicGraphError(ValidationError):
    """A block is reachable from itself through input or next links."""


NEXT_PORT = 'next'


def collect_links(nodes: List[Dict[str, Any]], edges: List[Dict[str, Any]] = None) -> List[Tuple[str, str, str]]:
    # links as (parent, port, child); edges[] and node-level links are merged
    links = []
    for n in nodes:
        for port, child in (n.get('inputs') or {}).items():
            if child:
                links.append((n['id'], port, child))
        if n.get('next'):
            links.append((n['id'], NEXT_PORT, n['next']))
    for e in edges or []:
        links.append((e.get('to'), e.get('toPort') or NEXT_PORT, e.get('from')))
    return links


def build_adj(nodes: List[Dict[str, Any]], edges: List[Dict[str, Any]] = None) -> Tuple[Dict[str, List[str]], Dict[str, int]]:
    # adjacency: parent -> children it needs generated, and indegree (number of parents)
    node_ids = [n['id'] for n in nodes]
    adj = {nid: [] for nid in node_ids}
    indeg = {nid: 0 for nid in node_ids}
    seen_ports: Dict[Tuple[str, str], str] = {}
    for parent, port, child in collect_links(nodes, edges):
        if parent not in adj:
            raise ValidationError(f"Link references unknown block '{parent}'", {'block': parent})
        if child not in adj:
            raise ValidationError(f"Input reference '{child}' for block '{parent}' not found", {'block': parent, 'input': child, 'port': port})
        if (parent, port) in seen_ports:
            if seen_ports[(parent, port)] == child:
                # the same link given both on the node and as an edge
                continue
            raise ValidationError(
                f"Socket '{port}' of block '{parent}' has more than one connection",
                {'block': parent, 'port': port, 'inputs': [seen_ports[(parent, port)], child]}
            )
        seen_ports[(parent, port)] = child
        adj[parent].append(child)
        indeg[child] += 1
    return adj, indeg


def check_graph(nodes: List[Dict[str, Any]], edges: List[Dict[str, Any]] = None) -> List[str]:
    """Validate block structure and return the ids of the top-level blocks, in node order.

    Raises ValidationError for duplicate ids, dangling references and blocks
    plugged into more than one socket, and CyclicGraphError when a block can
    reach itself.
    """
    ids = [n.get('id') for n in nodes]
    for n in nodes:
        if not n.get('id'):
            raise ValidationError('Block without an id', {'block_type': n.get('type')})
        if ids.count(n['id']) > 1:
            raise ValidationError(f"Duplicate block id '{n['id']}'", {'block': n['id']})
    adj, indeg = build_adj(nodes, edges)
    for nid, d in indeg.items():
        if d > 1:
            raise ValidationError(f"Block '{nid}' is connected to more than one socket", {'block': nid, 'parents': d})
    # Kahn's algorithm
    remaining = dict(indeg)
    q = [nid for nid, d in remaining.items() if d == 0]
    roots = list(q)
    visited = 0
    while q:
        n = q.pop(0)
        visited += 1
        for m in adj[n]:
            remaining[m] -= 1
            if remaining[m] == 0:
                q.append(m)
    if visited != len(nodes):
        cycle = sorted(nid for nid, d in remaining.items() if d > 0)
        raise CyclicGraphError('Cycle detected in block graph', {'cycle': cycle})
    return roots


def validate_kinds(nodes: Iterable[Dict[str, Any]], known_kinds: Iterable[str]):
    known = set(known_kinds)
    for n in nodes:
        if n.get('type') not in known:
            raise MalformedGraphError(f"Unknown block kind: {n.get('type')}", {'block': n.get('id'), 'kind': n.get('type')})
    return True


def unhandled(kind: str, block_id: Optional[str] = None, **combination) -> MalformedGraphError:
    # build the error for an option combination a generator has no branch for
    desc = ', '.join(f"{k}={v}" for k, v in combination.items())
    details = {'block': block_id, 'kind': kind}
    details.update(combination)
    return MalformedGraphError(f"Unhandled combination ({kind}): {desc}", details)


if __name__ == '__main__':
    import json, sys
    if len(sys.argv) < 2:
        print('Usage: validator.py ir.json')
        sys.exit(1)
    with open(sys.argv[1]) as f:
        ir = json.load(f)
    try:
        check_graph(ir.get('nodes', []), ir.get('edges', []))
        print('OK')
    except ValidationError as e:
        print('Validation error:', e, 'details:', getattr(e, 'details', {}))
        sys.exit(2)
