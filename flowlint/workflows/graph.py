"""Connection graph helpers."""

from typing import Set

import networkx as nx

from .schemas import Workflow


def build_connection_graph(workflow: Workflow) -> nx.DiGraph:
    """
    Build a directed graph of node names from the workflow connections.

    Connections pointing at nodes that are not defined are kept as edges so
    the target still counts as receiving input.
    """
    graph = nx.DiGraph()
    for node in workflow.nodes:
        graph.add_node(node.name, disabled=node.disabled)

    for source, outputs in workflow.connections.items():
        for connection_type, slots in outputs.items():
            for output_index, targets in enumerate(slots):
                for target in targets or []:
                    graph.add_edge(
                        source,
                        target.node,
                        connection_type=connection_type,
                        source_output=output_index,
                        target_input=target.index,
                    )
    return graph


def nodes_with_input(graph: nx.DiGraph) -> Set[str]:
    """Nodes that are the target of at least one connection."""
    return {node for node in graph.nodes if graph.in_degree(node) > 0}


def nodes_in_loops(graph: nx.DiGraph) -> Set[str]:
    """Nodes that lie on a connection cycle."""
    looped: Set[str] = set(nx.nodes_with_selfloops(graph))
    for component in nx.strongly_connected_components(graph):
        if len(component) > 1:
            looped.update(component)
    return looped
