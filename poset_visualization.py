"""
poset_visualization.py

Plotly-based visualization for finite posets.

This module converts the Hasse diagram of a Poset (its generator edges, as a
NetworkX DiGraph) to interactive Plotly figures with hover information and
several layout options, and exports posets to DOT and CSV.
"""

import csv

import networkx as nx
import plotly.graph_objects as go
from plotly.subplots import make_subplots


def create_plotly_graph(poset,
                        layout='hierarchical',
                        color_by='rank',
                        show_edges=True,
                        show_labels=True,
                        node_size=18,
                        title=None,
                        width=800,
                        height=600):
    """
    Create an interactive Plotly visualization of a poset's Hasse diagram.

    Args:
        poset: Poset object
        layout: Layout algorithm - 'hierarchical', 'force', or 'circular'
        color_by: How to color nodes - 'rank', 'index', 'extremal', or 'uniform'
        show_edges: Whether to display edges
        show_labels: Whether to print element labels on the nodes
        node_size: Base size for nodes (will be scaled by degree)
        title: Optional title for the graph
        width: Figure width in pixels
        height: Figure height in pixels

    Returns:
        plotly.graph_objects.Figure
    """
    # Get the NetworkX Hasse diagram
    G = poset.to_graph()

    # Compute layout positions
    pos = compute_layout(G, layout)

    # Prepare node data
    node_trace = create_node_trace(G, poset, pos, color_by, node_size, show_labels)

    # Prepare edge data
    if show_edges:
        edge_trace = create_edge_trace(G, pos)
    else:
        edge_trace = go.Scatter(x=[], y=[], mode='lines')

    # Create figure
    fig = go.Figure(data=[edge_trace, node_trace])

    # Update layout
    fig.update_layout(
        title=dict(text=title or f"Hasse Diagram ({len(poset)} elements)", font=dict(size=16)),
        showlegend=False,
        hovermode='closest',
        margin=dict(b=20, l=5, r=5, t=40),
        xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        plot_bgcolor='white',
        width=width,
        height=height
    )

    return fig


def compute_layout(G, layout_type):
    """
    Compute node positions based on layout algorithm.

    Args:
        G: NetworkX DiGraph
        layout_type: 'hierarchical', 'force', or 'circular'

    Returns:
        dict mapping node_id -> (x, y) position
    """
    if layout_type == 'hierarchical':
        return hierarchical_layout(G)
    elif layout_type == 'force':
        return nx.spring_layout(G, k=0.5, iterations=50, seed=0)
    elif layout_type == 'circular':
        return nx.circular_layout(G)
    else:
        raise ValueError(f"Unknown layout type: {layout_type}")


def compute_levels(G):
    """
    Assign each node its level: the length of the longest path reaching it
    from a node with no predecessors.

    Args:
        G: NetworkX DiGraph (must be acyclic)

    Returns:
        dict mapping node_id -> int level
    """
    levels = {}
    for node in nx.topological_sort(G):
        pred_levels = [levels[pred] for pred in G.predecessors(node)]
        levels[node] = max(pred_levels) + 1 if pred_levels else 0
    return levels


def hierarchical_layout(G):
    """
    Create a hierarchical layout based on node levels.

    Minimal elements sit on the bottom row and every element is drawn above
    all elements below it. Within a row, nodes are spread evenly in index
    order.

    Args:
        G: NetworkX DiGraph

    Returns:
        dict mapping node_id -> (x, y) position
    """
    levels = compute_levels(G)

    # Group nodes by level
    level_groups = {}
    for node, level in levels.items():
        level_groups.setdefault(level, []).append(node)

    pos = {}
    max_level = max(levels.values()) if levels else 0

    for level, nodes in level_groups.items():
        y = level / max(max_level, 1)  # Normalize to [0, 1]
        n_nodes = len(nodes)

        for i, node in enumerate(sorted(nodes)):
            if n_nodes > 1:
                x = i / (n_nodes - 1)
            else:
                x = 0.5
            pos[node] = (x, y)

    return pos


def create_edge_trace(G, pos):
    """
    Create Plotly trace for edges.

    Args:
        G: NetworkX DiGraph
        pos: dict mapping node_id -> (x, y) position

    Returns:
        plotly.graph_objects.Scatter trace
    """
    edge_x = []
    edge_y = []

    for edge in G.edges():
        x0, y0 = pos[edge[0]]
        x1, y1 = pos[edge[1]]
        edge_x.extend([x0, x1, None])
        edge_y.extend([y0, y1, None])

    edge_trace = go.Scatter(
        x=edge_x,
        y=edge_y,
        line=dict(width=1.5, color='#888'),
        hoverinfo='none',
        mode='lines'
    )

    return edge_trace


def create_node_trace(G, poset, pos, color_by, base_size, show_labels=True):
    """
    Create Plotly trace for nodes with hover information.

    Args:
        G: NetworkX DiGraph from poset.to_graph()
        poset: Poset object
        pos: dict mapping node_id -> (x, y) position
        color_by: Coloring scheme
        base_size: Base node size
        show_labels: Whether to draw labels inside the markers

    Returns:
        plotly.graph_objects.Scatter trace
    """
    node_x = []
    node_y = []
    node_text = []
    node_color = []
    node_size = []
    node_labels = []

    levels = compute_levels(G) if color_by == 'rank' else None

    for node in G.nodes():
        x, y = pos[node]
        node_x.append(x)
        node_y.append(y)
        node_labels.append(G.nodes[node]['label'])

        # Create hover text
        node_text.append(create_hover_text(node, poset, G))

        # Determine color
        node_color.append(get_node_color(node, poset, color_by, levels))

        # Determine size based on degree
        degree = G.in_degree(node) + G.out_degree(node)
        node_size.append(base_size + degree * 2)

    node_trace = go.Scatter(
        x=node_x,
        y=node_y,
        mode='markers+text' if show_labels else 'markers',
        hoverinfo='text',
        hovertext=node_text,
        text=node_labels if show_labels else None,
        textposition='middle center',
        customdata=list(G.nodes()),
        marker=dict(
            size=node_size,
            color=node_color,
            colorscale='Viridis',
            line=dict(width=1, color='darkgray')
        )
    )

    return node_trace


def create_hover_text(node_id, poset, G):
    """
    Create rich hover text for a node.

    Args:
        node_id: element index
        poset: Poset object
        G: NetworkX DiGraph

    Returns:
        str: HTML-formatted hover text
    """
    labels = poset.elements

    def names(indices):
        return ", ".join(labels[i] for i in sorted(indices)) or "(none)"

    lines = [
        f"<b>{labels[node_id]}</b> (#{node_id})",
        "",
        f"<b>Above:</b> {names(poset.up_set(node_id) - {node_id})}",
        f"<b>Below:</b> {names(poset.down_set(node_id) - {node_id})}",
    ]

    if node_id == poset.get_greatest_element():
        lines.append("  ✓ Greatest")
    if node_id == poset.get_least_element():
        lines.append("  ✓ Least")

    lines.append("")
    lines.append(f"Covers: {G.in_degree(node_id)}")
    lines.append(f"Covered by: {G.out_degree(node_id)}")

    return "<br>".join(lines)


def get_node_color(node_id, poset, color_by, levels=None):
    """
    Determine node color based on coloring scheme.

    Args:
        node_id: element index
        poset: Poset object
        color_by: 'rank', 'index', 'extremal', or 'uniform'
        levels: dict node_id -> level (required for 'rank')

    Returns:
        Color value (number for continuous, string for discrete)
    """
    if color_by == 'rank':
        return levels[node_id]
    elif color_by == 'index':
        return node_id
    elif color_by == 'extremal':
        if node_id == poset.get_least_element() or node_id == poset.get_greatest_element():
            return 'gold'
        return 'lightblue'
    elif color_by == 'uniform':
        return 'white'
    else:
        raise ValueError(f"Unknown color scheme: {color_by}")


def create_comparison_figure(posets, titles=None, layout='hierarchical'):
    """
    Create a side-by-side comparison of multiple posets.

    Args:
        posets: list of Poset objects
        titles: list of titles for each poset
        layout: Layout algorithm to use

    Returns:
        plotly.graph_objects.Figure with subplots
    """
    n_posets = len(posets)
    if titles is None:
        titles = [f"Poset {i+1}" for i in range(n_posets)]

    # Create subplots
    fig = make_subplots(
        rows=1,
        cols=n_posets,
        subplot_titles=titles,
        horizontal_spacing=0.05
    )

    for i, poset in enumerate(posets):
        col = i + 1

        # Compute layout
        G = poset.to_graph()
        pos = compute_layout(G, layout)

        # Add to subplot
        fig.add_trace(create_edge_trace(G, pos), row=1, col=col)
        fig.add_trace(create_node_trace(G, poset, pos, 'rank', 14), row=1, col=col)

    # Update layout
    fig.update_layout(
        showlegend=False,
        hovermode='closest',
        plot_bgcolor='white',
        height=600,
        width=400 * n_posets
    )

    # Hide axes for all subplots
    fig.update_xaxes(showgrid=False, zeroline=False, showticklabels=False)
    fig.update_yaxes(showgrid=False, zeroline=False, showticklabels=False)

    return fig


def create_table_figure(poset, operation='supremum'):
    """
    Show one of the binary operation tables as a Plotly table.

    Args:
        poset: Poset object
        operation: 'supremum', 'infimum', or 'pseudo_complement'

    Returns:
        plotly.graph_objects.Figure
    """
    if operation == 'supremum':
        table = poset.get_supremum()
    elif operation == 'infimum':
        table = poset.get_infimum()
    elif operation == 'pseudo_complement':
        table = poset.get_pseudo_complement()
    else:
        raise ValueError(f"Unknown operation: {operation}")

    labels = list(poset.elements)
    n = len(labels)

    def cell(k):
        return labels[k] if k is not None else '—'

    # Plotly tables are column-major
    columns = [labels]
    for j in range(n):
        columns.append([cell(table[i][j]) if table is not None else '—' for i in range(n)])

    fig = go.Figure(data=[go.Table(
        header=dict(values=[f"<b>{operation}</b>"] + [f"<b>{l}</b>" for l in labels],
                    fill_color='lightgray'),
        cells=dict(values=columns, fill_color=[['#f0f0f0'] * n] + [['white'] * n] * n)
    )])
    fig.update_layout(margin=dict(b=5, l=5, r=5, t=5))
    return fig


def export_to_dot(poset, filename=None):
    """
    Export poset to GraphViz DOT format.

    Args:
        poset: Poset object
        filename: Optional filename to write to (if None, returns string)

    Returns:
        str: DOT format string (if filename is None)
    """
    # Node and generator edge lines come from the poset itself
    dot_string = poset.to_dot_language()

    if filename:
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(dot_string)
        return None
    else:
        return dot_string


def export_to_csv(poset, filename):
    """
    Export the order and operation tables to CSV, one row per ordered pair.

    Args:
        poset: Poset object
        filename: CSV filename to write to
    """
    labels = poset.elements
    # Operation tables
    supremum = poset.get_supremum()
    infimum = poset.get_infimum()
    pseudo_complement = poset.get_pseudo_complement()

    def cell(k):
        return labels[k] if k is not None else ''

    # One row per ordered pair
    with open(filename, 'w', newline='', encoding='utf-8') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(['Left', 'Right', 'Leq', 'Supremum', 'Infimum', 'PseudoComplement'])

        for i in range(len(labels)):
            for j in range(len(labels)):
                writer.writerow([
                    labels[i],
                    labels[j],
                    poset.leq(i, j),
                    cell(supremum[i][j]),
                    cell(infimum[i][j]),
                    cell(pseudo_complement[i][j]) if pseudo_complement is not None else ''
                ])
