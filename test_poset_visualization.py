"""
test_poset_visualization.py

Tests for Hasse diagram rendering, exports and the explorer app.
"""

import csv

import plotly.graph_objects as go
import pytest
from dash import Dash, dcc, html

from poset_core import Poset
from poset_visualization import (
    create_plotly_graph, compute_layout, hierarchical_layout,
    create_hover_text, get_node_color, create_comparison_figure,
    create_table_figure, export_to_dot, export_to_csv,
)
from poset_notebook_apps import (
    DEFAULT_SNIPPET, render_snippet, update_explorer, create_poset_explorer_app,
)


@pytest.fixture
def diamond():
    return Poset(["a", "b", "c", "d"], [(0, 1), (0, 2), (1, 3), (2, 3)])


class TestLayout:

    def test_hierarchical_levels(self, diamond):
        pos = hierarchical_layout(diamond.to_graph())
        assert pos[0][1] == 0.0
        assert pos[1][1] == pos[2][1] == 0.5
        assert pos[3][1] == 1.0
        assert pos[1][0] < pos[2][0]

    def test_single_node_centered(self):
        pos = hierarchical_layout(Poset(["a"], []).to_graph())
        assert pos[0] == (0.5, 0.0)

    @pytest.mark.parametrize("layout", ['hierarchical', 'force', 'circular'])
    def test_all_layouts_place_every_node(self, diamond, layout):
        pos = compute_layout(diamond.to_graph(), layout)
        assert set(pos) == {0, 1, 2, 3}

    def test_unknown_layout(self, diamond):
        with pytest.raises(ValueError):
            compute_layout(diamond.to_graph(), 'spiral')


class TestFigures:

    def test_plotly_graph(self, diamond):
        fig = create_plotly_graph(diamond)
        assert isinstance(fig, go.Figure)
        edges, nodes = fig.data
        # Four generator edges, each drawn as x0, x1, None
        assert len(edges.x) == 12
        assert list(nodes.text) == ["a", "b", "c", "d"]

    def test_without_labels_or_edges(self, diamond):
        fig = create_plotly_graph(diamond, show_edges=False, show_labels=False)
        assert len(fig.data[0].x) == 0
        assert fig.data[1].mode == 'markers'

    def test_hover_text(self, diamond):
        G = diamond.to_graph()
        text = create_hover_text(0, diamond, G)
        assert "<b>a</b>" in text
        assert "Least" in text
        assert "Above:</b> b, c, d" in text

    def test_node_colors(self, diamond):
        assert get_node_color(3, diamond, 'extremal') == 'gold'
        assert get_node_color(1, diamond, 'extremal') == 'lightblue'
        assert get_node_color(2, diamond, 'index') == 2
        assert get_node_color(3, diamond, 'rank', {3: 2}) == 2
        with pytest.raises(ValueError):
            get_node_color(0, diamond, 'rainbow')

    def test_comparison_figure(self, diamond):
        fig = create_comparison_figure([diamond, Poset(["x", "y"], [])], titles=["A", "B"])
        assert len(fig.data) == 4

    def test_table_figure(self, diamond):
        fig = create_table_figure(diamond, 'supremum')
        columns = fig.data[0].cells.values
        # Column for "c": supremum(b, c) = d
        assert columns[3][1] == "d"

    def test_table_figure_absent_table(self):
        fig = create_table_figure(Poset(["x", "y"], []), 'pseudo_complement')
        assert list(fig.data[0].cells.values[1]) == ['—', '—']

    def test_table_figure_unknown_operation(self, diamond):
        with pytest.raises(ValueError):
            create_table_figure(diamond, 'implication')


class TestExport:

    def test_dot_string(self, diamond):
        assert export_to_dot(diamond) == diamond.to_dot_language()

    def test_dot_file(self, diamond, tmp_path):
        path = tmp_path / "diamond.dot"
        assert export_to_dot(diamond, str(path)) is None
        assert path.read_text(encoding='utf-8') == diamond.to_dot_language()

    def test_csv(self, diamond, tmp_path):
        path = tmp_path / "diamond.csv"
        export_to_csv(diamond, str(path))
        with open(path, newline='', encoding='utf-8') as f:
            rows = list(csv.reader(f))
        assert rows[0] == ['Left', 'Right', 'Leq', 'Supremum', 'Infimum', 'PseudoComplement']
        assert len(rows) == 1 + 16
        # b, c
        assert rows[1 + 4 * 1 + 2] == ['b', 'c', 'False', 'd', 'a', 'c']


class TestExplorerApp:

    def test_default_snippet_is_boolean(self):
        fig, messages, table = render_snippet(DEFAULT_SNIPPET)
        assert isinstance(fig, go.Figure)
        assert messages[-1] == "is Boolean algebra: True"
        assert table is None

    def test_error_becomes_message(self):
        fig, messages, table = render_snippet("a -> b\nb -> a")
        assert len(messages) == 1
        assert messages[0].startswith("poset must be antisymmetric")
        assert table is None

    def test_empty_input(self):
        _, messages, _ = render_snippet("")
        assert messages == ["no elements"]

    def test_with_table(self):
        _, _, table = render_snippet("a -> b", operation='infimum')
        assert isinstance(table, go.Figure)

    def test_app_factory(self):
        app = create_poset_explorer_app()
        assert isinstance(app, Dash)
        assert app.layout is not None

    def test_app_wires_button_to_outputs(self):
        app = create_poset_explorer_app()
        keys = [k for k in app.callback_map if 'canvas.figure' in k]
        assert len(keys) == 1
        assert 'description.children' in keys[0]
        assert 'table-container.children' in keys[0]
        inputs = {(i['id'], i['property']) for i in app.callback_map[keys[0]]['inputs']}
        assert inputs == {('button', 'n_clicks'), ('table-operation', 'value')}

    def test_update_explorer(self):
        fig, items, table = update_explorer("a -> b -> c", operation='supremum')
        assert isinstance(fig, go.Figure)
        assert all(isinstance(item, html.Li) for item in items)
        assert items[0].children == "the greatest element: c"
        assert isinstance(table, dcc.Graph)

    def test_update_explorer_error(self):
        _, items, table = update_explorer("a -> b\nb -> a", operation='supremum')
        assert len(items) == 1
        assert items[0].children.startswith("poset must be antisymmetric")
        assert table is None
