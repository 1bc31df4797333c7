"""
poset_notebook_apps.py

Dash/Plotly interactive application for exploring finite posets.
This module provides a ready-to-use app for Jupyter notebooks.

Main components:
- render_snippet(): parse an edge list, draw its Hasse diagram and list findings
- update_explorer(): turn a render into the app's component outputs
- create_poset_explorer_app(): text box + button + diagram + findings
"""

from dash import Dash, dcc, html, Input, Output, State as DashState
import plotly.graph_objects as go

from poset_core import Poset, PosetError, describe_poset
from poset_visualization import create_plotly_graph, create_table_figure


# Power set of {x, y}, ordered by inclusion
DEFAULT_SNIPPET = """\
{} -> {x} -> {x,y}
{} -> {y} -> {x,y}
"""

TABLE_OPERATIONS = [
    {'label': 'Supremum', 'value': 'supremum'},
    {'label': 'Infimum', 'value': 'infimum'},
    {'label': 'Pseudo-complement', 'value': 'pseudo_complement'},
]


def create_empty_figure(message=""):
    """Blank figure used when there is nothing to draw."""
    fig = go.Figure()
    fig.update_layout(
        xaxis=dict(visible=False), yaxis=dict(visible=False),
        plot_bgcolor='white', width=800, height=600,
        annotations=[dict(text=message, showarrow=False, font=dict(size=14, color='gray'))]
        if message else []
    )
    return fig


def render_snippet(snippet, layout='hierarchical', operation=None):
    """
    Parse an edge-list snippet and produce everything the app displays.

    Construction errors are not raised; their message becomes the only
    finding and the figures are left blank.

    Args:
        snippet: edge-list text, see poset_core.parse_dot_snippet()
        layout: layout for the Hasse diagram
        operation: optional table to show ('supremum', 'infimum',
            'pseudo_complement')

    Returns:
        tuple of (diagram figure, list of findings, table figure or None)
    """
    try:
        poset = Poset.from_dot_snippet(snippet or "")
    except PosetError as err:
        return create_empty_figure(str(err)), [str(err)], None

    messages = describe_poset(poset)
    if len(poset) == 0:
        return create_empty_figure("no elements"), messages, None

    fig = create_plotly_graph(poset, layout=layout)
    table = create_table_figure(poset, operation) if operation else None
    return fig, messages, table


def update_explorer(code, layout='hierarchical', operation=None):
    """
    Redraw the diagram, findings and table from the text box.

    Returns:
        tuple of (figure, list of html.Li, dcc.Graph or None) for the
        'canvas', 'description' and 'table-container' outputs
    """
    fig, messages, table = render_snippet(code, layout, operation)
    # Wrap the table figure for the container
    table_children = dcc.Graph(figure=table, config={'displayModeBar': False}) if table else None
    return fig, [html.Li(m) for m in messages], table_children


def create_poset_explorer_app(initial_snippet=DEFAULT_SNIPPET, layout='hierarchical'):
    """
    Create the interactive poset explorer Dash app.

    Features:
    - Text box for an edge list ('a -> b -> c', one chain per line)
    - Hasse diagram of the parsed poset
    - Bullet list of findings (extremal elements, lattice/Heyting/Boolean)
    - Operation table viewer (supremum, infimum, pseudo-complement)

    Args:
        initial_snippet: edge list shown when the app starts
        layout: 'hierarchical', 'force', or 'circular'

    Returns:
        Dash app ready to run with app.run(jupyter_mode='inline', ...)
    """
    initial_fig, initial_messages, _ = render_snippet(initial_snippet, layout)

    app = Dash(__name__)

    app.layout = html.Div([
        html.H4("Poset Explorer", style={'textAlign': 'center', 'marginBottom': '5px'}),

        html.Div([
            # Left: input and findings
            html.Div([
                html.P("One chain per line, e.g. 'a -> b -> c'.",
                       style={'fontSize': '11px', 'color': '#666', 'marginBottom': '5px'}),
                dcc.Textarea(
                    id='code',
                    value=initial_snippet,
                    style={'width': '100%', 'height': '200px', 'fontFamily': 'monospace', 'fontSize': '12px'}
                ),
                html.Button('Draw', id='button', n_clicks=0,
                            style={'backgroundColor': '#4CAF50', 'color': 'white',
                                   'padding': '3px 12px', 'marginTop': '4px'}),
                html.Ul(id='description',
                        children=[html.Li(m) for m in initial_messages],
                        style={'fontSize': '12px', 'marginTop': '10px'}),
                html.Label("Table: ", style={'fontWeight': 'bold', 'fontSize': '11px'}),
                dcc.RadioItems(
                    id='table-operation',
                    options=TABLE_OPERATIONS,
                    value=None, inline=True,
                    style={'fontSize': '11px'}
                ),
            ], style={'width': '30%', 'display': 'inline-block', 'verticalAlign': 'top'}),

            # Right: diagram and table
            html.Div([
                dcc.Graph(id='canvas', figure=initial_fig, config={'displayModeBar': False}),
                html.Div(id='table-container'),
            ], style={'width': '68%', 'display': 'inline-block', 'verticalAlign': 'top', 'marginLeft': '2%'}),
        ]),
    ])

    @app.callback(
        [Output('canvas', 'figure'), Output('description', 'children'),
         Output('table-container', 'children')],
        [Input('button', 'n_clicks'), Input('table-operation', 'value')],
        [DashState('code', 'value')]
    )
    def run(n_clicks, operation, code):
        return update_explorer(code, layout, operation)

    return app
