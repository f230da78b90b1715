"""
Core planar natural-construction engine.
"""

from .errors import EngineResult, Rejection, GraphEngineError, MalformedImportError, GraphIntegrityError
from .geometry import Point
from .graph import Bounds, Graph, Vertex, build_graph, start_graph
from .periphery import compute_periphery, periphery_of
from .segments import is_fully_connected, resolve_segment
from .placement import find_position
from .insertion import insert_vertex, insert_by_command, insert_random
from .relayout import relayout
from .coloring import color_vertex, color_last_vertex
from .serialization import graph_to_dict, graph_from_dict, save_graph_file, load_graph_file
from .view import LabelMode, toggle_label_mode, truncate, render_view
from .alea_prng import AleaPRNG

__all__ = ['EngineResult', 'Rejection', 'GraphEngineError', 'MalformedImportError', 'GraphIntegrityError',
           'Point', 'Bounds', 'Graph', 'Vertex', 'build_graph', 'start_graph',
           'compute_periphery', 'periphery_of', 'is_fully_connected', 'resolve_segment',
           'find_position', 'insert_vertex', 'insert_by_command', 'insert_random', 'relayout',
           'color_vertex', 'color_last_vertex', 'graph_to_dict', 'graph_from_dict',
           'save_graph_file', 'load_graph_file', 'LabelMode', 'toggle_label_mode', 'truncate',
           'render_view', 'AleaPRNG']
