"""Immutable tree nodes produced by the stencil parser.

Node hierarchy:
    Node
    ├── Template        # root
    ├── Data            # literal text
    ├── Output          # {{ path }}
    ├── If              # {% if expr %}...{% endif %}
    └── For             # {% for x in items %}...{% endfor %}

"""

from stencil.nodes.base import Node
from stencil.nodes.control_flow import For, If
from stencil.nodes.output import Data, Output
from stencil.nodes.structure import Template

__all__ = [
    "Data",
    "For",
    "If",
    "Node",
    "Output",
    "Template",
]
