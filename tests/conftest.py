import sys
import os
import pytest
sys.path.append(os.path.dirname(__file__))

from flows import make_flow, make_node, support_flow_json
from flowcanvas.editor import FlowEditor, FlowStore, Viewport


@pytest.fixture
def store():
    return FlowStore()


@pytest.fixture
def viewport():
    return Viewport()


@pytest.fixture
def editor():
    return FlowEditor()


@pytest.fixture
def support_json():
    return support_flow_json()


@pytest.fixture
def linear_flow():
    """A -> B -> C, start A."""
    return make_flow(
        make_node("A", ["B"]),
        make_node("B", ["C"]),
        make_node("C"),
        start="A",
    )
