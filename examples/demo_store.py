import sys
import os

# Ensure flowcanvas is in path
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from flowcanvas.editor import FlowStore
from flowcanvas.core import validate_flow, JsonSerializer


def main():
    print("Building flow...")
    store = FlowStore()

    greet = store.add_node(100, 100)
    store.update_node(greet, id="greet", description="Say hello", prompt="Greet the user.")
    order = store.add_node(380, 100)
    store.update_node(order, id="take_order", description="Take the order")
    store.set_start_node("greet")

    store.connect_nodes("greet", "take_order")
    edge_id = store.add_edge("take_order")

    print(f"Flow has {len(store.graph)} nodes and {store.graph.edge_count} edges.")

    print("\nValidation:")
    for issue in validate_flow(store.graph):
        print(f"  {issue}")

    print("\nPointing the unfinished edge back at 'greet'...")
    store.update_edge("take_order", edge_id, to_node_id="greet", condition="start over")
    issues = validate_flow(store.graph)
    print(f"  {len(issues)} issue(s)")

    print("\nExported JSON:")
    print(JsonSerializer.to_json(store.graph))


if __name__ == "__main__":
    main()
