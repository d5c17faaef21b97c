"""Example 01: Basic Schema

This example loads a small schema, makes selections the way a form would,
and asks the store what to show after every interaction.

Topics Covered:
--------------
- Loading a schema document
- Variable and value conditions
- Visible values and info descriptions
- The variable dependency graph
- Saving the schema to JSON
"""

import io

import formspace as fs

# =============================================================================
# Schema Document
# =============================================================================

DUNGEON = {
    "variables": [
        {
            "name": "Level",
            "type": "enum",
            "description": "How hard should it be?",
            "values": [{"name": "Easy"}, {"name": "Hard"}],
        },
        {
            "name": "Boss",
            "type": "enum",
            "values": [
                {"name": "Dragon", "conditions": {"Level": "Hard"}},
                {"name": "Goblin"},
            ],
        },
        {
            "name": "Treasure",
            "type": "enum",
            "conditions": {"Boss": "Dragon"},
            "values": [{"name": "Gold"}, {"name": "Egg"}],
        },
        {
            "name": "Tip",
            "type": "info",
            "description": "Good luck!",
            "values": [
                {
                    "description": "Bring a fire shield.",
                    "conditions": {"allOf": [{"Boss": "Dragon"}, {"Level": "Hard"}]},
                },
                {"description": "Goblins steal.", "conditions": {"Boss": "Goblin"}},
            ],
        },
    ]
}


def show(store: fs.SchemaStore) -> None:
    for variable in store.schema.variables:
        if not store.is_visible(variable.name):
            print(f"  {variable.name}: (hidden)")
        elif variable.is_info:
            print(f"  {variable.name}: {store.visible_descriptions(variable.name)}")
        else:
            selected = sorted(store.get_selection(variable.name))
            print(
                f"  {variable.name}: options={store.visible_values(variable.name)} "
                f"selected={selected}"
            )


def main():
    print("=" * 80)
    print("Example 01: Basic Schema")
    print("=" * 80)

    store = fs.SchemaStore(DUNGEON)

    # -------------------------------------------------------------------------
    print("\n1. Nothing selected:")
    print("-" * 80)
    show(store)
    print("\nNotice: Treasure is shown because Boss has not been chosen yet")

    # -------------------------------------------------------------------------
    print("\n2. Level = Easy:")
    print("-" * 80)
    store.set_selection("Level", "Easy")
    show(store)

    # -------------------------------------------------------------------------
    print("\n3. Level = Hard, Boss = Dragon:")
    print("-" * 80)
    store.set_selection("Level", "Hard")
    store.set_selection("Boss", "Dragon")
    show(store)

    # -------------------------------------------------------------------------
    print("\n4. Tip conditions in words:")
    print("-" * 80)
    tip = store.get_variable("Tip")
    for value in tip.values:
        print(f"  {value.description!r} applies when: {value.conditions.describe()}")

    # -------------------------------------------------------------------------
    print("\n5. Which variables depend on which:")
    print("-" * 80)
    graph = fs.DependencyGraph(store.schema).get_graph_data()
    for edge in graph["edges"]:
        print(f"  {edge['from']} -> {edge['to']}")
    print(f"  dangling references: {graph['dangling'] or 'none'}")

    # -------------------------------------------------------------------------
    print("\n6. Saved document:")
    print("-" * 80)
    buffer = io.StringIO()
    store.dump(buffer)
    print(buffer.getvalue())


if __name__ == "__main__":
    main()
