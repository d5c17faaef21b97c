"""Example 02: Relationship Hints

This example shows how a renderer can highlight related and incompatible
values before the user picks them, and how to drop selections that the
current conditions no longer allow.

Topics Covered:
--------------
- compute_relationships() on the store
- Nested allOf/anyOf conditions
- analyze_condition_tree() allow-lists
- Single-select settings
- Explicit pruning of stale selections
"""

import formspace as fs

LOADOUT = {
    "variables": [
        {
            "name": "Class",
            "values": [{"name": "Mage"}, {"name": "Knight"}, {"name": "Rogue"}],
        },
        {
            "name": "Armor",
            "values": [{"name": "Robe"}, {"name": "Plate"}, {"name": "Leather"}],
        },
        {
            "name": "Weapon",
            "values": [
                {
                    "name": "Staff",
                    "conditions": {
                        "allOf": [
                            {"Class": "Mage"},
                            {"anyOf": [{"Armor": "Robe"}, {"Armor": "Leather"}]},
                        ]
                    },
                },
                {"name": "Sword", "conditions": {"Class": "Knight"}},
                {"name": "Dagger"},
            ],
        },
    ]
}


def show_relationships(store: fs.SchemaStore) -> None:
    for name, relationship in store.compute_relationships().items():
        print(
            f"  {name}: related={sorted(relationship.related)} "
            f"incompatible={sorted(relationship.incompatible)}"
        )


def main():
    print("=" * 80)
    print("Example 02: Relationship Hints")
    print("=" * 80)

    store = fs.SchemaStore(LOADOUT, settings=fs.StoreSettings(allow_multiple=False))

    # -------------------------------------------------------------------------
    print("\n1. Weapon = Staff selected first:")
    print("-" * 80)
    store.toggle_selection("Weapon", "Staff")
    show_relationships(store)
    print("\nNotice: Staff narrows Class and Armor before they are chosen")

    # -------------------------------------------------------------------------
    print("\n2. Armor = Plate:")
    print("-" * 80)
    store.toggle_selection("Armor", "Plate")
    show_relationships(store)

    # -------------------------------------------------------------------------
    print("\n3. What Staff asks for:")
    print("-" * 80)
    staff = store.get_variable("Weapon").get_value("Staff")
    analysis = fs.analyze_condition_tree(staff.conditions)
    for armor in store.get_variable("Armor").value_names:
        print(f"  Armor = {armor}: allowed={analysis.allows('Armor', armor)}")

    # -------------------------------------------------------------------------
    print("\n4. Pruning stale selections:")
    print("-" * 80)
    removed = store.prune_selections()
    print(f"  removed: { {k: sorted(v) for k, v in removed.items()} }")
    print(f"  remaining: {store.selections.as_dict()}")


if __name__ == "__main__":
    main()
