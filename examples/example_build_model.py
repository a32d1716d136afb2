"""
Example: Building a MILP with milpmanager

This example builds a small production model out of variable operations
and solves it with HiGHS.

Problem:
    maximize    profit = 3*chairs + 5*tables
    subject to  chairs + 2*tables <= 14
                3*chairs - tables >= 0
                chairs, tables >= 0 and integer
"""

from milpmanager import Domain, MilpModel


def main():
    print()
    print("=" * 70)
    print("milpmanager Example: Building a Model - Python")
    print("=" * 70)
    print()

    print("Problem: maximize 3*chairs + 5*tables")
    print("         subject to chairs + 2*tables <= 14")
    print("                    3*chairs - tables >= 0")
    print("                    chairs, tables >= 0 and integer")
    print()

    with MilpModel() as model:
        # Step 1: Decision variables
        chairs = model.create('chairs', Domain.POSITIVE_OR_ZERO_INTEGER)
        tables = model.create('tables', Domain.POSITIVE_OR_ZERO_INTEGER)

        # Step 2: Constraints, compiled into auxiliary columns and rows
        model.set_less_or_equal(chairs + 2 * tables, model.from_constant(14))
        model.add_constraint(3 * chairs - tables >= 0)

        # Step 3: Objective
        profit = 3 * chairs + 5 * tables
        model.add_goal(profit)
        print(f"Model built: {model.rows} rows, {model.columns} columns")
        print()

        # Step 4: Solve
        result = model.solve()

        # Step 5: Display results
        print("=" * 70)
        print("Solution Summary")
        print("=" * 70)
        print(result)
        print()
        if result.is_optimal():
            print(f"  chairs = {model.get_value(chairs):.0f}")
            print(f"  tables = {model.get_value(tables):.0f}")
            print(f"  profit = {model.get_value(profit):.0f}")
        print()
        print("=" * 70)
        print()


if __name__ == "__main__":
    try:
        main()
    except ImportError as e:
        print(f"Error: {e}")
        print("\nPlease install milpmanager first:")
        print("  python -m pip install .")
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
