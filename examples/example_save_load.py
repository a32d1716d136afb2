"""
Example: Saving and reloading a model with milpmanager

The extension picks the file format: ``.lp`` for CPLEX LP, ``.npz`` for the
native archive and anything else for free MPS. The file is then loaded into
a fresh model and solved there.
"""

import sys
from pathlib import Path

from milpmanager import Domain, MilpModel


def main():
    print()
    print("=" * 70)
    print("milpmanager Example: Save and Load - Python")
    print("=" * 70)
    print()

    # Get output path
    if len(sys.argv) > 1:
        model_file = Path(sys.argv[1])
    else:
        model_file = Path("assignment.mps")

    # Step 1: Build and save
    with MilpModel() as model:
        picks = [model.create(f"pick{i}", Domain.BINARY_INTEGER) for i in range(4)]
        chosen = picks[0] + picks[1] + picks[2] + picks[3]
        model.add_constraint(chosen <= 2)
        total = 4 * picks[0] + 2 * picks[1] + 7 * picks[2] + 5 * picks[3]
        model.add_goal(total)
        model.save_model(model_file)
        print(f"Saved {model.columns} columns, {model.rows} rows to {model_file.absolute()}")
        print()

    # Step 2: Load into a fresh model and solve
    with MilpModel() as model:
        model.load_model(model_file)
        print(f"Loaded {model.columns} columns, {model.rows} rows")
        result = model.solve()

        print()
        print("=" * 70)
        print("Solution Summary")
        print("=" * 70)
        print(f"Status: {result.status.value}")
        print(f"Time: {result.time:.2f} seconds")
        if result.is_optimal():
            print(f"Objective: {result.objective:.6f}")
            print()
            print("Picked:")
            for i in range(4):
                variable = model.get_variable(f"pick{i}")
                if model.get_value(variable) > 0.5:
                    print(f"  {variable.name}")
        print()
        print("=" * 70)
        print()

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except ImportError as e:
        print(f"Error: {e}")
        print("\nPlease install milpmanager first:")
        print("  python -m pip install .")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
