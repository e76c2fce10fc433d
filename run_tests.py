import sys
import os

# Add project root to path
sys.path.append(os.getcwd())

try:
    from tests.test_functions import test_booth_minimum
    print("Running test_booth_minimum...", end=" ")
    test_booth_minimum()
    print("PASS")
except Exception as e:
    print(f"FAIL: {e}")
    sys.exit(1)

try:
    from tests.test_pso_smoke import test_pso_runs_and_improves
    print("Running test_pso_runs_and_improves...", end=" ")
    test_pso_runs_and_improves()
    print("PASS")
except Exception as e:
    print(f"FAIL: {e}")
    sys.exit(1)

print("\nAll tests passed!")
