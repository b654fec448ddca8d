"""
Test cases for the 1D Hall thruster discharge solver.

Run tests with pytest:
    pytest hall1d/tests/ -v

Or run individual test files:
    pytest hall1d/tests/test_boundary.py -v
    pytest hall1d/tests/test_update.py -v
"""
