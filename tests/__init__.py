"""Test suite for pagenum.

Tests mirror the source layout (tests/internals/... for pagenum/internals/...).

Running Tests:
    pytest                                  # Run all tests
    pytest -v                               # Verbose output
    pytest tests/test_pipeline.py           # Run specific file
    pytest -k "lexical"                     # Run tests with matching pattern in function name

Notes:
    - Fixture decks are generated with python-pptx at test time; hand-made archives use zipfile.
    - conftest.py redirects the user documents/cache folders into tmp_path for every test.
"""
