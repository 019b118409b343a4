"""Step definitions package for BDD tests.

Step definition modules are registered as pytest plugins in the root
conftest.py so pytest-bdd can discover them from every test module.
"""
