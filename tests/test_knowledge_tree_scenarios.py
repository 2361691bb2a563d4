"""
Test runner for Knowledge Tree BDD scenarios.

This file uses pytest-bdd to discover and run
the Gherkin scenarios from knowledge_tree.feature.
"""

import pytest
from pytest_bdd import scenarios

# Import all step definitions
from step_defs.knowledge_tree_steps import *


# The scenarios decorator imports all scenarios from the feature file
scenarios("../features/knowledge_tree.feature")
