"""
Tests for find_edge_sequences.py
================================

The script's parameters, which are only used when it is run.

Run: python -m pytest tests/test_find_edge_sequences.py -v
"""

import boundary_search
import cyclotomic
import find_edge_sequences as script


def test_search_rule_covers_every_symmetry():
	largest = cyclotomic.Geometry(max(script.SYMMETRIES))
	assert script.RULE == boundary_search.all_bumps(largest)


def test_chosen_edge_sequence_tiles_every_type():
	assert script.SYMMETRY in script.SYMMETRIES
	assert script.EDGE_SEQUENCE in script.EDGE_SEQUENCES
	geometry = cyclotomic.Geometry(script.SYMMETRY)
	assert boundary_search.valid_for_all_types(script.EDGE_SEQUENCE, geometry)


def test_every_parameter_is_used():
	with open(script.__file__, encoding="utf-8") as f:
		source = f.read()
	parameters = [name for name in vars(script) if name.isupper()]
	for name in parameters:
		assert source.count(name) > 1, f"{name} is never used"
