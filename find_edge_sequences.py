"""
Searches the permutations of a multiset for edge sequences which tile every
inflated rhomb, and builds a substitution tiling from one of them.
"""


import logging

import boundary_search
import cyclotomic
import rhomb_boundary
import substitution
from logging_config import setup_logging


# Orders of symmetry that can be used (no point in going past 13)
SYMMETRIES = [5, 7, 9, 11, 13]
SYMMETRY = 7

# Some edge sequences known to work
EDGE_SEQUENCES = [
	[1, -1, 0, 1, -1, 2, -2, 0],
	[-1, 1, 0],
	[-1, 1, 0, -1, 1, 0, 2, -2, 0],
	[-2, 2],
]
EDGE_SEQUENCE = EDGE_SEQUENCES[0]
NUM_SUBSTITUTIONS = 2

# Search parameters
MULTISET = [2, 1, 1, 0, 0]
SYMMETRIC = False
RULE = boundary_search.ALL_BUMPS

LOG_FILE = None
SHOW_PLOT = True


if __name__ == "__main__":
	setup_logging(logging.INFO, LOG_FILE)
	if SYMMETRY not in SYMMETRIES:
		logging.getLogger(__name__).error(f"Choose SYMMETRY from {SYMMETRIES}")
		raise SystemExit(1)
	geometry = cyclotomic.Geometry(SYMMETRY)

	# Check which prototiles each known edge sequence can tile
	print("\nPrototiles tiled by each edge sequence:")
	for edge in EDGE_SEQUENCES:
		tiled = [
			rhomb_boundary.create_rhomb_boundary(
				geometry, SYMMETRY - 2*i - 1, edge).valid()
			for i in range(SYMMETRY // 2)
		]
		print(f"{edge}: {tiled}")

	# Search for new edge sequences
	print(f"\nSearching permutations of {MULTISET}...")
	result = boundary_search.all_valid(
		MULTISET, geometry, sym=SYMMETRIC, rule=RULE, print_progress=True)
	print(result)
	for edge in result.valids:
		print(edge)

	# Build a substitution tiling
	print(f"\nSubstituting with {EDGE_SEQUENCE}...")
	try:
		sub = substitution.Substitution(
			geometry, EDGE_SEQUENCE, max_substitutions=NUM_SUBSTITUTIONS)
	except substitution.UntileableEdgeSequenceError as e:
		logging.getLogger(__name__).error(str(e))
		raise SystemExit(1)
	print("Substitution matrix:")
	print(sub.substitution_matrix())
	sub.sub_rhomb(NUM_SUBSTITUTIONS, print_progress=True)
	print("Tiles in the patch:")
	print(sub.count_tiles())
	if SHOW_PLOT:
		sub.show_plot()
