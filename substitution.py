"""
Implements substitution (inflation) tilings built from rhomb boundaries.

An edge sequence defines, for every rhomb type, a tiling of the rhomb
inflated by the cyclotomic integer at the end of the edge sequence's walk.
Replacing every rhomb of a patch by the correspondingly rotated and
translated copy of its rule gives a larger patch of the same kind, and
repeating this from a single seed rhomb builds successively larger
approximants of a quasiperiodic tiling.
"""


import logging

import numpy as np
import matplotlib.pyplot as plt

import rhomb_boundary
import rhombs


logger = logging.getLogger(__name__)


DEFAULT_MAX_SUBSTITUTIONS = 2


class UntileableEdgeSequenceError(ValueError):
	"""
	Raised when an edge sequence cannot be used to tile some of the
	inflated rhombs.

	Attributes:
	  edge              The edge sequence
	  types             A list of the rhomb types that can't be tiled
	  evens             The corresponding even angles (in units of pi/n)
	"""

	def __init__(self, edge, types, evens):
		self.edge, self.types, self.evens = list(edge), list(types), list(evens)
		super().__init__(
			f"The edge sequence {self.edge} cannot tile rhombs of type(s) "
			f"{self.types} (even angle(s) {self.evens})"
		)


def standard_seed(geometry):
	"""
	Returns a list containing the single rhomb used to start a substitution
	tiling: the rhomb at the origin, with angle 0, whose even angle is
	closest to a right angle.
	"""
	n = geometry.n
	even = n // 2 if n % 4 == 1 else n // 2 + 1
	return [rhombs.Rhomb(geometry.zero, (n - even + 1) // 2, 0)]


def substitution_rules(geometry, edge):
	"""
	Returns a list of the rhomb boundaries used to substitute each rhomb
	type (type i+1 being at position i).

	Raises UntileableEdgeSequenceError, naming every failing type, if any
	of the boundaries is invalid.
	"""
	rules = []
	failed_types, failed_evens = [], []
	for i in range(geometry.n // 2):
		even = geometry.n - 2*i - 1
		rule = rhomb_boundary.create_rhomb_boundary(geometry, even, edge)
		if not rule.valid():
			failed_types.append(i + 1)
			failed_evens.append(even)
		rules.append(rule)
	if failed_types:
		raise UntileableEdgeSequenceError(edge, failed_types, failed_evens)
	logger.debug(f"Built {len(rules)} substitution rules for {list(edge)}")
	return rules


class Substitution:
	"""
	A substitution tiling, with every generation of substitution kept.

	Attributes:
	  geometry          The cyclotomic.Geometry of the tiling
	  edge              The edge sequence defining the substitution
	  inflation         The inflation matrix of the edge sequence (see
	                    cyclotomic.Geometry.inflation())
	  rules             A list of RhombBoundary objects, the i-th being
	                    the tiling of an inflated rhomb of type i+1. These
	                    may be edited (e.g. by flipping hexes), with the
	                    changes used by any subsequent substitutions
	  seed              The list of rhombs.Rhomb objects to substitute
	                    from
	  max_substitutions The maximum number of substitutions that may be
	                    performed
	  levels            A list of the patches produced so far, levels[k]
	                    being the list of rhombs after k substitutions
	  current_level     The number of substitutions of the current patch
	"""

	def __init__(
		self, geometry, edge, seed=None, rules=None,
		max_substitutions=DEFAULT_MAX_SUBSTITUTIONS
	):
		if seed is None: seed = standard_seed(geometry)
		if rules is None: rules = substitution_rules(geometry, edge)
		if len(rules) != geometry.n // 2:
			raise ValueError(
				f"Expected {geometry.n // 2} substitution rules, not {len(rules)}"
			)
		self.geometry = geometry
		self.edge = list(edge)
		self.inflation = geometry.inflation(self.edge)
		self.rules = rules
		self.seed = list(seed)
		self.max_substitutions = max_substitutions
		self.reset_rhomb()

	def reset_rhomb(self):
		"""Returns to the seed, discarding every substituted patch"""
		self.levels = [[r.translate(self.geometry.zero) for r in self.seed]]
		self.current_level = 0

	def _substitute_once(self):
		"""Returns the patch produced by substituting the current one"""
		new_patch = []
		for r in self.levels[self.current_level]:
			shift = r.point.multiply(self.inflation)
			for sub_rhomb in self.rules[r.type - 1].get_joins():
				new_patch.append(sub_rhomb.transform(r.angle, shift))
		return new_patch

	def sub_rhomb(self, num_substitutions=1, print_progress=False):
		"""
		Substitutes the current patch the given number of times.

		Each substitution produces a new list of rhombs, and the previous
		patches are kept (see get_supertiles()).
		"""
		if self.current_level + num_substitutions > self.max_substitutions:
			raise ValueError(
				f"Cannot substitute {num_substitutions} more time(s): already at "
				f"level {self.current_level} of at most {self.max_substitutions}"
			)
		for i in range(num_substitutions):
			if print_progress:
				print(f"\r{100*i/num_substitutions:.2f}%", end="")
			new_patch = self._substitute_once()
			del self.levels[self.current_level+1:]
			self.levels.append(new_patch)
			self.current_level += 1
			logger.debug(f"Level {self.current_level}: {len(new_patch)} rhombs")
		if print_progress: print("\r100.00%")

	def get_patch(self):
		"""Returns the list of rhombs in the current patch"""
		return self.levels[self.current_level]

	def get_supertiles(self):
		"""
		Returns the list of rhombs of the previous patch, of which the
		current patch is the substitution (empty for the seed)
		"""
		if self.current_level == 0:
			return []
		return self.levels[self.current_level - 1]

	def supertile_outlines(self):
		"""
		Returns a list of the outlines of the supertiles in the coordinates
		of the current patch, each being a list of cyclotomic.Point objects
		"""
		return [r.supertile(self.inflation, self.edge) for r in self.get_supertiles()]

	def substitution_matrix(self):
		"""
		Returns the substitution matrix of the current rules as a numpy
		array, entry [j][i] being the number of rhombs of type j+1 in the
		rule for type i+1
		"""
		num_types = self.geometry.n // 2
		matrix = np.zeros((num_types, num_types), dtype=int)
		for i, rule in enumerate(self.rules):
			matrix[:, i] = rule.tile_numbers()
		return matrix

	def count_tiles(self):
		"""
		Returns a dictionary of the number of rhombs in the current patch of
		each type (the keys being the types which occur)
		"""
		count_dict = {}
		for r in self.get_patch():
			if r.type in count_dict:
				count_dict[r.type] += 1
			else:
				count_dict[r.type] = 1
		return count_dict

	def show_plot(self, show_supertiles=True):
		"""
		Displays a matplotlib popup with a plot of the current patch.

		Rhombs are coloured according to their type, and the outlines of
		the supertiles are drawn over them.
		"""
		fig = plt.figure()
		ax = fig.add_subplot()
		ax.set_xlabel(r"x")
		ax.set_ylabel(r"y")
		colours = plt.cm.viridis(np.linspace(0, 1, self.geometry.n // 2))
		for r in self.get_patch():
			corners = r.cartesian_vertices()
			ax.fill(corners[:,0], corners[:,1], facecolor=colours[r.type - 1],
			        edgecolor="black", linewidth=.5)
		if show_supertiles:
			for outline in self.supertile_outlines():
				corners = np.array([p.to_cartesian() for p in outline + outline[:1]])
				ax.plot(corners[:,0], corners[:,1], linestyle="-", color="red")
		ax.set_aspect("equal")
		plt.show()
