"""
Builds rhombic tilings of regions with a given boundary.

A boundary is a closed walk of unit steps, given by the angle (in units of
pi/n) of each step. The pairs of opposite parallel steps are joined by
pseudolines (Yarns), the crossings of the yarns are threaded into a
consistent order, and each crossing becomes a rhomb of the tiling.
"""


import logging

import numpy as np

import pseudolines
import rhombs


logger = logging.getLogger(__name__)


class RhombBoundary:
	"""
	A rhombic tiling of the region enclosed by a boundary walk.

	If the boundary cannot be tiled (because the threading produces two
	yarns crossing at an impossible angle) the boundary is marked invalid
	and contains no rhombs or hexes.

	Attributes:
	  geometry          The cyclotomic.Geometry of the tiling
	  length            The number of steps in the boundary walk
	  termini           A list of the pseudolines.Terminus objects, one
	                    per boundary step
	  yarns             A list of the pseudolines.Yarn objects, in the
	                    order in which they were created
	  rhombs            The arena of rhombs.Rhomb objects. A rhomb's
	                    index attribute is its position in this list; an
	                    entry is None once its rhomb has been collapsed
	  edge_rhombs       A list of the rhombs which have two edges on the
	                    boundary, and so can be collapsed
	  triples           A list of the rhombs.Hex objects which can
	                    currently be flipped
	  sym               Whether the arrangement was built to be
	                    symmetric under a rotation by pi
	"""

	def __init__(self, angles, geometry, sym=False):
		self.geometry = geometry
		self.length = len(angles)
		self.sym = sym
		self.frozen = False
		self.termini = [pseudolines.Terminus(j, a, geometry) for j, a in enumerate(angles)]
		self.yarns = []
		self.rhombs = []
		self.edge_rhombs = []
		self.triples = []
		self._place_yarns()
		if sym:
			threaded = self._symmetric_thread_yarns()
		else:
			threaded = self._thread_yarns()
		self._valid = threaded and all(y.valid() for y in self.yarns)
		if not self._valid:
			logger.debug(f"Boundary {list(angles)} cannot be tiled")
			return
		self._set_joins()
		self.set_edge_joins()
		self._set_triples()

	@classmethod
	def _frozen(cls, geometry, length, rhomb_list, triples, valid):
		"""Returns a boundary made directly from frozen rhombs and hexes"""
		boundary = cls.__new__(cls)
		boundary.geometry = geometry
		boundary.length = length
		boundary.sym = False
		boundary.frozen = True
		boundary.termini = []
		boundary.yarns = []
		boundary.rhombs = rhomb_list
		boundary.triples = triples
		boundary.edge_rhombs = []
		boundary._valid = valid
		boundary.set_edge_joins()
		return boundary

	def valid(self):
		return self._valid

	def get_joins(self):
		"""Returns a list of all the rhombs currently in the tiling"""
		return [r for r in self.rhombs if r is not None]

	def get_triples(self):
		return self.triples

	def get_edge_rhombs(self):
		return self.edge_rhombs

	def num_triples(self):
		return len(self.triples)

	def _ends_match(self):
		"""
		Returns bool whether the boundary steps can be paired off into
		steps in opposite directions.
		"""
		n = self.geometry.n
		sums = [0] * n
		for t in self.termini:
			if t.angle <= n:
				sums[t.angle - 1] += 1
			else:
				sums[t.angle - n - 1] -= 1
		return not any(sums)

	def yarn_on(self, i):
		"""Returns the yarn which starts or ends at boundary step i"""
		for y in self.yarns:
			if y.start_index == i or y.end_index == i:
				return y
		raise ValueError(f"No yarn at position {i}")

	def _place_yarns(self):
		"""
		Pairs up the termini to make yarns.

		Within each direction class, a step is paired with the nearest
		unpaired step in the opposite direction, in the manner of
		matching brackets, so that yarns of the same class never cross.
		"""
		if not self._ends_match():
			raise ValueError("The ends don't match")
		n = self.geometry.n
		for i in range(1, n+1):
			# Yarns point in an odd direction at the start
			start = i if i % 2 == 1 else i + n
			end = i + n if i % 2 == 1 else i
			starts, ends = [], []
			for t in self.termini:
				if t.angle == start:
					if ends:
						self.yarns.append(pseudolines.Yarn(t, ends.pop()))
					else:
						starts.append(t)
				if t.angle == end:
					if starts:
						self.yarns.append(pseudolines.Yarn(starts.pop(), t))
					else:
						ends.append(t)
		if self.sym:
			for i in range(self.length // 2):
				self.yarn_on(i).set_opposite(self.yarn_on(self.length - 1 - i))

	def _yarn_index(self):
		"""Returns a list in which each yarn appears at both its termini"""
		yarn_index = [None] * self.length
		for y in self.yarns:
			yarn_index[y.start_index] = y
			yarn_index[y.end_index] = y
		return yarn_index

	def _resolve_one(self, yarn_index, resolved, scan_limit):
		"""
		Finds the first unresolved yarn in yarn_index[:scan_limit] which
		crosses every unresolved yarn between its two termini, adds those
		crossings to the crossing lists and marks it resolved.

		Returns None if every yarn in range is already resolved, otherwise
		bool whether a yarn was resolved.
		"""
		unresolved = False
		for i in range(scan_limit):
			y = yarn_index[i]
			if y in resolved:
				continue
			unresolved = True
			other_end = y.start_index if y.start_index != i else y.end_index
			bound = min(other_end, scan_limit)
			between = [
				yarn_index[j] for j in range(i+1, bound) if yarn_index[j] not in resolved
			]
			if not all(y.should_cross(other) for other in between):
				continue
			forward = y.start_index == i
			for j in range(i+1, bound):
				other = yarn_index[j]
				if other in resolved:
					continue
				if forward:
					y.add_last(other)
				else:
					y.add_first(other)
				if j == other.start_index:
					other.add_last(y)
				else:
					other.add_first(y)
			resolved.add(y)
			return True
		return False if unresolved else None

	def _thread_yarns(self):
		"""
		Orders the crossings of every yarn.

		Repeatedly finds a yarn whose termini enclose only yarns it must
		cross, records those crossings and sets it aside. One yarn is
		resolved per pass over the boundary.

		Returns bool whether every yarn could be resolved.
		"""
		yarn_index = self._yarn_index()
		resolved = set()
		while True:
			progress = self._resolve_one(yarn_index, resolved, self.length)
			if progress is None:
				return True
			if not progress:
				logger.debug("Threading stalled with unresolved yarns")
				return False

	def _symmetric_thread_yarns(self):
		"""
		As _thread_yarns(), but only the first half of the boundary is
		threaded, and each yarn then takes the remaining crossings from
		its opposite.
		"""
		yarn_index = self._yarn_index()
		resolved = set()
		while True:
			progress = self._resolve_one(yarn_index, resolved, self.length // 2)
			if progress is None:
				break
			if not progress:
				logger.debug("Symmetric threading stalled with unresolved yarns")
				return False
		symmetrized = set()
		for y in yarn_index:
			if y not in symmetrized:
				y.symmetrize()
				symmetrized.add(y)
		return True

	def base(self, i):
		"""Returns the position reached after the first i+1 boundary steps"""
		if i < 0 or i >= self.length:
			raise ValueError(
				f"Cannot find a base point at index {i}, which is not "
				f"between 0 and {self.length - 1}"
			)
		output = self.geometry.zero
		for t in self.termini[:i+1]:
			output = output + self.geometry.unit(t.angle)
		return output

	def _set_joins(self):
		"""
		Creates a rhomb for every crossing, walking along each yarn from
		its start and keeping track of the corner of the current rhomb.
		"""
		done = set()
		for y in self.yarns:
			base = self.base(y.start_index)
			for z in y.cross:
				shift = self.geometry.unit(z.start_angle)
				ccw = y.ccw_start(z)
				if z in done:
					y.add_join(z.join_with(y))
				else:
					corner = base + shift if ccw else base
					join = rhombs.Rhomb.from_yarns(corner, y, z, len(self.rhombs))
					y.add_join(join)
					self.rhombs.append(join)
				base = base + shift if ccw else base - shift
			done.add(y)

	def set_edge_joins(self):
		"""Refreshes the list of rhombs with two edges on the boundary"""
		self.edge_rhombs = [r for r in self.get_joins() if r.on_edge()]

	def _set_triples(self):
		"""Finds every hex of three yarns crossing with nothing between them"""
		done = set()
		self.triples = []
		for y in self.yarns:
			for z1, z2 in zip(y.cross, y.cross[1:]):
				if z1 in done or z2 in done:
					continue
				if z1.consecutive(z2, y) and z2.consecutive(y, z1):
					self.triples.append(rhombs.Hex.from_yarns(y, z1, z2))
			done.add(y)

	def flip_triple(self, hex):
		"""
		Flips a hex and updates the lists of flippable hexes and of edge
		rhombs (a flip can move rhombs on to or off the boundary).

		Returns the list of hexes that were created or destroyed.
		"""
		if not hex.valid(self.rhombs):
			raise ValueError(f"{hex} is not a hexagon of this tiling")
		changes = hex.flip(self.rhombs)
		for h in changes:
			if h in self.triples:
				self.triples.remove(h)
			else:
				self.triples.append(h)
		self.set_edge_joins()
		return changes

	def collapse(self, rhomb):
		"""
		Removes a rhomb with two edges on the boundary from the tiling.

		Every hex containing the rhomb is removed too. For a live tiling
		the two yarns through the rhomb are shortened; for a frozen one the
		neighbours of the rhomb forget it.
		"""
		index = rhomb.index
		if index is None or index >= len(self.rhombs) or self.rhombs[index] is not rhomb:
			raise ValueError(f"{rhomb} is not part of this tiling")
		if not rhomb.on_edge():
			raise ValueError(f"{rhomb} is not on the edge of the tiling")
		self.triples = [h for h in self.triples if not h.contains(index)]
		if rhomb.frozen:
			for neighbour in rhomb.adjacent:
				if neighbour is not None:
					self.rhombs[neighbour].drop_neighbour(index)
			rhomb.adjacent = [None, None, None, None]
		else:
			rhomb.yarns[0].collapse(rhomb)
		self.rhombs[index] = None
		self.set_edge_joins()

	def simplify(self):
		"""
		Returns a frozen copy of this tiling, in which each rhomb records
		its neighbours itself and no longer refers to the yarns.

		Rhombs keep their handles, so hexes and handles from this tiling
		can be used to find their counterparts in the copy.
		"""
		new_rhombs = []
		for r in self.rhombs:
			if r is None:
				new_rhombs.append(None)
				continue
			copy = r.freeze(r.index)
			if r.frozen:
				copy.adjacent = list(r.adjacent)
			new_rhombs.append(copy)
		for y in self.yarns:
			a = y.end_angle
			previous = None
			for current in y.joins:
				new_rhombs[current.index].add_adjacent(
					None if previous is None else previous.index, a, True)
				if previous is not None:
					new_rhombs[previous.index].add_adjacent(current.index, a, False)
				previous = current
			if previous is not None:
				new_rhombs[previous.index].add_adjacent(None, a, False)
		new_triples = [
			rhombs.Hex(h.rhombs, None, list(h.directions)) if h.frozen
			else rhombs.Hex.from_rhombs(new_rhombs, *h.rhombs)
			for h in self.triples
		]
		return RhombBoundary._frozen(
			self.geometry, self.length, new_rhombs, new_triples, self._valid)

	def tile_numbers(self):
		"""Returns a list of the number of rhombs of each type, starting with type 1"""
		counts = [0] * (self.geometry.n // 2)
		for r in self.get_joins():
			counts[r.type - 1] += 1
		return counts

	def count_tiles(self):
		"""
		Returns a dictionary of the number of rhombs in the tiling of each
		type (the keys being the types which occur)
		"""
		count_dict = {}
		for r in self.get_joins():
			if r.type in count_dict:
				count_dict[r.type] += 1
			else:
				count_dict[r.type] = 1
		return count_dict

	def yarn_dump(self):
		"""Returns a string listing the crossings of every yarn"""
		return "".join(f"{y} crossings: \n{y.cross_string()}" for y in self.yarns)


def create_rhomb_boundary(geometry, even, angles1, angles2=None, sym=False):
	"""
	Returns the tiling of a rhomb whose edges are replaced by walks.

	Arguments:
	  geometry          The cyclotomic.Geometry to use
	  even              The even angle of the rhomb in units of pi/n,
	                    between 1 and n-1 (even or not, this is the angle
	                    opposite the odd one, which sets the rhomb type)
	  angles1           The edge sequence used for the first and third
	                    edges
	  angles2           The edge sequence used for the second and fourth
	                    edges (angles1 if not given)
	  sym               Whether to negate the edge sequences on the
	                    opposite side of each edge, so that the tiling is
	                    symmetric under a rotation by pi
	"""
	n = geometry.n
	if angles2 is None: angles2 = angles1
	if even < 1 or even > n - 1:
		raise ValueError(f"{even} is not between 1 and {n - 1}")
	b1 = [-x for x in angles1] if sym else list(angles1)
	b2 = [-x for x in angles2] if sym else list(angles2)
	l1, l2 = len(angles1), len(angles2)
	ll = 2 * (l1 + l2)
	a = [0] * ll
	for j in range(l1):
		a[ll-1-j] = n + angles1[j]
		a[j] = 2*n - even + b1[j] if even >= b1[j] else b1[j] - even
	for j in range(l2):
		a[l1+j] = angles2[j] if angles2[j] > 0 else 2*n + angles2[j]
		t = n - even + b2[j]
		a[l1+2*l2-1-j] = t if t > 0 else 3*n - even + b2[j]
	return RhombBoundary(a, geometry, sym)


def create_symmetric_rhomb_boundary(geometry, even, angles):
	"""
	Returns the tiling of a rhomb whose edges are replaced by an edge
	sequence, built to be symmetric under a rotation by pi.
	"""
	return create_rhomb_boundary(geometry, even, angles, [-x for x in angles], True)


def create_triangle_boundary(geometry, angles1, angles2, angles3, triangle):
	"""
	Returns the tiling of a triangle whose edges are replaced by walks.

	Arguments:
	  geometry          The cyclotomic.Geometry to use
	  angles1, angles2, angles3
	                    The edge sequences for the three edges
	  triangle          The angles of the triangle in units of pi/n
	                    (only the second and third are used, to turn the
	                    second and third edges)
	"""
	n = geometry.n
	a = [2*n + x if x <= 0 else x for x in angles1]
	for offset, edge in ((n - triangle[2], angles2), (n + triangle[1], angles3)):
		for x in edge:
			t = offset + x
			if t < 0: t += 2*n
			if t > 2*n: t -= 2*n
			a.append(t)
	return RhombBoundary(a, geometry, False)


def create_star_boundary(geometry, angles):
	"""
	Returns the tiling of the region whose boundary consists of the given
	edge sequence rotated successively by pi/n, 2n times over.

	The entries of angles must sum to zero.
	"""
	n = geometry.n
	if sum(angles) != 0:
		raise ValueError(f"The entries of {list(angles)} do not sum to 0")
	boundary = [0] * (2*n*len(angles))
	for j, x in enumerate(angles):
		for k in range(2*n):
			t = x + k
			if t <= 0:
				t += 2*n
			elif t > 2*n:
				t -= 2*n
			boundary[k*len(angles) + j] = t
	return RhombBoundary(boundary, geometry, False)


def create_prototile(geometry, i):
	"""Returns the boundary containing a single rhomb of type i+1"""
	if i < 0 or i >= geometry.n // 2:
		raise ValueError(f"Cannot create a prototile of type {i + 1}")
	return create_rhomb_boundary(geometry, geometry.n - 2*i - 1, [0])


def prototile_list(geometry):
	"""Returns a list of the single-rhomb boundaries of every type"""
	return [create_prototile(geometry, i) for i in range(geometry.n // 2)]


def substitution_matrix(geometry, edge):
	"""
	Returns the substitution matrix of an edge sequence as a numpy array.

	Entry [j][i] is the number of rhombs of type j+1 in the tiling of the
	inflated rhomb of type i+1.
	"""
	num_types = geometry.n // 2
	matrix = np.zeros((num_types, num_types), dtype=int)
	for i in range(num_types):
		boundary = create_rhomb_boundary(geometry, geometry.n - 2*i - 1, edge)
		matrix[:, i] = boundary.tile_numbers()
	return matrix
