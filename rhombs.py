"""
Defines the rhombs of a tiling and the hexagons formed by three of them,
along with the local move (the hex flip) which rearranges them.

Rhombs and hexes go through two phases. While the tiling is still
described by its Yarns (see pseudolines.py) they are "live" and their
neighbours are found through the yarns. Once a tiling has been
simplified they are "frozen": each rhomb records its own neighbours in
four adjacency slots holding the integer handles (arena indices) of the
neighbouring rhombs.
"""


import numpy as np


class Rhomb:
	"""
	A rhombic tile with integer coordinates.

	A rhomb of type t has angles (2t-1)pi/n and (n-2t+1)pi/n, so the types
	run from 1 (the thinnest rhomb) up to n//2. Its edge vectors are
	v1 = unit(angle) and v2 = unit(angle - 2(n//2 + 1 - type)), and its
	vertices are point, point+v2, point+v2+v1 and point+v1.

	Attributes:
	  point             The cyclotomic.Point at the reference corner
	  type              The congruence type, from 1 to n//2
	  angle             The orientation, in units of pi/n, in [0, 2n)
	  v1, v2            The two edge vectors (cyclotomic.Point objects)
	  index             The handle of this rhomb in the arena of its
	                    owning RhombBoundary (None if it has no owner)
	  yarns             For a live rhomb, the tuple of the two
	                    pseudolines.Yarn objects crossing here. None for
	                    a frozen rhomb
	  adjacent          For a frozen rhomb, a list of four handles of
	                    neighbouring rhombs (None on the boundary). Slots
	                    0 and 3 are the two neighbours along the yarn whose
	                    end angle matches this rhomb's angle, slots 1 and 2
	                    those along the other yarn; slots 0 and 1 are the
	                    neighbours nearer the starts of those yarns
	"""

	def __init__(self, point, rhomb_type, angle, index=None, yarns=None):
		geometry = point.geometry
		n = geometry.n
		self.point = point
		self.type = rhomb_type
		self.angle = angle % (2*n)
		self.v1 = geometry.unit(self.angle)
		self.v2 = geometry.unit(self.angle - 2*(n//2 + 1 - rhomb_type))
		self.index = index
		self.yarns = yarns
		self.adjacent = [None, None, None, None]

	@classmethod
	def from_yarns(cls, point, y1, y2, index=None):
		"""
		Returns the live rhomb at the crossing of two yarns.

		The type is set by the angle between the yarns and the orientation
		by whichever of the yarns is met first going anticlockwise.

		Arguments:
		  point             The corner of the rhomb from which the edges
		                    towards the starts of the two yarns leave
		  y1, y2            The crossing pseudolines.Yarn objects
		  index             The handle of the new rhomb
		"""
		n = point.geometry.n
		difference = abs(y1.start_angle - y2.start_angle)
		if difference >= n:
			difference = 2*n - difference
		rhomb_type = n//2 + 1 - difference//2
		start_angle = y2.start_angle if y1.ccw_start(y2) else y1.start_angle
		return cls(point, rhomb_type, start_angle + n, index, (y1, y2))

	@property
	def frozen(self):
		return self.yarns is None

	@property
	def geometry(self):
		return self.point.geometry

	def __repr__(self):
		phase = "frozen" if self.frozen else "live"
		return (f"Rhomb(index={self.index}, type={self.type}, angle={self.angle}, "
		        f"point={self.point.coefficients.tolist()}, {phase})")

	def vertices(self):
		"""Returns a list of the four corners of the rhomb, in order"""
		p = self.point
		return [p, p + self.v2, p + self.v2 + self.v1, p + self.v1]

	def cartesian_vertices(self):
		"""Returns a (4,2) numpy array of the cartesian corner coordinates"""
		return np.array([v.to_cartesian() for v in self.vertices()])

	def shift(self, vector):
		"""Moves the rhomb (in place) by a vector"""
		self.point = self.point + vector

	def on_edge(self):
		"""
		Returns bool whether this rhomb can be removed from the boundary
		of its tiling without leaving a hole, i.e. whether it has two edges
		on the boundary, one from each edge family.
		"""
		if self.frozen:
			return ((self.adjacent[0] is None or self.adjacent[3] is None)
			        and (self.adjacent[1] is None or self.adjacent[2] is None))
		return all(self is y.first_join() or self is y.last_join() for y in self.yarns)

	def freeze(self, index=None):
		"""
		Returns a frozen copy of this rhomb (with empty adjacency slots)
		and the given handle.
		"""
		return Rhomb(self.point, self.type, self.angle, index)

	def rotate(self, rotation):
		"""Returns a frozen copy rotated about the origin by rotation*pi/n"""
		return Rhomb(self.point.rotate(rotation), self.type, self.angle + rotation)

	def translate(self, move):
		"""Returns a frozen copy shifted by the vector move"""
		return Rhomb(self.point + move, self.type, self.angle)

	def transform(self, rotation, move):
		"""Returns a frozen copy rotated by rotation*pi/n and then shifted by move"""
		return self.rotate(rotation).translate(move)

	def add_adjacent(self, handle, angle, first):
		"""
		Records a neighbour in the adjacency slots.

		Arguments:
		  handle            The handle of the neighbour (None for boundary)
		  angle             The end angle of the yarn along which the
		                    neighbour lies
		  first             Whether the neighbour is nearer the start of
		                    that yarn
		"""
		if angle % (2*self.geometry.n) == self.angle:
			self.adjacent[0 if first else 3] = handle
		else:
			self.adjacent[1 if first else 2] = handle

	def swap_adjacent(self, old, new):
		"""Replaces the neighbour with handle old by the one with handle new"""
		for i in range(4):
			if self.adjacent[i] is not None and self.adjacent[i] == old:
				self.adjacent[i] = new
				return

	def drop_neighbour(self, handle):
		"""Forgets a neighbour, leaving that side on the boundary"""
		for i in range(4):
			if self.adjacent[i] is not None and self.adjacent[i] == handle:
				self.adjacent[i] = None

	def slot_of(self, handle):
		"""Returns the adjacency slot holding handle (None if absent)"""
		for i in range(4):
			if self.adjacent[i] is not None and self.adjacent[i] == handle:
				return i
		return None

	def common_edge(self, other):
		"""Returns the edge vector this rhomb shares with other (or None)"""
		if self.v1 == other.v1 or self.v1 == other.v2:
			return self.v1
		if self.v2 == other.v1 or self.v2 == other.v2:
			return self.v2
		return None

	def share_edge(self, other):
		"""Returns bool whether the two rhombs have (at least) two vertices in common"""
		if other is None:
			return False
		other_vertices = other.vertices()
		return sum(1 for v in self.vertices() if v in other_vertices) >= 2

	def supertile(self, inflation, edge):
		"""
		Returns the outline of this rhomb after inflation as a list of
		points, each edge of the rhomb being replaced by the walk given by
		the edge sequence.

		Arguments:
		  inflation         The inflation matrix (see
		                    cyclotomic.Geometry.inflation())
		  edge              The edge sequence, a list of angles in units
		                    of pi/n
		"""
		geometry = self.geometry
		n = geometry.n
		even = n + 1 - 2*self.type
		output = []
		current = self.point.multiply(inflation)
		for offset in (0, -even):
			for e in edge:
				output.append(current)
				current = current + geometry.unit(self.angle + offset + e)
		for offset in (n, n - even):
			for e in reversed(edge):
				output.append(current)
				current = current + geometry.unit(self.angle + offset + e)
		return output


class Hex:
	"""
	A hexagon made up of three mutually adjacent rhombs, which can be
	flipped to the other tiling of the same hexagon.

	Attributes:
	  rhombs            A tuple of the three handles of the rhombs
	  yarns             For a live hex, the tuple of the three
	                    pseudolines.Yarn objects that cross pairwise in the
	                    hex, with rhombs[0], rhombs[1] and rhombs[2] at the
	                    crossings (0,1), (1,2) and (2,0). None for a frozen
	                    hex
	  directions        For a frozen hex, a list of three bools giving the
	                    sign of the next move of each rhomb when flipped
	"""

	def __init__(self, rhombs, yarns=None, directions=None):
		self.rhombs = tuple(rhombs)
		self.yarns = yarns
		self.directions = directions

	@classmethod
	def from_yarns(cls, y0, y1, y2):
		"""Returns the live hex formed by three pairwise crossing yarns"""
		joins = (y0.join_with(y1), y1.join_with(y2), y2.join_with(y0))
		return cls(tuple(j.index for j in joins), (y0, y1, y2))

	@classmethod
	def from_rhombs(cls, arena, h0, h1, h2):
		"""
		Returns the frozen hex made up of the rhombs with the given handles.

		The direction in which each rhomb moves is found from the
		reference corners of the rhombs: rhombs sharing their reference
		corner move forwards, and if all three corners differ then the one
		rhomb whose v1 edge leads to another's corner does.
		"""
		handles = (h0, h1, h2)
		rhombs = [arena[h] for h in handles]
		points = [r.point for r in rhombs]
		directions = [False, False, False]
		corners = 3
		for i, j in ((0, 1), (0, 2), (1, 2)):
			if points[i] == points[j]:
				corners -= 1
				directions[i] = directions[j] = True
		if corners == 3:
			for odd_one in range(3):
				current = points[odd_one] + rhombs[odd_one].v1
				if current == points[(odd_one+1) % 3] or current == points[(odd_one+2) % 3]:
					directions[odd_one] = True
					break
		return cls(handles, None, directions)

	@property
	def frozen(self):
		return self.yarns is None

	def __eq__(self, other):
		return isinstance(other, Hex) and frozenset(self.rhombs) == frozenset(other.rhombs)

	def __hash__(self):
		return hash(frozenset(self.rhombs))

	def __repr__(self):
		return f"Hex{self.rhombs}"

	def contains(self, handle):
		return handle in self.rhombs

	def valid(self, arena):
		"""
		Returns bool whether the three rhombs currently form a hexagon.

		Arguments:
		  arena             The list of rhombs (indexed by handle) of the
		                    owning RhombBoundary
		"""
		if not self.frozen:
			y0, y1, y2 = self.yarns
			return (y0.consecutive(y1, y2) and y1.consecutive(y2, y0)
			        and y2.consecutive(y0, y1))
		for h in self.rhombs:
			if arena[h] is None:
				return False
		for i, h in enumerate(self.rhombs):
			others = (self.rhombs[(i+1) % 3], self.rhombs[(i+2) % 3])
			count = sum(1 for a in arena[h].adjacent if a is not None and a in others)
			if count != 2:
				return False
		return True

	def flip(self, arena):
		"""
		Flips the hex, moving each rhomb to the other side of the hexagon.

		Returns a list of the hexes (not including this one) which have
		been created or destroyed by the flip.
		"""
		if self.frozen:
			output = flip_rhombs(arena, self.rhombs, self.directions)
			self.directions = [not d for d in self.directions]
			return output
		y = self.yarns
		geometry = arena[self.rhombs[0]].geometry
		for a, b, c in ((0, 1, 2), (1, 2, 0), (2, 0, 1)):
			# Move the rhomb where a meets b across the yarn c
			if y[a].hits(y[b], y[c]) == y[a].ccw_start(y[c]):
				shift = geometry.unit(y[c].start_angle)
			else:
				shift = geometry.unit(y[c].end_angle)
			y[a].join_with(y[b]).shift(shift)
		y[0].swap(y[1], y[2])
		y[1].swap(y[2], y[0])
		y[2].swap(y[0], y[1])
		return surrounding_hexes(y[0], y[1], y[2])


def surrounding_hexes(y0, y1, y2):
	"""
	Returns a list of the live hexes which are created or destroyed by
	flipping the hex formed by yarns y0, y1 and y2.

	For each pair of the three yarns, the crossing one step beyond the
	pair on each yarn is looked up; where both yarns meet the same third
	yarn there, those three yarns form a hex.
	"""
	output = []
	y01, y02 = y0.position_of(y1), y0.position_of(y2)
	y10, y12 = y1.position_of(y0), y1.position_of(y2)
	y20, y21 = y2.position_of(y0), y2.position_of(y1)
	checks = (
		(y0, 2*y01 - y02, y1, 2*y10 - y12, (y0, y1)),
		(y0, 2*y02 - y01, y1, 2*y12 - y10, (y0, y1)),
		(y2, 2*y21 - y20, y1, 2*y12 - y10, (y1, y2)),
		(y2, 2*y20 - y21, y1, 2*y10 - y12, (y1, y2)),
		(y2, 2*y20 - y21, y0, 2*y02 - y01, (y0, y2)),
		(y2, 2*y21 - y20, y0, 2*y01 - y02, (y0, y2)),
	)
	for a, i, b, j, pair in checks:
		if (0 <= i < len(a.cross) and 0 <= j < len(b.cross)
				and a.cross[i] is b.cross[j]):
			output.append(Hex.from_yarns(a.cross[i], *pair))
	return output


def flip_rhombs(arena, handles, directions):
	"""
	Flips three frozen rhombs forming a hexagon, rewiring their adjacency
	slots and those of their outer neighbours.

	Returns a list of the frozen hexes destroyed or created by the move
	(the hexes formed by one of the three rhombs and its two outer
	neighbours, before and after the move respectively).

	Arguments:
	  arena             The list of rhombs of the tiling, indexed by handle
	  handles           The handles of the three rhombs
	  directions        Three bools giving the sign of each rhomb's move
	"""
	triple = [arena[h] for h in handles]
	# For each rhomb, find the slots holding the next and the previous
	# rhombs of the triple. The opposite slot (3-slot) of each of these
	# holds the outer neighbour across the parallel edge.
	slots = []
	for j in range(3):
		slots.append((
			triple[j].slot_of(handles[(j+1) % 3]),
			triple[j].slot_of(handles[(j+2) % 3])
		))
	output = []
	# Record the hexes that will be destroyed
	for i in range(3):
		a = triple[i].adjacent[3 - slots[i][0]]
		b = triple[i].adjacent[3 - slots[i][1]]
		if a is not None and b is not None and arena[a].share_edge(arena[b]):
			output.append(Hex.from_rhombs(arena, handles[i], a, b))
	# Rewire the adjacency so that each rhomb passes the outer neighbour
	# behind it to the next rhomb, then move the rhombs
	for i in range(3):
		k = (i+1) % 3
		outer_i = triple[i].adjacent[3 - slots[i][0]]
		outer_k = triple[k].adjacent[3 - slots[k][1]]
		if outer_i is not None:
			arena[outer_i].swap_adjacent(handles[i], handles[k])
		if outer_k is not None:
			arena[outer_k].swap_adjacent(handles[k], handles[i])
		triple[i].adjacent[slots[i][0]] = outer_k
		triple[k].adjacent[slots[k][1]] = outer_i
		triple[i].adjacent[3 - slots[i][0]] = handles[k]
		triple[k].adjacent[3 - slots[k][1]] = handles[i]
		edge = triple[(i+1) % 3].common_edge(triple[(i+2) % 3])
		triple[i].shift(edge if directions[i] else -edge)
	# Record the hexes that have been created
	for i in range(3):
		a = triple[i].adjacent[slots[i][0]]
		b = triple[i].adjacent[slots[i][1]]
		if a is not None and b is not None and arena[a].share_edge(arena[b]):
			output.append(Hex.from_rhombs(arena, handles[i], a, b))
	return output
