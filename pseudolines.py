"""
Defines the types Terminus and Yarn, which together describe a rhombic
tiling as an arrangement of pseudolines.

Each Yarn is a maximal chain of rhombs sharing an edge direction, and it
runs between two Termini on the boundary of the tiling. Every pair of
Yarns that cross corresponds to exactly one rhomb of the tiling.
"""


class Terminus:
	"""
	One end of a Yarn, located on the boundary of the tiling.

	Attributes:
	  index             The position of this terminus in the boundary
	                    (i.e. which step of the boundary walk it sits on)
	  angle             The direction of the boundary step in units of
	                    pi/n, always in the range (0, 2n]
	  geometry          The cyclotomic.Geometry of the tiling
	"""

	def __init__(self, index, angle, geometry):
		self.index = index
		self.angle = geometry.wrap_angle(angle)
		self.geometry = geometry

	def swap_angles(self, other):
		"""Exchanges the angles of this terminus and another"""
		self.angle, other.angle = other.angle, self.angle

	def __repr__(self):
		return f"Terminus(index={self.index}, angle={self.angle})"


class Yarn:
	"""
	A pseudoline running between two boundary Termini.

	The crossings of a yarn are kept in the order in which they are met
	travelling from the start to the end. Two yarns are only ever equal
	if they are the same object.

	Attributes:
	  start, end        The Terminus objects at each end of the yarn
	  cross             A list of the Yarns crossing this one, in order
	  joins             A list of the rhombs.Rhomb objects at each of
	                    those crossings, such that joins[i] is the rhomb
	                    where cross[i] meets this yarn
	  opposite          The image of this yarn under a rotation by pi,
	                    for symmetric arrangements (otherwise None)
	"""

	def __init__(self, start, end):
		self.start, self.end = start, end
		self.cross = []
		self.joins = []
		self.opposite = None

	@property
	def start_index(self):
		return self.start.index

	@property
	def end_index(self):
		return self.end.index

	@property
	def start_angle(self):
		return self.start.angle

	@property
	def end_angle(self):
		return self.end.angle

	@property
	def n(self):
		return self.start.geometry.n

	def first_index(self):
		"""The smaller of the indices of the two termini"""
		return min(self.start.index, self.end.index)

	def __lt__(self, other):
		return self.first_index() < other.first_index()

	def __repr__(self):
		return f"Yarn(start={self.start.index}, end={self.end.index})"

	def first_join(self):
		return self.joins[0] if self.joins else None

	def last_join(self):
		return self.joins[-1] if self.joins else None

	def add_first(self, yarn):
		self.cross.insert(0, yarn)

	def add_last(self, yarn):
		self.cross.append(yarn)

	def add_join(self, rhomb):
		self.joins.append(rhomb)

	def remove_first(self):
		self.cross.pop(0)
		self.joins.pop(0)

	def remove_last(self):
		self.cross.pop()
		self.joins.pop()

	def set_opposite(self, yarn):
		"""Makes this yarn and the given one each other's opposites"""
		if yarn is not self.opposite:
			self.opposite = yarn
			yarn.set_opposite(self)

	def symmetric(self):
		"""Returns bool whether this yarn is its own image under rotation by pi"""
		return self.opposite is self

	def symmetrize(self):
		"""
		Copies crossings onto this yarn from its opposite.

		Every yarn crossing the opposite yarn before the first (or after
		the last) crossing that this yarn shares with it, has an opposite
		which must cross this yarn at the other end.
		"""
		if self.opposite is None:
			return
		own_crossings = list(self.cross)
		opposite_crossings = list(self.opposite.cross)
		if not own_crossings:
			for y in opposite_crossings:
				self.add_first(y.opposite)
		for i, y in enumerate(opposite_crossings):
			if y.opposite in own_crossings:
				# Everything before this belongs at our end
				for j in range(i-1, -1, -1):
					self.add_last(opposite_crossings[j].opposite)
				break
		for i in range(len(opposite_crossings)-1, -1, -1):
			if opposite_crossings[i].opposite in own_crossings:
				# Everything after this belongs at our start
				for j in range(i+1, len(opposite_crossings)):
					self.add_first(opposite_crossings[j].opposite)
				break

	def collapse(self, join):
		"""
		Removes a boundary rhomb from this yarn and the other yarn
		through it.

		The two yarns both lose the crossing and their termini on that
		side are exchanged (keeping the angles in place), so the boundary
		runs around the inside of the removed rhomb.
		"""
		other = self.cross[self.joins.index(join)]
		if join is self.last_join():
			own_at_start = False
			own_terminus = self.end
			self.remove_last()
		else:
			own_at_start = True
			own_terminus = self.start
			self.remove_first()
		if join is other.last_join():
			other_at_start = False
			other_terminus = other.end
			other.remove_last()
		else:
			other_at_start = True
			other_terminus = other.start
			other.remove_first()
		own_terminus.swap_angles(other_terminus)
		if own_at_start:
			self.start = other_terminus
		else:
			self.end = other_terminus
		if other_at_start:
			other.start = own_terminus
		else:
			other.end = own_terminus

	def position_of(self, yarn):
		"""Returns the index of yarn in the crossing list (-1 if absent)"""
		for i, y in enumerate(self.cross):
			if y is yarn:
				return i
		return -1

	def crosses(self, yarn):
		return self.position_of(yarn) >= 0

	def cross_count(self):
		return len(self.cross)

	def hits(self, y1, y2):
		"""Returns bool whether this yarn crosses y1 immediately followed by y2"""
		i = self.position_of(y1)
		if i < 0 or i == len(self.cross) - 1:
			return False
		return self.cross[i+1] is y2

	def swap(self, y1, y2):
		"""
		Exchanges the order in which this yarn crosses y1 and y2, which
		must be consecutive crossings.
		"""
		i1, i2 = self.position_of(y1), self.position_of(y2)
		if i1 < 0 or i2 < 0:
			raise ValueError(f"Cannot swap {y1} and {y2}: both must cross {self}")
		if abs(i1 - i2) != 1:
			raise ValueError(f"Cannot swap {y1} and {y2}: they are not consecutive on {self}")
		self.cross[i1], self.cross[i2] = self.cross[i2], self.cross[i1]
		self.joins[i1], self.joins[i2] = self.joins[i2], self.joins[i1]

	def consecutive(self, y1, y2):
		"""Returns bool whether y1 and y2 cross this yarn one after the other"""
		i1 = self.position_of(y1)
		if i1 < 0:
			return False
		i2 = self.position_of(y2)
		if i2 < 0:
			return False
		return abs(i1 - i2) == 1

	def cross_ratio(self, other):
		"""
		Returns the sign (-1, 0 or 1) of the cross ratio of the boundary
		indices of the termini of this yarn and another.
		"""
		if other is self:
			return 0
		s1, e1 = self.start.index, self.end.index
		s2, e2 = other.start.index, other.end.index
		cr = (s1-s2) * (e1-s2) * (e1-e2) * (s1-e2)
		return -1 if cr < 0 else (1 if cr > 0 else 0)

	def should_cross(self, other):
		"""
		Returns bool whether the termini of the two yarns interleave around
		the boundary, in which case the yarns must cross.
		"""
		return self.cross_ratio(other) < 0

	def ccw_start(self, other):
		"""
		Returns bool whether, going anticlockwise around the boundary from
		the start of this yarn, the start of the other yarn is met before
		its end.
		"""
		if other is self:
			return False
		s1, e1 = self.start.index, self.end.index
		s2 = other.start.index
		return (s2-s1) * (e1-s2) * (e1-s1) > 0

	def valid(self):
		"""
		Returns bool whether every crossing of this yarn is geometrically
		possible, i.e. whether the angle between the yarn and each yarn it
		crosses (measured between the termini nearest the start of the
		boundary) is less than pi.
		"""
		n = self.n
		this_index = self.first_index()
		this_first = self.start if self.start.index == this_index else self.end
		for y in self.cross:
			that_index = y.first_index()
			that_first = y.start if y.start.index == that_index else y.end
			if this_index > that_index:
				difference = this_first.angle - that_first.angle
			else:
				difference = that_first.angle - this_first.angle
			if difference <= 0:
				difference += 2*n
			if difference >= n:
				return False
		return True

	def join_with(self, other):
		"""Returns the rhomb where other crosses this yarn (None if it doesn't)"""
		i = self.position_of(other)
		return self.joins[i] if i >= 0 else None

	def next_yarn(self, y1, y2):
		"""
		Given consecutive crossings y1 and y2, returns the yarn crossing
		this one on the far side of y1 from y2 (None if there isn't one).
		"""
		i1, i2 = self.position_of(y1), self.position_of(y2)
		if i1 < 0 or i2 < 0:
			raise ValueError(f"{y1} and {y2} do not both cross {self}")
		if abs(i1 - i2) != 1:
			raise ValueError(f"{y1} and {y2} are not consecutive on {self}")
		new_index = 2*i1 - i2
		if new_index < 0 or new_index >= len(self.cross):
			return None
		return self.cross[new_index]

	def cross_string(self):
		return "".join(f"  {y}\n" for y in self.cross)

