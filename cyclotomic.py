"""
Exact integer arithmetic on points of the plane generated by the 2N-th
roots of unity, for odd N.

A point is stored as its integer coordinates in the basis of the first
N-1 unit vectors e^(i k pi/N) (the last one being a combination of the
others), so positions, rotations and inflations of rhombic tilings can be
computed without any floating point error.
"""


import numpy as np


class Geometry:
	"""
	The context for all calculations with a given order of symmetry.

	Every Point belongs to a Geometry, and a new Geometry must be
	constructed (and everything rebuilt) in order to work with a different
	value of n.

	Attributes:
	  n                 The (odd) order of rotational symmetry, at least 5
	  dimension         The number of integer coordinates of a point, n-1
	  star              A tuple of the 2n unit vectors (Point objects),
	                    star[k] pointing at angle k*pi/n
	  star_matrix       A (2n, n-1) numpy array containing the
	                    coefficients of the unit vectors
	  cos, sin          Numpy arrays of cos(k*pi/n), sin(k*pi/n) for the
	                    basis vectors, used for cartesian projection
	  zero              The point at the origin
	"""

	def __init__(self, n=7):
		if n < 5:
			raise ValueError(f"The order of symmetry must be at least 5, not {n}")
		if n % 2 == 0:
			raise ValueError(f"Only odd orders of symmetry are supported, not {n}")
		self.n = n
		self.dimension = n - 1
		# The first n-1 unit vectors form the basis, and the nth one is
		# determined by the fact that the n roots of -1 sum to zero
		star_matrix = np.zeros((2*n, n-1), dtype=np.int64)
		for i in range(n-1):
			star_matrix[i, i] = 1
			star_matrix[n+i, i] = -1
			star_matrix[n-1, i] = 1 if i % 2 else -1
		star_matrix[2*n-1] = -star_matrix[n-1]
		star_matrix.flags.writeable = False
		self.star_matrix = star_matrix
		self.star = tuple(Point(self, row) for row in star_matrix)
		self.zero = Point(self, np.zeros(n-1, dtype=np.int64))
		angles = np.arange(n-1) * np.pi / n
		self.cos, self.sin = np.cos(angles), np.sin(angles)

	def __eq__(self, other):
		return isinstance(other, Geometry) and self.n == other.n

	def __hash__(self):
		return hash(("Geometry", self.n))

	def __reduce__(self):
		# Rebuild the tables rather than pickling them
		return (Geometry, (self.n,))

	def __repr__(self):
		return f"Geometry({self.n})"

	def unit(self, i):
		"""Returns the unit vector pointing at angle i*pi/n"""
		return self.star[i % (2*self.n)]

	def point(self, coefficients):
		"""Returns a Point in this geometry with the given coefficients"""
		return Point(self, coefficients)

	def wrap_angle(self, angle):
		"""Maps an angle (in units of pi/n) into the range (0, 2n]"""
		angle = angle % (2*self.n)
		return angle if angle > 0 else angle + 2*self.n

	def inflation(self, edge_sequence):
		"""
		Returns the inflation matrix associated with an edge sequence.

		The edge sequence describes a walk of unit steps (each entry being
		an angle in units of pi/n), and the matrix multiplies points by the
		cyclotomic integer at the end of that walk. It is returned as a
		tuple of n-1 points, the i-th being the walk rotated by i*pi/n,
		for use with Point.multiply().
		"""
		base = self.zero
		for s in edge_sequence:
			base = base + self.unit(s)
		return tuple(base.rotate(i) for i in range(self.dimension))


class Point:
	"""
	An immutable point (or vector) with integer coordinates in a Geometry.

	Attributes:
	  geometry          The Geometry to which the point belongs
	  coefficients      A read-only 1D numpy integer array of length n-1
	"""

	def __init__(self, geometry, coefficients):
		coefficients = np.array(coefficients, dtype=np.int64)
		if coefficients.shape != (geometry.dimension,):
			raise ValueError(
				f"A point for n = {geometry.n} needs {geometry.dimension} "
				f"coefficients, not {coefficients.shape}"
			)
		coefficients.flags.writeable = False
		self.geometry = geometry
		self.coefficients = coefficients

	def _check_geometry(self, other):
		if other.geometry.n != self.geometry.n:
			raise ValueError(
				f"Cannot combine points with n = {self.geometry.n} "
				f"and n = {other.geometry.n}"
			)

	def plus(self, other):
		self._check_geometry(other)
		return Point(self.geometry, self.coefficients + other.coefficients)

	def minus(self, other):
		self._check_geometry(other)
		return Point(self.geometry, self.coefficients - other.coefficients)

	def __add__(self, other):
		return self.plus(other)

	def __sub__(self, other):
		return self.minus(other)

	def __neg__(self):
		return Point(self.geometry, -self.coefficients)

	def rotate(self, angle):
		"""Returns this point rotated about the origin by angle*pi/n"""
		geometry = self.geometry
		# Basis vector j is sent to the unit vector at angle + j
		rows = (angle + np.arange(geometry.dimension)) % (2*geometry.n)
		return Point(geometry, self.coefficients @ geometry.star_matrix[rows])

	def multiply(self, matrix):
		"""
		Applies a linear map to this point.

		Arguments:
		  matrix            Either a sequence of n-1 points (as returned
		                    by Geometry.inflation()), the j-th being the
		                    image of the j-th basis vector, or the
		                    equivalent (n-1, n-1) integer array
		"""
		if len(matrix) != self.geometry.dimension:
			raise ValueError(
				f"Expected a matrix with {self.geometry.dimension} rows, "
				f"not {len(matrix)}"
			)
		if isinstance(matrix[0], Point):
			for row in matrix:
				self._check_geometry(row)
			matrix = np.array([row.coefficients for row in matrix])
		else:
			matrix = np.asarray(matrix, dtype=np.int64)
			if matrix.shape != (self.geometry.dimension, self.geometry.dimension):
				raise ValueError(f"A matrix of shape {matrix.shape} is not square")
		return Point(self.geometry, self.coefficients @ matrix)

	def to_cartesian(self):
		"""Returns the (lossy) cartesian coordinates as a numpy array"""
		return np.array([
			self.coefficients @ self.geometry.cos,
			self.coefficients @ self.geometry.sin
		])

	def is_zero(self):
		return not self.coefficients.any()

	def __eq__(self, other):
		return (isinstance(other, Point)
		        and self.geometry.n == other.geometry.n
		        and np.array_equal(self.coefficients, other.coefficients))

	def __hash__(self):
		return hash((self.geometry.n, tuple(self.coefficients.tolist())))

	def __repr__(self):
		return f"Point({self.coefficients.tolist()})"
