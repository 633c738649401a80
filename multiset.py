"""
Generates every distinct permutation of a multiset in cool-lex order.

Each successor is found by moving a single element of a linked list to the
front, using only a couple of pointers of extra storage, so that very
large sets of permutations can be split up and searched in pieces.
"""


from collections import Counter

from scipy.special import factorial


class _Node:
	"""A link in the list of elements"""

	def __init__(self, data, next_node=None):
		self.data, self.next = data, next_node


class MultisetPermutations:
	"""
	The current permutation of a multiset, which can be advanced to the
	next in cool-lex order.

	The first permutation is the one in non-increasing order. After every
	distinct permutation has been visited once, iterate() returns to it.

	Attributes:
	  size              The number of elements in the multiset
	  head              The first node of the linked list
	"""
	# Also has the private attributes self._i and self._after_i, the
	# tracking node of the cool-lex successor rule and the node after it

	def __init__(self, values):
		values = sorted(values)
		if not values:
			raise ValueError("Cannot permute an empty multiset")
		self.size = len(values)
		# Build the list in non-increasing order
		nodes = [_Node(v) for v in values]
		for a, b in zip(nodes[:0:-1], nodes[-2::-1]):
			a.next = b
		self.head = nodes[-1]
		self._i = nodes[1] if self.size > 1 else None
		self._after_i = nodes[0] if self.size > 1 else None

	def iterate(self):
		"""Advances to the next permutation (no effect on a singleton)"""
		if self.size < 2:
			return
		i, after_i = self._i, self._after_i
		if after_i.next is not None and i.data >= after_i.next.data:
			before_k = after_i
		else:
			before_k = i
		k = before_k.next
		# Move k to the front
		before_k.next = k.next
		k.next = self.head
		if k.data < self.head.data:
			i = k
		if i.next is None:
			# Wrapping around to the first permutation
			i = k
			for j in range(self.size - 2):
				i = i.next
		self._i = i
		self._after_i = i.next
		self.head = k

	def get_array(self):
		"""Returns a list of the elements in their current order"""
		output = []
		node = self.head
		while node is not None:
			output.append(node.data)
			node = node.next
		return output

	def deep_copy(self):
		"""Returns an independent generator at the same permutation"""
		output = MultisetPermutations.__new__(MultisetPermutations)
		output.size = self.size
		output._i = output._after_i = None
		output.head = _Node(self.head.data)
		if self.head is self._i: output._i = output.head
		if self.head is self._after_i: output._after_i = output.head
		node, new_node = self.head.next, output.head
		while node is not None:
			new_node.next = _Node(node.data)
			new_node = new_node.next
			if node is self._i: output._i = new_node
			if node is self._after_i: output._after_i = new_node
			node = node.next
		return output

	def __len__(self):
		return self.size

	def __iter__(self):
		"""
		Iterates over one full cycle of permutations (as lists), starting
		from the current one, without changing this generator
		"""
		copy = self.deep_copy()
		first = copy.get_array()
		current = first
		while True:
			yield current
			copy.iterate()
			current = copy.get_array()
			if current == first:
				return

	def __eq__(self, other):
		return (isinstance(other, MultisetPermutations)
		        and self.get_array() == other.get_array())

	def __hash__(self):
		return hash(tuple(self.get_array()))

	def __repr__(self):
		return f"MultisetPermutations({self.get_array()})"


def permutation_count(values):
	"""Returns the number of distinct permutations of a multiset"""
	total = int(factorial(len(values), exact=True))
	for multiplicity in Counter(values).values():
		total //= int(factorial(multiplicity, exact=True))
	return total
