"""
Searches the permutations of a multiset of angles for the edge sequences
which can tile every type of inflated rhomb.

The permutations are enumerated in cool-lex order (see multiset.py) and
split into fixed-length work units, which are run on a pool of worker
processes (or threads) in bounded batches.
"""


import logging
import os
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed

import multiset
import rhomb_boundary


logger = logging.getLogger(__name__)


# The number of permutations checked by each work unit
WORK_UNIT_LENGTH = 1000
# The number of permutations scheduled before waiting for results
BATCH_SIZE = 100 * WORK_UNIT_LENGTH


def all_bumps(geometry):
	"""
	Returns the substitution rule replacing each symbol k by the "bump"
	[k, -k] (and 0 by [0]), for use with substitute()
	"""
	return [[0]] + [[k, -k] for k in range(1, geometry.n // 2 + 1)]


# The bump rule for every symbol used up to 13-fold symmetry
ALL_BUMPS = [[0]] + [[k, -k] for k in range(1, 7)]


def substitute(sequence, rule):
	"""
	Returns a copy of sequence in which each symbol x with |x| < len(rule)
	is replaced by the subsequence rule[|x|].
	"""
	output = []
	for x in sequence:
		if abs(x) < len(rule):
			output.extend(rule[abs(x)])
		else:
			output.append(x)
	return output


def expand(sequence, rule=None, prefix=None, suffix=None):
	"""
	Returns the edge sequence encoded by a permutation: the prefix and
	suffix are attached and then the rule is applied.
	"""
	current = list(sequence)
	if prefix is not None: current = list(prefix) + current
	if suffix is not None: current = current + list(suffix)
	if rule is not None: current = substitute(current, rule)
	return current


def valid_for_all_types(sequence, geometry, sym=False):
	"""
	Returns bool whether an edge sequence can tile the inflation of every
	rhomb type (the even angles n-1, n-3, ..., 1).
	"""
	for even in range(geometry.n - 1, 0, -2):
		if sym:
			boundary = rhomb_boundary.create_symmetric_rhomb_boundary(geometry, even, sequence)
		else:
			boundary = rhomb_boundary.create_rhomb_boundary(geometry, even, sequence)
		if not boundary.valid():
			return False
	return True


class BoundaryWorkUnit:
	"""
	A chunk of the search: checks a fixed number of consecutive
	permutations.

	Attributes:
	  permutations      The multiset.MultisetPermutations generator, at
	                    the first permutation of the chunk. It is owned by
	                    the work unit and advanced as the unit runs
	  max_count         The number of permutations to check
	  geometry          The cyclotomic.Geometry to use
	  sym               Whether to build symmetric boundaries
	  rule, prefix, suffix
	                    Used to expand each permutation into an edge
	                    sequence (see expand())
	"""

	def __init__(
		self, permutations, max_count, geometry, sym=False,
		rule=None, prefix=None, suffix=None
	):
		self.permutations = permutations
		self.max_count = max_count
		self.geometry = geometry
		self.sym = sym
		self.rule, self.prefix, self.suffix = rule, prefix, suffix

	def __call__(self):
		"""Returns a list of the valid edge sequences in this chunk"""
		output = []
		for i in range(self.max_count):
			current = expand(
				self.permutations.get_array(), self.rule, self.prefix, self.suffix)
			if valid_for_all_types(current, self.geometry, self.sym):
				output.append(current)
			self.permutations.iterate()
		return output


class SearchResult:
	"""
	The outcome of a search.

	Attributes:
	  valids            A list of the edge sequences found to be valid for
	                    every rhomb type
	  failures          A list of (first permutation, exception) pairs for
	                    the work units that raised an exception
	  searched          The number of permutations scheduled
	"""

	def __init__(self, valids=None, failures=None, searched=0):
		if valids is None: valids = []
		if failures is None: failures = []
		self.valids, self.failures, self.searched = valids, failures, searched

	def __repr__(self):
		return (f"SearchResult({len(self.valids)} valid, {len(self.failures)} "
		        f"failed unit(s), {self.searched} searched)")


def all_valid(
	values, geometry, sym=False, rule=None, prefix=None, suffix=None,
	work_unit_length=WORK_UNIT_LENGTH, batch_size=BATCH_SIZE,
	max_workers=None, use_processes=True, print_progress=False
):
	"""
	Searches every distinct permutation of a multiset for edge sequences
	which tile every rhomb type.

	Returns a SearchResult. A work unit that raises an exception is
	logged and recorded in SearchResult.failures without affecting the
	results of the others.

	Arguments:
	  values            The multiset of symbols to permute (a list)
	  geometry          The cyclotomic.Geometry to use
	  sym               Whether to search symmetric boundaries
	  rule              A substitution rule expanding each symbol into a
	                    subsequence (see substitute() and all_bumps())
	  prefix, suffix    Symbols attached to every permutation before the
	                    rule is applied
	  work_unit_length  The number of permutations per work unit
	  batch_size        The number of permutations scheduled before
	                    waiting for every unit of the batch to finish
	  max_workers       The number of workers (defaults to the number
	                    of CPUs)
	  use_processes     Whether to run the work units in separate
	                    processes (otherwise they share this process's
	                    interpreter on a pool of threads)
	  print_progress    Whether to print the percentage of permutations
	                    searched
	"""
	if max_workers is None: max_workers = os.cpu_count() or 1
	permutations = multiset.MultisetPermutations(values)
	total = multiset.permutation_count(values)
	first = permutations.get_array()
	past_first = False
	done = False
	result = SearchResult()
	logger.info(f"Searching {total} permutations of {sorted(values)}")
	pool = ProcessPoolExecutor if use_processes else ThreadPoolExecutor
	with pool(max_workers=max_workers) as executor:
		while not done:
			# Schedule a batch of work units
			search_count = 0
			futures = {}
			while not done and search_count < batch_size:
				start = permutations.get_array()
				unit_permutations = permutations.deep_copy()
				unit_length = 0
				while unit_length < work_unit_length:
					if permutations.get_array() == first:
						if past_first:
							done = True
							break
						past_first = True
					if search_count == batch_size:
						break
					permutations.iterate()
					search_count += 1
					unit_length += 1
				if unit_length > 0:
					unit = BoundaryWorkUnit(
						unit_permutations, unit_length, geometry, sym, rule, prefix, suffix)
					futures[executor.submit(unit)] = start
			# Wait for the whole batch
			for future in as_completed(futures):
				exception = future.exception()
				if exception is not None:
					logger.warning(
						f"Work unit starting at {futures[future]} failed: {exception!r}")
					result.failures.append((futures[future], exception))
				else:
					result.valids.extend(future.result())
			result.searched += search_count
			logger.info(
				f"Searched {result.searched} of {total} permutations, "
				f"{len(result.valids)} valid so far")
			if print_progress:
				print(f"\r{100*result.searched/total:.2f}%", end="")
	if print_progress: print("\r100.00%")
	return result
