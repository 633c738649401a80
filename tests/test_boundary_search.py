"""
Tests for boundary_search.py
============================

Expansion of permutations into edge sequences, work units and the
threaded search over a whole multiset.

Run: python -m pytest tests/test_boundary_search.py -v
"""

import logging

import pytest

import boundary_search
import cyclotomic
import multiset


G5 = cyclotomic.Geometry(5)
G7 = cyclotomic.Geometry(7)


# =============================================================================
# Expanding permutations
# =============================================================================

def test_substitute():
	rule = [[0], [1, -1], [2, -2]]
	assert boundary_search.substitute([0, 1, -2, 5], rule) == [0, 1, -1, 2, -2, 5]
	assert boundary_search.substitute([], rule) == []


def test_all_bumps():
	assert boundary_search.all_bumps(G7) == [[0], [1, -1], [2, -2], [3, -3]]
	assert boundary_search.ALL_BUMPS[:4] == boundary_search.all_bumps(G7)


def test_expand():
	rule = [[0], [1, -1], [2, -2]]
	assert boundary_search.expand([1, 2]) == [1, 2]
	assert boundary_search.expand([1, 2], rule) == [1, -1, 2, -2]
	assert boundary_search.expand([1, 2], rule, [0], [0]) == [0, 1, -1, 2, -2, 0]
	assert boundary_search.expand([2], prefix=[1], suffix=[0]) == [1, 2, 0]


def test_valid_for_all_types():
	assert boundary_search.valid_for_all_types([0, 0], G5)
	assert boundary_search.valid_for_all_types([0, 0], G5, sym=True)
	assert not boundary_search.valid_for_all_types([0, 2], G5)


# =============================================================================
# Work units
# =============================================================================

def test_work_unit_checks_its_chunk():
	permutations = multiset.MultisetPermutations([0, 0])
	unit = boundary_search.BoundaryWorkUnit(permutations, 1, G5)
	assert unit() == [[0, 0]]


def test_work_unit_applies_rule(monkeypatch):
	checked = []
	def record(sequence, geometry, sym=False):
		checked.append(sequence)
		return len(checked) % 2 == 1
	monkeypatch.setattr(boundary_search, "valid_for_all_types", record)
	permutations = multiset.MultisetPermutations([1, 1, 2])
	unit = boundary_search.BoundaryWorkUnit(
		permutations, 3, G7, rule=[[0], [1, -1], [2, -2]], prefix=[0])
	assert unit() == [[0, 2, -2, 1, -1, 1, -1], [0, 1, -1, 1, -1, 2, -2]]
	assert checked[1] == [0, 1, -1, 2, -2, 1, -1]


# =============================================================================
# Searching
# =============================================================================

def test_search_single_permutation():
	result = boundary_search.all_valid([0, 0], G5, max_workers=2)
	assert result.valids == [[0, 0]]
	assert result.failures == []
	assert result.searched == 1


def test_search_symmetric():
	result = boundary_search.all_valid([0, 0], G5, sym=True, max_workers=2)
	assert result.valids == [[0, 0]]


def test_search_rejects_untileable():
	result = boundary_search.all_valid([0, 2], G5, max_workers=2)
	assert result.searched == 2
	assert [0, 2] not in result.valids


def test_processes_and_threads_agree():
	values = [1, -1, 0]
	in_processes = boundary_search.all_valid(values, G5, work_unit_length=2, max_workers=2)
	in_threads = boundary_search.all_valid(
		values, G5, work_unit_length=2, max_workers=2, use_processes=False)
	assert in_processes.searched == in_threads.searched == 6
	assert in_processes.failures == in_threads.failures == []
	assert sorted(in_processes.valids) == sorted(in_threads.valids)
	for edge in in_processes.valids:
		assert boundary_search.valid_for_all_types(edge, G5)


@pytest.mark.parametrize("work_unit_length, batch_size", [(1, 1), (1, 2), (2, 3), (1000, 100000)])
def test_search_visits_every_permutation(monkeypatch, work_unit_length, batch_size):
	checked = []
	def record(sequence, geometry, sym=False):
		checked.append(tuple(sequence))
		return True
	monkeypatch.setattr(boundary_search, "valid_for_all_types", record)
	values = [0, 0, 1, 1, 2]
	result = boundary_search.all_valid(
		values, G7, work_unit_length=work_unit_length, batch_size=batch_size,
		max_workers=3, use_processes=False)
	assert result.searched == multiset.permutation_count(values)
	assert sorted(checked) == sorted(set(checked))
	assert len(checked) == 30
	assert sorted(map(tuple, result.valids)) == sorted(checked)


def test_failing_unit_is_isolated(monkeypatch, caplog):
	def fail_on_one(sequence, geometry, sym=False):
		if sequence == [1, 2, 1]:
			raise RuntimeError("broken")
		return True
	monkeypatch.setattr(boundary_search, "valid_for_all_types", fail_on_one)
	with caplog.at_level(logging.WARNING, logger="boundary_search"):
		result = boundary_search.all_valid(
			[1, 1, 2], G7, work_unit_length=1, max_workers=2, use_processes=False)
	assert result.searched == 3
	assert len(result.failures) == 1
	start, exception = result.failures[0]
	assert start == [1, 2, 1]
	assert isinstance(exception, RuntimeError)
	assert sorted(result.valids) == [[1, 1, 2], [2, 1, 1]]
	assert "broken" in caplog.text


def test_search_progress(capsys):
	boundary_search.all_valid(
		[0, 0], G5, max_workers=1, use_processes=False, print_progress=True)
	assert "100.00%" in capsys.readouterr().out
