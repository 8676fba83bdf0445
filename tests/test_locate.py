from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from gwmesh.errors import MappingNotFound
from gwmesh.fea.analysis.locate import MappingResult, try_mapping
from gwmesh.fea.analysis.mapping import MappingQ1
from conftest import FailingMapping


def test_interior_point_maps_on_first_attempt(distorted_hex):
    mapping = MappingQ1()
    unit = np.array([0.25, 0.6, 0.4])
    point = distorted_hex.map_to_real(unit)

    result = try_mapping(point, distorted_hex, mapping, np.random.default_rng(0))

    assert result.found
    assert result.attempts == 1
    assert result.retries == 0
    assert result.unwrap() == pytest.approx(unit, abs=1e-10)
    assert result.query_points[0] == pytest.approx(point)


def test_always_failing_mapping_stops_after_21_attempts(unit_quad):
    mapping = FailingMapping()

    result = try_mapping([0.5, 0.5], unit_quad, mapping, np.random.default_rng(1))

    assert not result.found
    assert result.unit_point is None
    assert result.attempts == 21
    assert len(mapping.queries) == 21
    with pytest.raises(MappingNotFound):
        result.unwrap()


def test_first_query_is_unperturbed(unit_quad):
    mapping = FailingMapping()
    try_mapping([0.5, 0.5], unit_quad, mapping, np.random.default_rng(1))
    assert np.array_equal(mapping.queries[0], [0.5, 0.5])


def test_perturbations_are_redrawn_and_bounded(unit_hex):
    mapping = FailingMapping()
    point = np.array([0.2, 0.3, 0.4])

    try_mapping(point, unit_hex, mapping, np.random.default_rng(2))

    retries = mapping.queries[1:]
    offsets = np.array([q - point for q in retries])
    assert len({tuple(q) for q in retries}) == len(retries)
    assert np.all(np.abs(offsets) <= 1e-4)
    # every axis is perturbed independently
    assert not np.allclose(offsets[:, 0], offsets[:, 1])
    assert not np.allclose(offsets[:, 1], offsets[:, 2])


def test_success_after_some_failures(unit_quad):
    mapping = FailingMapping(failures=3, answer=[0.1, 0.2])

    result = try_mapping([0.1, 0.2], unit_quad, mapping, np.random.default_rng(3))

    assert result.found
    assert result.attempts == 4
    assert result.retries == 3
    assert result.unwrap() == pytest.approx([0.1, 0.2])


def test_custom_retry_budget(unit_quad):
    mapping = FailingMapping()
    result = try_mapping([0.5, 0.5], unit_quad, mapping, np.random.default_rng(4), max_retries=5)
    assert result.attempts == 6


def test_same_seed_reproduces_perturbations(unit_quad):
    first, second = FailingMapping(), FailingMapping()
    try_mapping([0.5, 0.5], unit_quad, first, np.random.default_rng(42))
    try_mapping([0.5, 0.5], unit_quad, second, np.random.default_rng(42))
    assert np.array_equal(np.array(first.queries), np.array(second.queries))


def test_default_generator_is_used_when_none_given(unit_quad):
    result = try_mapping([0.5, 0.5], unit_quad, FailingMapping())
    assert result.attempts == 21


def test_point_just_outside_is_nudged_inside(unit_quad):
    mapping = MappingQ1()
    point = np.array([1.0 + 1e-6, 0.5])

    result = try_mapping(point, unit_quad, mapping, np.random.default_rng(2024))

    assert result.found
    assert result.attempts > 1
    unit = result.unwrap()
    assert unit_quad.contains_unit_point(unit)
    assert unit == pytest.approx([1.0, 0.5], abs=2e-4)


def test_point_far_outside_reports_not_found(unit_quad):
    result = try_mapping([3.0, 0.5], unit_quad, MappingQ1(), np.random.default_rng(0))
    assert isinstance(result, MappingResult)
    assert not result.found
    assert result.attempts == 21


def test_concurrent_calls_with_independent_generators(distorted_quad):
    mapping = MappingQ1()
    units = np.random.default_rng(9).uniform(0.1, 0.9, size=(16, 2))
    points = [distorted_quad.map_to_real(u) for u in units]
    generators = np.random.default_rng(9).spawn(len(points))

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(
            lambda args: try_mapping(args[0], distorted_quad, mapping, args[1]),
            zip(points, generators),
        ))

    for unit, result in zip(units, results):
        assert result.unwrap() == pytest.approx(unit, abs=1e-10)
