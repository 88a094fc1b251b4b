"""Tests for the algorithm registry."""

import pytest

from cutout.config import MarchingSquaresConfig, RDPConfig, VoronoiConfig
from cutout.core.marching_squares import MarchingSquares
from cutout.core.registry import (
    REGISTRY,
    AlgorithmFamily,
    create,
    get_entry,
    list_algorithms,
    parameters_of,
)
from cutout.core.simplify import RamerDouglasPeucker
from cutout.core.voronoi import VoronoiFracture
from cutout.exceptions import ConfigurationError, UnknownAlgorithmError


class TestRegistryContents:
    def test_every_family_registered(self) -> None:
        keys = {(family.value, key) for family, key in REGISTRY}
        assert keys == {
            ("contour", "moore_neighbor"),
            ("contour", "marching_squares"),
            ("simplify", "rdp"),
            ("simplify", "reumann_witkam"),
            ("simplify", "visvalingam_whyatt"),
            ("smooth", "outward"),
            ("destruction", "voronoi"),
            ("destruction", "slice"),
            ("destruction", "multi_slice"),
        }

    def test_registry_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            REGISTRY[(AlgorithmFamily.CONTOUR, "other")] = REGISTRY[(AlgorithmFamily.CONTOUR, "marching_squares")]  # type: ignore[index]

    def test_list_by_family(self) -> None:
        entries = list_algorithms(AlgorithmFamily.SIMPLIFY)
        assert [e.key for e in entries] == ["rdp", "reumann_witkam", "visvalingam_whyatt"]

    def test_list_by_family_name(self) -> None:
        assert [e.key for e in list_algorithms("destruction")] == ["voronoi", "slice", "multi_slice"]

    def test_list_all(self) -> None:
        assert len(list_algorithms()) == len(REGISTRY)

    def test_list_unknown_family(self) -> None:
        with pytest.raises(ValueError):
            list_algorithms("sorting")


class TestLookup:
    def test_get_entry(self) -> None:
        entry = get_entry("contour", "marching_squares")
        assert entry.display_name == "Marching Squares"
        assert entry.config_model is MarchingSquaresConfig

    def test_unknown_key(self) -> None:
        with pytest.raises(UnknownAlgorithmError) as exc_info:
            get_entry(AlgorithmFamily.SIMPLIFY, "douglas")
        assert exc_info.value.key == "douglas"
        assert exc_info.value.family == "simplify"

    def test_unknown_family(self) -> None:
        with pytest.raises(UnknownAlgorithmError):
            get_entry("teleport", "rdp")

    def test_key_from_other_family(self) -> None:
        with pytest.raises(UnknownAlgorithmError):
            get_entry(AlgorithmFamily.CONTOUR, "rdp")


class TestCreate:
    def test_create_with_defaults(self) -> None:
        algorithm = get_entry("contour", "marching_squares").create()
        assert isinstance(algorithm, MarchingSquares)
        assert algorithm.config == MarchingSquaresConfig()

    def test_create_from_config(self) -> None:
        config = RDPConfig(epsilon=3.0)
        algorithm = create(AlgorithmFamily.SIMPLIFY, config)
        assert isinstance(algorithm, RamerDouglasPeucker)
        assert algorithm.config.epsilon == 3.0

    def test_create_destruction(self) -> None:
        assert isinstance(create("destruction", VoronoiConfig()), VoronoiFracture)

    def test_wrong_config_type(self) -> None:
        with pytest.raises(ConfigurationError):
            get_entry("simplify", "rdp").create(VoronoiConfig())


class TestParameters:
    def test_kind_excluded(self) -> None:
        names = [p.name for p in parameters_of(RDPConfig)]
        assert names == ["epsilon"]

    def test_ranges_and_steps(self) -> None:
        entry = get_entry("smooth", "outward")
        params = {p.name: p for p in entry.parameters}

        miter = params["miter_limit"]
        assert miter.default == 2.0
        assert miter.minimum == 1.0
        assert miter.maximum == 10.0
        assert miter.step == 0.1
        assert miter.type_name == "float"

        assert params["use_density"].type_name == "bool"
        assert params["use_density"].minimum is None

    def test_pattern_default_is_instantiated(self) -> None:
        params = {p.name: p for p in get_entry("destruction", "voronoi").parameters}
        assert params["pattern"].default.kind == "random"
