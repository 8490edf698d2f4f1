"""Tests for boundary conditions and ghost-cell padding."""

import numpy as np
import pytest

from transport import BCType, BoundaryCondition, BoundarySpec, InvalidConfig
from transport.fv.boundary import apply_boundary_conditions, extend_with_ghosts


class TestBoundarySpec:
    """Tests for boundary condition validation and coercion."""

    def test_default_is_periodic(self):
        bc = BoundarySpec()
        assert bc.periodic
        assert bc.left.type is BCType.PERIODIC

    def test_coerce_from_mapping(self):
        bc = BoundarySpec.coerce(
            {"left": {"type": "fixed", "value": 1}, "right": {"type": "zeroGradient"}}
        )
        assert bc.left.type is BCType.FIXED
        assert bc.left.value == 1.0
        assert bc.right.type is BCType.ZERO_GRADIENT
        assert not bc.periodic

    @pytest.mark.parametrize("tag", ["zeroGradient", "zero-gradient", "zero_gradient"])
    def test_zero_gradient_aliases(self, tag):
        assert BoundaryCondition(tag).type is BCType.ZERO_GRADIENT

    def test_coerce_none_and_str(self):
        assert BoundarySpec.coerce(None).periodic
        assert BoundarySpec.coerce("zeroGradient").right.type is BCType.ZERO_GRADIENT

    def test_periodic_on_one_side_only(self):
        with pytest.raises(InvalidConfig, match="both sides"):
            BoundarySpec(left="periodic", right={"type": "fixed", "value": 0.0})

    def test_fixed_needs_value(self):
        with pytest.raises(InvalidConfig):
            BoundaryCondition("fixed")

    def test_fixed_value_must_be_finite(self):
        with pytest.raises(InvalidConfig):
            BoundaryCondition("fixed", float("inf"))

    @pytest.mark.parametrize("value", ["abc", [1.0], object()])
    def test_fixed_value_must_be_numeric(self, value):
        with pytest.raises(InvalidConfig, match="must be a number"):
            BoundaryCondition("fixed", value)

    def test_malformed_value_from_mapping(self):
        with pytest.raises(InvalidConfig):
            BoundarySpec.coerce({"left": {"type": "fixed", "value": "abc"}, "right": "zeroGradient"})

    def test_unknown_type(self):
        with pytest.raises(InvalidConfig, match="Unknown boundary condition"):
            BoundaryCondition("robin")

    def test_to_mlflow(self):
        params = BoundarySpec(left=BoundaryCondition("fixed", 1.0), right="zeroGradient").to_mlflow()
        assert params["bc_left"] == "fixed"
        assert params["bc_left_value"] == 1.0
        assert params["bc_right"] == "zeroGradient"


class TestGhostCells:
    """Tests for extend_with_ghosts and apply_boundary_conditions."""

    PHI = np.array([1.0, 2.0, 3.0, 4.0, 5.0])

    def test_periodic_wraps(self):
        ext = extend_with_ghosts(self.PHI, BoundarySpec(), n_ghost=2)
        assert np.array_equal(ext, [4.0, 5.0, 1.0, 2.0, 3.0, 4.0, 5.0, 1.0, 2.0])

    def test_zero_gradient_copies_edge(self):
        ext = extend_with_ghosts(self.PHI, BoundarySpec.coerce("zeroGradient"), n_ghost=2)
        assert np.array_equal(ext, [1.0, 1.0, 1.0, 2.0, 3.0, 4.0, 5.0, 5.0, 5.0])

    def test_fixed_sets_value(self):
        bc = BoundarySpec(left=BoundaryCondition("fixed", -1.0), right=BoundaryCondition("fixed", 9.0))
        ext = extend_with_ghosts(self.PHI, bc, n_ghost=2)
        assert np.array_equal(ext[:2], [-1.0, -1.0])
        assert np.array_equal(ext[-2:], [9.0, 9.0])
        assert np.array_equal(ext[2:-2], self.PHI)

    def test_padding_is_a_copy(self):
        phi = self.PHI.copy()
        ext = extend_with_ghosts(phi, BoundarySpec(), n_ghost=2)
        ext[:] = 0.0
        assert np.array_equal(phi, self.PHI)

    def test_single_cell_periodic(self):
        ext = extend_with_ghosts(np.array([7.0]), BoundarySpec(), n_ghost=2)
        assert np.array_equal(ext, [7.0] * 5)

    def test_apply_fixed_and_zero_gradient(self):
        phi = self.PHI.copy()
        bc = BoundarySpec(left=BoundaryCondition("fixed", 0.0), right="zeroGradient")
        apply_boundary_conditions(phi, bc)
        assert phi[0] == 0.0
        assert phi[-1] == phi[-2] == 4.0

    def test_apply_periodic_is_noop(self):
        phi = self.PHI.copy()
        apply_boundary_conditions(phi, BoundarySpec())
        assert np.array_equal(phi, self.PHI)
