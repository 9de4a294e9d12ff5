import logging
import math

import pytest

from devize import EngineConfig, set_engine_config
from devize.solver import (
    Constraint,
    ConstraintKind,
    ConstraintSolver,
    SolveOptions,
    Variable,
)


def test_sum_with_fixed_variable():
    solver = ConstraintSolver()
    x = solver.create_variable('x', 0)
    y = solver.create_variable('y', 0)
    solver.create_fixed_constraint(x, 40)
    solver.create_equal_constraint([x, y], [1, 1], 100)

    assert solver.solve() is True
    assert solver.get_variable_value('x') == pytest.approx(40, abs=1e-5)
    assert solver.get_variable_value('y') == pytest.approx(60, abs=1e-5)
    assert solver.last_report.success
    assert solver.last_report.violations == []


def test_already_satisfied_system_takes_no_passes():
    solver = ConstraintSolver()
    x = solver.create_variable('x', 5)
    solver.create_less_equal_constraint([x], [1], 10)

    assert solver.solve() is True
    assert solver.last_report.iterations == 0
    assert x.value == 5


def test_inequalities_only_move_when_violated():
    solver = ConstraintSolver()
    x = solver.create_variable('x', 20)
    y = solver.create_variable('y', 1)
    solver.create_less_equal_constraint([x], [1], 10)
    solver.create_greater_equal_constraint([y], [1], 3)

    assert solver.solve() is True
    assert x.value == pytest.approx(10)
    assert y.value == pytest.approx(3)


def test_inequality_moves_negative_coefficient_variables():
    solver = ConstraintSolver()
    x = solver.create_variable('x', 10, 0, 100)
    y = solver.create_variable('y', 0, 0, 100)
    solver.create_less_equal_constraint([x, y], [1, -1], 0)

    assert solver.solve() is True
    assert x.value == pytest.approx(5)
    assert y.value == pytest.approx(5)


def test_inequality_skips_variable_at_its_bound():
    solver = ConstraintSolver()
    x = solver.create_variable('x', 10, 10, 100)
    y = solver.create_variable('y', 0, 0, 100)
    solver.create_less_equal_constraint([x, y], [1, -1], 0)

    assert solver.solve() is True
    assert x.value == 10
    assert y.value == pytest.approx(10)


def test_bounds_are_respected():
    solver = ConstraintSolver()
    x = solver.create_variable('x', 0, 0, 30)
    y = solver.create_variable('y', 0, 0, 1000)
    solver.create_equal_constraint([x, y], [1, 1], 100)

    assert solver.solve() is True
    assert 0 <= x.value <= 30
    assert x.value + y.value == pytest.approx(100, abs=1e-5)


def test_fixed_snaps_into_bounds():
    solver = ConstraintSolver()
    x = solver.create_variable('x', 0, 0, 10)
    solver.create_fixed_constraint(x, 50)

    assert solver.solve() is False
    assert x.value == 10
    assert solver.last_report.max_violation == pytest.approx(40)


def test_conflicting_constraints_keep_last_values_and_warn(caplog):
    solver = ConstraintSolver(SolveOptions(max_iterations=10))
    x = solver.create_variable('x')
    solver.create_fixed_constraint(x, 10, strength=1.0)
    solver.create_fixed_constraint(x, 20, strength=0.5)

    with caplog.at_level(logging.WARNING, logger='devize.solver.solver_core'):
        assert solver.solve() is False

    report = solver.last_report
    assert report.iterations == 10
    assert report.warnings
    assert len(report.violations) == 1
    assert x.value == 20
    assert 'did not converge' in caplog.text


def test_stronger_constraints_are_visited_first():
    solver = ConstraintSolver(SolveOptions(max_iterations=1))
    x = solver.create_variable('x')
    solver.create_fixed_constraint(x, 1, strength=0.25)
    solver.create_fixed_constraint(x, 2, strength=1.0)

    solver.solve()

    # the weak constraint runs last within the pass
    assert x.value == 1


def test_objectives_are_always_satisfied():
    solver = ConstraintSolver()
    x = solver.create_variable('x', 3)
    solver.create_objective(ConstraintKind.MAXIMIZE, [x], [1])
    solver.create_objective(ConstraintKind.MINIMIZE, [x], [1])

    assert solver.solve() is True
    assert x.value == 3


def test_create_objective_rejects_constraint_kinds():
    solver = ConstraintSolver()
    x = solver.create_variable('x')

    with pytest.raises(ValueError):
        solver.create_objective(ConstraintKind.EQUAL, [x], [1])


def test_refine_resolves_conflict_by_strength():
    solver = ConstraintSolver(SolveOptions(max_iterations=5))
    x = solver.create_variable('x', 0, 0, 100)
    solver.create_fixed_constraint(x, 10, strength=1.0)
    solver.create_fixed_constraint(x, 20, strength=0.25)

    assert solver.solve() is False
    assert solver.refine() is False

    # weighted mean of 10 (w=1) and 20 (w=0.25)
    assert x.value == pytest.approx(12.0, abs=1e-4)
    assert solver.last_report.method == 'refine'


def test_refine_fixes_unconverged_system():
    solver = ConstraintSolver(SolveOptions(max_iterations=1))
    x = solver.create_variable('x', 0, 0, 100)
    y = solver.create_variable('y', 0, 0, 100)
    solver.create_equal_constraint([x, y], [1, 1], 100)
    solver.create_equal_constraint([x, y], [1, -2], 10)

    assert solver.solve() is False
    assert solver.refine() is True
    assert x.value == pytest.approx(70, abs=1e-5)
    assert y.value == pytest.approx(30, abs=1e-5)


def test_refine_on_failure_from_config():
    set_engine_config(EngineConfig(refine_on_failure=True))
    solver = ConstraintSolver(SolveOptions(max_iterations=1))
    x = solver.create_variable('x', 0, 0, 100)
    y = solver.create_variable('y', 0, 0, 100)
    solver.create_equal_constraint([x, y], [1, 1], 100)
    solver.create_equal_constraint([x, y], [1, -2], 10)

    assert solver.solve() is True
    assert solver.last_report.method == 'refine'


def test_reset_and_clear():
    solver = ConstraintSolver()
    x = solver.create_variable('x', 5, 1, 10)
    y = solver.create_variable('y', -3)
    solver.create_fixed_constraint(y, 7)

    solver.reset()

    assert x.value == 1
    assert y.value == 0

    solver.clear()
    assert solver.values() == {}
    assert solver.constraints == []


def test_constraint_length_mismatch():
    x = Variable('x')

    with pytest.raises(ValueError) as exc:
        Constraint(ConstraintKind.EQUAL, [x], [1, 2], 0)

    assert 'Number of variables must match number of coefficients' in str(exc.value)


@pytest.mark.parametrize('strength', [-0.1, 1.5])
def test_constraint_strength_range(strength):
    with pytest.raises(ValueError):
        Constraint(ConstraintKind.EQUAL, [Variable('x')], [1], 0, strength)


def test_variable_bounds_must_be_ordered():
    with pytest.raises(ValueError):
        Variable('x', 0, 5, 1)


def test_constraint_describe():
    x = Variable('x')
    y = Variable('y')
    constraint = Constraint(ConstraintKind.LESS_EQUAL, [x, y], [1, 2], 10, 0.5)

    assert constraint.describe() == '1*x + 2*y <= 10 (strength=0.5)'


def test_unknown_variable_value_is_none():
    solver = ConstraintSolver()

    assert solver.get_variable('nope') is None
    assert solver.get_variable_value('nope') is None
    assert math.isinf(solver.create_variable('z').max)


def test_solver_calls_are_debug_logged(caplog):
    solver = ConstraintSolver()
    x = solver.create_variable('x')
    solver.create_fixed_constraint(x, 1)

    with caplog.at_level(logging.DEBUG, logger='devize.solver.solver_core'):
        solver.solve()

    assert 'Entering ConstraintSolver.solve' in caplog.text
    assert 'Exiting ConstraintSolver.solve -> True' in caplog.text
