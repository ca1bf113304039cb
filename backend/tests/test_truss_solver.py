"""Method of joints tests.

Triangle with apex load (drawing units, y down, 50 units per foot):

    A (0, 400) fixed, B (400, 400) roller, C (200, 250) apex

Members AC/BC rise 3 ft over 4 ft (cos 0.8, sin 0.6). With P = 1000 lb at C
and 500 lb reactions: F_AC = F_BC = -500 / 0.6 (compression) and
F_AB = 833.3 * 0.8 = 666.7 (tension).
"""
import math
import unittest
from dataclasses import replace

import numpy as np

from trussbuilder import schemas
from trussbuilder.config import CONFIG
from trussbuilder.loads import distribute
from trussbuilder.presets import build_input
from trussbuilder.truss_solver import _solve_joint, joint_residuals, solve_member_forces


def node(id, x, y, support=None):
    return schemas.NodeInput(id=id, x=x, y=y, support=support)


def member(start, end):
    return schemas.MemberInput(id=f"{start}-{end}", start=start, end=end)


def external(**fy):
    return {k: schemas.NodeForce(node_id=k, fy=v) for k, v in fy.items()}


class TestMethodOfJoints(unittest.TestCase):
    def setUp(self):
        self.nodes = [node("A", 0, 400, "fixed"), node("B", 400, 400, "roller"), node("C", 200, 250)]
        self.members = [member("A", "B"), member("A", "C"), member("B", "C")]
        self.node_forces = external(A=500.0, B=500.0, C=-1000.0)

    def test_triangle_sign_convention(self):
        sol = solve_member_forces(self.nodes, self.members, self.node_forces)
        self.assertAlmostEqual(sol.forces["A-C"], -500.0 / 0.6, places=6)
        self.assertAlmostEqual(sol.forces["B-C"], -500.0 / 0.6, places=6)
        self.assertAlmostEqual(sol.forces["A-B"], 500.0 / 0.6 * 0.8, places=6)
        self.assertTrue(sol.complete)
        self.assertEqual(set(sol.solved_joints), {"A", "B", "C"})

    def test_member_direction_does_not_change_force(self):
        flipped = [member("B", "A"), member("C", "A"), member("C", "B")]
        sol = solve_member_forces(self.nodes, flipped, self.node_forces)
        self.assertAlmostEqual(sol.forces["C-A"], -500.0 / 0.6, places=6)
        self.assertAlmostEqual(sol.forces["B-A"], 500.0 / 0.6 * 0.8, places=6)

    def test_equilibrium_at_every_joint(self):
        sol = solve_member_forces(self.nodes, self.members, self.node_forces)
        residuals = joint_residuals(self.nodes, self.members, self.node_forces, sol.forces)
        for node_id, (rx, ry) in residuals.items():
            self.assertLess(abs(rx), 1e-6, node_id)
            self.assertLess(abs(ry), 1e-6, node_id)

    def test_unloaded_collinear_joint_is_zero_force(self):
        # Bottom chord split at M with no web member: M has two collinear members
        nodes = self.nodes + [node("M", 200, 400)]
        members = [member("A", "M"), member("M", "B"), member("A", "C"), member("B", "C")]
        for load in (1_000.0, 1_000_000.0):
            forces = external(A=load / 2, B=load / 2, C=-load)
            sol = solve_member_forces(nodes, members, forces)
            self.assertEqual(sol.zero_force_joints, ["M"])
            self.assertEqual(sol.forces["A-M"], 0.0)
            self.assertEqual(sol.forces["M-B"], 0.0)

    def test_loaded_collinear_joint_is_not_short_circuited(self):
        nodes = [node("A", 0, 400, "fixed"), node("B", 400, 400, "roller"), node("C", 200, 400)]
        members = [member("A", "C"), member("C", "B")]
        sol = solve_member_forces(nodes, members, external(A=50.0, B=50.0, C=-100.0))
        self.assertEqual(sol.zero_force_joints, [])
        # A horizontal bar cannot carry the vertical load; the x equation gives 0
        self.assertEqual(sol.forces, {"A-C": 0.0, "C-B": 0.0})

    def test_unreachable_members_default_to_zero(self):
        # Pass limit of zero rounds: nothing beyond the zero-force check runs
        cfg = replace(CONFIG, max_pass_factor=0)
        sol = solve_member_forces(self.nodes, self.members, self.node_forces, cfg)
        self.assertEqual(sol.passes, 0)
        self.assertEqual(sorted(sol.unsolved_members), ["A-B", "A-C", "B-C"])
        self.assertEqual(set(sol.forces.values()), {0.0})
        self.assertFalse(sol.complete)

    def test_three_unknowns_everywhere_leaves_members_unsolved(self):
        # Square with both diagonals: every joint starts with 3 unknowns
        nodes = [node("A", 0, 400, "fixed"), node("B", 400, 400, "roller"),
                 node("C", 400, 0), node("D", 0, 0)]
        members = [member("A", "B"), member("B", "C"), member("C", "D"), member("D", "A"),
                   member("A", "C"), member("B", "D")]
        forces = external(A=100.0, B=100.0, C=-100.0, D=-100.0)
        with self.assertLogs("trussbuilder.truss_solver", level="WARNING"):
            sol = solve_member_forces(nodes, members, forces)
        self.assertEqual(len(sol.unsolved_members), 6)
        self.assertEqual(sol.passes, 1)
        self.assertEqual(sol.solved_joints, [])

    def test_deterministic(self):
        inp = build_input("Fink (W-Truss)")
        node_forces = distribute(inp.nodes, inp.loads, 20.0)
        first = solve_member_forces(inp.nodes, inp.members, node_forces)
        second = solve_member_forces(inp.nodes, inp.members, node_forces)
        self.assertEqual(first.forces, second.forces)
        self.assertEqual(first.solved_joints, second.solved_joints)


class TestSingularJoints(unittest.TestCase):
    """Joint X carries a vertical member to T and two collinear horizontal
    members to L and R. Once T supplies F_TX, X still has two parallel
    unknowns and cannot be solved until a neighbour provides one of them."""

    def test_collinear_unknowns_are_singular(self):
        left = schemas.MemberInput(id="X-L", start="X", end="L")
        right = schemas.MemberInput(id="X-R", start="X", end="R")
        post = schemas.MemberInput(id="X-T", start="X", end="T")
        incident = [
            (left, np.array([-1.0, 0.0])),
            (right, np.array([1.0, 0.0])),
            (post, np.array([0.0, 1.0])),
        ]
        ext = schemas.NodeForce(node_id="X", fy=-10.0)
        self.assertIsNone(_solve_joint(ext, incident, {"X-T": 10.0}, CONFIG))
        # With one horizontal force known the joint resolves
        result = _solve_joint(ext, incident, {"X-T": 10.0, "X-L": 0.0}, CONFIG)
        self.assertEqual([m.id for m, _f in result], ["X-R"])
        self.assertAlmostEqual(result[0][1], 0.0)

    def test_joint_waits_for_a_neighbour(self):
        nodes = [node("T", 200, 300), node("X", 200, 400), node("L", 0, 400), node("R", 400, 400)]
        members = [member("T", "X"), member("L", "X"), member("X", "R")]
        sol = solve_member_forces(nodes, members, external(T=-10.0, X=10.0))
        # X is skipped in round 1 and closed in round 2 after L and R solve
        self.assertEqual(sol.solved_joints, ["T", "L", "R", "X"])
        self.assertEqual(sol.passes, 2)
        self.assertAlmostEqual(sol.forces["T-X"], -10.0)
        self.assertEqual(sol.forces["L-X"], 0.0)
        self.assertEqual(sol.forces["X-R"], 0.0)
        self.assertTrue(sol.complete)
        self.assertEqual(sol.unbalanced_joints, [])

    def test_members_never_resolved_default_to_zero(self):
        # L and R are corners of fully braced squares, so they never drop below
        # three unknowns and X never gets a horizontal force
        nodes = [node("T", 200, 300), node("X", 200, 400)]
        members = [member("T", "X"), member("L", "X"), member("X", "R")]
        for corner, x0, dx in (("L", 0, -200), ("R", 400, 200)):
            p, s, u = corner + "p", corner + "s", corner + "u"
            nodes += [node(corner, x0, 400), node(p, x0 + dx, 400), node(s, x0 + dx, 200), node(u, x0, 200)]
            members += [member(corner, p), member(p, s), member(s, u), member(u, corner),
                        member(corner, s), member(p, u)]
        with self.assertLogs("trussbuilder.truss_solver", level="WARNING"):
            sol = solve_member_forces(nodes, members, external(T=-10.0, X=10.0))
        self.assertEqual(sol.solved_joints, ["T"])
        self.assertNotIn("X", sol.solved_joints)
        self.assertEqual(sol.passes, 1)
        self.assertAlmostEqual(sol.forces["T-X"], -10.0)
        self.assertEqual(len(sol.unsolved_members), len(members) - 1)
        self.assertIn("L-X", sol.unsolved_members)
        self.assertIn("X-R", sol.unsolved_members)
        for member_id in sol.unsolved_members:
            self.assertEqual(sol.forces[member_id], 0.0)


class TestUnbalancedJoints(unittest.TestCase):
    def test_fully_known_joint_must_balance_to_close(self):
        # Simple Beam: the x equations zero every member, so E ends with all
        # forces known and its load unresisted
        inp = build_input("Simple Beam")
        node_forces = distribute(inp.nodes, inp.loads, 20.0)
        with self.assertLogs("trussbuilder.truss_solver", level="WARNING"):
            sol = solve_member_forces(inp.nodes, inp.members, node_forces)
        self.assertEqual(sol.unbalanced_joints, ["E"])
        self.assertNotIn("E", sol.solved_joints)
        self.assertTrue(sol.complete)

    def test_unbalanced_joints_are_out_of_equilibrium(self):
        inp = build_input("Bowstring Truss")
        node_forces = distribute(inp.nodes, inp.loads, 20.0)
        sol = solve_member_forces(inp.nodes, inp.members, node_forces)
        self.assertTrue(sol.unbalanced_joints)
        residuals = joint_residuals(inp.nodes, inp.members, node_forces, sol.forces)
        for node_id in sol.unbalanced_joints:
            self.assertNotIn(node_id, sol.solved_joints)
            self.assertGreater(max(abs(c) for c in residuals[node_id]), CONFIG.equilibrium_tolerance)

    def test_balanced_presets_report_nothing(self):
        for name in ("King Post", "Howe Truss"):
            inp = build_input(name)
            node_forces = distribute(inp.nodes, inp.loads, 20.0)
            sol = solve_member_forces(inp.nodes, inp.members, node_forces)
            self.assertEqual(sol.unbalanced_joints, [], name)


class TestPresetTrusses(unittest.TestCase):
    def _solve(self, name, config=CONFIG):
        inp = build_input(name)
        node_forces = distribute(inp.nodes, inp.loads, 20.0, config)
        return inp, node_forces, solve_member_forces(inp.nodes, inp.members, node_forces, config)

    def test_king_post_forces(self):
        _inp, _nf, sol = self._solve("King Post")
        diag = math.hypot(500, 300)
        self.assertAlmostEqual(sol.forces["A-C"], -1100.0 * diag / 300, places=6)
        self.assertAlmostEqual(sol.forces["C-B"], sol.forces["A-C"], places=9)
        self.assertAlmostEqual(sol.forces["A-D"], 1100.0 * 500 / 300, places=6)
        self.assertAlmostEqual(sol.forces["D-B"], sol.forces["A-D"], places=9)
        self.assertAlmostEqual(sol.forces["C-D"], 0.0, places=9)

    def test_howe_equilibrium_and_symmetry(self):
        inp, node_forces, sol = self._solve("Howe Truss")
        self.assertTrue(sol.complete)
        residuals = joint_residuals(inp.nodes, inp.members, node_forces, sol.forces)
        for node_id, (rx, ry) in residuals.items():
            self.assertLess(abs(rx), 1e-6, node_id)
            self.assertLess(abs(ry), 1e-6, node_id)

        mirror = {"A": "B", "B": "A", "C": "C", "D": "E", "E": "D", "F": "G", "G": "F"}
        by_pair = {frozenset((m.start, m.end)): m.id for m in inp.members}
        for m in inp.members:
            twin = by_pair[frozenset((mirror[m.start], mirror[m.end]))]
            self.assertAlmostEqual(sol.forces[m.id], sol.forces[twin], places=6)

    def test_pratt_is_fully_solved(self):
        _inp, _nf, sol = self._solve("Pratt Truss")
        self.assertTrue(sol.complete)
        # Bottom chord in tension, top chord in compression
        self.assertGreater(sol.forces["A-F"], 0.0)
        self.assertLess(sol.forces["A-C"], 0.0)

    def test_y_up_drawing_gives_same_forces(self):
        _inp, _nf, expected = self._solve("King Post")
        inp = build_input("King Post")
        flipped = [n.model_copy(update={"y": 500 - n.y}) for n in inp.nodes]
        cfg = replace(CONFIG, y_axis_down=False)
        node_forces = distribute(flipped, inp.loads, 20.0, cfg)
        sol = solve_member_forces(flipped, inp.members, node_forces, cfg)
        for member_id, force in expected.forces.items():
            self.assertAlmostEqual(sol.forces[member_id], force, places=6)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
