"""
Rendezvous Point - Reified Planning Example

Two robots pick a meeting point (x, y) in the world frame. Each robot
contributes a ProblemDescriptor: the point must lie inside its reachable
box, and meeting to its left (egocentric y > 0) earns a bonus encoded as a
Reification. The combined query is sent to every available backend; the
dummy backend always reports no solution.
"""

import math

from autodiff_solvers import ProblemDescriptor, get_solver
from autodiff_solvers.backends import available_backends
from autodiff_solvers.geometry import Point2DAllo, PositionAllo
from autodiff_solvers.terms import Reification, Variable, gt, le

x, y = Variable(0, "x"), Variable(1, "y")

robots = {
    "alpha": PositionAllo(0.0, 0.0, 0.0),
    "beta": PositionAllo(6.0, 2.0, 3.14159),
}


def egocentric_y(pose: PositionAllo):
    """y coordinate of (x, y) in the robot's frame."""
    dx, dy = x - pose.x, y - pose.y
    return dy * math.cos(pose.theta) - dx * math.sin(pose.theta)


descriptors = []
for name, pose in robots.items():
    left_side = Reification(gt(egocentric_y(pose), 0), 0.0, 1.0)
    descriptors.append(
        ProblemDescriptor(
            constraint=le(x, pose.x + 5) & le(pose.x - 5, x),
            utility=left_side,
            domains={0: (-10.0, 10.0), 1: (-10.0, 10.0)},
            name=name,
        )
    )

for solver_name in available_backends():
    print("\n--- Using solver:", solver_name, "---\n")
    solver = get_solver(solver_name, time_limit=10)
    results = []
    if solver.get_solution([x, y], descriptors, results):
        meeting = Point2DAllo(results[0].values[0], results[0].values[1])
        print(meeting)
        for result in results:
            pose = robots[result.descriptor.name]
            print(f"{result.descriptor.name}: {meeting.to_ego(pose)} bonus={result.utility}")
    else:
        print("No solution found")
