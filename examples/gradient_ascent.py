"""
Gradient Ascent - Compiled Differentiation Example

A utility rewards standing close to a goal while staying away from an
obstacle; the obstacle penalty only applies inside a safety radius, which is
expressed with a Reification. The utility is compiled once and climbed with
its reverse-mode gradient.
"""

from autodiff_solvers.terms import Exp, Reification, Variable, lt
from autodiff_solvers.visitors import compile_term

x, y = Variable(0, "x"), Variable(1, "y")

goal = (4.0, 3.0)
obstacle = (2.0, 1.5)

goal_dist2 = (x - goal[0]) ** 2 + (y - goal[1]) ** 2
obstacle_dist2 = (x - obstacle[0]) ** 2 + (y - obstacle[1]) ** 2
inside_radius = Reification(lt(obstacle_dist2, 1.0), 0.0, 1.0)

utility = Exp(goal_dist2 * -0.1) - inside_radius * Exp(obstacle_dist2 * -1.0)
print("Utility:", utility)

compiled = compile_term(utility, [x, y])

point = [0.0, 0.0]
step = 0.5
for iteration in range(200):
    gradient, value = compiled.differentiate(point)
    point = [p + step * g for p, g in zip(point, gradient)]
    if iteration % 20 == 0:
        print(f"iter {iteration:3d}: x={point[0]:.3f} y={point[1]:.3f} utility={value:.4f}")

print(f"\nFinal point: x={point[0]:.3f} y={point[1]:.3f}")
print(f"Final utility: {compiled.evaluate(point):.4f}")
