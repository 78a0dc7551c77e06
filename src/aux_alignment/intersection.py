"""Ray/triangle intersection for locating a direction on the hull."""

import sys

EPSILON = sys.float_info.epsilon


def ray_triangle_intersection(ray, vertex1, vertex2, vertex3):
    """
    Möller-Trumbore test of a ray from the origin against a triangle.

    Only intersections in front of the origin count. A triangle is rejected
    when the determinant is within EPSILON of zero (ray parallel to its
    plane); back-facing triangles are otherwise not rejected.
    """
    edge1 = vertex2 - vertex1
    edge2 = vertex3 - vertex1

    p = ray.cross(edge2)
    determinant = edge1.dot(p)

    if -EPSILON < determinant < EPSILON:
        return False
    inverse_determinant = 1.0 / determinant

    # Ray origin is (0, 0, 0)
    t_vec = -vertex1

    u = t_vec.dot(p) * inverse_determinant
    if u < 0.0 or u > 1.0:
        return False

    q = t_vec.cross(edge1)

    v = ray.dot(q) * inverse_determinant
    if v < 0.0 or u + v > 1.0:
        return False

    t = edge2.dot(q) * inverse_determinant
    return t > EPSILON
