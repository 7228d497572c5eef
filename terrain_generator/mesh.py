# terrain_generator/mesh.py

"""
================================================================================
MESH GEOMETRY EXPORT
================================================================================
Turns a height field into indexed triangle-mesh data (world positions, face
indices and smooth vertex normals) that a 3D front end can upload directly.

The terrain plane lies in x/z with elevation on y; a planar vertex (x, y)
therefore maps to the world position (x, elevation, -y).
================================================================================
"""
import numpy as np


def build_plane_indices(segments: int) -> np.ndarray:
    """Two triangles per grid cell, counter-clockwise when viewed from +y."""
    verts_per_row = segments + 1
    iy, ix = np.mgrid[0:segments, 0:segments]

    a = ix + verts_per_row * iy
    b = ix + verts_per_row * (iy + 1)
    c = (ix + 1) + verts_per_row * (iy + 1)
    d = (ix + 1) + verts_per_row * iy

    faces1 = np.stack([a.ravel(), b.ravel(), d.ravel()], axis=1)
    faces2 = np.stack([b.ravel(), c.ravel(), d.ravel()], axis=1)

    # Interleave so each cell's two triangles are adjacent.
    faces = np.stack([faces1, faces2], axis=1).reshape(-1, 3)
    return faces.astype(np.uint32)


def get_world_positions(x_coords: np.ndarray, y_coords: np.ndarray, elevations: np.ndarray) -> np.ndarray:
    return np.stack([x_coords.ravel(), elevations.ravel(), -y_coords.ravel()], axis=1).astype(np.float32)


def compute_vertex_normals(positions: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """
    Area-weighted smooth normals: each face's (unnormalized) normal is added
    to its three vertices, then the sums are normalized.
    """
    v_a = positions[faces[:, 0]].astype(np.float64)
    v_b = positions[faces[:, 1]].astype(np.float64)
    v_c = positions[faces[:, 2]].astype(np.float64)

    face_normals = np.cross(v_c - v_b, v_a - v_b)

    normals = np.zeros((positions.shape[0], 3), dtype=np.float64)
    for corner in range(3):
        np.add.at(normals, faces[:, corner], face_normals)

    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    normals = np.divide(normals, lengths, out=np.zeros_like(normals), where=lengths > 0)
    return normals.astype(np.float32)
