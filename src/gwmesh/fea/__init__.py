"""
Finite Element Layer
====================
Q1 elements, their reference-to-physical mapping and the meshes built from them.

Why is this package needed?
---------------------------
1. Point location: it pulls physical points back to reference coordinates,
   robustly, for particle tracking and source placement.
2. Mesh access: it reads quadrangle/hexahedron meshes and exposes face vertices
   and vertical node columns.
3. Export: it collects mesh points per dof and plots traced streamlines.
"""
