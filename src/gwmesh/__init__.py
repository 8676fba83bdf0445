"""
gwmesh
======
Geometric helpers for layered groundwater meshes: recharge weights of tilted
faces, vertical node adjacency of quadrilateral/hexahedral elements, and robust
point location inside Q1 elements.
"""
from gwmesh.errors import (
    GwMeshError,
    InvalidDimension,
    InvalidIndex,
    DegenerateFace,
    TransformationFailed,
    MappingNotFound,
)
from gwmesh.model.geometry_kind import GeometryKind
from gwmesh.model.geometry_primitives import triangle_area
from gwmesh.model.recharge import recharge_weight, face_recharge_weight, scale_recharge
from gwmesh.model.adjacency import AdjacencyMode, connected_indices
from gwmesh.fea.analysis.mapping import Mapping, MappingQ1
from gwmesh.fea.analysis.locate import MappingResult, try_mapping

__all__ = [
    "GwMeshError", "InvalidDimension", "InvalidIndex", "DegenerateFace",
    "TransformationFailed", "MappingNotFound",
    "GeometryKind", "triangle_area",
    "recharge_weight", "face_recharge_weight", "scale_recharge",
    "AdjacencyMode", "connected_indices",
    "Mapping", "MappingQ1", "MappingResult", "try_mapping",
]
