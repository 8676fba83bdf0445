"""
The MODEL layer contains the pure geometry of the structured reference elements.
It has NO knowledge of meshes, files or plotting.
It deals with triangle areas, recharge weights and node adjacency.
"""
