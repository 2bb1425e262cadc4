"""Infrastructure layer: manifest persistence, the npm boundary, and the project.

This layer depends on stdlib, pydantic, and the domain layer.
It must never import from services, commands, or output.
"""
