"""Infrastructure layer: definition files and the condition graph.

This layer depends on stdlib and third-party libs (ruamel.yaml, NetworkX)
and builds domain objects from them (infrastructure -> domain).
It must never import from services, commands, or output.
"""
