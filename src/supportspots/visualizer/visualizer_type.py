from enum import IntEnum


class VisualizerType(IntEnum):
    """
    Rendering backends for toolpaths and support points.
    """
    PyVista = 0

    @classmethod
    def parse(cls, value):
        """Accept a member or its case-insensitive name ("pyvista")."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if str(value).lower() == member.name.lower():
                return member
        raise ValueError(f"Unsupported visualizer type: {value}")
