from enum import Enum


class ExtrusionRole(str, Enum):
    EXTERNAL_PERIMETER = "external_perimeter"   # 外轮廓, delimits an island
    PERIMETER = "perimeter"                     # 内轮廓
    OVERHANG_PERIMETER = "overhang_perimeter"   # 悬垂轮廓
    INTERNAL_INFILL = "internal_infill"         # 稀疏填充
    SOLID_INFILL = "solid_infill"               # 实心填充
    TOP_SOLID_INFILL = "top_solid_infill"       # 顶面填充
    BRIDGE_INFILL = "bridge_infill"             # 桥接填充
    GAP_FILL = "gap_fill"                       # 缝隙填充

    @property
    def is_perimeter(self) -> bool:
        return self in (ExtrusionRole.EXTERNAL_PERIMETER,
                        ExtrusionRole.PERIMETER,
                        ExtrusionRole.OVERHANG_PERIMETER)

    @property
    def is_external_perimeter(self) -> bool:
        return self is ExtrusionRole.EXTERNAL_PERIMETER

    @property
    def needs_stability_check(self) -> bool:
        """Fills that may hang in the air are checked like perimeters."""
        return self.is_perimeter or self in (ExtrusionRole.GAP_FILL, ExtrusionRole.BRIDGE_INFILL)

    @classmethod
    def parse(cls, value) -> "ExtrusionRole":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown extrusion role: {value!r}") from None
