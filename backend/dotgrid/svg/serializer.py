"""Write SVG output for a grid frame: connectors first, circles on top."""

from __future__ import annotations

from typing import Any

from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from dotgrid.engine.activation import ActivationSnapshot
from dotgrid.engine.config import RGBA, CircleRadii, Palette, RenderConfig
from dotgrid.engine.links import ConnectorInstance
from dotgrid.engine.vector import union_geometry


def serialize_svg(
    elements: list[dict[str, Any]],
    viewbox: tuple[float, float, float, float],
    title: str = "",
) -> str:
    """Generate SVG markup from element definitions, in list (paint) order."""
    x, y, w, h = viewbox
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg viewBox="{x:.4f} {y:.4f} {w:.4f} {h:.4f}" xmlns="http://www.w3.org/2000/svg"'
        f' role="img">',
    ]

    if title:
        lines.append(f"  <title>{title}</title>")

    for elem in elements:
        tag = elem.get("tag", "path")
        attrs = {k: v for k, v in elem.items() if k != "tag"}
        attr_str = " ".join(f'{k}="{v}"' for k, v in attrs.items())
        lines.append(f"  <{tag} {attr_str} />")

    lines.append("</svg>")
    return "\n".join(lines)


def color_attrs(color: RGBA, prefix: str = "fill") -> dict[str, str]:
    r, g, b, a = (max(0.0, min(1.0, float(c))) for c in color)
    hex_color = f"#{round(r * 255):02x}{round(g * 255):02x}{round(b * 255):02x}"
    attrs = {prefix: hex_color}
    if a < 1.0:
        attrs[f"{prefix}-opacity"] = f"{a:.3f}"
    return attrs


def geometry_to_path_d(geom: BaseGeometry) -> str:
    """SVG path data for a (Multi)Polygon, holes included (even-odd fill)."""
    if geom is None or geom.is_empty:
        return ""

    polys: list[Polygon] = []
    if geom.geom_type == "Polygon":
        polys = [geom]
    elif geom.geom_type in ("MultiPolygon", "GeometryCollection"):
        polys = [g for g in geom.geoms if g.geom_type == "Polygon" and not g.is_empty]

    parts: list[str] = []
    for poly in polys:
        for ring in [poly.exterior, *poly.interiors]:
            coords = list(ring.coords)
            if len(coords) < 3:
                continue
            d = f"M {coords[0][0]:.4f},{coords[0][1]:.4f}"
            for px, py in coords[1:]:
                d += f" L {px:.4f},{py:.4f}"
            parts.append(d + " Z")
    return " ".join(parts)


def frame_to_svg(
    snapshot: ActivationSnapshot,
    radii: CircleRadii,
    instances: list[ConnectorInstance],
    render: RenderConfig | None = None,
    palette: Palette | None = None,
    title: str = "",
) -> str:
    """Vector rendering of one frame with the same draw order as the raster path."""
    render = render or RenderConfig()
    palette = palette or Palette()
    topo = snapshot.topology
    xmin, ymin, xmax, ymax = topo.extent(render.margin_factor * radii.outer)

    elements: list[dict[str, Any]] = []
    if palette.background[3] > 0:
        elements.append({
            "tag": "rect",
            "x": f"{xmin:.4f}",
            "y": f"{ymin:.4f}",
            "width": f"{xmax - xmin:.4f}",
            "height": f"{ymax - ymin:.4f}",
            **color_attrs(palette.background),
        })

    d = geometry_to_path_d(union_geometry(instances, radii, render.circle_resolution))
    if d:
        elements.append({"tag": "path", "d": d, "fill-rule": "evenodd", **color_attrs(palette.connector)})

    active = snapshot.as_grid()
    for col, row in topo.cells():
        cx, cy = topo.center(col, row)
        pos = {"cx": f"{cx:.4f}", "cy": f"{cy:.4f}"}
        if active[row, col]:
            elements.append({"tag": "circle", **pos, "r": f"{radii.inner:.4f}", **color_attrs(palette.inner_active)})
        else:
            elements.append({"tag": "circle", **pos, "r": f"{radii.outer:.4f}", **color_attrs(palette.outer)})
            elements.append({"tag": "circle", **pos, "r": f"{radii.inner:.4f}", **color_attrs(palette.inner_empty)})

    return serialize_svg(elements, (xmin, ymin, xmax - xmin, ymax - ymin), title=title)
