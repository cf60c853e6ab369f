"""
World document reading and writing.

A world document records the workspace size and, optionally, the obstacle
polygons:

    <root>
      <world width="100" height="100">
        <obstacle index="0">
          <point x="10" y="40"/>
          ...
        </obstacle>
      </world>
    </root>

Coordinates are written as exact rationals (``"99/2"``) so that a document
round-trips without loss.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from homotopy.exceptions import WorldFileError
from homotopy.geometry import Point2D
from homotopy.logging import get_logger
from homotopy.obstacle import Obstacle, PointLike

logger = get_logger("world_io")


@dataclass(frozen=True)
class World:
    """
    Contents of a world document.

    Attributes:
        width: Workspace width
        height: Workspace height
        polygons: Obstacle vertex lists in index order
    """
    width: int
    height: int
    polygons: Tuple[Tuple[Point2D, ...], ...] = ()


def _vertices(obstacle: Union[Obstacle, Iterable[PointLike]]) -> List[Point2D]:
    if isinstance(obstacle, Obstacle):
        return list(obstacle.vertices)
    return [Point2D.of(p) for p in obstacle]


def world_to_element(
    width: int,
    height: int,
    obstacles: Sequence[Union[Obstacle, Iterable[PointLike]]] = (),
) -> ET.Element:
    root = ET.Element("root")
    world = ET.SubElement(root, "world", attrib={
        "width": str(width),
        "height": str(height),
    })
    for index, obstacle in enumerate(obstacles):
        node = ET.SubElement(world, "obstacle", attrib={"index": str(index)})
        for point in _vertices(obstacle):
            ET.SubElement(node, "point", attrib={"x": str(point.x), "y": str(point.y)})
    return root


def write_world(
    path: Union[str, Path],
    width: int,
    height: int,
    obstacles: Sequence[Union[Obstacle, Iterable[PointLike]]] = (),
) -> Path:
    """Write a world document.

    Args:
        path: Output file.
        width: Workspace width.
        height: Workspace height.
        obstacles: Obstacles or raw vertex lists, written in index order.

    Returns:
        Path of the written file.
    """
    path = Path(path)
    tree = ET.ElementTree(world_to_element(width, height, obstacles))
    tree.write(path, encoding="utf-8", xml_declaration=True)
    logger.info(f"Wrote world {width}x{height} with {len(obstacles)} obstacles to {path}")
    return path


def _int_attribute(path: Path, node: ET.Element, name: str) -> int:
    raw = node.get(name)
    if raw is None:
        raise WorldFileError(str(path), f"<{node.tag}> has no '{name}' attribute")
    try:
        return int(raw)
    except ValueError:
        raise WorldFileError(str(path), f"'{name}' must be an integer, got {raw!r}") from None


def _coordinate(path: Path, node: ET.Element, name: str) -> Fraction:
    raw = node.get(name)
    if raw is None:
        raise WorldFileError(str(path), f"<point> has no '{name}' attribute")
    try:
        return Fraction(raw)
    except (ValueError, ZeroDivisionError):
        raise WorldFileError(str(path), f"bad coordinate {name}={raw!r}") from None


def read_world(path: Union[str, Path]) -> World:
    """Read a world document.

    Obstacles are ordered by their ``index`` attribute, falling back to
    document order when it is absent.

    Raises:
        WorldFileError: If the file is missing or malformed.
    """
    path = Path(path)
    if not path.exists():
        raise WorldFileError(str(path), "file not found")

    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise WorldFileError(str(path), f"invalid XML: {e}") from e

    world = root if root.tag == "world" else root.find("world")
    if world is None:
        raise WorldFileError(str(path), "no <world> element")

    width = _int_attribute(path, world, "width")
    height = _int_attribute(path, world, "height")

    indexed = []
    for position, node in enumerate(world.findall("obstacle")):
        index = _int_attribute(path, node, "index") if "index" in node.attrib else position
        points = tuple(
            Point2D(_coordinate(path, p, "x"), _coordinate(path, p, "y"))
            for p in node.findall("point")
        )
        indexed.append((index, points))

    indices = [index for index, _ in indexed]
    if len(set(indices)) != len(indices):
        raise WorldFileError(str(path), "duplicate obstacle index")

    polygons = tuple(points for _, points in sorted(indexed, key=lambda item: item[0]))
    logger.debug(f"Read world {width}x{height} with {len(polygons)} obstacles from {path}")
    return World(width, height, polygons)
