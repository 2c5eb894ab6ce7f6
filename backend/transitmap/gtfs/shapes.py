"""
Route geometry aggregation.

Shape points are grouped into ordered polylines, joined to routes and
directions through the trips table, deduplicated per
(route_id, direction_id, shape_id) and simplified with Douglas-Peucker.
"""

from operator import attrgetter
from typing import Dict, Iterable, List, Sequence, Set, Tuple

import structlog
from shapely.geometry import LineString

from transitmap.gtfs.models import (
    Coordinate,
    GeometrySnapshot,
    Polyline,
    RouteDirectionGeometry,
    ShapePoint,
    Trip,
)

logger = structlog.get_logger()


def group_shape_points(rows: Iterable[Dict[str, str]]) -> Tuple[Dict[str, List[ShapePoint]], int]:
    """
    Group shape rows by shape_id, each group ordered by sequence.
    
    Returns the groups and the number of rows skipped as malformed. Points
    sharing a sequence number keep their input order.
    """
    shapes: Dict[str, List[ShapePoint]] = {}
    skipped = 0
    
    for row in rows:
        point = ShapePoint.from_row(row)
        if point is None:
            skipped += 1
            continue
        shapes.setdefault(point.shape_id, []).append(point)
    
    for points in shapes.values():
        points.sort(key=attrgetter("sequence"))
    
    if skipped:
        logger.debug("Skipped malformed shape rows", count=skipped)
    
    return shapes, skipped


def simplify_polyline(coords: Sequence[Coordinate], tolerance: float) -> List[Coordinate]:
    """Douglas-Peucker simplification that always keeps both endpoints exactly."""
    coords = list(coords)
    if tolerance <= 0 or len(coords) < 3:
        return coords
    
    simplified = LineString(coords).simplify(tolerance, preserve_topology=False)
    out: List[Coordinate] = [(x, y) for x, y in simplified.coords]
    
    # A fully collapsed line (e.g. a closed loop) comes back empty
    if len(out) < 2:
        return [coords[0], coords[-1]]
    
    out[0] = coords[0]
    out[-1] = coords[-1]
    return out


def build_route_geometries(
    shape_rows: Iterable[Dict[str, str]],
    trip_rows: Iterable[Dict[str, str]],
    tolerance: float = 0.0,
) -> GeometrySnapshot:
    """
    Build one multi-line geometry per (route_id, direction_id).
    
    Trips are visited in input order and the first trip seen for a
    (route_id, direction_id, shape_id) triple wins; later trips on the same
    triple add nothing. Shapes with fewer than two valid points contribute no
    line, so a route/direction served only by such shapes is left out.
    """
    shapes, skipped = group_shape_points(shape_rows)
    
    lines: Dict[Tuple[str, str], List[Polyline]] = {}
    seen: Set[Tuple[str, str, str]] = set()
    simplified_by_shape: Dict[str, Polyline] = {}
    trip_count = 0
    missing_shapes = 0
    
    for row in trip_rows:
        trip_count += 1
        trip = Trip.from_row(row)
        if trip is None:
            skipped += 1
            continue
        
        points = shapes.get(trip.shape_id)
        if points is None:
            missing_shapes += 1
            continue
        
        key = (trip.route_id, trip.direction_id, trip.shape_id)
        if key in seen:
            continue
        seen.add(key)
        
        if len(points) < 2:
            continue
        
        polyline = simplified_by_shape.get(trip.shape_id)
        if polyline is None:
            coords = [(p.lon, p.lat) for p in points]
            polyline = tuple(simplify_polyline(coords, tolerance))
            simplified_by_shape[trip.shape_id] = polyline
        
        lines.setdefault((trip.route_id, trip.direction_id), []).append(polyline)
    
    routes = tuple(
        RouteDirectionGeometry(route_id=route_id, direction_id=direction_id, lines=tuple(route_lines))
        for (route_id, direction_id), route_lines in lines.items()
    )
    
    if missing_shapes:
        logger.warning("Trips reference unknown shapes", count=missing_shapes)
    
    snapshot = GeometrySnapshot(
        routes=routes,
        shape_count=len(shapes),
        trip_count=trip_count,
        skipped_rows=skipped,
    )
    
    logger.info(
        "Geometry built",
        route_directions=len(routes),
        lines=snapshot.line_count,
        shapes=len(shapes),
        trips=trip_count,
        skipped_rows=skipped,
    )
    return snapshot
