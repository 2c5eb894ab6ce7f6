"""
GTFS static table access.

Rows come back exactly as they appear in the text files: header-keyed dicts
of strings. Parsing numeric fields is left to the consumer.
"""

import csv
from pathlib import Path
from typing import Dict, List, Tuple, Union

import structlog

from transitmap.core.exceptions import SourceReadError

logger = structlog.get_logger()

Row = Dict[str, str]


def read_table(data_dir: Union[str, Path], file_name: str) -> List[Row]:
    """Read one GTFS table as a list of header-keyed rows."""
    path = Path(data_dir) / file_name
    
    if not path.exists():
        raise SourceReadError(str(path), "file not found")
    
    try:
        # utf-8-sig strips the BOM some agencies still publish
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            rows = [row for row in reader if not _is_blank(row)]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise SourceReadError(str(path), str(e)) from e
    
    logger.debug("Read GTFS table", table=file_name, rows=len(rows))
    return rows


def load_schedule_tables(data_dir: Union[str, Path]) -> Tuple[List[Row], List[Row]]:
    """Load the shapes and trips tables needed for route geometry."""
    shapes = read_table(data_dir, "shapes.txt")
    trips = read_table(data_dir, "trips.txt")
    
    logger.info("Loaded schedule tables", shapes=len(shapes), trips=len(trips))
    return shapes, trips


def _is_blank(row: Row) -> bool:
    return not any(isinstance(value, str) and value.strip() for value in row.values())
