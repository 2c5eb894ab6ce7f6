"""
Download and extract a GTFS static dataset.
"""

import io
import zipfile
from pathlib import Path
from typing import Optional, Union

import httpx
import structlog

from transitmap.core.exceptions import SourceReadError

logger = structlog.get_logger()


async def download_gtfs_static(
    url: str,
    output_dir: Union[str, Path] = Path("data"),
    timeout: float = 120.0,
    client: Optional[httpx.AsyncClient] = None,
) -> Path:
    """Fetch the GTFS zip at ``url`` and extract it into ``output_dir``."""
    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SourceReadError(str(output_dir), f"cannot create data directory: {e}") from e
    
    logger.info("Downloading GTFS static data", url=url)
    
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
                response = await own_client.get(url)
        else:
            response = await client.get(url, timeout=timeout)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise SourceReadError(url, str(e)) from e
    
    logger.info("Downloaded GTFS archive", size_mb=round(len(response.content) / 1024 / 1024, 1))
    
    try:
        with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
            for info in zf.filelist:
                logger.debug("Archive member", name=info.filename, size_kb=round(info.file_size / 1024, 1))
            zf.extractall(output_dir)
    except (zipfile.BadZipFile, OSError) as e:
        raise SourceReadError(url, f"cannot extract archive: {e}") from e
    
    logger.info("Extracted GTFS static data", output_dir=str(output_dir))
    return output_dir
