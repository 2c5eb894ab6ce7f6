"""Test static dataset download and extraction."""

import io
import zipfile

import httpx
import pytest

from conftest import SHAPES_TXT, TRIPS_TXT, feed_transport, respond
from transitmap.core.exceptions import SourceReadError
from transitmap.gtfs.download import download_gtfs_static
from transitmap.gtfs.reader import load_schedule_tables

URL = "https://static.example.com/gtfs.zip"


def gtfs_zip() -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("shapes.txt", SHAPES_TXT)
        zf.writestr("trips.txt", TRIPS_TXT)
    return buffer.getvalue()


@pytest.mark.asyncio
class TestDownloadGtfsStatic:

    async def test_extracts_archive(self, tmp_path):
        async with httpx.AsyncClient(transport=feed_transport({URL: respond(content=gtfs_zip())})) as client:
            out = await download_gtfs_static(URL, tmp_path / "data", client=client)
        
        shapes, trips = load_schedule_tables(out)
        assert len(shapes) == 5
        assert len(trips) == 5

    async def test_http_error(self, tmp_path):
        async with httpx.AsyncClient(transport=feed_transport({URL: respond(status=404)})) as client:
            with pytest.raises(SourceReadError):
                await download_gtfs_static(URL, tmp_path, client=client)

    async def test_bad_archive(self, tmp_path):
        async with httpx.AsyncClient(transport=feed_transport({URL: respond(content=b"not a zip")})) as client:
            with pytest.raises(SourceReadError) as exc_info:
                await download_gtfs_static(URL, tmp_path, client=client)
        
        assert "archive" in exc_info.value.detail

    async def test_uncreatable_output_dir(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory", encoding="utf-8")
        
        async with httpx.AsyncClient(transport=feed_transport({URL: respond(content=gtfs_zip())})) as client:
            with pytest.raises(SourceReadError) as exc_info:
                await download_gtfs_static(URL, blocker / "sub", client=client)
        
        assert "data directory" in exc_info.value.detail
