import threading

import pytest
from PIL import Image

from pixcache.cache.manager import ImageCache
from pixcache.config import hierarchy
from pixcache.config.schema import CacheSettings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user-level config files and PIXCACHE_* variables out of tests."""
    for env_key in hierarchy._ENV_MAP:
        monkeypatch.delenv(env_key, raising=False)
    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


@pytest.fixture
def sample_image():
    """Small RGB test image (4x3, solid red)."""
    return Image.new("RGB", (4, 3), (255, 0, 0))


@pytest.fixture
def sample_image_bytes():
    """Minimal valid PNG for testing (1x1 white pixel)."""
    import base64
    return base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4"
        "nGP4z8BQDwAEgAF/pooBPQAAAABJRU5ErkJggg=="
    )


@pytest.fixture
def settings(tmp_path):
    return CacheSettings(
        namespace="test",
        cache_dir=tmp_path / "caches",
        data_dir=tmp_path / "data",
    )


@pytest.fixture
def cache(settings):
    c = ImageCache(settings)
    yield c
    c.close()


@pytest.fixture
def query():
    """Run ImageCache.query and wait for its single callback."""

    def _query(cache, key, timeout=5.0):
        done = threading.Event()
        calls = []

        def callback(image, cache_type):
            calls.append((image, cache_type))
            done.set()

        cache.query(key, callback)
        assert done.wait(timeout), "query callback was never invoked"
        return calls[0]

    return _query
