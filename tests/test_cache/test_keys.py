"""Tests for cache key hashing."""

from pathlib import Path

from pixcache.cache.keys import cache_path_for_key, hash_key


class TestHashKey:
    def test_deterministic(self):
        assert hash_key("https://example.com/a.png") == hash_key("https://example.com/a.png")

    def test_different_keys_different_hash(self):
        assert hash_key("a") != hash_key("b")

    def test_returns_32_char_lowercase_hex(self):
        h = hash_key("test")
        assert len(h) == 32
        assert all(c in "0123456789abcdef" for c in h)

    def test_known_md5_digest(self):
        assert hash_key("hello") == "5d41402abc4b2a76b9719d911017c592"

    def test_empty_key_is_valid(self):
        assert hash_key("") == "d41d8cd98f00b204e9800998ecf8427e"

    def test_unicode_key(self):
        assert len(hash_key("画像/ключ.png")) == 32

    def test_lone_surrogate_key(self):
        key = b"img\xff.png".decode("utf-8", "surrogateescape")
        assert len(hash_key(key)) == 32
        assert hash_key(key) != hash_key("img.png")


class TestCachePathForKey:
    def test_joins_digest_to_root(self):
        root = Path("/tmp/cache")
        assert cache_path_for_key("hello", root) == root / "5d41402abc4b2a76b9719d911017c592"

    def test_no_sharding(self, tmp_path):
        assert cache_path_for_key("a/b/c", tmp_path).parent == tmp_path
