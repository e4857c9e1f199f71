import sys, pathlib, threading

sys.path.insert(0, str(pathlib.Path(__file__).parent.parent.joinpath("src").resolve()))
from proxydetect import ProxyConfig
from proxydetect.cache import MtimeCache, PrefsCache, Stamped


def counting(value):
    calls = []

    def build():
        calls.append(True)
        return value

    return build, calls


def test_get_or_refresh():
    cache = PrefsCache()
    config = ProxyConfig(auto_detect=True)
    build, calls = counting(config)
    key = ("default", "/profiles/default/prefs.js")

    assert key not in cache
    assert cache.get_or_refresh(key, 1, build) is config
    assert cache.get_or_refresh(key, 1, build) is config
    assert len(calls) == 1
    assert key in cache
    assert cache[key] is config
    assert cache.stamp(key) == 1

    cache.get_or_refresh(key, 2, build)
    assert len(calls) == 2
    assert cache.stamp(key) == 2


def test_other_key_replaces_entry():
    cache = PrefsCache()
    build, calls = counting(None)
    cache.get_or_refresh(("a", "/a"), 1, build)
    cache.get_or_refresh(("b", "/b"), 1, build)
    cache.get_or_refresh(("a", "/a"), 1, build)
    assert len(calls) == 3
    assert cache.get(("b", "/b")) is None
    assert cache.stamp(("b", "/b")) is None


def test_clear():
    cache = PrefsCache()
    build, calls = counting(ProxyConfig())
    cache.get_or_refresh(("a", "/a"), 1, build)
    cache.clear()
    assert ("a", "/a") not in cache
    cache.get_or_refresh(("a", "/a"), 1, build)
    assert len(calls) == 2


def test_concurrent_refresh_builds_once():
    cache = PrefsCache()
    build, calls = counting(ProxyConfig(auto_detect=True))
    threads = [
        threading.Thread(target=cache.get_or_refresh, args=(("a", "/a"), 1, build)) for _ in range(8)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(calls) == 1


def test_stamped_entries():
    cache = PrefsCache()
    assert isinstance(cache, MtimeCache)
    config = ProxyConfig.fixed("h:1")
    cache[("a", "/a")] = Stamped(5, config)
    assert cache[("a", "/a")] is config
    assert cache.stamp(("a", "/a")) == 5
    assert cache.stamp(("b", "/b")) is None
    assert cache.get_or_refresh(("a", "/a"), 5, lambda: None) is config
