"""
Tests for DirectoryClient against mocked master responses.

Covers assign parameter handling, lookup status mapping, empty location
lists, malformed bodies, and per-call address resolution.
"""
from __future__ import annotations

from collections import Counter
from typing import List

import httpx
import pytest

from seaweed_blobs.errors import DecodeError, NotFound, RequestError
from seaweed_blobs.handles import decode_filename
from seaweed_blobs.settings import Settings
from seaweed_blobs.storage.addressing import ReplicaSelector
from seaweed_blobs.storage.directory import DirectoryClient


def make_directory(handler, settings=None, **kwargs) -> DirectoryClient:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return DirectoryClient(settings or Settings(master_addr="master:9333"), http, **kwargs)


class TestAllocate:
    """Test DirectoryClient.allocate."""
    
    def test_allocate_returns_handle(self):
        """Test a successful assign yields a handle whose filename decodes to the fid."""
        def handler(request):
            assert request.url.path == "/dir/assign"
            return httpx.Response(200, json={"fid": "3,abc", "url": "127.0.0.1:8080"})
        
        handle = make_directory(handler).allocate()
        
        assert handle.url == "127.0.0.1:8080"
        assert decode_filename(handle.filename) == b"3,abc"
    
    def test_empty_params_are_omitted(self):
        seen: List[httpx.Request] = []
        
        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"fid": "3,abc", "url": "v:8080"})
        
        make_directory(handler).allocate()
        make_directory(handler).allocate(replication="", ttl="")
        
        assert seen[0].url.query == b""
        assert seen[1].url.query == b""
    
    def test_params_are_passed(self):
        seen: List[httpx.Request] = []
        
        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"fid": "3,abc", "url": "v:8080"})
        
        make_directory(handler).allocate(replication="001", ttl="3d")
        
        assert seen[0].url.params["replication"] == "001"
        assert seen[0].url.params["ttl"] == "3d"
    
    def test_settings_defaults_apply(self):
        """Test default replication and ttl from settings fill in missing args."""
        seen: List[httpx.Request] = []
        
        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"fid": "3,abc", "url": "v:8080"})
        
        settings = Settings(master_addr="master:9333", default_replication="010", default_ttl="1h")
        make_directory(handler, settings).allocate()
        make_directory(handler, settings).allocate(ttl="5m")
        
        assert dict(seen[0].url.params) == {"replication": "010", "ttl": "1h"}
        assert dict(seen[1].url.params) == {"replication": "010", "ttl": "5m"}
    
    @pytest.mark.parametrize("status", [404, 500, 503])
    def test_non_200_is_request_error(self, status):
        """Test assign never reports NotFound, even on 404."""
        def handler(request):
            return httpx.Response(status, json={"error": "nope"})
        
        with pytest.raises(RequestError) as exc_info:
            make_directory(handler).allocate()
        assert exc_info.value.status_code == status
    
    @pytest.mark.parametrize("body", [b"not json", b"{}", b'{"fid": "3,abc"}', b'{"fid": "", "url": "v"}'])
    def test_malformed_body_is_decode_error(self, body):
        def handler(request):
            return httpx.Response(200, content=body)
        
        with pytest.raises(DecodeError):
            make_directory(handler).allocate()
    
    def test_transport_error_is_request_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)
        
        with pytest.raises(RequestError) as exc_info:
            make_directory(handler).allocate()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    
    def test_master_url_with_scheme(self):
        seen: List[httpx.Request] = []
        
        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"fid": "3,abc", "url": "v:8080"})
        
        make_directory(handler, Settings(master_addr="https://master:9333")).allocate()
        assert str(seen[0].url) == "https://master:9333/dir/assign"


class TestResolve:
    """Test DirectoryClient.resolve and locate."""
    
    def test_resolve_returns_replicas(self):
        def handler(request):
            assert request.url.path == "/dir/lookup"
            assert request.url.params["volumeId"] == "3"
            return httpx.Response(200, json={"locations": [{"url": "A"}, {"url": "B"}]})
        
        result = make_directory(handler).resolve("3")
        assert result.volume_id == "3"
        assert result.replicas == ("A", "B")
    
    def test_zero_locations_is_not_found(self):
        def handler(request):
            return httpx.Response(200, json={"locations": []})
        
        with pytest.raises(NotFound):
            make_directory(handler).resolve("3")
    
    def test_missing_locations_is_not_found(self):
        def handler(request):
            return httpx.Response(200, json={"volumeId": "3"})
        
        with pytest.raises(NotFound):
            make_directory(handler).resolve("3")
    
    def test_404_is_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"error": "volume id 3 not found"})
        
        with pytest.raises(NotFound):
            make_directory(handler).resolve("3")
    
    def test_500_is_request_error(self):
        def handler(request):
            return httpx.Response(500, text="internal error")
        
        with pytest.raises(RequestError) as exc_info:
            make_directory(handler).resolve("3")
        assert exc_info.value.status_code == 500
    
    def test_malformed_body_is_decode_error(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>")
        
        with pytest.raises(DecodeError):
            make_directory(handler).resolve("3")
    
    def test_locate_spreads_over_replicas(self):
        """Test repeated lookups pick each replica, not always the first."""
        def handler(request):
            return httpx.Response(200, json={"locations": [{"url": "A"}, {"url": "B"}]})
        
        directory = make_directory(handler)
        counts = Counter(directory.locate("3") for _ in range(200))
        
        assert counts["A"] > 0
        assert counts["B"] > 0
    
    def test_locate_uses_injected_picker(self):
        class Last:
            def choose(self, replicas):
                return replicas[-1]
        
        def handler(request):
            return httpx.Response(200, json={"locations": [{"url": "A"}, {"url": "B"}]})
        
        assert make_directory(handler, picker=Last()).locate("3") == "B"
    
    def test_lookups_are_not_cached(self):
        calls = []
        
        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"locations": [{"url": "A"}]})
        
        directory = make_directory(handler, picker=ReplicaSelector(seed=1))
        directory.locate("3")
        directory.locate("3")
        assert len(calls) == 2


class TestAddressResolution:
    """Test the master address is resolved on every call."""
    
    def test_resolver_called_per_request(self):
        class Rotating:
            def __init__(self):
                self.calls = 0
            
            def resolve(self, addr):
                self.calls += 1
                return f"master{self.calls}:9333"
        
        hosts = []
        
        def handler(request):
            hosts.append(request.url.host)
            return httpx.Response(200, json={"fid": "3,abc", "url": "v:8080"})
        
        resolver = Rotating()
        directory = make_directory(handler, resolver=resolver)
        directory.allocate()
        directory.allocate()
        
        assert resolver.calls == 2
        assert hosts == ["master1", "master2"]
