"""Tests for the ProcessHandle class."""

import gc

import pytest

from winprocenum.process_api import PROCESS_QUERY_LIMITED_INFORMATION, PROCESS_VM_READ
from winprocenum.process_handle import QUERY_ACCESS, ProcessHandle


class TestProcessHandle:
    """Tests for ProcessHandle."""

    def test_open_requests_least_privilege(self, make_api):
        """Test open asks only for limited query and VM read rights."""
        api = make_api(handles={20: 0x200})

        ProcessHandle.open(20, api).close()

        assert api.opened == [(PROCESS_QUERY_LIMITED_INFORMATION | PROCESS_VM_READ, 20)]
        assert QUERY_ACCESS == 0x1010

    def test_open_success_is_valid(self, make_api):
        """Test a handle returned by the OS is valid."""
        api = make_api(handles={20: 0x200})

        handle = ProcessHandle.open(20, api)

        assert handle.is_valid()
        assert handle.pid == 20
        assert handle.value == 0x200
        handle.close()

    def test_open_failure_is_invalid_not_raised(self, make_api):
        """Test a failed open yields an invalid handle instead of an exception."""
        api = make_api()

        handle = ProcessHandle.open(10, api)

        assert not handle.is_valid()
        assert handle.value is None
        assert handle.pid == 10

    def test_close_is_idempotent(self, make_api):
        """Test close releases the OS handle exactly once."""
        api = make_api(handles={20: 0x200})
        handle = ProcessHandle.open(20, api)

        handle.close()
        handle.close()

        assert api.closed == [0x200]
        assert not handle.is_valid()
        assert handle.value is None

    def test_close_invalid_handle_is_noop(self, make_api):
        """Test closing an invalid handle does not call CloseHandle."""
        api = make_api()
        handle = ProcessHandle.open(10, api)

        handle.close()

        assert api.closed == []

    def test_context_manager_closes(self, make_api):
        """Test leaving a with block releases the handle."""
        api = make_api(handles={20: 0x200})

        with ProcessHandle.open(20, api) as handle:
            assert handle.is_valid()

        assert api.closed == [0x200]
        assert not handle.is_valid()

    def test_context_manager_closes_on_error(self, make_api):
        """Test an exception inside the with block still releases the handle."""
        api = make_api(handles={20: 0x200})

        with pytest.raises(RuntimeError):
            with ProcessHandle.open(20, api):
                raise RuntimeError("boom")

        assert api.closed == [0x200]

    def test_explicit_close_then_scope_exit(self, make_api):
        """Test an explicit close inside a with block is not repeated on exit."""
        api = make_api(handles={20: 0x200})

        with ProcessHandle.open(20, api) as handle:
            handle.close()

        assert api.closed == [0x200]

    def test_released_when_garbage_collected(self, make_api):
        """Test a dropped handle that was never closed is still released."""
        api = make_api(handles={20: 0x200})

        handle = ProcessHandle.open(20, api)
        del handle
        gc.collect()

        assert api.closed == [0x200]

    def test_direct_construction_rejected(self, make_api):
        """Test the wrapper cannot be built without going through open."""
        with pytest.raises(TypeError):
            ProcessHandle(20, 0x200, make_api())

    def test_repr_shows_state(self, make_api):
        """Test repr reports the pid and whether the handle is open."""
        api = make_api(handles={20: 0x200})
        handle = ProcessHandle.open(20, api)

        assert repr(handle) == "ProcessHandle(pid=20, open)"
        handle.close()
        assert repr(handle) == "ProcessHandle(pid=20, invalid)"
