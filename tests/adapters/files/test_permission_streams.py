"""
Tests for the permission-preserving stream helpers.
"""

import io

import pytest

from privfs.adapters.files.permission_streams import (
    PermissionGuard,
    PermissionRestoringFileIO,
    open_input_stream,
    open_output_stream,
)


class TestPermissionGuard:
    """Test cases for PermissionGuard."""

    def test_relax_and_restore(self, fake_channel):
        fake_channel.respond("stat -c %a /etc/app", ["750"])
        guard = PermissionGuard(fake_channel, "/etc/app")

        guard.relax()
        guard.restore()

        assert guard.recorded_mode == "750"
        assert fake_channel.commands == [
            "stat -c %a /etc/app",
            "chmod 0777 /etc/app",
            "chmod 0750 /etc/app",
        ]

    def test_four_digit_mode(self, fake_channel):
        fake_channel.respond("stat -c %a /bin/x", ["4755"])
        guard = PermissionGuard(fake_channel, "/bin/x")

        guard.relax()
        guard.restore()

        assert fake_channel.chmods == ["chmod 0777 /bin/x", "chmod 04755 /bin/x"]

    def test_restore_runs_once(self, fake_channel):
        fake_channel.respond("stat -c %a /f", ["644"])
        guard = PermissionGuard(fake_channel, "/f")

        guard.relax()
        guard.restore()
        guard.restore()

        assert fake_channel.chmods == ["chmod 0777 /f", "chmod 0644 /f"]

    @pytest.mark.parametrize(
        "output", [[], ["stat: cannot stat '/f': Permission denied"], ["999"], ["64"]]
    )
    def test_invalid_mode_skips_chmod(self, fake_channel, mock_logger, output):
        fake_channel.respond("stat -c %a /f", output)
        guard = PermissionGuard(fake_channel, "/f", mock_logger)

        guard.relax()
        guard.restore()

        assert guard.recorded_mode is None
        assert fake_channel.chmods == []
        mock_logger.warning.assert_called_once()

    def test_failed_chmod_is_logged(self, fake_channel, mock_logger):
        fake_channel.respond("stat -c %a /f", ["644"])
        fake_channel.respond("chmod 0777 /f", code=1)
        fake_channel.respond("chmod 0644 /f", code=1)
        guard = PermissionGuard(fake_channel, "/f", mock_logger)

        guard.relax()
        guard.restore()

        assert mock_logger.warning.call_count == 2


class TestPermissionRestoringFileIO:
    """Test cases for the stream wrapper."""

    def test_restore_after_raw_close(self, tmp_path):
        events = []
        target = tmp_path / "a"
        stream = PermissionRestoringFileIO(
            str(target), "wb", lambda: events.append(stream.closed)
        )

        stream.write(b"x")
        stream.close()

        assert events == [True]

    def test_restore_when_close_raises(self, tmp_path):
        events = []

        class FailingClose(io.FileIO):
            def close(self):
                raise OSError("disk gone")

        class Stream(PermissionRestoringFileIO, FailingClose):
            pass

        stream = Stream(str(tmp_path / "a"), "wb", lambda: events.append("restored"))

        with pytest.raises(OSError, match="disk gone"):
            stream.close()
        io.FileIO.close(stream)

        assert events == ["restored"]

    def test_open_output_stream_uses_permission_path(self, fake_channel, tmp_path):
        fake_channel.respond(f"stat -c %a {tmp_path}", ["700"])

        with open_output_stream(fake_channel, str(tmp_path / "n"), str(tmp_path)) as s:
            s.write(b"1")

        assert fake_channel.chmods == [f"chmod 0777 {tmp_path}", f"chmod 0700 {tmp_path}"]


class TestOverlappingStreams:
    """Test cases for several streams holding one path open."""

    def test_guards_share_one_relaxation(self, mode_channel):
        channel = mode_channel({"/f": "640"})
        first = PermissionGuard(channel, "/f")
        second = PermissionGuard(channel, "/f")

        first.relax()
        second.relax()
        assert second.recorded_mode == "640"

        first.restore()
        assert channel.modes["/f"] == "777"
        second.restore()

        assert channel.modes["/f"] == "640"
        assert channel.commands == [
            "stat -c %a /f",
            "chmod 0777 /f",
            "chmod 0640 /f",
        ]

    def test_overlapping_input_streams(self, mode_channel, tmp_path):
        target = tmp_path / "shared.txt"
        target.write_bytes(b"data")
        path = str(target)
        channel = mode_channel({path: "640"})

        a = open_input_stream(channel, path)
        b = open_input_stream(channel, path)
        a.close()
        assert channel.modes[path] == "777"
        assert b.read() == b"data"
        b.close()

        assert channel.modes[path] == "640"

    def test_overlapping_output_streams(self, mode_channel, tmp_path):
        parent = str(tmp_path)
        channel = mode_channel({parent: "755"})

        a = open_output_stream(channel, str(tmp_path / "one"), parent)
        b = open_output_stream(channel, str(tmp_path / "two"), parent)
        b.close()
        a.close()

        assert channel.modes[parent] == "755"
        assert channel.chmods == [f"chmod 0777 {parent}", f"chmod 0755 {parent}"]

    def test_relaxed_again_after_last_close(self, mode_channel):
        channel = mode_channel({"/f": "600"})

        for _ in range(2):
            guard = PermissionGuard(channel, "/f")
            guard.relax()
            guard.restore()

        assert channel.modes["/f"] == "600"
        assert channel.chmods == ["chmod 0777 /f", "chmod 0600 /f"] * 2

    def test_channels_are_independent(self, mode_channel):
        one = mode_channel({"/f": "644"})
        two = mode_channel({"/f": "600"})
        a = PermissionGuard(one, "/f")
        b = PermissionGuard(two, "/f")

        a.relax()
        b.relax()
        a.restore()
        b.restore()

        assert one.modes["/f"] == "644"
        assert two.modes["/f"] == "600"

    def test_unreadable_mode_does_not_block_later_relax(self, fake_channel):
        fake_channel.respond("stat -c %a /f", ["?"])
        first = PermissionGuard(fake_channel, "/f")
        first.relax()

        fake_channel.respond("stat -c %a /f", ["644"])
        second = PermissionGuard(fake_channel, "/f")
        second.relax()
        first.restore()
        second.restore()

        assert fake_channel.chmods == ["chmod 0777 /f", "chmod 0644 /f"]
